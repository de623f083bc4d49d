from sqlmodel_translations.api.v1.endpoints.utils import rate_limiter
from sqlmodel_translations.core.config import settings

PREFIX = settings.api_prefix


def test_list_languages(client):
    response = client.get(f"{PREFIX}/languages")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [lang["language_code"] for lang in body["data"]] == ["en", "es", "fr", "de", "it", "pt", "ar", "zh"]
    assert body["data"][1]["display_name"] == "Español"


def test_list_active_languages(client):
    response = client.get(f"{PREFIX}/languages/active")

    assert response.status_code == 200
    assert [lang["language_code"] for lang in response.json()["data"]] == ["en"]


def test_store_language(client):
    response = client.post(
        f"{PREFIX}/languages",
        json={"language_code": "pt-BR", "name": "Brazilian Portuguese", "is_active": True, "sort_order": 9},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Language saved successfully"
    assert body["data"]["language_code"] == "pt-BR"
    assert body["data"]["native_name"] is None


def test_store_existing_code_updates_it(client):
    response = client.post(f"{PREFIX}/languages", json={"language_code": "es", "name": "Castilian", "is_active": True})

    assert response.status_code == 201
    languages = client.get(f"{PREFIX}/languages").json()["data"]
    assert len(languages) == 8
    assert [lang["name"] for lang in languages if lang["language_code"] == "es"] == ["Castilian"]


def test_store_rejects_invalid_payloads(client):
    for payload in (
        {"language_code": "english", "name": "English"},
        {"language_code": "EN", "name": "English"},
        {"language_code": "en"},
        {"language_code": "en", "name": "x" * 256},
        {"language_code": "en", "name": "English", "sort_order": -1},
    ):
        response = client.post(f"{PREFIX}/languages", json=payload)
        assert response.status_code == 422, payload
        assert response.json()["success"] is False


def test_update_language(client):
    response = client.put(f"{PREFIX}/languages/fr", json={"name": "French", "native_name": "Français", "is_active": True})

    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is True
    assert "fr" in [lang["language_code"] for lang in client.get(f"{PREFIX}/languages/active").json()["data"]]


def test_update_language_rejects_bad_code(client):
    response = client.put(f"{PREFIX}/languages/French", json={"name": "French"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid language code format"}


def test_toggle_language_twice(client):
    first = client.patch(f"{PREFIX}/languages/de/toggle")
    assert first.status_code == 200
    assert first.json()["message"] == "Language status updated successfully"
    assert first.json()["data"]["is_active"] is True

    second = client.patch(f"{PREFIX}/languages/de/toggle")
    assert second.json()["data"]["is_active"] is False


def test_toggle_invalid_and_missing_codes(client):
    assert client.patch(f"{PREFIX}/languages/deutsch/toggle").status_code == 400

    response = client.patch(f"{PREFIX}/languages/xx/toggle")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Language not found"}


def test_delete_language(client):
    response = client.delete(f"{PREFIX}/languages/zh")

    assert response.status_code == 200
    assert response.json()["message"] == "Language deleted successfully"
    assert "zh" not in [lang["language_code"] for lang in client.get(f"{PREFIX}/languages").json()["data"]]


def test_delete_missing_language_is_not_an_error(client):
    response = client.delete(f"{PREFIX}/languages/xx")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Language not found"}


def test_delete_invalid_code(client):
    assert client.delete(f"{PREFIX}/languages/ZH").status_code == 400


def test_write_routes_require_manage_token_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "api_manage_token", "s3cret")

    assert client.get(f"{PREFIX}/languages").status_code == 200
    assert client.patch(f"{PREFIX}/languages/de/toggle").status_code == 403
    assert client.delete(f"{PREFIX}/languages/de", headers={"X-Translations-Token": "wrong"}).status_code == 403

    response = client.post(
        f"{PREFIX}/languages",
        json={"language_code": "sv", "name": "Swedish"},
        headers={"X-Translations-Token": "s3cret"},
    )
    assert response.status_code == 201


def test_rate_limit(client, monkeypatch):
    monkeypatch.setattr(rate_limiter, "max_requests", 2)

    assert client.get(f"{PREFIX}/languages").status_code == 200
    assert client.get(f"{PREFIX}/languages/active").status_code == 200
    response = client.get(f"{PREFIX}/languages")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == str(rate_limiter.window_seconds)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
