from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient

from sqlmodel_translations.api.v1 import create_api_router
from sqlmodel_translations.api.v1.endpoints.utils import rate_limiter
from sqlmodel_translations.core.config import settings
from sqlmodel_translations.core.database import get_session
from sqlmodel_translations.core.exceptions import ConfigurationError, ConflictError, NotFoundError, ValidationError
from sqlmodel_translations.main import create_app


def _app_with_failing_routes():
    app = create_app(provision_languages=False)

    @app.get("/fail/{kind}")
    async def fail(kind: str):
        errors = {
            "validation": ValidationError("bad input"),
            "missing": NotFoundError("no such thing"),
            "conflict": ConflictError("already there"),
            "config": ConfigurationError("secret internals"),
        }
        raise errors[kind]

    return app


def test_plugin_exceptions_are_mapped_to_status_codes():
    client = TestClient(_app_with_failing_routes())

    assert client.get("/fail/validation").status_code == 400
    assert client.get("/fail/missing").json() == {"success": False, "message": "no such thing", "type": "NotFoundError"}
    assert client.get("/fail/conflict").status_code == 409


def test_internal_errors_do_not_leak_details():
    response = TestClient(_app_with_failing_routes()).get("/fail/config")

    assert response.status_code == 500
    assert "secret internals" not in response.text


def test_host_dependencies_guard_every_route(session):
    async def deny():
        raise HTTPException(status_code=401, detail="Unauthenticated")

    app = create_app(dependencies=[Depends(deny)], provision_languages=False)
    app.dependency_overrides[get_session] = lambda: session
    rate_limiter.reset()

    with TestClient(app) as client:
        assert client.get(f"{settings.api_prefix}/languages").status_code == 401
        assert client.get("/health").status_code == 200


def test_router_can_be_mounted_in_a_host_app(session):
    app = FastAPI()
    app.include_router(create_api_router(), prefix="/admin/i18n")
    app.dependency_overrides[get_session] = lambda: session
    rate_limiter.reset()

    response = TestClient(app).get("/admin/i18n/languages/active")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert [lang["language_code"] for lang in response.json()["data"]] == ["en"]
