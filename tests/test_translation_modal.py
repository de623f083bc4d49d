import pytest
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from sqlmodel_translations.components.translation_modal import (
    TRANSLATION_DELETED,
    TRANSLATION_SAVED,
    ModalState,
    TranslationModal,
)
from sqlmodel_translations.core.config import settings
from sqlmodel_translations.services import language_service
from tests.support.models import Post
from tests.support.translations.post_translation import PostTranslation


@pytest.fixture(name="modal")
def modal_fixture(session, post):
    language_service.toggle_language(session, "fr")
    language_service.toggle_language(session, "de")
    return TranslationModal(session).mount(model=post)


def test_mount_loads_active_languages_and_empty_form(modal, post):
    assert modal.state == ModalState.CLOSED
    assert not modal.show_modal
    assert modal.model_id == post.id
    assert modal.model_class is Post
    assert [lang["language_code"] for lang in modal.available_languages] == ["en", "fr", "de"]
    assert modal.translatable_fields == ["title", "body"]
    assert modal.translations["fr"] == {"title": "", "body": ""}


def test_mount_by_class_and_id(session, post):
    modal = TranslationModal(session).mount(model_class=Post, model_id=post.id)

    assert modal.model.id == post.id
    assert set(modal.translations) == {"en"}


def test_mount_loads_existing_translations(session, post):
    language_service.toggle_language(session, "fr")
    post.save_translation({"title": "Bonjour"}, "fr")

    modal = TranslationModal(session).mount(model=post)

    assert modal.translations["fr"] == {"title": "Bonjour", "body": ""}


def test_translations_are_loaded_with_one_query(session, post, engine):
    for code in ("fr", "de", "es", "it"):
        language_service.toggle_language(session, code)
        post.save_translation({"title": f"title-{code}"}, code)

    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        if "post_translations" in statement:
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    try:
        TranslationModal(session).mount(model=post)
    finally:
        event.remove(engine, "before_cursor_execute", record)

    assert len(statements) == 1


def test_open_switch_and_close(modal):
    modal.open_modal()
    assert modal.state == ModalState.OPEN
    assert modal.current_language == settings.default_language

    modal.switch_language("fr")
    assert modal.current_language == "fr"

    modal.open_modal("de")
    assert modal.current_language == "de"

    modal.errors = {"title": "bad"}
    modal.close_modal()
    assert modal.state == ModalState.CLOSED
    assert modal.errors == {}


def test_save_translation_persists_and_dispatches(modal, post):
    received = []
    modal.on(TRANSLATION_SAVED, received.append)
    modal.open_modal("fr")
    modal.set_field("title", "  Bonjour  ")

    modal.save_translation()

    assert modal.state == ModalState.OPEN
    assert post.translation("fr").title == "Bonjour"
    assert modal.translations["fr"]["title"] == "Bonjour"
    assert modal.flash == {"message": "✅ Translation saved successfully!"}
    assert received == [{"language": "fr", "model_id": post.id}]
    assert modal.dispatched == [(TRANSLATION_SAVED, {"language": "fr", "model_id": post.id})]


def test_clearing_a_field_saves_null(modal, post):
    post.save_translation({"title": "Bonjour", "body": "Corps"}, "fr")
    modal.open_modal("fr")
    modal.set_field("body", "")

    modal.save_translation()

    translation = post.translation("fr")
    assert translation.title == "Bonjour"
    assert translation.body is None


def test_saving_empty_form_deletes_translation(modal, post):
    post.save_translation({"title": "Bonjour"}, "fr")
    modal.open_modal("fr")
    modal.set_field("title", "   ")
    modal.set_field("body", "")

    modal.save_translation()

    assert not post.has_translation("fr")
    assert modal.flash == {"message": "🗑️ Translation deleted successfully!"}
    assert modal.translations["fr"] == {"title": "", "body": ""}
    assert modal.dispatched == []


def test_save_rejects_values_over_max_length(modal, post, monkeypatch):
    monkeypatch.setattr(settings, "max_translation_length", 3)
    modal.open_modal("fr")
    modal.set_field("title", "Bonjour")

    modal.save_translation()

    assert "title" in modal.errors
    assert not post.has_translation("fr")


def test_save_error_is_flashed(modal, post):
    modal.open_modal("french")
    modal.set_field("title", "Bonjour")

    modal.save_translation()

    assert modal.flash["error"].startswith("❌ Error saving translation")
    assert modal.state == ModalState.OPEN


def test_save_error_rolls_back_the_session_the_model_belongs_to(engine, session, post, monkeypatch):
    language_service.toggle_language(session, "fr")

    def failing_save(self, data, language_code):
        session.add(PostTranslation(post_id=self.id, language_code=language_code, title="pending"))
        raise SQLAlchemyError("write failed")

    monkeypatch.setattr(Post, "save_translation", failing_save)

    # Modal bound to a different session than the one post was loaded in
    with Session(engine) as view_session:
        modal = TranslationModal(view_session).mount(model=post)
        modal.open_modal("fr")
        modal.set_field("title", "Bonjour")
        modal.save_translation()

    assert modal.flash["error"].startswith("❌ Error saving translation")
    assert not session.new
    assert not post.has_translation("fr")


def test_delete_translation(modal, post):
    post.save_translation({"title": "Hallo"}, "de")
    modal.open_modal("de")

    modal.delete_translation()

    assert not post.has_translation("de")
    assert modal.dispatched == [(TRANSLATION_DELETED, {"language": "de", "model_id": post.id})]


def test_translation_status(modal, post):
    post.save_translation({"title": "Bonjour"}, "fr")

    assert modal.translation_status == {"en": False, "fr": True, "de": False}


def test_render(modal, post):
    assert "Manage Translations" not in modal.render()

    post.save_translation({"title": "<b>Bonjour</b>"}, "fr")
    modal.open_modal("fr")
    html = modal.render()

    assert "Manage Translations" in html
    assert settings.ui_modal_size in html
    assert "Français" in html
    assert "&lt;b&gt;Bonjour&lt;/b&gt;" in html
    assert "<b>Bonjour</b>" not in html
    assert "Original: Hello world" in html
    assert 'data-action="delete_translation"' in html


def test_unmounted_modal_is_inert(session):
    modal = TranslationModal(session)
    modal.save_translation()
    modal.delete_translation("fr")
    assert modal.translation_status == {}
    assert modal.flash == {}
