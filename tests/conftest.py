"""Shared pytest fixtures: in-memory SQLite, seeded languages, a TestClient."""
import os

# Settings are read at import time
os.environ.setdefault("TRANSLATIONS_DATABASE_URL", "sqlite://")
os.environ.setdefault("TRANSLATIONS_TRANSLATION_MODEL_NAMESPACE", "tests.support.translations")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from sqlmodel_translations.api.v1.endpoints.utils import rate_limiter
from sqlmodel_translations.core.database import get_session
from sqlmodel_translations.main import create_app
from sqlmodel_translations.services.language_service import ensure_languages_table
from tests.support.models import Post
from tests.support.translations.post_translation import PostTranslation  # noqa: F401


def make_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(name="engine")
def engine_fixture():
    engine = make_engine()
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        ensure_languages_table(session)
        yield session


@pytest.fixture(name="post")
def post_fixture(session):
    post = Post(title="Hello world", body="Original body", status="published")
    session.add(post)
    session.commit()
    session.refresh(post)
    return post


@pytest.fixture(name="client")
def client_fixture(session):
    app = create_app(provision_languages=False)
    app.dependency_overrides[get_session] = lambda: session
    rate_limiter.reset()
    with TestClient(app) as client:
        yield client
    rate_limiter.reset()
