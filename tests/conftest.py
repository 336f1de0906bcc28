# tests/conftest.py
from __future__ import annotations

import os
import time
import uuid
from collections.abc import Generator, Iterator
from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-test-key")

from unitea_functions.api.v1.dependencies import get_services
from unitea_functions.db.session import Base
from unitea_functions.db.session import get_db as app_get_session
from unitea_functions.main import app as fastapi_app
from unitea_functions.models import Post, Profile
from unitea_functions.services.classifiers import ClassificationVerdict
from unitea_functions.services.container import ServiceContainer
from unitea_functions.services.identity import JwtIdentityProvider
from unitea_functions.services.moderation import ModerationPipeline
from unitea_functions.services.storage import StorageError

TEST_DB_URL = "sqlite://"
TEST_JWT_SECRET = "test-jwt-secret"
TEST_AUDIENCE = "authenticated"


# --- Fakes for the remote collaborators -------------------------------------


@dataclass
class FakeTextClassifier:
    """Text classifier returning a fixed verdict and recording its inputs."""

    flagged: bool = False
    answer: str | None = None
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def classify(self, text: str) -> ClassificationVerdict:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return ClassificationVerdict(flagged=self.flagged, answer=self.answer)


@dataclass
class FakeImageClassifier:
    """Vision classifier answering with a fixed string."""

    answer: str | None = "YES"
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def classify_image(self, image_url: str) -> ClassificationVerdict:
        self.calls.append(image_url)
        if self.error is not None:
            raise self.error
        normalized = (self.answer or "").strip().upper()
        return ClassificationVerdict(flagged=normalized != "YES", answer=normalized)


@dataclass
class FakeStorage:
    """Storage returning predictable signed URLs."""

    fail: bool = False
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def create_signed_url(
        self,
        bucket: str,
        key: str,
        expires_in: int,
        *,
        access_token: str | None = None,
    ) -> str:
        self.calls.append(
            {"bucket": bucket, "key": key, "expires_in": expires_in, "access_token": access_token}
        )
        if self.fail:
            raise StorageError("object not found")
        return f"https://storage.test/{bucket}/{key}?token=signed"


@dataclass
class Fakes:
    policy: FakeTextClassifier
    abuse: FakeTextClassifier
    image: FakeImageClassifier
    storage: FakeStorage
    pipeline: ModerationPipeline


def make_token(user_id: str, *, secret: str = TEST_JWT_SECRET, expires_in: int = 3600) -> str:
    now = int(time.time())
    payload = {
        "sub": user_id,
        "aud": TEST_AUDIENCE,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


# --- Database ---------------------------------------------------------------


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:  # pragma: no cover - driver hook
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


# --- Application ------------------------------------------------------------


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def fakes() -> Fakes:
    policy = FakeTextClassifier()
    abuse = FakeTextClassifier(answer="NO")
    image = FakeImageClassifier()
    storage = FakeStorage()
    pipeline = ModerationPipeline(
        policy_classifier=policy,
        abuse_classifier=abuse,
        image_classifier=image,
        storage=storage,
    )
    return Fakes(policy=policy, abuse=abuse, image=image, storage=storage, pipeline=pipeline)


@pytest.fixture(autouse=True)
def override_dependencies(app: FastAPI, db_session: Session, fakes: Fakes) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    container = ServiceContainer(
        identity=JwtIdentityProvider(TEST_JWT_SECRET, audience=TEST_AUDIENCE),
        pipeline=fakes.pipeline,
    )

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_services] = lambda: container
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_services, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


# --- Rows and credentials ---------------------------------------------------


def _make_profile(db: Session, username: str, *, is_admin: bool = False) -> Profile:
    profile = Profile(id=str(uuid.uuid4()), username=username, is_admin=is_admin)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture()
def test_user(db_session: Session) -> Profile:
    """Create and return a persisted student profile."""
    return _make_profile(db_session, "student")


@pytest.fixture()
def other_user(db_session: Session) -> Profile:
    """Create and return a second persisted profile."""
    return _make_profile(db_session, "classmate")


@pytest.fixture()
def admin_user(db_session: Session) -> Profile:
    """Create and return an admin profile."""
    return _make_profile(db_session, "moderator", is_admin=True)


@pytest.fixture()
def auth_token(test_user: Profile) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return {"Authorization": f"Bearer {make_token(test_user.id)}"}


@pytest.fixture()
def other_auth_token(other_user: Profile) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return {"Authorization": f"Bearer {make_token(other_user.id)}"}


@pytest.fixture()
def admin_auth_token(admin_user: Profile) -> dict[str, str]:
    """Return authorization headers for the admin."""
    return {"Authorization": f"Bearer {make_token(admin_user.id)}"}


@pytest.fixture()
def test_post(db_session: Session, test_user: Profile) -> Post:
    """Create a baseline feed post owned by the primary user."""
    post = Post(user_id=test_user.id, content="Where is the library quiet room?")
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    return post


@pytest.fixture()
def token_factory() -> Any:
    """Return the helper that signs test JWTs."""
    return make_token
