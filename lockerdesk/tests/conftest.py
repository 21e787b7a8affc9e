"""
Shared fixtures: an isolated SQLite file database per test, a fresh
notification hub with a recording subscriber, and an app wired to both.
"""
from __future__ import annotations

import os
from typing import Iterator

os.environ.setdefault("LOCKERDESK_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("LOCKERDESK_LIBRARY_PASSWORD", "test-library-password")
os.environ.setdefault("LOCKERDESK_JWT_SECRET", "test-jwt-secret")

import pytest
from fastapi import FastAPI
from sqlalchemy.orm import Session, sessionmaker
from starlette.testclient import TestClient

from lockerdesk.core.entities.notification import Notification
from lockerdesk.infrastructure.database import Base, build_engine
from lockerdesk.infrastructure.identity import JwtIdentityResolver
from lockerdesk.infrastructure.models import models  # noqa: F401
from lockerdesk.infrastructure.notifications import NotificationHub
from lockerdesk.infrastructure.rate_limiter import MovingWindowAttemptLimiter
from lockerdesk.services.lockerdesk_service import initialize_pool_service
from lockerdesk.tests.helpers import operator, student

TEST_POOL_SIZE = 10


@pytest.fixture()
def engine(tmp_path):
    engine = build_engine(f"sqlite+pysqlite:///{tmp_path / 'lockerdesk.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine)


@pytest.fixture()
def db(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def pool(db: Session) -> int:
    initialize_pool_service(db, size=TEST_POOL_SIZE)
    return TEST_POOL_SIZE


@pytest.fixture()
def hub() -> NotificationHub:
    return NotificationHub()


@pytest.fixture()
def events(hub: NotificationHub) -> list[Notification]:
    received: list[Notification] = []
    hub.subscribe(received.append, name="test-recorder")
    return received


@pytest.fixture()
def resolver() -> JwtIdentityResolver:
    return JwtIdentityResolver(secret="test-jwt-secret")


@pytest.fixture()
def release_limiter() -> MovingWindowAttemptLimiter:
    return MovingWindowAttemptLimiter("5/15 minutes", namespace="release")


@pytest.fixture()
def login_limiter() -> MovingWindowAttemptLimiter:
    return MovingWindowAttemptLimiter("5/15 minutes", namespace="login")


@pytest.fixture()
def app(session_factory, hub, resolver, release_limiter, login_limiter) -> Iterator[FastAPI]:
    from lockerdesk.main import app as lockerdesk_app
    from lockerdesk.presentation import dependencies

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    lockerdesk_app.dependency_overrides[dependencies.get_db] = _override_get_db
    lockerdesk_app.dependency_overrides[dependencies.get_notification_hub] = lambda: hub
    lockerdesk_app.dependency_overrides[dependencies.get_identity_resolver] = lambda: resolver
    lockerdesk_app.dependency_overrides[dependencies.get_release_limiter] = lambda: release_limiter
    lockerdesk_app.dependency_overrides[dependencies.get_login_limiter] = lambda: login_limiter
    yield lockerdesk_app
    lockerdesk_app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def operator_headers(resolver: JwtIdentityResolver) -> dict[str, str]:
    return {"Authorization": f"Bearer {resolver.issue(operator())}"}


@pytest.fixture()
def student_headers(resolver: JwtIdentityResolver):
    def _headers(student_id: str = "student-a", email: str = "a@uni.test") -> dict[str, str]:
        return {"Authorization": f"Bearer {resolver.issue(student(student_id, email))}"}

    return _headers
