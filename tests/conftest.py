from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.db import Base, enable_sqlite_foreign_keys, get_db
from app.main import app
from app.services.ai_gateway import ContentAnalysis, GenerationResult, get_ai_gateway
from app.services.notifier import get_notifier


class FakeGateway:
    def __init__(self):
        self.generate_calls = []
        self.translate_calls = []
        self.analyze_calls = []
        self.fail_with: Exception | None = None

    def generate(self, request):
        self.generate_calls.append(request)
        if self.fail_with:
            raise self.fail_with
        return GenerationResult(
            content=f"Generated {request.type.value.lower()}",
            metadata={"model": "fake-model", "provider": "fake", "usage": {"total_tokens": 12}},
        )

    def translate(self, request):
        self.translate_calls.append(request)
        if self.fail_with:
            raise self.fail_with
        return GenerationResult(
            content=f"[{request.target_language}] {request.content}",
            metadata={"model": "fake-model", "provider": "fake"},
        )

    def analyze(self, content):
        self.analyze_calls.append(content)
        return ContentAnalysis(sentiment="positive", confidence=0.9, keywords=["kettle"], tone="energetic", readability_score=72)


class RecordingNotifier:
    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def publish(self, topic, payload):
        self.events.append((topic, payload))

    def topics(self) -> list[str]:
        return [topic for topic, _ in self.events]


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield TestingSessionLocal
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def client(session_factory, gateway, notifier) -> Generator[TestClient, None, None]:
    def override_get_db():
        test_db = session_factory()
        try:
            yield test_db
        finally:
            test_db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_gateway] = lambda: gateway
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.state.testing_sessionmaker = session_factory

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
