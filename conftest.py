import os
import random
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REPORT_DIRECTORY", tempfile.mkdtemp(prefix="ex-reports-"))
os.environ.setdefault("UPLOAD_DIRECTORY", tempfile.mkdtemp(prefix="ex-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from database import Base, get_db
from dependencies import get_rng, get_speech_service
from models.user import User, Profile


class FakeSpeech:
    """Stands in for the Hugging Face client in API tests."""

    def __init__(self):
        self.spoken = []

    async def synthesize(self, text):
        self.spoken.append(text)
        return b"RIFFfake-audio"

    async def transcribe(self, audio):
        return "hello world"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    user = User(email="founder@example.com", password_hash="x")
    user.profile = Profile(name="Asha", email="founder@example.com")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def speech():
    return FakeSpeech()


@pytest.fixture
def client(session_factory, speech):
    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rng] = lambda: random.Random(1234)
    app.dependency_overrides[get_speech_service] = lambda: speech
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_and_login(client, email="founder@example.com", name="Asha", password="secret123"):
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 200, response.text
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client)
