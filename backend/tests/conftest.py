"""
Shared fixtures: an app on in-memory SQLite with recorded outbound HTTP.

Outbound calls (AI engine, identity provider, weather API) go through
``FakeSession`` objects. With nothing queued a session refuses the connection,
so the AI engine is "down" unless a test says otherwise.
"""
import io
import json
import time

import pytest
import requests
from fastapi.testclient import TestClient
from jose import jwt

from fashion_api.config import Settings
from fashion_api.main import create_app
from fashion_api.models import ClothingItem, User, Wardrobe
from fashion_api.models.clothing import default_user_metadata
from fashion_api.services.ai_client import AIClient
from fashion_api.services.identity import IdentityProvider
from fashion_api.services.storage import ImageStorage
from fashion_api.services.weather import WeatherService

TEST_SECRET = "test-secret"


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.text = json.dumps(payload) if payload is not None else ""

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Stands in for ``requests.Session``; records calls and replays queued outcomes."""

    def __init__(self):
        self.calls = []
        self.outcomes = []

    def queue(self, *outcomes):
        self.outcomes.extend(outcomes)

    def _next(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.outcomes:
            raise requests.ConnectionError("Connection refused")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def request(self, method, url, **kwargs):
        return self._next(method, url, **kwargs)

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def close(self):
        pass


class FakeS3:
    """In-memory stand-in for a boto3 S3 client."""

    def __init__(self):
        self.objects = {}

    def put_object(self, Bucket, Key, Body, **kwargs):
        self.objects[Key] = {"Body": Body, **kwargs}

    def get_object(self, Bucket, Key):
        return {"Body": io.BytesIO(self.objects[Key]["Body"])}

    def delete_object(self, Bucket, Key):
        self.objects.pop(Key, None)


def make_token(uid, email=None, expires_in=3600, secret=TEST_SECRET, **claims):
    now = int(time.time())
    payload = {"sub": uid, "iat": now, "exp": now + expires_in, **claims}
    if email:
        payload["email"] = email
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user):
    return {"Authorization": f"Bearer {make_token(user.external_id, user.email)}"}


@pytest.fixture()
def settings():
    return Settings(
        ENVIRONMENT="test",
        LOG_LEVEL="WARNING",
        DATABASE_URL="sqlite://",
        FRONTEND_URL="http://localhost:3000",
        AI_BACKEND_URL="http://ai.test",
        IDENTITY_TOKEN_SECRET=TEST_SECRET,
        IDENTITY_TOKEN_ALGORITHMS=["HS256"],
        IDENTITY_TOKEN_AUDIENCE="",
        IDENTITY_TOKEN_ISSUER="",
        IDENTITY_PROVIDER_URL="http://identity.test",
        USE_OBJECT_STORAGE=False,
        STORAGE_PUBLIC_URL="https://cdn.test",
        WEATHER_API_KEY="test-key",
        WEATHER_API_URL="http://weather.test",
        RATE_LIMIT_ENABLED=False,
    )


@pytest.fixture()
def ai_session():
    return FakeSession()


@pytest.fixture()
def identity_session():
    return FakeSession()


@pytest.fixture()
def weather_session():
    return FakeSession()


@pytest.fixture()
def s3():
    return None


@pytest.fixture()
def app(settings, ai_session, identity_session, weather_session, s3):
    return create_app(
        settings,
        identity_provider=IdentityProvider.from_settings(settings, session=identity_session),
        ai_client=AIClient.from_settings(settings, session=ai_session),
        storage=ImageStorage(settings, client=s3),
        weather=WeatherService.from_settings(settings, session=weather_session),
    )


@pytest.fixture()
def client(app):
    # Entering the client runs the lifespan, which creates the tables
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def db(app, client):
    session = app.state.context.session_factory()
    yield session
    session.close()


@pytest.fixture()
def create_user(db):
    def _create(username="alice", uid=None, **fields):
        user = User(
            external_id=uid or f"uid-{username}",
            email=f"{username}@example.com",
            username=username,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _create


@pytest.fixture()
def user(create_user):
    return create_user("alice")


@pytest.fixture()
def headers(user):
    return auth_headers(user)


@pytest.fixture()
def other_user(create_user):
    return create_user("bob")


@pytest.fixture()
def make_wardrobe(db):
    def _make(owner, name="Main", **fields):
        fields.setdefault("is_default", False)
        wardrobe = Wardrobe(user_id=owner.id, name=name, items=[], shared_with=[], tags=[], **fields)
        db.add(wardrobe)
        db.commit()
        db.refresh(wardrobe)
        return wardrobe
    return _make


@pytest.fixture()
def make_item(db):
    def _make(owner, wardrobe, name="Item", category="tshirts_tops", color="blue", tags=None):
        metadata = default_user_metadata()
        metadata["userTags"] = tags or []
        item = ClothingItem(
            user_id=owner.id,
            wardrobe_id=wardrobe.id,
            name=name,
            category=category,
            color=color,
            image_url="/images/fallback-item.jpg",
            attributes={},
            user_metadata=metadata,
        )
        db.add(item)
        db.flush()
        wardrobe.items = list(wardrobe.items or []) + [item.id]
        db.commit()
        db.refresh(item)
        return item
    return _make
