import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Tests seed their own data
os.environ.setdefault("SEED_DATA", "false")

import reelreview.models  # noqa: F401  registers tables on Base
from reelreview.database import Base
from reelreview.main import create_app
from reelreview.schemas.movie import Genre
from reelreview.schemas.review import ReviewCreate
from reelreview.services.review_service import ReviewService
from reelreview.storage import MemoryStorage, SqlStorage
from reelreview.utils.security import create_access_token

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Fresh entity store, run once per backend."""
    if request.param == "memory":
        yield MemoryStorage()
        return

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield SqlStorage(TestingSessionLocal)


@pytest.fixture
def make_user(store):
    """Factory for users stored directly (no password hashing)."""
    counter = {"n": 0}

    def _make_user(username=None, **overrides):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        data = {
            "username": username,
            "email": f"{username}@example.com",
            "password_hash": "not-a-real-hash",
        }
        data.update(overrides)
        return store.create_user(data)

    return _make_user


@pytest.fixture
def make_movie(store):
    """Factory for catalog movies with sensible defaults."""
    counter = {"n": 0}

    def _make_movie(title=None, **overrides):
        counter["n"] += 1
        data = {
            "title": title or f"Movie {counter['n']}",
            "synopsis": "A movie used by the test suite.",
            "director": "Jane Doe",
            "cast": ["Actor One", "Actor Two"],
            "genres": [Genre.DRAMA],
            "release_year": 2000,
            "duration": 120,
        }
        data.update(overrides)
        return store.create_movie(data)

    return _make_movie


@pytest.fixture
def client(store):
    """FastAPI test client serving the parametrized store."""
    app = create_app(storage=store, seed_data=False)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def headers_for():
    """Build a bearer header for any stored user"""

    def _headers_for(user):
        token = create_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _headers_for


@pytest.fixture
def auth_user(make_user):
    return make_user("critic")


@pytest.fixture
def auth_headers(auth_user, headers_for):
    """Bearer token for auth_user"""
    return headers_for(auth_user)


@pytest.fixture
def review_data():
    """Factory for valid review payloads."""

    def _review_data(rating=4, **overrides):
        data = {
            "rating": rating,
            "title": "Worth the watch",
            "content": (
                "A layered, patient film that rewards attention; the final act "
                "ties every thread together."
            ),
            "spoiler_warning": False,
        }
        data.update(overrides)
        return ReviewCreate(**data)

    return _review_data


@pytest.fixture
def make_review(store, review_data):
    """Write a review through the service so ratings are recomputed."""

    def _make_review(user, movie, rating=4, **overrides):
        return ReviewService.create_review(store, user.id, movie.id, review_data(rating, **overrides))

    return _make_review
