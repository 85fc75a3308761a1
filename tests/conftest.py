import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("RATE_LIMITING_ENABLED", "false")
os.environ.setdefault("STORAGE_BACKEND", "sql")

from pinboard.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from pinboard.database import Base, SessionLocal, engine  # noqa: E402
from pinboard.dependencies import get_store  # noqa: E402
from pinboard.storage import MemoryBookingStore  # noqa: E402
from services.bookings.app import app as bookings_app  # noqa: E402


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def bookings_client() -> Generator[TestClient, None, None]:
    with TestClient(bookings_app) as client:
        yield client


@pytest.fixture()
def memory_store() -> Generator[MemoryBookingStore, None, None]:
    """Route the service to a fresh in-memory store for the duration of a test."""
    store = MemoryBookingStore()
    bookings_app.dependency_overrides[get_store] = lambda: store
    yield store
    bookings_app.dependency_overrides.pop(get_store, None)
