"""FastAPI dependencies that hand routes the configured booking store."""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from .config import get_settings
from .database import get_db
from .storage import DEMO_BOOKINGS, BookingStore, MemoryBookingStore, SqlBookingStore


@lru_cache
def get_memory_store() -> MemoryBookingStore:
    settings = get_settings()
    return MemoryBookingStore(DEMO_BOOKINGS if settings.seed_demo_data else None)


def get_store(db: Session = Depends(get_db)) -> BookingStore:
    if get_settings().storage_backend == "memory":
        return get_memory_store()
    return SqlBookingStore(db)
