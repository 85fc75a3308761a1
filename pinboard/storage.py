"""Booking stores: one interface over a shared SQL database or an in-process dict.

The core only ever sees the snapshot returned by ``list()``; which backend is
active is decided by ``Settings.storage_backend``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from threading import Lock
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import BookingNotFound, StorageError
from .models import Booking
from .schemas import BookingRead

logger = logging.getLogger(__name__)

DEMO_BOOKINGS = (
    BookingRead(
        id="demo-1",
        x=20,
        y=30,
        tenant_name="Demo Tenant",
        date_from=date(2026, 1, 1),
        date_to=date(2026, 1, 7),
        description="Sample booking",
    ),
)


class BookingStore(ABC):
    """Key-value store of bookings by id. ``list`` preserves insertion order."""

    @abstractmethod
    def list(self) -> List[BookingRead]:
        ...

    @abstractmethod
    def get(self, booking_id: str) -> BookingRead:
        """Return one booking or raise :class:`BookingNotFound`."""

    @abstractmethod
    def put(self, booking: BookingRead) -> BookingRead:
        """Insert or replace ``booking`` under its id. Raises :class:`StorageError`."""

    @abstractmethod
    def delete(self, booking_id: str) -> None:
        ...


class SqlBookingStore(BookingStore):
    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self) -> List[BookingRead]:
        rows = self.db.query(Booking).order_by(Booking.created_at, Booking.id).all()
        return [BookingRead.model_validate(row) for row in rows]

    def _row(self, booking_id: str) -> Booking:
        row = self.db.get(Booking, booking_id)
        if row is None:
            raise BookingNotFound(booking_id)
        return row

    def get(self, booking_id: str) -> BookingRead:
        return BookingRead.model_validate(self._row(booking_id))

    def put(self, booking: BookingRead) -> BookingRead:
        data = booking.model_dump()
        try:
            row = self.db.get(Booking, booking.id)
            if row is None:
                row = Booking(**data)
                self.db.add(row)
            else:
                for key, value in data.items():
                    setattr(row, key, value)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to save booking %s: %s", booking.id, exc)
            raise StorageError(f"Failed to save booking {booking.id}") from exc
        self.db.refresh(row)
        return BookingRead.model_validate(row)

    def delete(self, booking_id: str) -> None:
        row = self._row(booking_id)
        try:
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to delete booking %s: %s", booking_id, exc)
            raise StorageError(f"Failed to delete booking {booking_id}") from exc


class MemoryBookingStore(BookingStore):
    """Single-process store. Records are copied in and out so callers never share them."""

    def __init__(self, seed: Optional[Iterable[BookingRead]] = None) -> None:
        self._items: Dict[str, BookingRead] = {}
        self._lock = Lock()
        for booking in seed or ():
            self._items[booking.id] = booking.model_copy()

    def list(self) -> List[BookingRead]:
        with self._lock:
            return [booking.model_copy() for booking in self._items.values()]

    def get(self, booking_id: str) -> BookingRead:
        with self._lock:
            try:
                return self._items[booking_id].model_copy()
            except KeyError:
                raise BookingNotFound(booking_id) from None

    def put(self, booking: BookingRead) -> BookingRead:
        with self._lock:
            self._items[booking.id] = booking.model_copy()
        return booking.model_copy()

    def delete(self, booking_id: str) -> None:
        with self._lock:
            if self._items.pop(booking_id, None) is None:
                raise BookingNotFound(booking_id)
