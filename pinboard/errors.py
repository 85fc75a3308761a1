"""Exceptions raised by the booking core and its storage layer."""


class PinboardError(Exception):
    """Base class for every error raised by this package."""


class InvalidDate(PinboardError, ValueError):
    """A date value is not a calendar date or a ``YYYY-MM-DD`` string."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid date: {value!r} (expected YYYY-MM-DD)")
        self.value = value


class InvalidRange(PinboardError, ValueError):
    """A booking starts after it ends."""

    def __init__(self, date_from: object, date_to: object) -> None:
        super().__init__(f"date_from ({date_from}) must not be later than date_to ({date_to})")
        self.date_from = date_from
        self.date_to = date_to


class BookingNotFound(PinboardError, KeyError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(booking_id)
        self.booking_id = booking_id

    def __str__(self) -> str:
        return f"Booking {self.booking_id} not found"


class StorageError(PinboardError):
    """The backing store failed to persist a change. Nothing was written."""
