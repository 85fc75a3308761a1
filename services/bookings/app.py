import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional
from uuid import uuid4

from cachetools import TTLCache
from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from pinboard.collision import check_collision
from pinboard.config import get_settings
from pinboard.database import Base, engine
from pinboard.dependencies import get_store
from pinboard.errors import BookingNotFound, InvalidRange, StorageError
from pinboard.intervals import filter_by_week, validate_range
from pinboard.logging_middleware import add_audit_middleware
from pinboard.rate_limit import apply_rate_limiter, limiter, write_limit
from pinboard.schemas import (
    BookingCreate,
    BookingRead,
    BookingUpdate,
    CollisionCheck,
    CollisionVerdict,
    WeekWindow,
)
from pinboard.storage import BookingStore
from pinboard.weeks import find_week, generate_weeks

settings = get_settings()
logger = logging.getLogger(__name__)
weeks_cache: TTLCache = TTLCache(maxsize=16, ttl=settings.week_cache_ttl)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.run_db_migrations:
        Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    fastapi_app = FastAPI(title="Bookings Service", version="1.0.0", lifespan=lifespan)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    apply_rate_limiter(fastapi_app)
    add_audit_middleware(fastapi_app, "bookings")
    Instrumentator().instrument(fastapi_app).expose(fastapi_app, include_in_schema=False)
    return fastapi_app


app = create_app()


def current_weeks() -> List[WeekWindow]:
    key = (settings.calendar_anchor, settings.calendar_year, settings.max_weeks)
    weeks = weeks_cache.get(key)
    if weeks is None:
        weeks = generate_weeks(settings.calendar_anchor, settings.calendar_year, settings.max_weeks)
        weeks_cache[key] = weeks
    return weeks


def _get_or_404(store: BookingStore, booking_id: str) -> BookingRead:
    try:
        return store.get(booking_id)
    except BookingNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found") from exc


def _ensure_no_collision(
    store: BookingStore,
    x: float,
    y: float,
    date_from: date,
    date_to: date,
    map_width: float,
    map_height: float,
    exclude_id: Optional[str] = None,
) -> None:
    try:
        validate_range(date_from, date_to)
    except InvalidRange as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    result = check_collision(
        x,
        y,
        date_from,
        date_to,
        store.list(),
        map_width,
        map_height,
        exclude_id=exclude_id,
        radius=settings.collision_radius_px,
    )
    if result.collision and result.conflict is not None:
        conflict = result.conflict
        logger.info("Rejected placement at (%.2f, %.2f): collides with booking %s", x, y, conflict.id)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": (
                    f"Collision: booking for {conflict.tenant_name} already exists here "
                    f"from {conflict.date_from} to {conflict.date_to}"
                ),
                "conflict": conflict.model_dump(mode="json"),
            },
        )


def _save(store: BookingStore, booking: BookingRead) -> BookingRead:
    try:
        return store.put(booking)
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to save booking") from exc


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "service": "bookings"}


@app.get("/weeks", response_model=List[WeekWindow], tags=["weeks"])
def list_weeks() -> List[WeekWindow]:
    return current_weeks()


@app.get("/bookings", response_model=List[BookingRead])
@limiter.limit(settings.default_rate_limit)
def list_bookings(
    request: Request,
    week_id: Optional[str] = Query(None, description="Only bookings overlapping this week; 'all' or unknown ids return everything"),
    store: BookingStore = Depends(get_store),
) -> List[BookingRead]:
    week = find_week(current_weeks(), week_id) if week_id else None
    return filter_by_week(store.list(), week)


@app.post("/bookings/collisions", response_model=CollisionVerdict)
@limiter.limit(settings.default_rate_limit)
def check_placement(
    request: Request,
    candidate: CollisionCheck,
    store: BookingStore = Depends(get_store),
) -> CollisionVerdict:
    try:
        validate_range(candidate.date_from, candidate.date_to)
    except InvalidRange as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    result = check_collision(
        candidate.x,
        candidate.y,
        candidate.date_from,
        candidate.date_to,
        store.list(),
        candidate.map_width,
        candidate.map_height,
        exclude_id=candidate.exclude_id,
        radius=settings.collision_radius_px,
    )
    return CollisionVerdict(collision=result.collision, conflict=result.conflict)


@app.get("/bookings/{booking_id}", response_model=BookingRead)
def get_booking(booking_id: str, store: BookingStore = Depends(get_store)) -> BookingRead:
    return _get_or_404(store, booking_id)


@app.post("/bookings", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
@write_limit
def create_booking(
    request: Request,
    booking_in: BookingCreate,
    store: BookingStore = Depends(get_store),
) -> BookingRead:
    _ensure_no_collision(
        store,
        booking_in.x,
        booking_in.y,
        booking_in.date_from,
        booking_in.date_to,
        booking_in.map_width,
        booking_in.map_height,
    )
    booking = BookingRead(id=str(uuid4()), **booking_in.model_dump(exclude={"map_width", "map_height"}))
    return _save(store, booking)


@app.put("/bookings/{booking_id}", response_model=BookingRead)
@write_limit
def update_booking(
    request: Request,
    booking_id: str,
    booking_update: BookingUpdate,
    store: BookingStore = Depends(get_store),
) -> BookingRead:
    current = _get_or_404(store, booking_id)
    data = booking_update.model_dump(exclude_unset=True, exclude_none=True)
    map_width = data.pop("map_width", settings.edit_map_width)
    map_height = data.pop("map_height", settings.edit_map_height)
    updated = current.model_copy(update=data)

    _ensure_no_collision(
        store,
        updated.x,
        updated.y,
        updated.date_from,
        updated.date_to,
        map_width,
        map_height,
        exclude_id=booking_id,
    )
    return _save(store, updated)


@app.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
@write_limit
def delete_booking(
    request: Request,
    booking_id: str,
    store: BookingStore = Depends(get_store),
) -> None:
    try:
        store.delete(booking_id)
    except BookingNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found") from exc
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to delete booking") from exc
