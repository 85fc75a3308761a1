"""Unit tests for the pin collision rule."""
from datetime import date

import pytest

from pinboard.collision import COLLISION_RADIUS_PX, CollisionResult, check_collision, pixel_distance
from pinboard.schemas import BookingRead

WIDTH, HEIGHT = 1000, 500


def make_booking(booking_id="a", x=20.0, y=30.0, date_from="2026-01-01", date_to="2026-01-07") -> BookingRead:
    return BookingRead(
        id=booking_id,
        x=x,
        y=y,
        tenant_name=f"Tenant {booking_id}",
        date_from=date.fromisoformat(date_from),
        date_to=date.fromisoformat(date_to),
    )


@pytest.fixture
def booking_a() -> BookingRead:
    return make_booking()


class TestPixelDistance:
    def test_distance_scales_with_surface(self):
        assert pixel_distance(0, 0, 50, 0, 20, 20) == 10.0
        assert pixel_distance(0, 0, 50, 0, 40, 20) == 20.0

    def test_uses_both_axes(self):
        assert pixel_distance(0, 0, 3, 4, 100, 100) == pytest.approx(5.0)


class TestCheckCollision:
    def test_empty_collection_never_collides(self):
        assert check_collision(20, 30, "2026-01-01", "2026-01-07", [], WIDTH, HEIGHT) == CollisionResult(collision=False)

    def test_near_pin_with_overlapping_dates_collides(self, booking_a):
        result = check_collision(20.1, 30.1, "2026-01-05", "2026-01-10", [booking_a], WIDTH, HEIGHT)
        assert result.collision is True
        assert result.conflict == booking_a

    def test_near_pin_with_disjoint_dates_does_not_collide(self, booking_a):
        result = check_collision(20.1, 30.1, "2026-01-08", "2026-01-10", [booking_a], WIDTH, HEIGHT)
        assert result == CollisionResult(collision=False)

    def test_touching_dates_collide(self, booking_a):
        assert check_collision(20, 30, "2026-01-07", "2026-01-07", [booking_a], WIDTH, HEIGHT).collision

    def test_nine_pixels_away_collides(self, booking_a):
        # 0.9% of 1000px
        result = check_collision(20.9, 30, "2026-01-01", "2026-01-07", [booking_a], WIDTH, HEIGHT)
        assert result.collision is True
        assert result.conflict is booking_a

    def test_eleven_pixels_away_does_not_collide(self, booking_a):
        result = check_collision(21.1, 30, "2026-01-01", "2026-01-07", [booking_a], WIDTH, HEIGHT)
        assert result.collision is False
        assert result.conflict is None

    def test_exactly_on_radius_does_not_collide(self):
        existing = make_booking(x=0, y=0)
        assert COLLISION_RADIUS_PX == 10
        assert not check_collision(50, 0, "2026-01-01", "2026-01-07", [existing], 20, 20).collision

    def test_same_pins_collide_only_on_smaller_surface(self):
        existing = make_booking(x=50, y=50)
        assert not check_collision(52, 50, "2026-01-01", "2026-01-07", [existing], 1000, 1000).collision
        assert check_collision(52, 50, "2026-01-01", "2026-01-07", [existing], 400, 400).collision

    def test_custom_radius(self, booking_a):
        assert check_collision(21.1, 30, "2026-01-01", "2026-01-07", [booking_a], WIDTH, HEIGHT, radius=12).collision

    def test_excluded_booking_is_skipped(self, booking_a):
        result = check_collision(
            booking_a.x, booking_a.y, booking_a.date_from, booking_a.date_to, [booking_a], WIDTH, HEIGHT, exclude_id="a"
        )
        assert result.collision is False

    def test_exclusion_still_checks_other_bookings(self, booking_a):
        neighbour = make_booking("b", x=20.2, y=30)
        result = check_collision(20, 30, "2026-01-01", "2026-01-07", [booking_a, neighbour], WIDTH, HEIGHT, exclude_id="a")
        assert result.conflict == neighbour

    def test_first_match_wins(self, booking_a):
        closer = make_booking("b", x=20.05, y=30.05, date_from="2026-01-03", date_to="2026-01-04")
        result = check_collision(20.05, 30.05, "2026-01-01", "2026-01-07", [booking_a, closer], WIDTH, HEIGHT)
        assert result.conflict == booking_a
        result = check_collision(20.05, 30.05, "2026-01-01", "2026-01-07", [closer, booking_a], WIDTH, HEIGHT)
        assert result.conflict == closer

    def test_zero_surface_collapses_every_pin(self):
        far_away = make_booking(x=95, y=95)
        assert check_collision(1, 1, "2026-01-01", "2026-01-02", [far_away], 0, 0).collision

    def test_does_not_mutate_existing_bookings(self, booking_a):
        existing = [booking_a, make_booking("b", x=80, y=80)]
        snapshot = [booking.model_copy() for booking in existing]
        check_collision(20, 30, "2026-01-01", "2026-01-07", existing, WIDTH, HEIGHT)
        assert existing == snapshot

    def test_accepts_any_iterable(self, booking_a):
        assert check_collision(20, 30, "2026-01-02", "2026-01-03", iter([booking_a]), WIDTH, HEIGHT).collision
