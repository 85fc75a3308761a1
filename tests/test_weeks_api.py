def test_weeks_endpoint(bookings_client):
    response = bookings_client.get("/weeks")
    assert response.status_code == 200
    weeks = response.json()
    assert len(weeks) == 53
    assert weeks[0] == {
        "id": "week-1",
        "label": "Week 1: 29.12 - 04.01",
        "start": "2025-12-29",
        "end": "2026-01-04",
    }


def test_weeks_are_cached(bookings_client):
    first = bookings_client.get("/weeks").json()
    second = bookings_client.get("/weeks").json()
    assert first == second
