import pytest
from unittest.mock import AsyncMock, MagicMock

from app.core.errors import UpstreamFailure
from app.services.availability_service import AvailabilityService, open_slots


def test_booked_slot_removed_for_matching_treatment_and_date():
    services = [{"name": "Cleaning", "price": 50, "slots": ["9am", "10am"]}]
    bookings = [{"treatment": "Cleaning", "date": "2024-01-01", "slot": "9am"}]

    result = open_slots(services, bookings, "2024-01-01")

    assert [s.name for s in result] == ["Cleaning"]
    assert result[0].slots == ["10am"]


def test_no_bookings_keeps_full_roster():
    services = [{"name": "Cleaning", "slots": ["9am", "10am", "11am"]}]
    result = open_slots(services, [], "2024-01-01")
    assert result[0].slots == ["9am", "10am", "11am"]


def test_other_dates_and_other_treatments_are_ignored():
    services = [
        {"name": "Cleaning", "slots": ["9am", "10am", "11am"]},
        {"name": "Whitening", "slots": ["9am", "2pm"]},
    ]
    bookings = [
        {"treatment": "Cleaning", "date": "2024-01-02", "slot": "9am"},
        {"treatment": "Whitening", "date": "2024-01-01", "slot": "2pm"},
        {"treatment": "Unknown", "date": "2024-01-01", "slot": "10am"},
    ]

    result = open_slots(services, bookings, "2024-01-01")

    assert result[0].slots == ["9am", "10am", "11am"]
    assert result[1].slots == ["9am"]


def test_roster_order_is_preserved():
    services = [{"name": "Cleaning", "slots": ["11am", "9am", "3pm", "10am"]}]
    bookings = [{"treatment": "Cleaning", "date": "d", "slot": "9am"}]
    assert open_slots(services, bookings, "d")[0].slots == ["11am", "3pm", "10am"]


def test_date_is_compared_verbatim():
    services = [{"name": "Cleaning", "slots": ["9am"]}]
    bookings = [{"treatment": "Cleaning", "date": "Jan 1, 2024", "slot": "9am"}]
    assert open_slots(services, bookings, "2024-01-01")[0].slots == ["9am"]
    assert open_slots(services, bookings, "Jan 1, 2024")[0].slots == []


@pytest.mark.asyncio
async def test_compute_availability_is_idempotent(db):
    db.bookings = [{"id": "1", "treatment": "Cleaning", "date": "2024-01-01", "slot": "10am", "patient": "a@x.com"}]
    service = AvailabilityService(db)

    first = await service.compute_availability("2024-01-01")
    second = await service.compute_availability("2024-01-01")

    assert first == second
    assert first[0].slots == ["9am", "11am"]
    assert db.services[0]["slots"] == ["9am", "10am", "11am"]


@pytest.mark.asyncio
async def test_persistence_failure_returns_nothing():
    db = MagicMock()
    db.list_services = AsyncMock(return_value=[{"name": "Cleaning", "slots": ["9am"]}])
    db.find_bookings = AsyncMock(side_effect=UpstreamFailure())

    with pytest.raises(UpstreamFailure):
        await AvailabilityService(db).compute_availability("2024-01-01")
