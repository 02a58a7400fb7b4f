import asyncio
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Set

from app.core.logger import logger
from app.models.db_models import Service
from app.services.db_service import DBService


def open_slots(services: Iterable[Dict[str, Any]], bookings: Iterable[Dict[str, Any]], date: str) -> List[Service]:
    """
    Removes the slots already booked on `date` from every service roster.
    Dates are compared as plain strings. Roster order is kept.
    """
    booked: Dict[str, Set[str]] = defaultdict(set)
    for booking in bookings:
        if booking.get("date") != date:
            continue
        booked[booking.get("treatment")].add(booking.get("slot"))

    result = []
    for row in services:
        service = Service(**row)
        taken = booked.get(service.name)
        if taken:
            service.slots = [slot for slot in service.slots if slot not in taken]
        result.append(service)
    return result


class AvailabilityService:
    def __init__(self, db: DBService):
        self.db = db

    async def list_service_names(self) -> List[Dict[str, Any]]:
        return await self.db.list_services(columns="id,name")

    async def compute_availability(self, date: str) -> List[Service]:
        services, bookings = await asyncio.gather(
            self.db.list_services(),
            self.db.find_bookings(date=date),
        )
        logger.info(f"📅 Availability for {date}: {len(services)} services, {len(bookings)} bookings")
        return open_slots(services, bookings, date)
