from typing import Optional

from fastapi import Depends, Header, Request

from app.core.errors import UpstreamFailure
from app.models.db_models import Identity
from app.services.auth_service import AuthGate
from app.services.availability_service import AvailabilityService
from app.services.booking_service import BookingService
from app.services.db_service import DBService
from app.services.directory_service import DirectoryService


def get_db(request: Request) -> DBService:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise UpstreamFailure("Database is not configured")
    return db


async def get_identity(authorization: Optional[str] = Header(None)) -> Identity:
    return AuthGate.verify_credential(authorization)


async def require_admin(
    identity: Identity = Depends(get_identity),
    db: DBService = Depends(get_db),
) -> Identity:
    """Gate for admin-only routes. Credential first, then the stored role."""
    await AuthGate(db).require_admin(identity)
    return identity


def get_auth_gate(db: DBService = Depends(get_db)) -> AuthGate:
    return AuthGate(db)


def get_availability_service(db: DBService = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_booking_service(db: DBService = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_directory_service(db: DBService = Depends(get_db)) -> DirectoryService:
    return DirectoryService(db)
