from typing import List

from app.core.errors import DuplicateKeyError, NotFound
from app.core.logger import logger
from app.models.api_models import DoctorRequest
from app.models.db_models import Doctor, User
from app.services.db_service import DBService


class DirectoryService:
    """Users and the doctor roster. Plain reads and writes, no business rules."""

    def __init__(self, db: DBService):
        self.db = db

    async def list_users(self) -> List[User]:
        return [User(**row) for row in await self.db.list_users()]

    async def grant_admin(self, email: str):
        if not await self.db.set_user_role(email, "admin"):
            raise NotFound("User not found")
        logger.info(f"👑 {email} is now an admin")

    async def list_doctors(self) -> List[Doctor]:
        return [Doctor(**row) for row in await self.db.list_doctors()]

    async def add_doctor(self, request: DoctorRequest) -> bool:
        """Returns False when a doctor with that email already exists."""
        try:
            await self.db.insert_doctor(request.model_dump(exclude_none=True))
        except DuplicateKeyError:
            logger.info(f"⛔ Doctor {request.email} already exists")
            return False
        logger.info(f"🩺 Doctor {request.email} added")
        return True

    async def remove_doctor(self, email: str):
        if not await self.db.delete_doctor(email):
            raise NotFound("Doctor not found")
