import asyncio
import uuid
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, create_async_client

from app.core.config import settings
from app.core.errors import DuplicateKeyError, UpstreamFailure
from app.core.logger import logger

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class DBService:
    """
    Async access to the Supabase tables (services, bookings, users, doctors, payments).

    Created once in the application lifespan and handed to request handlers
    through a dependency. Every call is bounded by `timeout` seconds.
    """

    def __init__(self, client: AsyncClient, timeout: Optional[float] = None):
        self._client = client
        self.timeout = timeout if timeout is not None else settings.EXTERNAL_CALL_TIMEOUT

    @classmethod
    async def connect(cls, url: str, key: str) -> "DBService":
        client = await create_async_client(url, key)
        logger.info("✅ Supabase Async client initialized")
        return cls(client)

    async def close(self):
        await self._client.postgrest.aclose()
        logger.info("🔌 Supabase client closed")

    async def _execute(self, query, operation: str) -> List[Dict[str, Any]]:
        try:
            response = await asyncio.wait_for(query.execute(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"⏱️ DB timeout ({operation}) after {self.timeout}s")
            raise UpstreamFailure()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateKeyError(e.message) from e
            logger.error(f"❌ DB Error ({operation}): {e.code} {e.message}")
            raise UpstreamFailure() from e
        except httpx.HTTPError as e:
            logger.error(f"❌ DB connection error ({operation}): {e}")
            raise UpstreamFailure() from e
        return response.data or []

    async def _select(self, table: str, columns: str = "*", **filters) -> List[Dict[str, Any]]:
        query = self._client.table(table).select(columns)
        for column, value in filters.items():
            query = query.eq(column, value)
        return await self._execute(query, f"select {table}")

    # --- Services ---

    async def list_services(self, columns: str = "*") -> List[Dict[str, Any]]:
        return await self._select("services", columns)

    # --- Bookings ---

    async def find_bookings(self, **filters) -> List[Dict[str, Any]]:
        """Bookings matching every given column exactly."""
        return await self._select("bookings", **filters)

    async def get_booking(self, booking_id: str) -> Optional[Dict[str, Any]]:
        try:
            uuid.UUID(str(booking_id))
        except ValueError:
            return None
        rows = await self._select("bookings", id=booking_id)
        return rows[0] if rows else None

    async def insert_booking(self, booking: Dict[str, Any]) -> Dict[str, Any]:
        """
        Inserts a booking row.
        Raises DuplicateKeyError when (treatment, date, patient) already exists.
        """
        rows = await self._execute(self._client.table("bookings").insert(booking), "insert booking")
        logger.info(f"✅ Booking {rows[0].get('id')} stored")
        return rows[0]

    async def mark_booking_paid(self, booking_id: str, transaction_id: str) -> bool:
        query = self._client.table("bookings") \
            .update({"paid": True, "transaction_id": transaction_id}) \
            .eq("id", booking_id)
        rows = await self._execute(query, "mark booking paid")
        return bool(rows)

    # --- Payments ---

    async def insert_payment(self, payment: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self._execute(self._client.table("payments").insert(payment), "insert payment")
        return rows[0]

    async def find_unreconciled_payments(self, limit: int) -> List[Dict[str, Any]]:
        """
        Payments joined to a booking that is still unpaid.
        The inner embed makes PostgREST drop payments of paid bookings server side.
        """
        query = self._client.table("payments") \
            .select("*, bookings!inner(paid)") \
            .eq("bookings.paid", False) \
            .order("created_at") \
            .limit(limit)
        return await self._execute(query, "find unreconciled payments")

    # --- Users ---

    async def list_users(self) -> List[Dict[str, Any]]:
        return await self._select("users")

    async def get_user(self, email: str) -> Optional[Dict[str, Any]]:
        rows = await self._select("users", email=email)
        return rows[0] if rows else None

    async def upsert_user(self, email: str) -> Dict[str, Any]:
        """Creates the user if missing. An existing role is left untouched."""
        query = self._client.table("users").upsert({"email": email}, on_conflict="email")
        rows = await self._execute(query, "upsert user")
        return rows[0] if rows else {"email": email}

    async def set_user_role(self, email: str, role: str) -> bool:
        query = self._client.table("users").update({"role": role}).eq("email", email)
        rows = await self._execute(query, "set user role")
        return bool(rows)

    # --- Doctors ---

    async def list_doctors(self) -> List[Dict[str, Any]]:
        return await self._select("doctors")

    async def insert_doctor(self, doctor: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self._execute(self._client.table("doctors").insert(doctor), "insert doctor")
        return rows[0]

    async def delete_doctor(self, email: str) -> bool:
        query = self._client.table("doctors").delete().eq("email", email)
        rows = await self._execute(query, "delete doctor")
        if rows:
            logger.info(f"🗑️ Doctor {email} deleted from DB.")
        return bool(rows)
