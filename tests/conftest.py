import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_db
from app.core.errors import DuplicateKeyError
from app.core.security import create_access_token
from app.main import app


class InMemoryDB:
    """
    Stands in for DBService in tests. Same method names and return shapes,
    and the same unique keys as sql/schema.sql.
    """

    def __init__(self):
        self.services: List[Dict[str, Any]] = []
        self.bookings: List[Dict[str, Any]] = []
        self.users: List[Dict[str, Any]] = []
        self.doctors: List[Dict[str, Any]] = []
        self.payments: List[Dict[str, Any]] = []

    @staticmethod
    def _match(rows, **filters):
        return [dict(r) for r in rows if all(r.get(k) == v for k, v in filters.items())]

    async def list_services(self, columns: str = "*"):
        if columns == "*":
            return [dict(s) for s in self.services]
        keep = [c.strip() for c in columns.split(",")]
        return [{k: s[k] for k in keep if k in s} for s in self.services]

    async def find_bookings(self, **filters):
        return self._match(self.bookings, **filters)

    async def get_booking(self, booking_id: str) -> Optional[Dict[str, Any]]:
        rows = self._match(self.bookings, id=booking_id)
        return rows[0] if rows else None

    async def insert_booking(self, booking):
        key = (booking["treatment"], booking["date"], booking["patient"])
        if any((b["treatment"], b["date"], b["patient"]) == key for b in self.bookings):
            raise DuplicateKeyError("bookings_conflict_key")
        row = {"id": str(uuid.uuid4()), "paid": False, "transaction_id": None, **booking}
        self.bookings.append(row)
        return dict(row)

    async def mark_booking_paid(self, booking_id, transaction_id):
        for b in self.bookings:
            if b["id"] == booking_id:
                b.update(paid=True, transaction_id=transaction_id)
                return True
        return False

    async def insert_payment(self, payment):
        row = {"id": len(self.payments) + 1, "created_at": datetime.now().isoformat(), **payment}
        self.payments.append(row)
        return dict(row)

    async def find_unreconciled_payments(self, limit):
        unpaid = {b["id"] for b in self.bookings if not b.get("paid")}
        rows = [dict(p) for p in self.payments if p["booking_id"] in unpaid]
        return rows[:limit]

    async def list_users(self):
        return [dict(u) for u in self.users]

    async def get_user(self, email):
        rows = self._match(self.users, email=email)
        return rows[0] if rows else None

    async def upsert_user(self, email):
        existing = await self.get_user(email)
        if existing:
            return existing
        row = {"email": email, "role": None}
        self.users.append(row)
        return dict(row)

    async def set_user_role(self, email, role):
        for u in self.users:
            if u["email"] == email:
                u["role"] = role
                return True
        return False

    async def list_doctors(self):
        return [dict(d) for d in self.doctors]

    async def insert_doctor(self, doctor):
        if any(d["email"] == doctor["email"] for d in self.doctors):
            raise DuplicateKeyError("doctors_pkey")
        self.doctors.append(dict(doctor))
        return dict(doctor)

    async def delete_doctor(self, email):
        before = len(self.doctors)
        self.doctors = [d for d in self.doctors if d["email"] != email]
        return len(self.doctors) < before


@pytest.fixture
def db():
    db = InMemoryDB()
    db.services = [
        {"id": 1, "name": "Cleaning", "price": 50, "slots": ["9am", "10am", "11am"]},
        {"id": 2, "name": "Whitening", "price": 120, "slots": ["9am", "2pm"]},
    ]
    db.users = [
        {"email": "admin@clinic.com", "role": "admin"},
        {"email": "a@x.com", "role": None},
    ]
    return db


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_header(email: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'email': email})}"}


@pytest.fixture
def user_headers():
    return auth_header("a@x.com")


@pytest.fixture
def admin_headers():
    return auth_header("admin@clinic.com")


@pytest.fixture
def headers_for():
    return auth_header


@pytest.fixture
def restore_app_state():
    """Puts app.state.db back the way the test found it."""
    saved = getattr(app.state, "db", None)
    yield app.state
    app.state.db = saved
