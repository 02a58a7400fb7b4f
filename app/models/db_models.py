from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

# Storage rows use snake_case columns, the JSON API uses camelCase aliases.

class Service(BaseModel):
    id: Optional[int] = None
    name: str
    price: float = 0
    slots: List[str] = Field(default_factory=list)

class Booking(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    treatment: str
    date: str
    slot: str
    patient: str
    patient_name: Optional[str] = Field(default=None, alias="patientName")
    phone: Optional[str] = None
    price: Optional[float] = None
    paid: bool = False
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")

    @property
    def conflict_key(self) -> dict:
        return {"treatment": self.treatment, "date": self.date, "patient": self.patient}

class User(BaseModel):
    email: str
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

class Doctor(BaseModel):
    email: str
    name: str
    specialty: Optional[str] = None
    img: Optional[str] = None

class Payment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    booking_id: str = Field(alias="bookingId")
    transaction_id: str = Field(alias="transactionId")
    patient: Optional[str] = None
    price: Optional[float] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

class Identity(BaseModel):
    """Decoded access token claims. Only `email` is required."""
    model_config = ConfigDict(extra="allow")

    email: str
