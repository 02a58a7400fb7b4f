from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# --- Incoming Request Models ---

class PaymentIntentRequest(BaseModel):
    price: float = Field(..., gt=0)

class BookingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    treatment: str
    date: str
    slot: str
    patient: str
    patient_name: Optional[str] = Field(default=None, alias="patientName")
    phone: Optional[str] = None
    price: Optional[float] = None

class PaymentRecordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transaction_id: str = Field(..., alias="transactionId")
    patient: Optional[str] = None
    price: Optional[float] = None

class DoctorRequest(BaseModel):
    email: str
    name: str
    specialty: Optional[str] = None
    img: Optional[str] = None

class UserLoginRequest(BaseModel):
    name: Optional[str] = None
