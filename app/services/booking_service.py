from typing import List, Optional

from fastapi import BackgroundTasks
from pydantic import BaseModel

from app.core.errors import DuplicateKeyError, Forbidden, NotFound
from app.core.logger import logger
from app.models.api_models import BookingRequest, PaymentRecordRequest
from app.models.db_models import Booking, Identity, Payment
from app.services.db_service import DBService
from app.services.notification_service import send_appointment_confirmation

ALREADY_BOOKED = "Already booked"
BOOKING_SUCCESS = "Booking Success"
UNRECONCILED_LIMIT = 200


class BookingResult(BaseModel):
    success: bool
    message: str
    booking: Optional[Booking] = None


def send_confirmation(booking: Booking):
    """Background task. Never raises, the booking is already stored."""
    try:
        if not send_appointment_confirmation(booking):
            logger.warning(f"⚠️ Confirmation email for booking {booking.id} was not sent")
    except Exception:
        logger.exception(f"❌ Confirmation email for booking {booking.id} failed")


class BookingService:
    def __init__(self, db: DBService):
        self.db = db

    async def create_booking(self, request: BookingRequest, background_tasks: BackgroundTasks) -> BookingResult:
        """
        Stores the booking unless the patient already holds one for the same
        treatment and date. The unique constraint on that key also catches
        concurrent duplicates that slip past the lookup.
        """
        booking = Booking(**request.model_dump())
        logger.info(f"📥 Booking Request - {booking.treatment} on {booking.date} at {booking.slot} for {booking.patient}")

        existing = await self.db.find_bookings(**booking.conflict_key)
        if existing:
            logger.info(f"⛔ {booking.patient} already booked {booking.treatment} on {booking.date}")
            return BookingResult(success=False, message=ALREADY_BOOKED)

        try:
            row = await self.db.insert_booking(booking.model_dump(exclude={"id"}, exclude_none=True))
        except DuplicateKeyError:
            logger.info(f"⛔ Concurrent duplicate booking rejected for {booking.patient}")
            return BookingResult(success=False, message=ALREADY_BOOKED)

        saved = Booking(**row)
        background_tasks.add_task(send_confirmation, saved)
        return BookingResult(success=True, message=BOOKING_SUCCESS, booking=saved)

    async def list_patient_bookings(self, patient: str, identity: Identity) -> List[Booking]:
        if patient != identity.email:
            logger.warning(f"🚫 {identity.email} asked for bookings of {patient}")
            raise Forbidden()
        rows = await self.db.find_bookings(patient=patient)
        return [Booking(**row) for row in rows]

    async def get_booking(self, booking_id: str) -> Booking:
        row = await self.db.get_booking(booking_id)
        if not row:
            raise NotFound("Booking not found")
        return Booking(**row)

    async def record_payment(self, booking_id: str, request: PaymentRecordRequest) -> Payment:
        """
        Appends the payment row, then flags the booking as paid.

        The two writes are independent. If the second one fails the payment
        row stays behind and is reported by find_unreconciled_payments.
        """
        booking = await self.get_booking(booking_id)

        payment = Payment(
            booking_id=booking.id,
            transaction_id=request.transaction_id,
            patient=request.patient or booking.patient,
            price=request.price if request.price is not None else booking.price,
        )
        row = await self.db.insert_payment(payment.model_dump(exclude={"id", "created_at"}, exclude_none=True))
        logger.info(f"💳 Payment {payment.transaction_id} recorded for booking {booking.id}")

        if not await self.db.mark_booking_paid(booking.id, request.transaction_id):
            logger.error(f"❌ Payment {payment.transaction_id} stored but booking {booking.id} was not marked paid")
            raise NotFound("Booking not found")
        return Payment(**row)

    async def find_unreconciled_payments(self, limit: int = UNRECONCILED_LIMIT) -> List[Payment]:
        """Payments whose booking is still flagged unpaid, oldest first, at most `limit`."""
        rows = await self.db.find_unreconciled_payments(limit)
        return [Payment(**row) for row in rows]
