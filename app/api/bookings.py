from fastapi import APIRouter, BackgroundTasks, Depends

from app.api.deps import get_booking_service, get_identity
from app.models.api_models import BookingRequest, PaymentRecordRequest
from app.models.db_models import Identity
from app.services.booking_service import BookingService

router = APIRouter()

@router.get("/booking")
async def my_bookings(
    patient: str,
    identity: Identity = Depends(get_identity),
    booking_service: BookingService = Depends(get_booking_service),
):
    bookings = await booking_service.list_patient_bookings(patient, identity)
    return {"success": True, "result": [b.model_dump(by_alias=True) for b in bookings]}

@router.get("/booking/{booking_id}", dependencies=[Depends(get_identity)])
async def get_booking(booking_id: str, booking_service: BookingService = Depends(get_booking_service)):
    booking = await booking_service.get_booking(booking_id)
    return {"success": True, "booking": booking.model_dump(by_alias=True)}

@router.post("/booking", dependencies=[Depends(get_identity)])
async def create_booking(
    req: BookingRequest,
    background_tasks: BackgroundTasks,
    booking_service: BookingService = Depends(get_booking_service),
):
    # Conflicts are a normal answer (200, success=False), not an error
    result = await booking_service.create_booking(req, background_tasks)
    response = {"success": result.success, "message": result.message}
    if result.booking:
        response["booking"] = result.booking.model_dump(by_alias=True)
    return response

@router.patch("/booking/{booking_id}", dependencies=[Depends(get_identity)])
async def pay_booking(
    booking_id: str,
    req: PaymentRecordRequest,
    booking_service: BookingService = Depends(get_booking_service),
):
    await booking_service.record_payment(booking_id, req)
    return {"success": True, "message": "Payment recorded"}
