from fastapi import APIRouter, Depends

from app.api.deps import get_booking_service, get_identity, require_admin
from app.models.api_models import PaymentIntentRequest
from app.services import payment_service
from app.services.booking_service import BookingService

router = APIRouter()

# Stripe only, no database handle needed
@router.post("/create-payment-intent", dependencies=[Depends(get_identity)])
async def create_payment_intent(req: PaymentIntentRequest):
    client_secret = await payment_service.create_payment_intent(req.price)
    return {"success": True, "clientSecret": client_secret}

@router.get("/payment/unreconciled", dependencies=[Depends(require_admin)])
async def unreconciled_payments(booking_service: BookingService = Depends(get_booking_service)):
    payments = await booking_service.find_unreconciled_payments()
    return {"success": True, "result": [p.model_dump(by_alias=True, mode="json") for p in payments]}
