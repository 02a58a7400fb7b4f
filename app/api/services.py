from fastapi import APIRouter, Depends

from app.api.deps import get_availability_service, get_identity
from app.services.availability_service import AvailabilityService

router = APIRouter()

@router.get("/service", dependencies=[Depends(get_identity)])
async def list_services(availability: AvailabilityService = Depends(get_availability_service)):
    return {"success": True, "result": await availability.list_service_names()}

@router.get("/available")
async def available(date: str, availability: AvailabilityService = Depends(get_availability_service)):
    services = await availability.compute_availability(date)
    return {"success": True, "result": [s.model_dump() for s in services]}
