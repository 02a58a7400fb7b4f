from fastapi import APIRouter, Depends

from app.api.deps import get_directory_service, require_admin
from app.models.api_models import DoctorRequest
from app.services.directory_service import DirectoryService

# Every doctor route is admin-only
router = APIRouter(dependencies=[Depends(require_admin)])

@router.get("/doctor")
async def list_doctors(directory: DirectoryService = Depends(get_directory_service)):
    doctors = await directory.list_doctors()
    return {"success": True, "result": [d.model_dump() for d in doctors]}

@router.post("/doctor")
async def add_doctor(req: DoctorRequest, directory: DirectoryService = Depends(get_directory_service)):
    if not await directory.add_doctor(req):
        return {"success": False, "message": "Doctor already exists"}
    return {"success": True, "message": "Inserted successfully"}

@router.delete("/doctor/{email}")
async def remove_doctor(email: str, directory: DirectoryService = Depends(get_directory_service)):
    await directory.remove_doctor(email)
    return {"success": True, "message": "Removed successfully"}
