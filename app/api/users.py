from fastapi import APIRouter, Depends
from typing import Optional

from app.api.deps import get_auth_gate, get_directory_service, get_identity, require_admin
from app.models.api_models import UserLoginRequest
from app.services.auth_service import AuthGate
from app.services.directory_service import DirectoryService

router = APIRouter()

@router.get("/admin/{email}", dependencies=[Depends(require_admin)])
async def check_admin(email: str):
    return {"success": True, "admin": True}

@router.get("/user", dependencies=[Depends(get_identity)])
async def list_users(directory: DirectoryService = Depends(get_directory_service)):
    users = await directory.list_users()
    return {"success": True, "result": [u.model_dump() for u in users]}

@router.put("/user/admin/{email}", dependencies=[Depends(require_admin)])
async def make_admin(email: str, directory: DirectoryService = Depends(get_directory_service)):
    await directory.grant_admin(email)
    return {"success": True, "message": "Admin role granted"}

@router.put("/user/{email}")
async def login(
    email: str,
    req: Optional[UserLoginRequest] = None,
    auth_gate: AuthGate = Depends(get_auth_gate),
):
    access_token = await auth_gate.login(email, req.name if req else None)
    return {"success": True, "accessToken": access_token}
