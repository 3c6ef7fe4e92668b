# =============================================================================
# app/routers/admin.py - Admin Credential Endpoints
# =============================================================================
# The dashboard posts JSON here. A successful login is just an answer;
# no session or token is issued.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import AdminServiceDep
from core.models import ChangePasswordRequest, LoginRequest

router = APIRouter()


@router.post("/login")
def login(body: LoginRequest, service: AdminServiceDep):
    """
    Check the admin username and password.

    Returns 401 on a mismatch.
    """
    service.verify_login(body.username, body.password)
    return {"success": True, "message": "Login successful"}


@router.post("/change-password")
def change_password(body: ChangePasswordRequest, service: AdminServiceDep):
    """
    Rotate the admin password.

    - **currentPassword**: must match the stored hash (401 otherwise)
    - **newPassword**: at least MIN_PASSWORD_LENGTH characters (400 otherwise)
    """
    service.change_password(body.current_password, body.new_password, username=body.username)
    return {"success": True, "message": "Password changed successfully"}
