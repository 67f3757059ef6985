"""
Admin endpoints.

User listing, dashboard figures and logo upload.  These routes carry
no authentication of their own; deployments restrict ``/admin`` at
the proxy or rely on the frontend's role check.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, File, UploadFile

from exam_simulator_api.app.core.exceptions import ValidationError
from exam_simulator_api.app.core.uploads import scratch_upload
from exam_simulator_api.app.services.admin_service import AdminService
from exam_simulator_api.app.services.statistics_service import StatisticsService
from exam_simulator_api.app.services.user_service import UserService

router = APIRouter()


@router.post("/upload-logo", response_model=Dict[str, Any])
async def upload_logo(logo: Optional[UploadFile] = File(None)) -> Dict[str, Any]:
    """Replace the site logo with an uploaded image."""
    if logo is None:
        raise ValidationError("No logo uploaded")
    with scratch_upload(logo, "logo") as path:
        await AdminService.upload_logo(path, logo.content_type)
    return {"success": True, "message": "Logo uploaded successfully"}


@router.get("/users", response_model=Dict[str, Any])
async def list_users() -> Dict[str, Any]:
    """List all users.  Passwords are never included."""
    users = await UserService.list_users()
    return {"success": True, "users": users, "count": len(users)}


@router.get("/stats", response_model=Dict[str, Any])
async def dashboard_stats() -> Dict[str, Any]:
    stats = await StatisticsService.dashboard()
    return {"success": True, "stats": stats}
