"""
Authentication endpoints.

Login is a single stateless credential check: a successful call
returns the user record (without password) and no token.  Clients
keep the returned user for the rest of their session.
"""

from typing import Any, Dict

from fastapi import APIRouter

from exam_simulator_api.app.schemas.user import ChangeEmail, UserCreate, UserLogin
from exam_simulator_api.app.services.user_service import UserService

router = APIRouter()


@router.post("/login", response_model=Dict[str, Any])
async def login(credentials: UserLogin) -> Dict[str, Any]:
    """Check email and password.

    Returns 404 if no account uses the email and 401 if the password
    is wrong.
    """
    user = await UserService.authenticate(credentials.email, credentials.password)
    return {"success": True, "user": user}


@router.post("/register", response_model=Dict[str, Any])
async def register(data: UserCreate) -> Dict[str, Any]:
    """Register a student account.  Duplicate emails are rejected with 400."""
    user = await UserService.register(data)
    return {"success": True, "user": user}


@router.post("/change-email", response_model=Dict[str, Any])
async def change_email(data: ChangeEmail) -> Dict[str, Any]:
    await UserService.change_email(data.user_id, data.new_email)
    return {"success": True, "message": "Email updated successfully"}
