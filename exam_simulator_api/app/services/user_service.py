"""
Business logic for users.

Users live in the ``users`` document of the record store.  Emails are
unique (exact, case-sensitive match); uniqueness is checked here
before every write because the store itself enforces nothing.
Passwords are stored as PBKDF2 hashes and are stripped from every
record handed back to the API layer.
"""

import logging
from typing import Any, Dict, List

from exam_simulator_api.app.core.config import settings
from exam_simulator_api.app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from exam_simulator_api.app.core.security import hash_password, verify_password
from exam_simulator_api.app.core.store import get_store, new_record_id, utc_timestamp
from exam_simulator_api.app.schemas.user import UserCreate, UserRead

USERS = "users"

logger = logging.getLogger(__name__)


def public_view(user: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``user`` without its password, shaped as ``UserRead``."""
    return UserRead.model_validate(without_password(user)).model_dump(by_alias=True)


def without_password(user: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``user`` as stored, minus its password."""
    return {key: value for key, value in user.items() if key != "password"}


class UserService:
    """Registration, login and account maintenance."""

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Dict[str, Any]:
        """Check credentials and return the matching user.

        Raises ``NotFoundError`` when no user has this email and
        ``UnauthorizedError`` when the password does not match.
        """
        store = get_store()
        if not store.exists(USERS):
            raise NotFoundError("No users found")
        user = next((u for u in store.load(USERS) if u.get("email") == email), None)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(password, user.get("password") or ""):
            logger.info("Rejected login for %s", email)
            raise UnauthorizedError("Invalid credentials")
        return public_view(user)

    @classmethod
    async def register(cls, data: UserCreate) -> Dict[str, Any]:
        """Create a student account and return it without the password."""

        def _append(users: List[Dict[str, Any]]) -> Dict[str, Any]:
            if any(u.get("email") == data.email for u in users):
                raise ConflictError("Email already registered")
            user = {
                "id": new_record_id("student", users),
                "name": data.name,
                "email": data.email,
                "password": hash_password(data.password),
                "role": "student",
                "createdAt": utc_timestamp(),
                "verified": False,
            }
            users.append(user)
            return user

        user = get_store().update(USERS, _append)
        logger.info("Registered user %s (%s)", user["email"], user["id"])
        return public_view(user)

    @classmethod
    async def change_email(cls, user_id: str, new_email: str) -> None:
        """Replace the email of ``user_id`` with ``new_email``.

        Another user already holding ``new_email`` is a conflict; setting
        a user's current email again is allowed.
        """
        store = get_store()
        if not store.exists(USERS):
            raise NotFoundError("Users not found")

        def _rewrite(users: List[Dict[str, Any]]) -> None:
            if any(u.get("email") == new_email and u.get("id") != user_id for u in users):
                raise ConflictError("Email already in use")
            for user in users:
                if user.get("id") == user_id:
                    user["email"] = new_email
                    return
            raise NotFoundError("User not found")

        store.update(USERS, _rewrite)
        logger.info("Changed email of user %s", user_id)

    @classmethod
    async def list_users(cls) -> List[Dict[str, Any]]:
        """Return every user with the password removed.

        Records are returned as stored, without schema validation.
        """
        return [without_password(u) for u in get_store().load(USERS)]

    @classmethod
    async def ensure_default_admin(cls) -> bool:
        """Create the configured admin account if no users exist yet.

        Returns ``True`` when the account was created.  An existing
        users document (even an empty one) is never touched.
        """
        store = get_store()
        if store.exists(USERS):
            return False
        admin = {
            "id": "admin_001",
            "name": settings.admin_name,
            "email": settings.admin_email,
            "password": hash_password(settings.admin_password),
            "role": "admin",
            "createdAt": utc_timestamp(),
            "verified": True,
        }
        store.save(USERS, [admin])
        logger.info("Default admin %s created", settings.admin_email)
        return True
