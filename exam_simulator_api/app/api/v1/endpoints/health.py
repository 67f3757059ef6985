"""
Health check endpoint.
"""

from typing import Any, Dict

from fastapi import APIRouter

from exam_simulator_api.app.core.store import utc_timestamp

router = APIRouter()


@router.get("/health", response_model=Dict[str, Any])
async def health() -> Dict[str, Any]:
    return {
        "success": True,
        "status": "Server running",
        "timestamp": utc_timestamp(),
        "storage": "Local JSON files",
    }
