"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under their prefixes.  When
new domains are introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import admin, auth, health, questions, results

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(questions.router, prefix="/questions", tags=["questions"])
router.include_router(results.router, prefix="/results", tags=["results"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
# The health router defines its own "/health" path.
router.include_router(health.router, tags=["health"])
