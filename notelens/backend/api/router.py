"""
API Router.

Aggregates the resource routers mounted under the configured API prefix.
"""

from fastapi import APIRouter

from notelens.backend.api.endpoints import ai, folders, notes, users

router = APIRouter()

router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(folders.router, prefix="/folders", tags=["folders"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(ai.router, prefix="/ai", tags=["ai"])
