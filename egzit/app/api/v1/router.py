"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from egzit.app.api.v1.endpoints import (
    auth, moves, admin_moves, movers, locations,
    notifications, analytics, admin_ops
)

router = APIRouter()

# Authentication
router.include_router(auth.router)

# Customer moves
router.include_router(moves.router)

# Backoffice
router.include_router(admin_moves.router)
router.include_router(movers.router)
router.include_router(analytics.router)
router.include_router(admin_ops.router)

# Shared
router.include_router(locations.router)
router.include_router(notifications.router)
