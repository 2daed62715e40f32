"""API route aggregation.

All routers registered here get mounted in main.py under /api/v1.
The WebSocket notifier lives at the root path and is mounted separately.
"""

from fastapi import APIRouter

from phonecall.api.health import router as health_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
