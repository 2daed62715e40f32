"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and
reports which record it pushes, so a deployment can be checked without
opening a WebSocket.
"""

from fastapi import APIRouter

from phonecall import __version__
from phonecall.config import settings
from phonecall.schemas.notification import default_record

router = APIRouter()


@router.get("/health")
async def health_check():
    """Check server health and report the configured notification record."""
    checks = {"server": "ok", "version": __version__}

    # An empty PHONECALL_RECORD_NAME or _COMPANY leaves nothing to push
    try:
        record = default_record()
        checks["record"] = "ok"
    except ValueError as e:
        record = None
        checks["record"] = f"error: {e}"

    status = "healthy" if all(
        v == "ok" for k, v in checks.items() if k != "version"
    ) else "degraded"

    return {
        "status": status,
        **checks,
        "environment": settings.environment,
        "notification": record.model_dump() if record else None,
    }
