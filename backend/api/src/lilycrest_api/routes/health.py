"""Health check endpoint."""

import os
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Health check",
    description="Liveness check for load balancers and deploy smoke tests.",
)
async def health() -> dict[str, Any]:
    return {
        "status": "healthy",
        "version": "0.1.0",
        "environment": os.getenv("ENVIRONMENT", "dev"),
        "timestamp": datetime.now(UTC).isoformat(),
    }
