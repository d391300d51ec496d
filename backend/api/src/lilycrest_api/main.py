"""FastAPI application for the Lilycrest booking REST API.

This package provides REST endpoints for:
- Health checks
- Tenant reservations and the progress tracker
- Admin visit and payment actions
- Room listings
"""

import os
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from lilycrest_api.exceptions import register_exception_handlers
from lilycrest_api.middleware.correlation import CorrelationIdMiddleware
from lilycrest_api.routes import admin_router, health_router, reservations_router, rooms_router
from lilycrest_shared.utils.logging import configure_logging, get_logger

configure_logging(os.getenv("LOG_LEVEL", "INFO"))
logger = get_logger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def get_cors_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app = FastAPI(
    title="Lilycrest Booking API",
    description="REST API for dormitory reservations and their progress",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

# Matches CloudFront routing: /api/* -> API Gateway
app.include_router(health_router, prefix="/api")
app.include_router(reservations_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(rooms_router, prefix="/api")


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "lilycrest-api",
    }


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the API locally with uvicorn.

    Args:
        host: Host to bind to
        port: Port to listen on
        reload: Enable hot reload for development
    """
    import uvicorn

    if reload:
        # Reload mode needs an import string
        uvicorn.run(
            "lilycrest_api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["api/src", "shared/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    logger.info("Starting local API server")
    run_server()
