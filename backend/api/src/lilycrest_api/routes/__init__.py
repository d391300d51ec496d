"""API routes package.

Routers are organized by domain:

- health: health check endpoints
- reservations: tenant reservation listings and progress tracker
- admin: back-office visit and payment actions
- rooms: room listings with occupancy

All routers are registered in main.py with the /api prefix.
"""

from lilycrest_api.routes.admin import router as admin_router
from lilycrest_api.routes.health import router as health_router
from lilycrest_api.routes.reservations import router as reservations_router
from lilycrest_api.routes.rooms import router as rooms_router

__all__ = [
    "admin_router",
    "health_router",
    "reservations_router",
    "rooms_router",
]
