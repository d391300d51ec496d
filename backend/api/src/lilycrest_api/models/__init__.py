"""API-specific request/response models.

Domain models (Reservation, Room, DerivedProgress) live in
lilycrest_shared.models and are reused here where the API returns them as-is.

Modules:
- common: error and acknowledgement envelopes
- reservations: tenant reservation listings, tracker view, admin request bodies
- rooms: room listings with occupancy figures
"""

__all__: list[str] = []
