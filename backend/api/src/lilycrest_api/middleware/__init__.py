"""ASGI middleware for the Lilycrest API."""
