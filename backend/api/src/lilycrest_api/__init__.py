"""Lilycrest booking REST API (FastAPI, deployed behind API Gateway via Mangum)."""
