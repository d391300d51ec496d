"""Shared domain models and services for the Lilycrest booking backend."""
