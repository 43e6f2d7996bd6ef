"""Routers exposed by the host application."""

from __future__ import annotations

from .health import router as health_router

__all__ = ["health_router"]
