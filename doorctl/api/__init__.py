"""API endpoints."""

from .door import router as door_router

__all__ = ["door_router"]
