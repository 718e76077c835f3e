# (c) Copyright Datacraft, 2026
"""API routers."""
from .passkey import router as passkey_router
from .well_known import router as well_known_router

__all__ = ["passkey_router", "well_known_router"]
