# (c) Copyright Datacraft, 2026
"""Minimal WebAuthn relying-party server for passkey demos."""
from .main import create_app

__all__ = ["create_app"]
