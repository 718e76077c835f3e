# (c) Copyright Datacraft, 2026
"""Passkey services."""
from .passkey import PasskeyResult, PasskeyService

__all__ = ["PasskeyResult", "PasskeyService"]
