# (c) Copyright Datacraft, 2026
"""Errors raised by the passkey flows."""


class PasskeyError(Exception):
	"""Base class for passkey flow errors."""


class EngineFailure(PasskeyError):
	"""The WebAuthn engine rejected a challenge or verification call."""


class NotRegistered(PasskeyError):
	"""Login was attempted before any credential was registered."""

	def __init__(self, message: str = "No registered user"):
		super().__init__(message)


class ConfigurationError(Exception):
	"""The server cannot start with the current settings."""
