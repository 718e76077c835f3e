# (c) Copyright Datacraft, 2026
"""User identity lookup for the passkey flows."""
from typing import Protocol

from passkey_server.config import Settings
from passkey_server.schema import UserIdentity


class IdentityProvider(Protocol):
	"""Resolves the identity a passkey ceremony is performed for."""

	def lookup(self, username: str | None = None) -> UserIdentity:
		...


class DemoIdentityProvider:
	"""Returns the single configured demo identity for every lookup."""

	def __init__(self, identity: UserIdentity):
		self.identity = identity

	@classmethod
	def from_settings(cls, settings: Settings) -> "DemoIdentityProvider":
		return cls(
			UserIdentity(
				id=settings.demo_user_id.encode(),
				name=settings.demo_user_name,
				display_name=settings.demo_user_display_name,
			)
		)

	def lookup(self, username: str | None = None) -> UserIdentity:
		return self.identity
