# (c) Copyright Datacraft, 2026
"""WebAuthn/Passkey ceremonies backed by py-webauthn."""
import base64
import json
import logging
import secrets
from dataclasses import dataclass

from webauthn import (
	generate_authentication_options,
	generate_registration_options,
	options_to_json,
	verify_authentication_response,
	verify_registration_response,
)
from webauthn.helpers import base64url_to_bytes
from webauthn.helpers.exceptions import WebAuthnException
from webauthn.helpers.structs import (
	AttestationConveyancePreference,
	AuthenticatorSelectionCriteria,
	COSEAlgorithmIdentifier,
	ResidentKeyRequirement,
	UserVerificationRequirement,
)

from passkey_server.config import Settings
from passkey_server.exceptions import EngineFailure, NotRegistered, PasskeyError
from passkey_server.identity import IdentityProvider
from passkey_server.schema import CredentialRecord, Flow
from passkey_server.store import PasskeyStore

logger = logging.getLogger(__name__)

# Raised by py-webauthn while parsing malformed client payloads
_PAYLOAD_ERRORS = (WebAuthnException, ValueError, TypeError, KeyError)


@dataclass
class PasskeyResult:
	"""Result of a verification ceremony."""
	success: bool
	username: str | None = None
	message: str | None = None


def to_base64(value: bytes) -> str:
	return base64.b64encode(value).decode("ascii")


class PasskeyService:
	"""Issues challenges and verifies passkey ceremonies for one relying party."""

	def __init__(
		self,
		store: PasskeyStore,
		identities: IdentityProvider,
		rp_id: str = "localhost",
		rp_name: str = "Passkey Demo",
		origin: str = "https://localhost",
		timeout: int = 60000,
		challenge_size: int = 64,
		enforce_timeout: bool = True,
	):
		self.store = store
		self.identities = identities
		self.rp_id = rp_id
		self.rp_name = rp_name
		self.origin = origin
		self.timeout = timeout
		self.challenge_size = challenge_size
		self.enforce_timeout = enforce_timeout

	@classmethod
	def from_settings(
		cls,
		settings: Settings,
		store: PasskeyStore,
		identities: IdentityProvider,
	) -> "PasskeyService":
		return cls(
			store=store,
			identities=identities,
			rp_id=settings.rp_id,
			rp_name=settings.rp_name,
			origin=settings.origin,
			timeout=settings.challenge_timeout,
			challenge_size=settings.challenge_size,
			enforce_timeout=settings.enforce_challenge_timeout,
		)

	@property
	def _max_challenge_age(self) -> int | None:
		return self.timeout if self.enforce_timeout else None

	async def start_registration(self, username: str | None = None) -> dict:
		"""Generate registration options for the resolved user.

		The raw challenge replaces any outstanding registration challenge.
		``challenge`` and ``user.id`` are returned as standard base64 text.

		Raises:
			EngineFailure: if py-webauthn cannot build the options.
		"""
		user = self.identities.lookup(username)

		async with self.store.lock(Flow.REGISTRATION):
			try:
				options = generate_registration_options(
					rp_id=self.rp_id,
					rp_name=self.rp_name,
					user_id=user.id,
					user_name=user.name,
					user_display_name=user.display_name,
					challenge=secrets.token_bytes(self.challenge_size),
					timeout=self.timeout,
					attestation=AttestationConveyancePreference.NONE,
					authenticator_selection=AuthenticatorSelectionCriteria(
						resident_key=ResidentKeyRequirement.PREFERRED,
						user_verification=UserVerificationRequirement.PREFERRED,
					),
					supported_pub_key_algs=[
						COSEAlgorithmIdentifier.ECDSA_SHA_256,
						COSEAlgorithmIdentifier.EDDSA,
						COSEAlgorithmIdentifier.RSASSA_PKCS1_v1_5_SHA_256,
					],
				)
			except _PAYLOAD_ERRORS as e:
				raise EngineFailure(str(e)) from e

			self.store.set_challenge(Flow.REGISTRATION, options.challenge)

		payload = json.loads(options_to_json(options))
		payload["challenge"] = to_base64(options.challenge)
		payload["user"]["id"] = to_base64(user.id)
		return payload

	async def complete_registration(
		self,
		credential: dict,
		username: str | None = None,
	) -> PasskeyResult:
		"""Verify an attestation response against the last registration challenge.

		On success the credential replaces whatever was stored for the user.
		On failure the credential store is left untouched.
		"""
		user = self.identities.lookup(username)

		async with self.store.lock(Flow.REGISTRATION):
			try:
				challenge = self.store.current_challenge(Flow.REGISTRATION, self._max_challenge_age)
				try:
					verification = verify_registration_response(
						credential=credential,
						expected_challenge=challenge,
						expected_rp_id=self.rp_id,
						expected_origin=self.origin,
						require_user_verification=False,
					)
				except _PAYLOAD_ERRORS as e:
					raise EngineFailure(str(e)) from e
			except PasskeyError as e:
				logger.error(f"Registration verification failed: {e}")
				return PasskeyResult(success=False, username=user.name, message=str(e))

			self.store.save_credential(
				CredentialRecord(
					credential_id=verification.credential_id,
					public_key=verification.credential_public_key,
					sign_count=verification.sign_count,
					user_handle=user.id,
					username=user.name,
					aaguid=verification.aaguid or None,
					device_type=verification.credential_device_type or None,
					backed_up=verification.credential_backed_up,
				)
			)

		logger.info(f"Registration verified for {user.name}")
		return PasskeyResult(success=True, username=user.name)

	async def start_authentication(self) -> dict:
		"""Generate assertion options that accept any registered credential."""
		async with self.store.lock(Flow.LOGIN):
			try:
				options = generate_authentication_options(
					rp_id=self.rp_id,
					challenge=secrets.token_bytes(self.challenge_size),
					timeout=self.timeout,
					allow_credentials=[],
					user_verification=UserVerificationRequirement.PREFERRED,
				)
			except _PAYLOAD_ERRORS as e:
				raise EngineFailure(str(e)) from e

			self.store.set_challenge(Flow.LOGIN, options.challenge)

		payload = json.loads(options_to_json(options))
		payload["challenge"] = to_base64(options.challenge)
		payload["allowCredentials"] = []
		return payload

	async def complete_authentication(
		self,
		credential: dict,
		username: str | None = None,
	) -> PasskeyResult:
		"""Verify an assertion response against the stored credential.

		Fails with "No registered user" before touching py-webauthn when
		nothing is registered. The new signature counter is written back
		after every successful login.
		"""
		user = self.identities.lookup(username)

		async with self.store.lock(Flow.LOGIN):
			try:
				stored = self.store.get_credential(user.name)
				if stored is None:
					raise NotRegistered()

				challenge = self.store.current_challenge(Flow.LOGIN, self._max_challenge_age)
				try:
					self._check_user_handle(credential, stored)
					verification = verify_authentication_response(
						credential=credential,
						expected_challenge=challenge,
						expected_rp_id=self.rp_id,
						expected_origin=self.origin,
						credential_public_key=stored.public_key,
						credential_current_sign_count=stored.sign_count,
						require_user_verification=False,
					)
				except _PAYLOAD_ERRORS as e:
					raise EngineFailure(str(e)) from e
			except PasskeyError as e:
				logger.error(f"Login failed: {e}")
				return PasskeyResult(success=False, username=user.name, message=str(e))

			self.store.update_sign_count(user.name, verification.new_sign_count)

		logger.info(f"Login verified for {user.name}")
		return PasskeyResult(success=True, username=user.name)

	@staticmethod
	def _check_user_handle(credential: dict, stored: CredentialRecord) -> None:
		"""Reject assertions whose userHandle names another user."""
		response = credential.get("response")
		if not isinstance(response, dict):
			raise EngineFailure("Credential missing required response")
		user_handle = response.get("userHandle")
		if not user_handle:
			return
		if base64url_to_bytes(user_handle) != stored.user_handle:
			raise EngineFailure("User handle does not match the registered credential")
