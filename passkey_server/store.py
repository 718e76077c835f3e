# (c) Copyright Datacraft, 2026
"""In-memory challenge and credential storage."""
import asyncio
import logging
from datetime import datetime, timedelta, timezone

from passkey_server.exceptions import EngineFailure
from passkey_server.schema import CredentialRecord, Flow, IssuedChallenge

logger = logging.getLogger(__name__)


class PasskeyStore:
	"""Process-lifetime storage for the passkey flows.

	Holds one challenge slot per flow (last write wins) and the
	credential records keyed by username. A lock per flow lets the
	service serialize issuance and verification of the same flow.
	"""

	def __init__(self):
		self._challenges: dict[Flow, IssuedChallenge] = {}
		self._credentials: dict[str, CredentialRecord] = {}
		self._locks: dict[Flow, asyncio.Lock] = {flow: asyncio.Lock() for flow in Flow}

	def lock(self, flow: Flow) -> asyncio.Lock:
		return self._locks[flow]

	def set_challenge(self, flow: Flow, value: bytes) -> IssuedChallenge:
		"""Store a freshly issued challenge, replacing the previous one."""
		if flow in self._challenges:
			logger.debug(f"Replacing outstanding {flow.value} challenge")
		issued = IssuedChallenge(value=value)
		self._challenges[flow] = issued
		return issued

	def get_challenge(self, flow: Flow) -> IssuedChallenge | None:
		return self._challenges.get(flow)

	def current_challenge(self, flow: Flow, max_age_ms: int | None = None) -> bytes:
		"""Return the most recent challenge for a flow.

		Raises:
			EngineFailure: when no challenge was issued, or it is older
				than ``max_age_ms``.
		"""
		issued = self._challenges.get(flow)
		if issued is None:
			raise EngineFailure(f"No {flow.value} challenge has been issued")

		if max_age_ms is not None:
			age = datetime.now(timezone.utc) - issued.issued_at
			if age > timedelta(milliseconds=max_age_ms):
				raise EngineFailure(f"The {flow.value} challenge has expired")

		return issued.value

	def save_credential(self, record: CredentialRecord) -> None:
		previous = self._credentials.get(record.username)
		if previous is not None:
			logger.info(f"Replacing stored credential for {record.username}")
		self._credentials[record.username] = record

	def get_credential(self, username: str) -> CredentialRecord | None:
		return self._credentials.get(username)

	def update_sign_count(self, username: str, sign_count: int) -> CredentialRecord:
		record = self._credentials[username]
		updated = record.model_copy(
			update={
				"sign_count": sign_count,
				"last_used_at": datetime.now(timezone.utc),
			}
		)
		self._credentials[username] = updated
		return updated
