from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class Flow(str, Enum):
    REGISTRATION = "registration"
    LOGIN = "login"


class UserIdentity(BaseModel):
    id: bytes
    name: str
    display_name: str

    model_config = ConfigDict(frozen=True)


class IssuedChallenge(BaseModel):
    value: bytes
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CredentialRecord(BaseModel):
    """Credential kept for a registered authenticator."""
    credential_id: bytes
    public_key: bytes
    sign_count: int = 0
    user_handle: bytes
    username: str
    aaguid: str | None = None
    device_type: str | None = None
    backed_up: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_used_at: datetime | None = None


class VerificationResponse(BaseModel):
    status: str = "ok"


class VerificationFailedResponse(BaseModel):
    status: str = "failed"
    error: str


class ErrorResponse(BaseModel):
    error: str
