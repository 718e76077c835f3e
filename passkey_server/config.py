import logging

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

DEFAULT_RP_ID = "guarded-fortress-75705-c422ef56e8e1.herokuapp.com"
DEFAULT_APPLE_TEAM_ID = "AB33BBCCU7"
DEFAULT_ANDROID_FINGERPRINT = (
    "F4:C9:54:1D:D4:DE:70:FC:3A:6F:3B:A4:38:04:07:4D:"
    "3E:9F:AF:90:94:34:D6:4A:8C:6C:B1:EE:43:E4:89:CA"
)


class Settings(BaseSettings):
    # Relying party
    rp_id: str = Field(default=DEFAULT_RP_ID, description="Relying Party ID (domain)")
    rp_name: str = Field(default="Passkey Demo (Heroku)", description="Relying Party display name")
    origin: str | None = Field(default=None, description="Expected origin for WebAuthn")

    # Challenges
    challenge_size: int = Field(default=64, ge=16, le=64, description="Challenge length in bytes")
    challenge_timeout: int = Field(default=60000, gt=0, description="WebAuthn timeout in ms")
    enforce_challenge_timeout: bool = True

    # Demo identity
    demo_user_id: str = "1234"
    demo_user_name: str = "testuser"
    demo_user_display_name: str = "Test User"

    # Transport
    host: str = "0.0.0.0"
    port: int = Field(default=3000, validation_alias=AliasChoices("port", "passkey_port"))
    dyno: str | None = Field(default=None, validation_alias=AliasChoices("dyno"))
    local_hostname: str = "passkey.local"
    tls_cert_file: Path = Path("passkey.local+1.pem")
    tls_key_file: Path = Path("passkey.local+1-key.pem")
    mdns_enabled: bool = False
    log_level: str = "INFO"

    # Domain association documents
    apple_app_ids: list[str] = Field(default_factory=list)
    android_package_name: str = "com.mo.pingsdkexample"
    android_cert_fingerprints: list[str] = Field(
        default_factory=lambda: [DEFAULT_ANDROID_FINGERPRINT]
    )

    model_config = SettingsConfigDict(env_prefix='passkey_', populate_by_name=True)

    @model_validator(mode="after")
    def fill_rp_defaults(self) -> "Settings":
        if self.origin is None:
            self.origin = f"https://{self.rp_id}"
        if not self.apple_app_ids:
            self.apple_app_ids = [f"{DEFAULT_APPLE_TEAM_ID}.{self.rp_id}"]
        return self

    @property
    def is_managed_hosting(self) -> bool:
        """True when a hosting platform terminates TLS in front of us."""
        return bool(self.dyno)


@lru_cache()
def get_settings():
    return Settings()
