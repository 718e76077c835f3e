# (c) Copyright Datacraft, 2026
import logging
from datetime import datetime, timezone

from fastapi import Request

from .config import Settings
from .identity import IdentityProvider
from .services.passkey import PasskeyService
from .store import PasskeyStore

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> PasskeyStore:
    return request.app.state.store


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identities


def get_passkey_service(request: Request) -> PasskeyService:
    """FastAPI dependency building the service over the app's store."""
    return PasskeyService.from_settings(
        get_app_settings(request),
        store=get_store(request),
        identities=get_identity_provider(request),
    )


async def log_requests(request: Request, call_next):
    """Log every incoming request before handing it on."""
    logger.info(
        f"{request.method} {request.url.path} at "
        f"{datetime.now(timezone.utc).isoformat()}"
    )
    return await call_next(request)
