# (c) Copyright Datacraft, 2026
"""FastAPI application factory."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .exceptions import EngineFailure
from .identity import DemoIdentityProvider, IdentityProvider
from .routers import passkey_router, well_known_router
from .schema import ErrorResponse, VerificationFailedResponse
from .store import PasskeyStore
from .utils import log_requests

logger = logging.getLogger(__name__)


async def engine_failure_handler(request: Request, exc: EngineFailure) -> JSONResponse:
	logger.error(f"Error creating challenge for {request.url.path}: {exc}")
	return JSONResponse(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		content=ErrorResponse(error=str(exc)).model_dump(),
	)


async def invalid_payload_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
	logger.error(f"Malformed payload for {request.url.path}: {exc.errors()}")
	return JSONResponse(
		status_code=status.HTTP_400_BAD_REQUEST,
		content=VerificationFailedResponse(error="Malformed request body").model_dump(),
	)


def create_app(
	settings: Settings | None = None,
	store: PasskeyStore | None = None,
	identities: IdentityProvider | None = None,
) -> FastAPI:
	"""Build the relying-party application with its own stores."""
	settings = settings or get_settings()

	app = FastAPI(title=settings.rp_name)
	app.state.settings = settings
	app.state.store = store or PasskeyStore()
	app.state.identities = identities or DemoIdentityProvider.from_settings(settings)

	app.middleware("http")(log_requests)
	app.add_exception_handler(EngineFailure, engine_failure_handler)
	app.add_exception_handler(RequestValidationError, invalid_payload_handler)

	app.include_router(passkey_router)
	app.include_router(well_known_router)

	logger.debug(f"Relying party {settings.rp_id} expecting origin {settings.origin}")
	return app
