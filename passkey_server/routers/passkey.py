# (c) Copyright Datacraft, 2026
"""WebAuthn/Passkey API endpoints."""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from passkey_server import schema
from passkey_server.services.passkey import PasskeyResult, PasskeyService
from passkey_server.utils import get_passkey_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Passkeys"])


def _verification_response(result: PasskeyResult) -> JSONResponse | schema.VerificationResponse:
	if not result.success:
		return JSONResponse(
			status_code=status.HTTP_400_BAD_REQUEST,
			content=schema.VerificationFailedResponse(error=result.message or "").model_dump(),
		)
	return schema.VerificationResponse()


@router.get("/register-challenge")
async def register_challenge(
	username: str | None = None,
	service: PasskeyService = Depends(get_passkey_service),
) -> dict[str, Any]:
	"""Issue registration options for the demo user."""
	return await service.start_registration(username)


@router.get("/login-challenge")
async def login_challenge(
	service: PasskeyService = Depends(get_passkey_service),
) -> dict[str, Any]:
	"""Issue assertion options accepting any registered credential."""
	return await service.start_authentication()


@router.post(
	"/verify-register",
	response_model=schema.VerificationResponse,
	responses={400: {"model": schema.VerificationFailedResponse}},
)
async def verify_register(
	credential: dict[str, Any] = Body(...),
	username: str | None = None,
	service: PasskeyService = Depends(get_passkey_service),
):
	"""Verify an attestation response from navigator.credentials.create()."""
	result = await service.complete_registration(credential, username)
	return _verification_response(result)


@router.post(
	"/verify-login",
	response_model=schema.VerificationResponse,
	responses={400: {"model": schema.VerificationFailedResponse}},
)
async def verify_login(
	credential: dict[str, Any] = Body(...),
	username: str | None = None,
	service: PasskeyService = Depends(get_passkey_service),
):
	"""Verify an assertion response from navigator.credentials.get()."""
	result = await service.complete_authentication(credential, username)
	return _verification_response(result)
