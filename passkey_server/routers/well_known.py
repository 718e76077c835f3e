# (c) Copyright Datacraft, 2026
"""Domain association documents and the root greeting."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from passkey_server.config import Settings
from passkey_server.utils import get_app_settings

router = APIRouter(tags=["Well-known"])

ANDROID_RELATIONS = [
	"delegate_permission/common.handle_all_urls",
	"delegate_permission/common.get_login_creds",
]


def apple_app_site_association(settings: Settings) -> dict:
	return {
		"webcredentials": {"apps": list(settings.apple_app_ids)},
		"applinks": {"apps": [], "details": []},
		"activitycontinuation": {"apps": list(settings.apple_app_ids)},
	}


def android_asset_links(settings: Settings) -> list[dict]:
	return [
		{
			"relation": list(ANDROID_RELATIONS),
			"target": {
				"namespace": "android_app",
				"package_name": settings.android_package_name,
				"sha256_cert_fingerprints": list(settings.android_cert_fingerprints),
			},
		}
	]


@router.get("/.well-known/apple-app-site-association")
async def apple_association(settings: Settings = Depends(get_app_settings)) -> JSONResponse:
	"""Let iOS associate the configured apps with this domain."""
	return JSONResponse(apple_app_site_association(settings))


@router.get("/.well-known/assetlinks.json")
async def asset_links(settings: Settings = Depends(get_app_settings)) -> JSONResponse:
	"""Android Digital Asset Links statement list."""
	return JSONResponse(android_asset_links(settings))


@router.get("/", response_class=PlainTextResponse)
async def root(settings: Settings = Depends(get_app_settings)) -> str:
	return f"Passkey Server running for {settings.rp_name}"
