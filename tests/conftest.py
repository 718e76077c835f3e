import pytest
from fastapi.testclient import TestClient

from passkey_server.config import Settings
from passkey_server.identity import DemoIdentityProvider
from passkey_server.main import create_app
from passkey_server.services.passkey import PasskeyService
from passkey_server.store import PasskeyStore

from .authenticator import SoftwareAuthenticator

RP_ID = "passkey.test"
ORIGIN = "https://passkey.test"


@pytest.fixture
def settings():
    return Settings(rp_id=RP_ID, rp_name="Passkey Test", origin=ORIGIN)


@pytest.fixture
def store():
    return PasskeyStore()


@pytest.fixture
def service(settings, store):
    return PasskeyService.from_settings(
        settings,
        store=store,
        identities=DemoIdentityProvider.from_settings(settings),
    )


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def authenticator():
    return SoftwareAuthenticator()
