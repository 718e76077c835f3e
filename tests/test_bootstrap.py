from unittest import mock

import pytest

from passkey_server import bootstrap
from passkey_server.config import Settings
from passkey_server.exceptions import ConfigurationError


@pytest.fixture
def tls_files(tmp_path):
    cert = tmp_path / "passkey.local+1.pem"
    key = tmp_path / "passkey.local+1-key.pem"
    cert.write_text("cert")
    key.write_text("key")
    return cert, key


def test_managed_hosting_serves_plain_http():
    settings = Settings(dyno="web.1", port=5000)

    options = bootstrap.server_options(settings)

    assert options == {"host": "0.0.0.0", "port": 5000, "log_level": "info"}


def test_local_mode_serves_https(tls_files):
    cert, key = tls_files
    settings = Settings(dyno=None, tls_cert_file=cert, tls_key_file=key)

    options = bootstrap.server_options(settings)

    assert options["ssl_certfile"] == str(cert)
    assert options["ssl_keyfile"] == str(key)
    assert options["port"] == 3000


def test_local_mode_requires_tls_files(tmp_path):
    settings = Settings(
        dyno=None,
        tls_cert_file=tmp_path / "missing.pem",
        tls_key_file=tmp_path / "missing-key.pem",
    )

    with pytest.raises(ConfigurationError, match="TLS file not found"):
        bootstrap.server_options(settings)


def test_no_advertisement_on_managed_hosting():
    settings = Settings(dyno="web.1", mdns_enabled=True)

    with mock.patch.object(bootstrap, "Zeroconf") as zeroconf:
        with bootstrap.advertise(settings) as info:
            assert info is None

    zeroconf.assert_not_called()


def test_local_advertisement():
    settings = Settings(dyno=None, mdns_enabled=True, port=3443)

    with mock.patch.object(bootstrap, "Zeroconf") as zeroconf, \
            mock.patch.object(bootstrap, "local_address", return_value="192.168.1.20"):
        with bootstrap.advertise(settings) as info:
            assert info.name == "passkey._https._tcp.local."
            assert info.server == "passkey.local."
            assert info.port == 3443
            zeroconf.return_value.register_service.assert_called_once_with(info)

    zeroconf.return_value.unregister_service.assert_called_once_with(info)
    zeroconf.return_value.close.assert_called_once()


def test_run_starts_uvicorn(tls_files):
    cert, key = tls_files
    settings = Settings(dyno=None, tls_cert_file=cert, tls_key_file=key)

    with mock.patch.object(bootstrap.uvicorn, "run") as run:
        bootstrap.run(settings)

    app = run.call_args.args[0]
    assert app.state.settings is settings
    assert run.call_args.kwargs["ssl_certfile"] == str(cert)
