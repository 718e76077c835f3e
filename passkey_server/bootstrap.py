# (c) Copyright Datacraft, 2026
"""Transport selection and server startup."""
import logging
import socket
from contextlib import contextmanager
from typing import Any, Iterator

import uvicorn
from zeroconf import ServiceInfo, Zeroconf

from .config import Settings, get_settings
from .exceptions import ConfigurationError
from .main import create_app

logger = logging.getLogger(__name__)

MDNS_SERVICE_TYPE = "_https._tcp.local."


def server_options(settings: Settings) -> dict[str, Any]:
	"""Build uvicorn keyword arguments for the current environment.

	Managed hosting terminates TLS upstream, so we listen in plain HTTP.
	Locally we serve HTTPS with the configured certificate pair.
	"""
	options: dict[str, Any] = {
		"host": settings.host,
		"port": settings.port,
		"log_level": settings.log_level.lower(),
	}
	if settings.is_managed_hosting:
		return options

	for path in (settings.tls_cert_file, settings.tls_key_file):
		if not path.is_file():
			raise ConfigurationError(f"TLS file not found: {path}")

	options["ssl_certfile"] = str(settings.tls_cert_file)
	options["ssl_keyfile"] = str(settings.tls_key_file)
	return options


def local_address() -> str:
	"""Best guess at the LAN address other devices can reach."""
	with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
		try:
			# No packets are sent for a UDP connect
			sock.connect(("10.255.255.255", 1))
			return sock.getsockname()[0]
		except OSError:
			return "127.0.0.1"


def mdns_service_info(settings: Settings, address: str) -> ServiceInfo:
	instance = settings.local_hostname.split(".")[0]
	return ServiceInfo(
		MDNS_SERVICE_TYPE,
		f"{instance}.{MDNS_SERVICE_TYPE}",
		addresses=[socket.inet_aton(address)],
		port=settings.port,
		properties={"path": "/"},
		server=f"{settings.local_hostname}.",
	)


@contextmanager
def advertise(settings: Settings) -> Iterator[ServiceInfo | None]:
	"""Register the HTTPS service over mDNS while the server runs."""
	if settings.is_managed_hosting or not settings.mdns_enabled:
		yield None
		return

	info = mdns_service_info(settings, local_address())
	zeroconf = Zeroconf()
	zeroconf.register_service(info)
	logger.info(f"Advertising {info.name} as {settings.local_hostname}")
	try:
		yield info
	finally:
		zeroconf.unregister_service(info)
		zeroconf.close()


def run(settings: Settings | None = None) -> None:
	settings = settings or get_settings()
	logging.basicConfig(
		level=settings.log_level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)

	options = server_options(settings)
	app = create_app(settings)

	if settings.is_managed_hosting:
		logger.info(f"Server running behind managed hosting at https://{settings.rp_id}")
	else:
		logger.info(f"Local HTTPS server running at https://{settings.local_hostname}:{settings.port}")

	with advertise(settings):
		uvicorn.run(app, **options)
