"""
Run the form intake HTTP service under uvicorn.

HTTPS is used when both TLS files exist; otherwise the service falls back to
plain HTTP.
"""

from __future__ import annotations

import errno
import logging
import socket
from pathlib import Path

import uvicorn

from form_intake.config import AppSettings, get_app_settings
from form_intake.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def resolve_tls_files(settings: AppSettings) -> tuple[str, str] | None:
    key_path = Path(settings.tls_key_path)
    cert_path = Path(settings.tls_cert_path)
    if key_path.is_file() and cert_path.is_file():
        return str(key_path), str(cert_path)
    return None


def bind_socket(host: str, port: int) -> socket.socket:
    """
    Bind the listening socket up front so a busy port fails with a clear message.
    """

    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def main() -> int:
    settings = get_app_settings()
    configure_logging(settings.log_level)

    try:
        sock = bind_socket(settings.host, settings.port)
    except OSError as exc:
        if exc.errno == errno.EADDRINUSE:
            logger.critical(
                "Port %d is already in use. Close the other server or change PORT.",
                settings.port,
            )
        else:
            logger.critical("Server failed to start: %s", exc)
        return 1

    tls_files = resolve_tls_files(settings)
    config_options: dict[str, object] = {"lifespan": "on", "log_level": settings.log_level.lower()}
    if tls_files is not None:
        config_options.update(ssl_keyfile=tls_files[0], ssl_certfile=tls_files[1])
        logger.info("HTTPS server listening on https://%s:%d", settings.host, settings.port)
    else:
        logger.info("HTTP server listening on http://%s:%d", settings.host, settings.port)
        logger.info(
            "HTTPS not started (missing %s or %s)",
            settings.tls_key_path,
            settings.tls_cert_path,
        )

    config = uvicorn.Config("form_intake.main:app", **config_options)
    server = uvicorn.Server(config)
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()

    # uvicorn leaves `started` unset when the lifespan startup failed.
    return 0 if server.started else 1


if __name__ == "__main__":
    raise SystemExit(main())
