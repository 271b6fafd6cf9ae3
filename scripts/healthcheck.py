"""
Container health check for the form intake service.

Healthy means `/health` answered 200 and reported the database as up.
"""

from __future__ import annotations

import json
import os
import ssl
from pathlib import Path
from urllib.error import URLError
from urllib.request import urlopen


def _tls_enabled() -> bool:
    key_path = Path(os.getenv("TLS_KEY_PATH", "certs/key.pem"))
    cert_path = Path(os.getenv("TLS_CERT_PATH", "certs/cert.pem"))
    return key_path.is_file() and cert_path.is_file()


def main() -> int:
    port = os.getenv("PORT", "3000")
    path = os.getenv("HEALTHCHECK_PATH", "/health")

    context = None
    scheme = "http"
    if _tls_enabled():
        scheme = "https"
        # Certificates are often self-signed for local deployments.
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    url = f"{scheme}://127.0.0.1:{port}{path}"
    try:
        with urlopen(url, timeout=2, context=context) as response:
            if response.status != 200:
                return 1
            body = json.loads(response.read() or b"{}")
    except (URLError, TimeoutError, ValueError):
        return 1
    return 0 if body.get("db") == "up" else 1


if __name__ == "__main__":
    raise SystemExit(main())
