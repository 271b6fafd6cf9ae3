from __future__ import annotations

import logging
import socket
from pathlib import Path

import pytest

from form_intake import server
from form_intake.config import AppSettings


def test_tls_used_only_when_both_files_exist(tmp_path: Path) -> None:
    key_path = tmp_path / "key.pem"
    cert_path = tmp_path / "cert.pem"
    settings = AppSettings(tls_key_path=str(key_path), tls_cert_path=str(cert_path))

    key_path.write_text("key", encoding="utf-8")
    assert server.resolve_tls_files(settings) is None

    cert_path.write_text("cert", encoding="utf-8")
    assert server.resolve_tls_files(settings) == (str(key_path), str(cert_path))


def test_busy_port_exits_with_clear_message(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as holder:
        holder.bind(("127.0.0.1", 0))
        holder.listen()
        busy_port = holder.getsockname()[1]
        monkeypatch.setattr(server, "get_app_settings", lambda: AppSettings(host="127.0.0.1", port=busy_port))

        with caplog.at_level(logging.CRITICAL, logger=server.__name__):
            exit_code = server.main()

    assert exit_code == 1
    assert f"Port {busy_port} is already in use" in caplog.text


def test_bind_socket_binds_requested_host() -> None:
    sock = server.bind_socket("127.0.0.1", 0)
    try:
        assert sock.getsockname()[0] == "127.0.0.1"
    finally:
        sock.close()
