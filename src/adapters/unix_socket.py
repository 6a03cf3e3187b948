"""Conector de sockets Unix.

Por qué un wrapper:
- Estandariza timeout y limpieza del socket cuando `connect` falla.
- Facilita testeo: el runner recibe cualquier `Connector`.
"""

from __future__ import annotations

import logging
import socket
from typing import Final

from core.config import AppSettings

log: Final = logging.getLogger("sadv")


class UnixSocketConnector:
    """Abre sockets `AF_UNIX`/`SOCK_STREAM`."""

    def connect(self, path: str, *, timeout: float | None = None) -> socket.socket:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            if timeout is not None:
                sock.settimeout(timeout)
            sock.connect(path)
        except OSError:
            sock.close()
            raise
        log.debug("Connected to %s", path)
        return sock


def probe_socket(settings: AppSettings | None = None, path: str | None = None) -> tuple[bool, str]:
    """Comprueba que el daemon acepta conexiones (sin enviar credenciales)."""

    settings = settings or AppSettings()
    target = settings.resolved_socket_path(path)
    try:
        sock = UnixSocketConnector().connect(target, timeout=settings.timeout_seconds)
    except OSError as exc:
        return False, str(exc)
    sock.close()
    return True, "accepting connections"
