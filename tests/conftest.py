from __future__ import annotations

import os
import shutil
import socket
import struct
import tempfile
import threading
from collections.abc import Iterator
from unittest import mock

import pytest

from core.config import AppSettings
from core.protocol import FIELD_COUNT, decode_request


def _recv_exactly(conn: socket.socket, size: int) -> bytes:
    data = b""
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


class StubDaemon:
    """saslauthd falso: acepta una conexión, lee la petición y escribe `reply`."""

    def __init__(self, path: str, reply: bytes) -> None:
        self.path = path
        self.reply = reply
        self.raw_request = b""
        self.connections = 0
        self._server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._server.bind(path)
        self._server.listen(1)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    @property
    def request(self):
        return decode_request(self.raw_request)

    def _serve(self) -> None:
        try:
            conn, _ = self._server.accept()
        except OSError:
            return
        self.connections += 1
        with conn:
            raw = b""
            for _ in range(FIELD_COUNT):
                prefix = _recv_exactly(conn, 2)
                raw += prefix
                if len(prefix) < 2:
                    # el cliente cerró sin enviar una petición completa (sondeo de conexión)
                    return
                (length,) = struct.unpack(">H", prefix)
                raw += _recv_exactly(conn, length)
            self.raw_request = raw
            conn.sendall(self.reply)

    def close(self) -> None:
        self._thread.join(timeout=5)
        self._server.close()


@pytest.fixture
def socket_dir() -> Iterator[str]:
    # tmp_path puede superar el límite de 108 bytes de sun_path.
    path = tempfile.mkdtemp(prefix="sadv-")
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def stub_daemon(socket_dir: str):
    daemons: list[StubDaemon] = []

    def _start(reply: bytes) -> StubDaemon:
        daemon = StubDaemon(os.path.join(socket_dir, "mux"), reply)
        daemons.append(daemon)
        return daemon

    yield _start
    for daemon in daemons:
        daemon.close()


@pytest.fixture
def settings() -> Iterator[AppSettings]:
    """Settings aislados del entorno y de cualquier .env local."""

    with mock.patch.dict(os.environ, {}, clear=True):
        yield AppSettings(_env_file=None, timeout_seconds=5.0)


class FakeConnection:
    """Conexión con respuestas predefinidas que registra si se cerró."""

    def __init__(self, chunks: list[bytes] | None = None, *, accept: list[int] | None = None) -> None:
        self.chunks = list(chunks or [])
        # bytes aceptados por cada send(); agotada la lista se acepta todo
        self.accept = list(accept or [])
        self.sent = b""
        self.closed = False
        self.recv_error: OSError | None = None
        self.send_error: OSError | None = None

    def send(self, data: bytes) -> int:
        if self.send_error is not None:
            raise self.send_error
        accepted = self.accept.pop(0) if self.accept else len(data)
        self.sent += data[:accepted]
        return accepted

    def recv(self, bufsize: int) -> bytes:
        if self.recv_error is not None:
            raise self.recv_error
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        if len(chunk) > bufsize:
            self.chunks.insert(0, chunk[bufsize:])
            chunk = chunk[:bufsize]
        return chunk

    def close(self) -> None:
        self.closed = True


class RecordingConnector:
    """Conector de pruebas: devuelve `connection` o lanza `error`."""

    def __init__(self, connection: FakeConnection | None = None, error: OSError | None = None) -> None:
        self.connection = connection
        self.error = error
        self.calls: list[tuple[str, float | None]] = []

    def connect(self, path: str, *, timeout: float | None = None) -> FakeConnection:
        self.calls.append((path, timeout))
        if self.error is not None:
            raise self.error
        assert self.connection is not None
        return self.connection
