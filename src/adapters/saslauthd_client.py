"""Cliente de saslauthd: una transacción por llamada.

Secuencia: codificar -> conectar -> escribir -> leer prefijo -> leer cuerpo ->
cerrar -> clasificar. Sin reintentos y sin estado compartido entre llamadas.
"""

from __future__ import annotations

import logging
from contextlib import closing
from typing import Final

from adapters.unix_socket import UnixSocketConnector
from core import protocol
from core.config import AppSettings
from core.domain.models import CredentialRequest, VerifyOutcome, VerifyResult
from core.errors import (
    AuthenticationFailed,
    ConnectionFailed,
    CredentialsRequired,
    ReadFailed,
    ResponseTruncated,
    ShortWrite,
    VerifierError,
)
from core.interfaces.transport import Connection, Connector

log: Final = logging.getLogger("sadv")


def _send_all(conn: Connection, payload: bytes) -> int:
    """Escribe `payload` completo; devuelve menos solo si el peer deja de aceptar bytes."""

    sent = 0
    while sent < len(payload):
        accepted = conn.send(payload[sent:])
        if not accepted:
            break
        sent += accepted
    return sent


def _recv_exactly(conn: Connection, size: int) -> bytes:
    """Lee hasta `size` bytes; devuelve menos solo si el peer cierra antes."""

    data = bytearray()
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return bytes(data)


class SaslauthdVerifier:
    """Verifica usuario/contraseña contra saslauthd."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        connector: Connector | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._connector = connector or UnixSocketConnector()

    def verify(
        self,
        user: str,
        password: str,
        service: str = "",
        realm: str = "",
        client_addr: str = "",
        *,
        path: str | None = None,
    ) -> VerifyResult:
        socket_path = self._settings.resolved_socket_path(path)
        if not user or not password:
            return VerifyResult(
                outcome=VerifyOutcome.CREDENTIALS_REQUIRED,
                socket_path=socket_path,
                detail=str(CredentialsRequired()),
            )

        request = CredentialRequest(
            user=user,
            password=password,
            service=service or self._settings.service,
            realm=realm,
            client_addr=client_addr,
        )
        payload = protocol.encode_request(request)
        log.debug(
            "Verifying credentials (service=%r) via %s, %d byte request",
            request.service,
            socket_path,
            len(payload),
        )

        try:
            body = self._transact(socket_path, payload)
        except VerifierError as exc:
            log.debug("Transaction with %s failed: %s", socket_path, exc)
            return VerifyResult(
                response=exc.response,
                outcome=VerifyOutcome(exc.outcome),
                socket_path=socket_path,
                detail=str(exc),
            )

        response = protocol.decode_text(body)
        if not protocol.is_success(body):
            log.debug("saslauthd rejected credentials via %s", socket_path)
            return VerifyResult(
                response=response,
                outcome=VerifyOutcome.AUTHENTICATION_FAILED,
                socket_path=socket_path,
                detail=str(AuthenticationFailed()),
            )
        return VerifyResult(
            response=response,
            outcome=VerifyOutcome.SUCCESS,
            socket_path=socket_path,
        )

    def _transact(self, socket_path: str, payload: bytes) -> bytes:
        try:
            conn = self._connector.connect(socket_path, timeout=self._settings.timeout_seconds)
        except OSError as exc:
            raise ConnectionFailed(f"cannot connect to {socket_path}: {exc}") from exc

        with closing(conn):
            try:
                sent = _send_all(conn, payload)
            except OSError as exc:
                raise ShortWrite(f"write to {socket_path} failed: {exc}") from exc
            if sent != len(payload):
                raise ShortWrite(f"short write: {sent} of {len(payload)} bytes")

            try:
                prefix = _recv_exactly(conn, protocol.LENGTH_PREFIX_SIZE)
            except OSError as exc:
                raise ReadFailed(f"error reading response length: {exc}") from exc
            if len(prefix) != protocol.LENGTH_PREFIX_SIZE:
                raise ReadFailed("connection closed before response length")
            expected = protocol.read_length_prefix(prefix)

            try:
                body = _recv_exactly(conn, expected)
            except OSError as exc:
                raise ReadFailed(f"error reading response: {exc}") from exc
            if len(body) != expected:
                raise ResponseTruncated(
                    f"response truncated: got {len(body)} of {expected} bytes",
                    response=protocol.decode_text(body),
                )
            return body


def verify_password(
    path: str | None,
    user: str,
    password: str,
    service: str = "",
    realm: str = "",
    client_addr: str = "",
    *,
    settings: AppSettings | None = None,
    connector: Connector | None = None,
) -> VerifyResult:
    """Una verificación completa contra saslauthd.

    `path` vacío usa la configuración (`SADV_SOCKET_PATH`,
    `PATH_SASLAUTHD_RUNDIR` o el default). `service` vacío usa
    `settings.service` ("imap" por defecto).
    """

    verifier = SaslauthdVerifier(settings=settings, connector=connector)
    return verifier.verify(user, password, service, realm, client_addr, path=path)
