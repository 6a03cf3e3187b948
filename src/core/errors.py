"""Taxonomía de errores de la verificación.

Por qué una jerarquía cerrada:
- Cada clase corresponde a un único `VerifyOutcome` (atributo `outcome`), así
  que el llamador distingue "credenciales rechazadas" de "fallo de transporte"
  sin inspeccionar mensajes.
- El transporte las lanza internamente; el runner las convierte en
  `VerifyResult`. `VerifyResult.raise_for_outcome()` las vuelve a lanzar para
  quien prefiera excepciones.
"""

from __future__ import annotations

from typing import ClassVar


class VerifierError(Exception):
    """Base de todos los errores de verificación."""

    outcome: ClassVar[str] = ""
    default_message: ClassVar[str] = "verification error"

    def __init__(self, message: str | None = None, *, response: str = "") -> None:
        super().__init__(message or self.default_message)
        self.response = response


class CredentialsRequired(VerifierError):
    outcome = "credentials_required"
    default_message = "user and password are required"


class ConnectionFailed(VerifierError):
    outcome = "connection_failed"
    default_message = "cannot connect to saslauthd socket"


class ShortWrite(VerifierError):
    outcome = "short_write"
    default_message = "short write"


class ReadFailed(VerifierError):
    outcome = "read_failed"
    default_message = "error reading response"


class ResponseTruncated(VerifierError):
    outcome = "response_truncated"
    default_message = "response truncated"


class AuthenticationFailed(VerifierError):
    """El protocolo terminó bien pero el daemon rechazó las credenciales."""

    outcome = "authentication_failed"
    default_message = "authentication failed"


ERRORS_BY_OUTCOME: dict[str, type[VerifierError]] = {
    cls.outcome: cls
    for cls in (
        CredentialsRequired,
        ConnectionFailed,
        ShortWrite,
        ReadFailed,
        ResponseTruncated,
        AuthenticationFailed,
    )
}
