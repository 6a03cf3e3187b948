"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación y documentación autocontenida (Field) sin acoplar el Core
  a librerías de I/O.
- `VerifyResult` se serializa tal cual para la salida `--json` de la CLI.

Nota:
- Estos modelos describen *qué* se envía y se recibe, no *cómo* viaja.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.config import DEFAULT_SERVICE
from core.errors import ERRORS_BY_OUTCOME


class VerifyOutcome(str, Enum):
    """Conjunto cerrado de resultados de una transacción."""

    SUCCESS = "success"
    CREDENTIALS_REQUIRED = "credentials_required"
    CONNECTION_FAILED = "connection_failed"
    SHORT_WRITE = "short_write"
    READ_FAILED = "read_failed"
    RESPONSE_TRUNCATED = "response_truncated"
    AUTHENTICATION_FAILED = "authentication_failed"

    @property
    def is_transport_error(self) -> bool:
        """True para fallos de socket/protocolo (no para un rechazo del daemon)."""

        return self in _TRANSPORT_ERRORS


_TRANSPORT_ERRORS = frozenset(
    {
        VerifyOutcome.CONNECTION_FAILED,
        VerifyOutcome.SHORT_WRITE,
        VerifyOutcome.READ_FAILED,
        VerifyOutcome.RESPONSE_TRUNCATED,
    }
)


class CredentialRequest(BaseModel):
    """Los cinco campos que viajan al daemon, en orden de cable.

    `realm` y `client_addr` vacíos son valores legítimos: se codifican como
    campos de longitud cero.
    """

    model_config = ConfigDict(frozen=True)

    user: str = Field(..., description="Usuario a verificar.")
    password: str = Field(..., repr=False, description="Contraseña en claro.")
    service: str = Field(default=DEFAULT_SERVICE, description="Servicio PAM/SASL.")
    realm: str = Field(default="", description="Realm (opcional).")
    client_addr: str = Field(default="", description="Dirección del cliente (opcional).")

    def fields(self) -> tuple[str, str, str, str, str]:
        return (self.user, self.password, self.service, self.realm, self.client_addr)


class VerifyResult(BaseModel):
    """Resultado de una verificación: texto del daemon + outcome etiquetado.

    Por qué se devuelve siempre `response`:
    - Incluso ante un rechazo ("NO ...") el texto del daemon explica el motivo
      y es útil para diagnóstico.
    """

    response: str = Field(
        default="",
        description="Texto devuelto por saslauthd (vacío si no hubo respuesta).",
    )
    outcome: VerifyOutcome = Field(..., description="Clasificación de la transacción.")
    socket_path: str | None = Field(
        default=None,
        description="Socket usado (o que se intentó usar).",
    )
    detail: str | None = Field(
        default=None,
        description="Mensaje de error legible cuando outcome != success.",
    )

    @property
    def ok(self) -> bool:
        return self.outcome is VerifyOutcome.SUCCESS

    @property
    def is_transport_error(self) -> bool:
        return self.outcome.is_transport_error

    def raise_for_outcome(self) -> VerifyResult:
        """Lanza el `VerifierError` correspondiente si la verificación no tuvo éxito."""

        if self.ok:
            return self
        error_cls = ERRORS_BY_OUTCOME[self.outcome.value]
        raise error_cls(self.detail, response=self.response)
