"""Codec del protocolo de saslauthd.

Formato (big-endian, sin framing adicional):

    request  = field(user) field(password) field(service) field(realm) field(client_addr)
    field(s) = uint16(len(s)) + s      (solo el prefijo si s está vacío)
    response = uint16(n) + n bytes de texto; éxito si el texto empieza por "OK"

El formato es un contrato con un daemon externo: no se reordena ni se amplía.
"""

from __future__ import annotations

import struct

from core.domain.models import CredentialRequest
from core.errors import CredentialsRequired

_LENGTH = struct.Struct(">H")

LENGTH_PREFIX_SIZE = _LENGTH.size
MAX_FIELD_LENGTH = 0xFFFF
FIELD_COUNT = 5
SUCCESS_PREFIX = b"OK"


class FieldTooLong(ValueError):
    """Un campo no cabe en el prefijo de 16 bits."""


def _to_bytes(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def encode_field(value: str | bytes) -> bytes:
    """Codifica un campo con su prefijo de longitud."""

    raw = _to_bytes(value)
    if len(raw) > MAX_FIELD_LENGTH:
        raise FieldTooLong(f"field is {len(raw)} bytes, max is {MAX_FIELD_LENGTH}")
    if not raw:
        return _LENGTH.pack(0)
    return _LENGTH.pack(len(raw)) + raw


def encode_request(request: CredentialRequest) -> bytes:
    """Concatena los cinco campos en orden de cable."""

    if not request.user or not request.password:
        raise CredentialsRequired()
    buffer = bytearray()
    for value in request.fields():
        buffer += encode_field(value)
    return bytes(buffer)


def decode_request(payload: bytes) -> CredentialRequest:
    """Inverso de `encode_request` (lo usa el daemon de pruebas).

    Lanza `ValueError` si el payload está truncado o sobran bytes.
    """

    values: list[str] = []
    offset = 0
    for _ in range(FIELD_COUNT):
        if offset + LENGTH_PREFIX_SIZE > len(payload):
            raise ValueError("truncated length prefix")
        (length,) = _LENGTH.unpack_from(payload, offset)
        offset += LENGTH_PREFIX_SIZE
        if offset + length > len(payload):
            raise ValueError("truncated field")
        values.append(payload[offset : offset + length].decode("utf-8"))
        offset += length
    if offset != len(payload):
        raise ValueError(f"{len(payload) - offset} trailing bytes")
    user, password, service, realm, client_addr = values
    return CredentialRequest(
        user=user,
        password=password,
        service=service,
        realm=realm,
        client_addr=client_addr,
    )


def encode_response(text: str | bytes) -> bytes:
    """Respuesta tal como la escribe el daemon."""

    return encode_field(text)


def read_length_prefix(prefix: bytes) -> int:
    (length,) = _LENGTH.unpack(prefix)
    return length


def is_success(body: bytes) -> bool:
    return body.startswith(SUCCESS_PREFIX)


def decode_text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")
