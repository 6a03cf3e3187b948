"""Contratos del transporte hacia saslauthd.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- `socket.socket` ya cumple `Connection`; los tests usan conexiones falsas o un
  conector que nunca debe invocarse.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class Connection(Protocol):
    """Conexión de stream ya establecida (subconjunto de `socket.socket`)."""

    def send(self, data: bytes) -> int: ...

    def recv(self, bufsize: int) -> bytes: ...

    def close(self) -> None: ...


@runtime_checkable
class Connector(Protocol):
    """Abre una conexión hacia el socket del daemon.

    Reglas de diseño:
    - Un fallo al conectar se señala con `OSError`; el conector no deja recursos
      abiertos en ese caso.
    - La conexión devuelta pertenece al llamador, que debe cerrarla.
    """

    def connect(self, path: str, *, timeout: float | None = None) -> Connection:
        """Conecta a `path` y devuelve la conexión."""

        ...
