"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- El entorno solo se lee al construir `AppSettings` (borde del proceso); la
  resolución del socket es una función pura que recibe valores explícitos.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SOCKET_PATH = "/var/run/saslauthd/mux"
# Nombre del socket dentro del rundir de saslauthd. Es el valor habitual, pero
# el daemon puede compilarse con otro nombre.
SOCKET_NAME = "mux"
DEFAULT_SERVICE = "imap"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "sadv"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "sadv"
    return Path.home() / ".config" / "sadv"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def resolve_socket_path(path: str | None = None, rundir: str | None = None) -> str:
    """Resuelve la ruta del socket de saslauthd.

    Reglas (en orden de prioridad):
    - `path` explícito, tal cual.
    - `<rundir>/mux` si hay rundir configurado.
    - `DEFAULT_SOCKET_PATH` en cualquier otro caso.
    """

    if path:
        return path
    if rundir:
        return f"{rundir.rstrip('/')}/{SOCKET_NAME}"
    return DEFAULT_SOCKET_PATH


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="SADV_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        env_ignore_empty=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    rundir: str | None = Field(
        default=None,
        validation_alias="PATH_SASLAUTHD_RUNDIR",
        description="Directorio runtime de saslauthd (el socket es <rundir>/mux).",
    )
    socket_path: str | None = Field(
        default=None,
        description="Ruta explícita al socket; tiene prioridad sobre el rundir.",
    )
    service: str = Field(
        default=DEFAULT_SERVICE,
        min_length=1,
        max_length=0xFFFF,
        description="Servicio enviado al daemon cuando el llamador no indica uno.",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout del socket (segundos). None = bloqueo por defecto del transporte.",
    )

    def resolved_socket_path(self, path: str | None = None) -> str:
        """Ruta efectiva: `path` > `socket_path` > rundir > default."""

        return resolve_socket_path(path or self.socket_path, self.rundir)
