"""Doctor command for environment diagnostics."""

from __future__ import annotations

import os
import stat

import typer
from rich.console import Console

from adapters.unix_socket import probe_socket
from cli.ui_components import build_doctor_table
from core.config import DEFAULT_SOCKET_PATH, AppSettings

_console = Console()


def _check_socket_file(path: str) -> tuple[str, str]:
    try:
        mode = os.stat(path).st_mode
    except FileNotFoundError:
        return "FAIL", "Path does not exist (is saslauthd running?)"
    except OSError as exc:
        return "FAIL", str(exc)
    if not stat.S_ISSOCK(mode):
        return "FAIL", "Path exists but is not a socket"
    return "OK", "Unix socket"


def run(
    socket: str = typer.Option("", "--socket", "-s", help="Explicit socket path."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    path = settings.resolved_socket_path(socket or None)

    table = build_doctor_table()

    # Config
    if socket:
        table.add_row("Socket source", "OK", "--socket option")
    elif settings.socket_path:
        table.add_row("Socket source", "OK", "SADV_SOCKET_PATH")
    elif settings.rundir:
        table.add_row("Socket source", "OK", f"PATH_SASLAUTHD_RUNDIR={settings.rundir}")
    else:
        table.add_row("Socket source", "DEFAULT", DEFAULT_SOCKET_PATH)
    table.add_row("Socket path", "OK", path)
    table.add_row("Service", "OK", settings.service)
    table.add_row(
        "Timeout",
        "OK",
        f"{settings.timeout_seconds}s" if settings.timeout_seconds else "none (blocking)",
    )

    status, detail = _check_socket_file(path)
    table.add_row("Socket file", status, detail)

    ok_probe, detail_probe = probe_socket(settings, path)
    table.add_row("Daemon connect", "OK" if ok_probe else "FAIL", detail_probe)

    _console.print(table)

    if not ok_probe:
        _console.print(
            "\n[yellow]Note:[/yellow] Set PATH_SASLAUTHD_RUNDIR or SADV_SOCKET_PATH if saslauthd "
            "uses a non-default run directory."
        )
        raise typer.Exit(code=1)
