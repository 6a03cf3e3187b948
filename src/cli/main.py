"""CLI de sadv (Typer).

Por qué Typer + Rich:
- Opciones tipadas con fallback a variables de entorno (`SASLUSER`/`SASLPASS`)
  sin parsear a mano.
- Rich solo se usa en la capa de presentación; el Core no imprime nada.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.saslauthd_client import verify_password
from cli import doctor
from cli.ui_components import build_result_panel, print_result
from core.config import AppSettings
from core.domain.models import VerifyOutcome

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Verify user/password pairs against a local saslauthd daemon.",
)
app.command(name="doctor")(doctor.run)

_console = Console()

EXIT_AUTH_FAILED = 1
EXIT_ERROR = 2


def configure_logging(verbose: bool) -> None:
    """Activa logs DEBUG con RichHandler; sin `--verbose` la librería no emite nada."""

    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    ctx.obj = {"verbose": verbose}
    configure_logging(verbose)


@app.command()
def verify(
    ctx: typer.Context,
    user: str = typer.Option("", "--user", "-u", envvar="SASLUSER", help="User name."),
    password: str = typer.Option(
        "",
        "--password",
        "-p",
        envvar="SASLPASS",
        show_default=False,
        help="Password (prefer the SASLPASS env var).",
    ),
    socket: str = typer.Option("", "--socket", "-s", help="Explicit saslauthd socket path."),
    service: str = typer.Option("", "--service", help="Service name (default: imap)."),
    realm: str = typer.Option("", "--realm", help="Realm."),
    client_addr: str = typer.Option("", "--client-addr", help="Client address."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Ask saslauthd whether the user/password pair is valid."""

    settings = AppSettings()
    result = verify_password(
        socket or None,
        user,
        password,
        service,
        realm,
        client_addr,
        settings=settings,
    )

    if as_json:
        _console.print_json(result.model_dump_json())
    else:
        print_result(_console, result)
        if ctx.obj and ctx.obj.get("verbose"):
            _console.print(build_result_panel(result))

    if result.ok:
        return
    if result.outcome is VerifyOutcome.AUTHENTICATION_FAILED:
        raise typer.Exit(code=EXIT_AUTH_FAILED)
    raise typer.Exit(code=EXIT_ERROR)


def run() -> None:
    app()
