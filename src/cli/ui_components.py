"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- El texto del daemon se imprime como `Text` (sin markup) porque no es de fiar.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import VerifyResult


def print_result(console: Console, result: VerifyResult) -> None:
    """Salida clásica de testsadv: estado + "from saslauthd:<respuesta>"."""

    if result.ok:
        console.print(Text("OK Success.", style="green"))
    else:
        console.print(Text(result.detail or result.outcome.value, style="red"))
    console.print(Text(f"from saslauthd:{result.response}"))


def build_result_panel(result: VerifyResult) -> Panel:
    """Panel con el detalle de la transacción (modo `--verbose`)."""

    style = "green" if result.ok else ("red" if result.is_transport_error else "yellow")
    body = Text()
    body.append("Outcome: ", style="bold")
    body.append(result.outcome.value + "\n", style=style)
    body.append("Socket: ", style="bold")
    body.append(f"{result.socket_path or '-'}\n")
    body.append("Response: ", style="bold")
    body.append(result.response or "-")
    if result.detail:
        body.append("\nDetail: ", style="bold")
        body.append(result.detail, style="dim")
    return Panel(body, title=Text("saslauthd", style=f"bold {style}"), border_style=style)


def build_doctor_table() -> Table:
    table = Table(title="sadv Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table
