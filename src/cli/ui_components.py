"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ServerSession


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modo interactivo)."""

    title = Text("iamctl", style="bold cyan")
    subtitle = Text("OAuth2 password grant • Identity Server", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def mask_token(token: str, *, visible: int = 4) -> str:
    """Oculta un token dejando solo los últimos `visible` caracteres."""

    if len(token) <= visible * 2:
        return "*" * len(token)
    return "*" * 8 + token[-visible:]


def build_session_table(session: ServerSession) -> Table:
    table = Table(title="Stored session", show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Server", session.server_url)
    table.add_row("Access token", mask_token(session.access_token))
    table.add_row("Refresh token", mask_token(session.refresh_token))
    table.add_row("Saved at", session.saved_at.isoformat(timespec="seconds"))
    return table


def build_login_panel(*, server_url: str, token_type: str, expires_in: int, scope: str, path: str) -> Panel:
    """Resumen de un login correcto (sin mostrar tokens)."""

    body = Text()
    body.append("Server: ", style="bold")
    body.append(f"{server_url}\n")
    body.append("Token type: ", style="bold")
    body.append(f"{token_type}\n")
    body.append("Expires in: ", style="bold")
    body.append(f"{expires_in}s\n")
    scopes = scope.split()
    body.append("Scopes: ", style="bold")
    body.append(f"{len(scopes)} granted\n")
    body.append(f"Saved to {path}", style="dim")
    return Panel(body, title=Text("Login OK", style="bold green"), border_style="green")
