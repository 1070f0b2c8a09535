"""Doctor command for environment diagnostics."""

from __future__ import annotations

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_client
from adapters.session_store import read_session
from adapters.sp_config import read_client_credentials
from core.config import AppSettings, get_user_env_file
from core.errors import IamCtlError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        with build_client(settings) as client:
            response = client.get(url)
        return True, f"HTTP {response.status_code}"
    except (httpx.HTTPError, IamCtlError) as exc:
        return False, str(exc)


@app.command()
def run(
    connectivity: bool = typer.Option(
        True,
        "--connectivity/--no-connectivity",
        help="Probe the stored server URL over HTTPS.",
    ),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="iamctl Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Config dir", "OK", str(settings.resolved_config_dir()))
    env_file = get_user_env_file()
    table.add_row("User .env", "OK" if env_file.exists() else "OPTIONAL", str(env_file))

    # Client credentials
    try:
        credentials = read_client_credentials(settings=settings)
        table.add_row("Client config", "OK", f"client {credentials.client_id} @ {credentials.tenant_domain}")
    except IamCtlError as exc:
        table.add_row("Client config", "FAIL", str(exc))

    # TLS policy
    if settings.insecure_skip_verify:
        table.add_row("TLS verify", "WARN", "Certificate verification disabled")
    elif settings.ca_bundle is not None:
        try:
            settings.tls_verify()
            table.add_row("TLS verify", "OK", f"Custom CA bundle {settings.ca_bundle}")
        except IamCtlError as exc:
            table.add_row("TLS verify", "FAIL", str(exc))
    else:
        table.add_row("TLS verify", "OK", "System trust store")

    # Session + connectivity (best-effort)
    session = None
    try:
        session = read_session(settings=settings)
        if session is None:
            table.add_row("Session", "MISSING", "Run `iamctl login <server-url>`")
        else:
            table.add_row("Session", "OK", session.server_url)
    except IamCtlError as exc:
        table.add_row("Session", "FAIL", str(exc))

    if connectivity and session is not None:
        ok_http, detail_http = _check_http(session.server_url, settings)
        table.add_row("Server connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)
