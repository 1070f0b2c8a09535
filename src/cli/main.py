"""CLI principal (Typer).

Comandos:
- `login`: password grant contra el IdP y guarda servidor + tokens.
- `init`: guarda las credenciales del cliente (SP config).
- `status` / `logout`: inspecciona o borra la sesión local.
- `doctor`: diagnósticos de entorno.

Solo esta capa convierte `IamCtlError` en mensaje + exit code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.session_store import read_session, remove_session
from adapters.sp_config import write_client_credentials
from cli import doctor
from cli.ui_components import build_login_panel, build_session_table, print_banner
from core.config import AppSettings, load_ca_bundle, write_user_env_vars
from core.domain.models import ClientCredentials, TokenRequest
from core.errors import IamCtlError
from core.logging_setup import configure_logging
from core.services.login import login as run_login

__version__ = "0.1.0"

DEFAULT_TENANT_DOMAIN = "carbon.super"

app = typer.Typer(
    name="iamctl",
    no_args_is_help=True,
    add_completion=False,
    help="Authenticate against an OAuth2 identity server and store the tokens locally.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _fail(exc: Exception) -> typer.Exit:
    _err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"iamctl {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)


@app.command("login")
def login_command(
    server_url: str = typer.Argument(..., help="Base URL of the identity server, e.g. https://localhost:9443"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Resource owner username."),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Resource owner password."),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Skip TLS certificate verification (self-signed test servers only).",
    ),
    send_user_field: bool = typer.Option(
        False,
        "--send-user-field",
        help="Also send the legacy `user=clientId:clientSecret` form field.",
    ),
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the banner."),
) -> None:
    """Exchange username/password for tokens and save them."""

    settings = AppSettings()
    overrides: dict[str, bool] = {}
    if insecure:
        overrides["insecure_skip_verify"] = True
    if send_user_field:
        overrides["send_user_field"] = True
    if overrides:
        settings = settings.model_copy(update=overrides)

    if banner:
        print_banner(_console)

    if username is None:
        username = typer.prompt("Username")
    if password is None:
        password = typer.prompt("Password", hide_input=True)

    try:
        request = TokenRequest(server_url=server_url, username=username, password=password)
    except ValidationError as exc:
        raise typer.BadParameter("server URL, username and password must not be empty") from exc

    try:
        result = run_login(request=request, settings=settings)
    except IamCtlError as exc:
        raise _fail(exc) from exc

    _console.print(
        build_login_panel(
            server_url=result.session.server_url,
            token_type=result.token_type,
            expires_in=result.expires_in,
            scope=result.scope,
            path=str(result.session_path),
        )
    )


@app.command("init")
def init_command(
    client_id: Optional[str] = typer.Option(None, "--client-id", help="OAuth2 client identifier."),
    client_secret: Optional[str] = typer.Option(None, "--client-secret", help="OAuth2 client secret."),
    tenant_domain: Optional[str] = typer.Option(None, "--tenant-domain", help="Tenant domain of the client."),
    ca_bundle: Optional[Path] = typer.Option(
        None,
        "--ca-bundle",
        exists=True,
        dir_okay=False,
        resolve_path=True,
        help="CA bundle used to verify the server certificate (saved to the user .env).",
    ),
) -> None:
    """Store the OAuth2 client credentials used by `login`."""

    settings = AppSettings()

    if ca_bundle is not None:
        try:
            load_ca_bundle(ca_bundle)
        except IamCtlError as exc:
            raise _fail(exc) from exc

    if client_id is None:
        client_id = typer.prompt("Client ID").strip()
    if client_secret is None:
        client_secret = typer.prompt("Client secret", hide_input=True).strip()
    if tenant_domain is None:
        tenant_domain = typer.prompt("Tenant domain", default=DEFAULT_TENANT_DOMAIN, show_default=True).strip()

    try:
        credentials = ClientCredentials(
            client_id=client_id,
            client_secret=client_secret,
            tenant_domain=tenant_domain,
        )
    except ValidationError as exc:
        raise typer.BadParameter("client id, client secret and tenant domain are required") from exc

    try:
        path = write_client_credentials(credentials, settings=settings)
    except IamCtlError as exc:
        raise _fail(exc) from exc

    _console.print(f"[green]Saved client config to:[/green] {path}")

    if ca_bundle is not None:
        env_path = write_user_env_vars({"IAMCTL_CA_BUNDLE": str(ca_bundle)})
        _console.print(f"[green]Saved CA bundle setting to:[/green] {env_path}")


@app.command("status")
def status_command() -> None:
    """Show the stored server URL and (masked) tokens."""

    settings = AppSettings()
    try:
        session = read_session(settings=settings)
    except IamCtlError as exc:
        raise _fail(exc) from exc

    if session is None:
        _err_console.print("[yellow]No stored session.[/yellow] Run `iamctl login <server-url>`.")
        raise typer.Exit(code=1)

    _console.print(build_session_table(session))


@app.command("logout")
def logout_command() -> None:
    """Delete the local session file (tokens are not revoked)."""

    settings = AppSettings()
    try:
        removed = remove_session(settings=settings)
    except IamCtlError as exc:
        raise _fail(exc) from exc

    if removed:
        _console.print("[green]Local session removed.[/green]")
    else:
        _console.print("[dim]No stored session.[/dim]")


def run() -> None:
    app()
