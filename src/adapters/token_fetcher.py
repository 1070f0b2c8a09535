"""Token Fetcher: OAuth2 password grant contra el IdP.

Fase única:
- POST `{server}/oauth2/token` con Basic Auth del cliente.
- Parsea la respuesta JSON a `TokenResponse`.
- Sin reintentos: cualquier fallo se propaga como `IamCtlError`.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from adapters.http_client import build_client
from core.config import AppSettings
from core.domain.models import (
    TOKEN_PATH,
    ClientCredentials,
    TokenRequest,
    TokenResponse,
    normalize_server_url,
)
from core.errors import TokenEndpointError, TokenResponseError, TransportError

logger = logging.getLogger(__name__)

# Scopes registrados en el IdP para gestión de aplicaciones; deben enviarse tal cual.
SCOPE = (
    "/permission/admin/manage/identity/applicationmgt/update "
    "/permission/admin/manage/identity/applicationmgt/create "
    "/permission/admin/manage/identity/applicationmgt/view "
    "internal_application_mgt_update "
    "internal_application_mgt_create "
    "internal_application_mgt_view"
)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def build_token_endpoint(server_url: str) -> str:
    return normalize_server_url(server_url) + TOKEN_PATH


def build_token_form(
    request: TokenRequest,
    credentials: ClientCredentials,
    *,
    send_user_field: bool = False,
) -> dict[str, str]:
    """Cuerpo del formulario del password grant.

    `user=clientId:clientSecret` duplica el header Basic; solo se envía si el
    servidor destino lo necesita.
    """

    form = {
        "grant_type": "password",
        "username": request.username,
        "password": request.password,
        "scope": SCOPE,
    }
    if send_user_field:
        form["user"] = f"{credentials.client_id}:{credentials.client_secret}"
    return form


def _error_fields(response: httpx.Response) -> tuple[str | None, str | None]:
    try:
        payload = response.json()
    except ValueError:
        return None, None
    if not isinstance(payload, dict):
        return None, None
    error = payload.get("error")
    description = payload.get("error_description")
    return (
        error if isinstance(error, str) else None,
        description if isinstance(description, str) else None,
    )


def parse_token_response(response: httpx.Response) -> TokenResponse:
    """Convierte una respuesta HTTP en `TokenResponse` o lanza el error adecuado."""

    if not response.is_success:
        error, description = _error_fields(response)
        raise TokenEndpointError(response.status_code, error=error, error_description=description)

    try:
        payload = response.json()
    except ValueError as exc:
        raise TokenResponseError(f"token endpoint returned a non-JSON body: {exc}") from exc

    if not isinstance(payload, dict):
        raise TokenResponseError("token endpoint returned JSON that is not an object")

    try:
        return TokenResponse.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise TokenResponseError(
            f"token response is missing or has invalid fields: {', '.join(fields)}"
        ) from exc


def fetch_tokens(
    request: TokenRequest,
    credentials: ClientCredentials,
    *,
    settings: AppSettings | None = None,
    client: httpx.Client | None = None,
    send_user_field: bool | None = None,
) -> TokenResponse:
    """Ejecuta el password grant y devuelve la respuesta validada.

    Si se inyecta `client`, no se cierra aquí.
    """

    settings = settings or AppSettings()
    if send_user_field is None:
        send_user_field = settings.send_user_field

    endpoint = request.token_endpoint
    form = build_token_form(request, credentials, send_user_field=send_user_field)

    owns_client = client is None
    http = client or build_client(settings)
    logger.info("Requesting password-grant token from %s", endpoint)
    try:
        response = http.post(
            endpoint,
            data=form,
            auth=httpx.BasicAuth(credentials.client_id, credentials.client_secret),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
    except httpx.TransportError as exc:
        raise TransportError(f"cannot reach {endpoint}: {exc}") from exc
    finally:
        if owns_client:
            http.close()

    logger.debug("Token endpoint answered HTTP %s", response.status_code)
    tokens = parse_token_response(response)
    logger.info(
        "Token acquired (type=%s, expires_in=%ss, scopes=%d)",
        tokens.token_type,
        tokens.expires_in,
        len(tokens.scopes),
    )
    return tokens


def fetch_token_pair(
    request: TokenRequest,
    credentials: ClientCredentials,
    *,
    settings: AppSettings | None = None,
    client: httpx.Client | None = None,
    send_user_field: bool | None = None,
) -> tuple[str, str]:
    """Atajo: devuelve solo `(access_token, refresh_token)`."""

    tokens = fetch_tokens(
        request,
        credentials,
        settings=settings,
        client=client,
        send_user_field=send_user_field,
    )
    return tokens.access_token, tokens.refresh_token
