"""Lector del SP config (credenciales del cliente OAuth2).

Formato (JSON, mismo que genera `iamctl init`):

    {"clientId": "...", "clientSecret": "...", "tenantDomain": "carbon.super"}

También se aceptan las claves snake_case.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from adapters.json_exporter import export_json_atomic, load_json_object
from core.config import AppSettings
from core.domain.models import ClientCredentials
from core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def _resolve(path: Path | None, settings: AppSettings | None) -> Path:
    if path is not None:
        return path
    return (settings or AppSettings()).resolved_sp_config_path()


def read_client_credentials(
    path: Path | None = None,
    *,
    settings: AppSettings | None = None,
) -> ClientCredentials:
    """Carga clientId/clientSecret/tenantDomain; cualquier fallo es `ConfigurationError`."""

    sp_path = _resolve(path, settings)
    if not sp_path.is_file():
        raise ConfigurationError(
            f"client configuration not found at {sp_path} (run `iamctl init` first)"
        )

    try:
        data = load_json_object(sp_path)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError es subclase de ValueError.
        raise ConfigurationError(f"cannot read client configuration {sp_path}: {exc}") from exc

    try:
        credentials = ClientCredentials.model_validate(data)
    except ValidationError as exc:
        missing = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ConfigurationError(
            f"client configuration {sp_path} is incomplete: {', '.join(missing) or 'invalid values'}"
        ) from exc

    logger.debug("Loaded client credentials for tenant %s from %s", credentials.tenant_domain, sp_path)
    return credentials


def write_client_credentials(
    credentials: ClientCredentials,
    path: Path | None = None,
    *,
    settings: AppSettings | None = None,
) -> Path:
    """Guarda las credenciales del cliente (permisos 0600)."""

    sp_path = _resolve(path, settings)
    payload = credentials.model_dump(mode="json", by_alias=True)
    try:
        return export_json_atomic(payload=payload, output_path=sp_path)
    except OSError as exc:
        raise ConfigurationError(f"cannot write client configuration {sp_path}: {exc}") from exc
