"""Persistencia de la sesión (servidor + tokens).

Reglas:
- URL, access token y refresh token se escriben siempre juntos, en una sola
  escritura atómica.
- El fichero queda con permisos 0600.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from adapters.json_exporter import export_json_atomic, load_json_object
from core.config import AppSettings
from core.domain.models import ServerSession
from core.errors import SessionStoreError

logger = logging.getLogger(__name__)


def _resolve(path: Path | None, settings: AppSettings | None) -> Path:
    if path is not None:
        return path
    return (settings or AppSettings()).resolved_session_path()


def write_session(
    session: ServerSession,
    path: Path | None = None,
    *,
    settings: AppSettings | None = None,
) -> Path:
    """Escribe la sesión y devuelve la ruta final."""

    out_path = _resolve(path, settings)
    payload = session.model_dump(mode="json", by_alias=True)
    try:
        export_json_atomic(payload=payload, output_path=out_path)
    except OSError as exc:
        raise SessionStoreError(f"cannot write session file {out_path}: {exc}") from exc
    logger.info("Saved session for %s to %s", session.server_url, out_path)
    return out_path


def read_session(
    path: Path | None = None,
    *,
    settings: AppSettings | None = None,
) -> ServerSession | None:
    """Devuelve la sesión guardada, o `None` si no hay ninguna."""

    in_path = _resolve(path, settings)
    if not in_path.exists():
        return None
    try:
        return ServerSession.model_validate(load_json_object(in_path))
    except (OSError, ValueError, ValidationError) as exc:
        raise SessionStoreError(f"session file {in_path} is unreadable: {exc}") from exc


def remove_session(
    path: Path | None = None,
    *,
    settings: AppSettings | None = None,
) -> bool:
    """Borra el fichero de sesión local. No revoca nada en el servidor."""

    target = _resolve(path, settings)
    if not target.exists():
        return False
    try:
        target.unlink()
    except OSError as exc:
        raise SessionStoreError(f"cannot remove session file {target}: {exc}") from exc
    logger.info("Removed session file %s", target)
    return True
