"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/ficheros) lean config de forma consistente.
"""

from __future__ import annotations

import os
import ssl
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError

APP_NAME = "iamctl"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def load_ca_bundle(path: Path) -> ssl.SSLContext:
    """Contexto TLS que confía en las CAs de `path`; fallo = `ConfigurationError`."""

    try:
        return ssl.create_default_context(cafile=str(path))
    except (OSError, ssl.SSLError) as exc:
        raise ConfigurationError(f"cannot load CA bundle {path}: {exc}") from exc


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# iamctl user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="IAMCTL_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout de la petición al token endpoint (segundos).",
    )
    user_agent: str = Field(
        default="iamctl/0.1",
        min_length=1,
        description="User-Agent para peticiones al servidor de identidad.",
    )

    insecure_skip_verify: bool = Field(
        default=False,
        description="Desactiva la verificación TLS (solo servidores de prueba con certificado autofirmado).",
    )
    ca_bundle: Path | None = Field(
        default=None,
        description="Ruta a un bundle de CAs propio para verificar el servidor.",
    )
    send_user_field: bool = Field(
        default=False,
        description="Envía el campo legacy `user=clientId:clientSecret` en el formulario.",
    )

    config_dir: Path | None = Field(
        default=None,
        description="Directorio de configuración (por defecto el del usuario).",
    )
    sp_config_path: Path | None = Field(
        default=None,
        description="Ruta al JSON con clientId/clientSecret/tenantDomain.",
    )
    session_path: Path | None = Field(
        default=None,
        description="Ruta al JSON donde se guardan URL del servidor y tokens.",
    )

    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )

    def resolved_config_dir(self) -> Path:
        return self.config_dir or get_user_config_dir()

    def resolved_sp_config_path(self) -> Path:
        return self.sp_config_path or self.resolved_config_dir() / "sp_config.json"

    def resolved_session_path(self) -> Path:
        return self.session_path or self.resolved_config_dir() / "server.json"

    def tls_verify(self) -> bool | ssl.SSLContext:
        """Valor para el parámetro `verify` de httpx."""

        if self.insecure_skip_verify:
            return False
        if self.ca_bundle is not None:
            return load_ca_bundle(self.ca_bundle)
        return True
