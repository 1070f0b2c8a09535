"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta en el borde: credenciales, respuesta del servidor y
  sesión persistida comparten el mismo contrato.
- Facilita la serialización con las claves camelCase que usan otras
  herramientas del ecosistema.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

TOKEN_PATH = "/oauth2/token"


def normalize_server_url(value: str) -> str:
    return value.strip().rstrip("/")


class ClientCredentials(BaseModel):
    """Credenciales del service provider (cliente OAuth2) registrado en el IdP."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    client_id: str = Field(..., min_length=1, alias="clientId")
    client_secret: str = Field(..., min_length=1, alias="clientSecret", repr=False)
    tenant_domain: str = Field(..., min_length=1, alias="tenantDomain")

    @field_validator("client_id", "client_secret", "tenant_domain", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class TokenRequest(BaseModel):
    """Parámetros de una invocación: servidor + usuario final."""

    model_config = ConfigDict(frozen=True)

    server_url: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, repr=False)

    @field_validator("server_url", mode="before")
    @classmethod
    def _normalize_url(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_server_url(value)
        return value

    @field_validator("username", mode="before")
    @classmethod
    def _strip_username(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @property
    def token_endpoint(self) -> str:
        return self.server_url + TOKEN_PATH


class TokenResponse(BaseModel):
    """Respuesta del token endpoint (RFC 6749 §5.1)."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1, repr=False)
    refresh_token: str = Field(..., min_length=1, repr=False)
    scope: str = Field(default="")
    token_type: str = Field(default="Bearer")
    expires_in: int = Field(default=0, ge=0)

    @property
    def scopes(self) -> list[str]:
        return self.scope.split()


class ServerSession(BaseModel):
    """Lo que se persiste tras un login: servidor + par de tokens, siempre juntos."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    server_url: str = Field(..., min_length=1, alias="serverUrl")
    access_token: str = Field(..., min_length=1, alias="accessToken", repr=False)
    refresh_token: str = Field(..., min_length=1, alias="refreshToken", repr=False)
    saved_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="savedAt",
    )
