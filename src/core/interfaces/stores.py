"""Contratos de los colaboradores del login.

Por qué Protocol:
- El servicio de login depende de un lector de credenciales y de un escritor
  de sesión, no de ficheros concretos.
- Los tests sustituyen cualquiera de los dos con un callable.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from core.domain.models import ClientCredentials, ServerSession


@runtime_checkable
class CredentialsReader(Protocol):
    """Produce las credenciales del cliente; fallar aquí es fatal."""

    def __call__(self) -> ClientCredentials:
        ...


@runtime_checkable
class SessionWriter(Protocol):
    """Persiste servidor + tokens como una unidad y devuelve la ruta escrita."""

    def __call__(self, session: ServerSession) -> Path:
        ...
