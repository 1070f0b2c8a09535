"""Taxonomía de errores de iamctl.

Por qué excepciones propias:
- Los adaptadores lanzan, la CLI decide cómo presentarlo (mensaje + exit code).
- Tests y otras herramientas pueden capturar fallos sin terminar el proceso.
"""

from __future__ import annotations


class IamCtlError(Exception):
    """Base de todos los errores controlados de la herramienta."""


class ConfigurationError(IamCtlError):
    """Faltan credenciales del cliente o el fichero SP config es inválido."""


class TransportError(IamCtlError):
    """Fallo de red, TLS o timeout al contactar el servidor."""


class TokenEndpointError(IamCtlError):
    """El token endpoint respondió con un status no 2xx."""

    def __init__(
        self,
        status_code: int,
        *,
        error: str | None = None,
        error_description: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.error = error
        self.error_description = error_description
        message = f"token endpoint returned HTTP {status_code}"
        if error:
            message += f" ({error})"
        if error_description:
            message += f": {error_description}"
        super().__init__(message)


class TokenResponseError(IamCtlError):
    """La respuesta no es JSON válido o le faltan campos esperados."""


class SessionStoreError(IamCtlError):
    """No se pudo leer/escribir el fichero local de sesión."""
