"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y la política TLS en un solo sitio.
- Facilita testeo: se puede sustituir por un cliente mockeado.
"""

from __future__ import annotations

import logging

import httpx

from core.config import AppSettings

logger = logging.getLogger(__name__)


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` síncrono con defaults seguros.

    La verificación TLS solo se desactiva si `insecure_skip_verify` está activo
    de forma explícita.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)

    verify = settings.tls_verify()
    if verify is False:
        logger.warning("TLS certificate verification is DISABLED (insecure_skip_verify=true)")

    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers=headers,
        verify=verify,
    )
