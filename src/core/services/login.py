"""Login orchestration.

This module holds the whole password-grant flow so the CLI only deals with
prompts and printing:

    read client config -> request tokens -> persist session

Collaborators (config reader, session writer, HTTP client) are injectable,
which keeps tests free of real files and sockets. If any step before
persistence fails the writer is never called.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import httpx

from adapters.session_store import write_session
from adapters.sp_config import read_client_credentials
from adapters.token_fetcher import fetch_tokens
from core.config import AppSettings
from core.domain.models import ServerSession, TokenRequest, TokenResponse
from core.interfaces.stores import CredentialsReader, SessionWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Output of a successful login."""

    session: ServerSession
    session_path: Path
    token_type: str
    expires_in: int
    scope: str


def login(
    *,
    request: TokenRequest,
    settings: AppSettings,
    reader: CredentialsReader | None = None,
    writer: SessionWriter | None = None,
    client: httpx.Client | None = None,
) -> LoginResult:
    """Run exactly one token exchange and persist its result."""

    reader = reader or partial(read_client_credentials, settings=settings)
    writer = writer or partial(write_session, settings=settings)

    credentials = reader()
    tokens: TokenResponse = fetch_tokens(request, credentials, settings=settings, client=client)

    session = ServerSession(
        server_url=request.server_url,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )
    session_path = writer(session)
    logger.debug("Login flow finished for %s", request.server_url)

    return LoginResult(
        session=session,
        session_path=session_path,
        token_type=tokens.token_type,
        expires_in=tokens.expires_in,
        scope=tokens.scope,
    )
