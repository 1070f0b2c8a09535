from unittest import mock

import pytest

from adapters.session_store import read_session
from core.domain.models import ServerSession
from core.errors import ConfigurationError, TokenEndpointError, TokenResponseError
from core.services.login import login

TOKEN_URL = "https://idp.example.com/oauth2/token"


def test_login_persists_tokens(httpx_mock, settings, sp_config_file, token_request, token_body):
    httpx_mock.add_response(method="POST", url=TOKEN_URL, json=token_body)

    result = login(request=token_request, settings=settings)

    assert result.session.access_token == "AT1"
    assert result.session.refresh_token == "RT1"
    assert result.session_path == settings.resolved_session_path()
    assert result.expires_in == 3600

    stored = read_session(settings=settings)
    assert stored is not None
    assert (stored.server_url, stored.access_token, stored.refresh_token) == (
        "https://idp.example.com",
        "AT1",
        "RT1",
    )


def test_login_with_injected_collaborators(httpx_mock, settings, credentials, token_request, token_body, tmp_path):
    httpx_mock.add_response(method="POST", url=TOKEN_URL, json=token_body)
    written: list[ServerSession] = []

    def writer(session: ServerSession):
        written.append(session)
        return tmp_path / "fake.json"

    result = login(request=token_request, settings=settings, reader=lambda: credentials, writer=writer)

    assert written == [result.session]
    assert result.session_path == tmp_path / "fake.json"


def test_login_unauthorized_never_writes(httpx_mock, settings, credentials, token_request):
    httpx_mock.add_response(method="POST", url=TOKEN_URL, status_code=401)
    writer = mock.Mock()

    with pytest.raises(TokenEndpointError):
        login(request=token_request, settings=settings, reader=lambda: credentials, writer=writer)

    writer.assert_not_called()


def test_login_bad_body_never_writes(httpx_mock, settings, sp_config_file, token_request):
    httpx_mock.add_response(method="POST", url=TOKEN_URL, json={"refresh_token": "RT1"})

    with pytest.raises(TokenResponseError):
        login(request=token_request, settings=settings)

    assert not settings.resolved_session_path().exists()


def test_login_without_client_config_makes_no_request(httpx_mock, settings, token_request):
    writer = mock.Mock()

    with pytest.raises(ConfigurationError):
        login(request=token_request, settings=settings, writer=writer)

    assert httpx_mock.get_requests() == []
    writer.assert_not_called()
