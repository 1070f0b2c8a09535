import pytest
from pydantic import ValidationError

from core.domain.models import TokenRequest


def test_token_request_strips_username():
    request = TokenRequest(server_url="https://idp.example.com/", username="  alice ", password=" pw ")

    assert request.username == "alice"
    assert request.password == " pw "
    assert request.token_endpoint == "https://idp.example.com/oauth2/token"


def test_token_request_rejects_blank_username():
    with pytest.raises(ValidationError):
        TokenRequest(server_url="https://idp.example.com", username="   ", password="pw")
