from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.config import AppSettings
from core.domain.models import ClientCredentials, TokenRequest

TOKEN_URL = "https://idp.example.com/oauth2/token"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real user config dir and any local .env."""

    for name in (
        "IAMCTL_CONFIG_DIR",
        "IAMCTL_SP_CONFIG_PATH",
        "IAMCTL_SESSION_PATH",
        "IAMCTL_INSECURE_SKIP_VERIFY",
        "IAMCTL_SEND_USER_FIELD",
        "IAMCTL_CA_BUNDLE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config_dir(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "iamctl"
    monkeypatch.setenv("IAMCTL_CONFIG_DIR", str(path))
    return path


@pytest.fixture
def settings(config_dir) -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def credentials() -> ClientCredentials:
    return ClientCredentials(client_id="cid", client_secret="csecret", tenant_domain="carbon.super")


@pytest.fixture
def token_request() -> TokenRequest:
    return TokenRequest(server_url="https://idp.example.com", username="alice", password="secret123")


@pytest.fixture
def sp_config_file(config_dir) -> Path:
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / "sp_config.json"
    path.write_text(
        json.dumps({"clientId": "cid", "clientSecret": "csecret", "tenantDomain": "carbon.super"}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def token_body() -> dict:
    return {
        "access_token": "AT1",
        "refresh_token": "RT1",
        "scope": "internal_application_mgt_view internal_application_mgt_update",
        "token_type": "Bearer",
        "expires_in": 3600,
    }
