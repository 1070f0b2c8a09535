import ssl

import pytest

from core.config import AppSettings, get_user_config_dir, write_user_env_vars
from core.errors import ConfigurationError


def test_defaults(settings, config_dir):
    assert settings.insecure_skip_verify is False
    assert settings.send_user_field is False
    assert settings.http_timeout_seconds == 20.0
    assert settings.resolved_sp_config_path() == config_dir / "sp_config.json"
    assert settings.resolved_session_path() == config_dir / "server.json"


def test_tls_verify_is_on_by_default(settings):
    assert settings.tls_verify() is True


def test_tls_verify_opt_out(monkeypatch, config_dir):
    monkeypatch.setenv("IAMCTL_INSECURE_SKIP_VERIFY", "true")

    assert AppSettings(_env_file=None).tls_verify() is False


def test_tls_verify_custom_bundle(settings, monkeypatch):
    created = {}

    def fake_context(*, cafile):
        created["cafile"] = cafile
        return ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    monkeypatch.setattr("core.config.ssl.create_default_context", fake_context)
    settings = settings.model_copy(update={"ca_bundle": "/etc/ssl/idp.pem"})

    assert isinstance(settings.tls_verify(), ssl.SSLContext)
    assert created["cafile"].endswith("idp.pem")


def test_explicit_paths_win(tmp_path, monkeypatch):
    monkeypatch.setenv("IAMCTL_SESSION_PATH", str(tmp_path / "s.json"))

    assert AppSettings(_env_file=None).resolved_session_path() == tmp_path / "s.json"


def test_user_config_dir_follows_xdg(tmp_path, monkeypatch):
    monkeypatch.setattr("core.config.sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_user_config_dir() == tmp_path / "iamctl"


def test_write_user_env_vars_merges(tmp_path, monkeypatch):
    monkeypatch.setattr("core.config.sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    write_user_env_vars({"IAMCTL_LOG_LEVEL": "INFO"})
    path = write_user_env_vars({"IAMCTL_HTTP_TIMEOUT_SECONDS": "5", "IAMCTL_CA_BUNDLE": None})

    text = path.read_text(encoding="utf-8")
    assert "IAMCTL_LOG_LEVEL=INFO" in text
    assert "IAMCTL_HTTP_TIMEOUT_SECONDS=5" in text
    assert "IAMCTL_CA_BUNDLE" not in text


def test_tls_verify_missing_bundle(settings, tmp_path):
    settings = settings.model_copy(update={"ca_bundle": tmp_path / "missing.pem"})

    with pytest.raises(ConfigurationError, match="cannot load CA bundle"):
        settings.tls_verify()


def test_tls_verify_bundle_without_certificates(settings, tmp_path):
    bundle = tmp_path / "bad.pem"
    bundle.write_text("not a cert\n", encoding="utf-8")
    settings = settings.model_copy(update={"ca_bundle": bundle})

    with pytest.raises(ConfigurationError, match="bad.pem"):
        settings.tls_verify()
