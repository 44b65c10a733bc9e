from pathlib import Path

import pytest
from pydantic import ValidationError

from credbridge.config.logging import redact_sensitive
from credbridge.config.settings import Settings, expand_path
from credbridge.types import TokenProviderKind

_ENV_VARS = (
    "USE_FILE_CHALLENGE_AUTH",
    "LOCAL_TOKENS_PATH",
    "REMOTE_TOKENS_PATH",
    "CHALLENGE_TIMEOUT_SECONDS",
    "TOKEN_PROVIDER",
    "PORT",
    "AZURE_CREDENTIAL_OPTIONS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
class TestSettings:
    def test_default_settings(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.use_file_challenge_auth is True
        assert settings.local_tokens_path == "~/.LocalCredentialBridgeTokens"
        assert settings.remote_tokens_path == "/var/opt/azcmagent/tokens"
        assert settings.challenge_timeout_seconds == 10
        assert settings.token_provider == TokenProviderKind.AZURE
        assert settings.port == 40342
        assert settings.azure_credential_options == {}

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("USE_FILE_CHALLENGE_AUTH", "false")
        monkeypatch.setenv("REMOTE_TOKENS_PATH", "C:\\ProgramData\\tokens")
        monkeypatch.setenv("CHALLENGE_TIMEOUT_SECONDS", "30")
        monkeypatch.setenv("TOKEN_PROVIDER", "static")
        settings = Settings(_env_file=None)
        assert settings.use_file_challenge_auth is False
        assert settings.remote_tokens_path == "C:\\ProgramData\\tokens"
        assert settings.challenge_timeout_seconds == 30
        assert settings.token_provider == TokenProviderKind.STATIC

    def test_azure_credential_options_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AZURE_CREDENTIAL_OPTIONS", '{"exclude_cli_credential": true}')
        settings = Settings(_env_file=None)
        assert settings.azure_credential_options == {"exclude_cli_credential": True}

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, challenge_timeout_seconds=0)

    def test_local_tokens_dir_expands_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", "/home/bridge")
        settings = Settings(_env_file=None)
        assert settings.local_tokens_dir == Path("/home/bridge/.LocalCredentialBridgeTokens")


@pytest.mark.unit
class TestExpandPath:
    def test_dollar_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BRIDGE_ROOT", "/srv/bridge")
        assert expand_path("$BRIDGE_ROOT/tokens") == Path("/srv/bridge/tokens")

    def test_percent_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("USERPROFILE", "/home/me")
        assert expand_path("%USERPROFILE%/.LocalCredentialBridgeTokens") == Path(
            "/home/me/.LocalCredentialBridgeTokens"
        )

    def test_unknown_percent_variable_kept(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NOPE_NOT_SET", raising=False)
        assert expand_path("%NOPE_NOT_SET%/tokens") == Path("%NOPE_NOT_SET%/tokens")


@pytest.mark.unit
class TestRedactSensitive:
    def test_masks_secret_bearing_keys(self) -> None:
        event = {"event": "x", "authorization": "Basic abc", "token": "t", "resource": "r"}
        redacted = redact_sensitive(None, "info", event)
        assert redacted["authorization"] == "***"
        assert redacted["token"] == "***"
        assert redacted["resource"] == "r"
