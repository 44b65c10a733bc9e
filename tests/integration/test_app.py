from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from credbridge.config.settings import Settings
from credbridge.exceptions import ConfigError
from credbridge.providers.static import StaticTokenProvider
from credbridge.web.app import create_app


@pytest.mark.integration
class TestAppFactory:
    def test_builds_provider_from_settings(self, settings: Settings) -> None:
        app = create_app(settings)
        assert isinstance(app.state.bridge._provider, StaticTokenProvider)

    def test_static_provider_without_token_fails(self, tokens_dir) -> None:
        settings = Settings(
            _env_file=None, local_tokens_path=str(tokens_dir), token_provider="static"
        )
        with pytest.raises(ConfigError):
            create_app(settings)

    def test_azure_provider_gets_credential_options(self, tokens_dir) -> None:
        settings = Settings(
            _env_file=None,
            local_tokens_path=str(tokens_dir),
            token_provider="azure",
            azure_credential_options={"exclude_cli_credential": True},
        )
        with patch("credbridge.providers.azure.DefaultAzureCredential") as mock_cls:
            create_app(settings)
        mock_cls.assert_called_once_with(
            exclude_cli_credential=True, exclude_managed_identity_credential=True
        )

    @pytest.mark.asyncio
    async def test_health_check(self, client) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["file_challenge_auth"] is True
        assert data["pending_challenges"] == 0

    @pytest.mark.asyncio
    async def test_health_counts_pending_challenges(self, client) -> None:
        await client.get("/metadata/identity/oauth2/token", params={"resource": "tst"})
        resp = await client.get("/health")
        assert resp.json()["pending_challenges"] == 1

    @pytest.mark.asyncio
    async def test_uses_settings_token_end_to_end(self, settings: Settings) -> None:
        settings.use_file_challenge_auth = False
        app = create_app(settings)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/metadata/identity/oauth2/token", params={"resource": "tst"})
        assert resp.status_code == 200
        assert resp.json()["access_token"] == "settings-token"

    @pytest.mark.asyncio
    async def test_openapi_lists_token_route(self, client) -> None:
        resp = await client.get("/openapi.json")
        assert resp.status_code == 200
        assert "/metadata/identity/oauth2/token" in resp.json()["paths"]
