"""Tests for AzureADProvider - Azure AD OAuth2 client credentials flow."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from core.oauth2.exceptions import InvalidConfigurationError, TokenAcquisitionError
from core.oauth2.providers.azure import AzureADProvider

SCOPE = "https://api.businesscentral.dynamics.com/.default"

# ---------------------------------------------------------------------------
# __init__
# ---------------------------------------------------------------------------


class TestAzureADProviderInit:
    @patch("core.oauth2.providers.azure.ClientSecretCredential")
    def test_creates_provider_with_valid_params(self, mock_csc):
        provider = AzureADProvider(
            provider_name="test_azure",
            client_id="cid",
            client_secret="cs",
            tenant_id="tid",
        )
        assert provider.provider_name == "test_azure"
        assert provider.client_id == "cid"
        assert provider.tenant_id == "tid"
        mock_csc.assert_called_once_with(tenant_id="tid", client_id="cid", client_secret="cs")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"client_id": "", "client_secret": "cs", "tenant_id": "tid"},
            {"client_id": "cid", "client_secret": "", "tenant_id": "tid"},
            {"client_id": "cid", "client_secret": "cs", "tenant_id": ""},
        ],
    )
    @patch("core.oauth2.providers.azure.ClientSecretCredential")
    def test_raises_on_missing_params(self, mock_csc, kwargs):
        with pytest.raises(InvalidConfigurationError, match="required"):
            AzureADProvider(provider_name="test", **kwargs)
        mock_csc.assert_not_called()


# ---------------------------------------------------------------------------
# acquire_token / refresh_token / close
# ---------------------------------------------------------------------------


@pytest.fixture
def credential():
    with patch("core.oauth2.providers.azure.ClientSecretCredential") as mock_csc:
        instance = mock_csc.return_value
        instance.get_token = AsyncMock()
        instance.close = AsyncMock()
        yield instance


@pytest.fixture
def provider(credential):
    return AzureADProvider(
        provider_name="business_central",
        client_id="cid",
        client_secret="cs",
        tenant_id="tid",
    )


class TestAcquireToken:

    @pytest.mark.asyncio
    async def test_returns_token_for_scope(self, provider, credential):
        expires_on = int(datetime(2030, 1, 1, tzinfo=UTC).timestamp())
        credential.get_token.return_value = SimpleNamespace(token="bc-token", expires_on=expires_on)

        token = await provider.acquire_token(SCOPE)

        credential.get_token.assert_awaited_once_with(SCOPE)
        assert token.access_token == "bc-token"
        assert token.token_type == "Bearer"
        assert token.scope == SCOPE
        assert token.expires_at == datetime(2030, 1, 1, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_wraps_credential_failure(self, provider, credential):
        credential.get_token.side_effect = RuntimeError("AADSTS700016: app not found")

        with pytest.raises(TokenAcquisitionError, match="AADSTS700016"):
            await provider.acquire_token(SCOPE)

    @pytest.mark.asyncio
    async def test_refresh_acquires_new_token_for_same_scope(self, provider, credential):
        credential.get_token.return_value = SimpleNamespace(token="t1", expires_on=2_000_000_000)
        first = await provider.acquire_token(SCOPE)

        credential.get_token.return_value = SimpleNamespace(token="t2", expires_on=2_000_000_000)
        second = await provider.refresh_token(first)

        assert second.access_token == "t2"
        assert credential.get_token.await_args_list[-1].args == (SCOPE,)

    @pytest.mark.asyncio
    async def test_close_closes_credential(self, provider, credential):
        await provider.close()
        credential.close.assert_awaited_once()
