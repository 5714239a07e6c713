"""Tests for ClientConfig / AzureAuthConfig validation."""

import platform

import pytest

from business_central.config import (
    BC_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    AzureAuthConfig,
    ClientConfig,
    default_user_agent,
    is_empty,
    is_valid_guid,
    is_valid_url,
)


class TestValidators:

    @pytest.mark.parametrize(
        "value",
        ["11111111-2222-3333-4444-555555555555", "AAAAAAAA-BBBB-CCCC-DDDD-EEEEEEEEEEEE"],
    )
    def test_valid_guid(self, value):
        assert is_valid_guid(value) is True

    @pytest.mark.parametrize(
        "value",
        ["", "not-a-guid", "11111111-2222-3333-4444-55555555555", "{11111111-2222-3333-4444-555555555555}", None, 1],
    )
    def test_invalid_guid(self, value):
        assert is_valid_guid(value) is False

    @pytest.mark.parametrize("value", ["https://api.example.com/v2.0", "http://localhost:8080"])
    def test_valid_url(self, value):
        assert is_valid_url(value) is True

    @pytest.mark.parametrize("value", ["", "ftp://example.com", "example.com", "https://", None])
    def test_invalid_url(self, value):
        assert is_valid_url(value) is False

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_is_empty(self, value):
        assert is_empty(value) is True

    @pytest.mark.parametrize("value", ["x", [0], 0, False])
    def test_is_not_empty(self, value):
        assert is_empty(value) is False


class TestClientConfig:

    def test_defaults(self, tenant_id, company_id):
        config = ClientConfig(tenant_id=tenant_id, environment="Production", company_id=company_id)

        assert config.base_url == BC_BASE_URL
        assert config.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
        assert config.user_agent == default_user_agent()

    def test_overrides(self, tenant_id, company_id):
        config = ClientConfig(
            tenant_id=tenant_id,
            environment="Sandbox",
            company_id=company_id,
            base_url="http://localhost:8080/v2.0/",
            timeout_seconds=5,
            user_agent="my-app/1.0",
        )

        assert config.base_url == "http://localhost:8080/v2.0"
        assert config.timeout_seconds == 5.0
        assert config.user_agent == "my-app/1.0"

    @pytest.mark.parametrize(
        "overrides,match",
        [
            ({"company_id": "nope"}, "company_id"),
            ({"tenant_id": ""}, "tenant_id"),
            ({"environment": "  "}, "environment"),
            ({"base_url": "not a url"}, "base_url"),
            ({"timeout_seconds": 0}, "timeout_seconds"),
            ({"timeout_seconds": -1}, "timeout_seconds"),
        ],
    )
    def test_invalid_values_raise(self, tenant_id, company_id, overrides, match):
        kwargs = {"tenant_id": tenant_id, "environment": "Production", "company_id": company_id}
        kwargs.update(overrides)
        with pytest.raises(ValueError, match=match):
            ClientConfig(**kwargs)


class TestDefaultUserAgent:

    def test_product_format(self):
        agent = default_user_agent()
        assert agent.startswith("bc-odata-client/")
        assert f"Python {platform.python_version()}" in agent
        assert agent.endswith(")")


class TestAzureAuthConfig:

    def test_valid(self, client_id):
        config = AzureAuthConfig(client_id=client_id, client_secret="s3cret")
        assert config.tenant_id is None

    def test_invalid_client_id(self):
        with pytest.raises(ValueError, match="client_id"):
            AzureAuthConfig(client_id="app", client_secret="s3cret")

    def test_missing_secret(self, client_id):
        with pytest.raises(ValueError, match="client_secret"):
            AzureAuthConfig(client_id=client_id, client_secret="")

    def test_invalid_tenant_override(self, client_id):
        with pytest.raises(ValueError, match="tenant_id"):
            AzureAuthConfig(client_id=client_id, client_secret="s", tenant_id="contoso")

    def test_repr_hides_secret(self, client_id):
        assert "s3cret" not in repr(AzureAuthConfig(client_id=client_id, client_secret="s3cret"))
