"""Fixtures for client tests: mock server, token providers, record schemas."""

import pytest
from aiohttp.test_utils import TestServer
from mock_business_central import MockBusinessCentral, SalesOrder, StaticTokenProvider

from business_central.client import BusinessCentralClient
from business_central.config import ClientConfig

ENVIRONMENT = "Production"


@pytest.fixture
def sales_order_schema():
    return SalesOrder


@pytest.fixture
def token_provider():
    return StaticTokenProvider()


@pytest.fixture
async def bc_server(tenant_id, company_id):
    mock = MockBusinessCentral(tenant_id, ENVIRONMENT, company_id)
    server = TestServer(mock.app)
    await server.start_server()
    mock.base_url = str(server.make_url("/v2.0"))
    yield mock
    await server.close()


@pytest.fixture
def client_config(bc_server, tenant_id, company_id):
    return ClientConfig(
        tenant_id=tenant_id,
        environment=ENVIRONMENT,
        company_id=company_id,
        base_url=bc_server.base_url,
        timeout_seconds=5,
        user_agent="bc-odata-client-tests/1.0",
    )


@pytest.fixture
async def client(client_config, token_provider):
    async with BusinessCentralClient(client_config, "v2.0", token_provider) as bc_client:
        yield bc_client
