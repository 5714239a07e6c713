"""
pytest configuration for the Business Central client tests.

Adds src directory to Python path for imports and provides shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from core.logging.context import clear_log_context  # noqa: E402

TENANT_ID = "11111111-2222-3333-4444-555555555555"
COMPANY_ID = "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"
CLIENT_ID = "99999999-8888-7777-6666-555555555555"


@pytest.fixture
def tenant_id():
    return TENANT_ID


@pytest.fixture
def company_id():
    return COMPANY_ID


@pytest.fixture
def client_id():
    return CLIENT_ID


@pytest.fixture(autouse=True)
def clean_log_context():
    clear_log_context()
    yield
    clear_log_context()
