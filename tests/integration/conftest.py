"""
Integration test configuration.

These tests call the live game API. They only read state; nothing here
starts runs, submits moves or claims.
Run with: pytest -m integration
Skip with: pytest -m "not integration"
"""

import os

import pytest

from teraverse.clients import create_gigaverse_client


@pytest.fixture(scope="session")
def live_client():
    """
    Session-scoped HTTP client.

    Skips if no bearer token is available.
    """
    token = os.environ.get("TERAVERSE_TOKEN")
    if not token:
        pytest.skip("TERAVERSE_TOKEN not set")

    base_url = os.environ.get("TERAVERSE_BASE_URL", "https://gigaverse.io")
    return create_gigaverse_client(bearer_token=token, base_url=base_url)


@pytest.fixture(scope="session")
def live_address():
    address = os.environ.get("TERAVERSE_ADDRESS")
    if not address:
        pytest.skip("TERAVERSE_ADDRESS not set")
    return address
