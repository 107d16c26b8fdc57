"""Pytest fixtures for the Linear MCP test suite."""

import pytest

from linear_mcp import server
from linear_mcp.registry.builder import build_registry
from linear_mcp.registry.store import RegistryStore

from tests.test_utils import create_multi_team_data


# ============================================================================
# REGISTRY FIXTURES
# ============================================================================


@pytest.fixture
def multi_team_data():
    """Fresh two-team workspace snapshot (SQT default, SQM prefixed)."""
    return create_multi_team_data()


@pytest.fixture
def multi_team_registry(multi_team_data):
    """Registry built from the two-team snapshot."""
    return build_registry(multi_team_data)


@pytest.fixture
def registry_store():
    """
    Independent RegistryStore per test.

    Yields:
        Empty RegistryStore

    Cleanup:
        Clears all sessions
    """
    store = RegistryStore()
    yield store
    store.clear_all_registries()


# ============================================================================
# SERVER FIXTURES
# ============================================================================


@pytest.fixture
def clean_server():
    """
    Reset the server's registry store and workspace fetcher around a test.

    Yields:
        The server module
    """
    server.registry_store.clear_all_registries()
    server.set_workspace_fetcher(None)

    yield server

    server.registry_store.clear_all_registries()
    server.set_workspace_fetcher(None)
