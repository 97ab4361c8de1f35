"""
Shared test fixtures for supply_info tests.

Provides reusable fixtures for:
- An empty MetricCache
- Mock UTXO RPC and explorer clients returning valid payloads
- A SupplyRecorder wired to those mocks
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from supply_info.metric_cache import MetricCache
from supply_info.services.recording_service import SupplyRecorder

VAULT_ADDRESS = "0x1111111111111111111111111111111111111111"

# utxo=100, nevm=500, vault=2 SYS  ->  total 598
UTXO_INFO = {"height": 1800000, "txouts": 12345, "total_amount": 100}
NEVM_SUPPLY = 500
VAULT_BALANCE = {"status": "1", "message": "OK", "result": "2000000000000000000"}


@pytest.fixture
def metric_cache():
    return MetricCache()


@pytest.fixture
def mock_rpc_client():
    """Mock Syscoin RPC client that returns a valid gettxoutsetinfo result."""
    client = MagicMock()
    client.get_txoutset_info = AsyncMock(return_value=dict(UTXO_INFO))
    return client


@pytest.fixture
def mock_explorer_client():
    """Mock NEVM explorer client that returns valid supply and balance responses."""
    client = MagicMock()
    client.get_coin_supply = AsyncMock(return_value=NEVM_SUPPLY)
    client.get_address_balance = AsyncMock(return_value=dict(VAULT_BALANCE))
    return client


@pytest.fixture
def recorder(metric_cache, mock_rpc_client, mock_explorer_client):
    return SupplyRecorder(
        metric_cache,
        mock_rpc_client,
        mock_explorer_client,
        vault_address=VAULT_ADDRESS,
    )
