"""
Upstream data sources

- Syscoin Core JSON-RPC (UTXO set aggregate)
- NEVM explorers (coin supply, vault balance)
"""

from supply_info.sources.explorer import NevmExplorerClient
from supply_info.sources.utxo_rpc import SyscoinRpcClient

__all__ = ["NevmExplorerClient", "SyscoinRpcClient"]
