"""
Application Constants

Unit scales, upstream markers, default endpoints and timeouts.
"""

# NEVM balances are reported in wei
UNIT_SCALE = 10**18

# Etherscan-style explorers report "1" for a successful call
EXPLORER_STATUS_OK = "1"

DEFAULT_NEVM_SUPPLY_URL = "https://explorer-v5.syscoin.org/api?module=stats&action=coinsupply"
DEFAULT_NEVM_EXPLORER_API_URL = "https://explorer.syscoin.org/api"

# Third-party explorers get a shorter budget than our own node
RPC_TIMEOUT_SECONDS = 10.0
EXPLORER_TIMEOUT_SECONDS = 8.0

# Truncate upstream bodies quoted in error messages
ERROR_BODY_PREVIEW_CHARS = 200

TOTAL_SUPPLY = "totalSupply"
CIRCULATING_SUPPLY = "circulatingSupply"
METRIC_KINDS = (TOTAL_SUPPLY, CIRCULATING_SUPPLY)
