"""
Total supply calculation

Combines the three upstream readings into one figure:

    total = nevm_supply - vault_balance / 10^18 + utxo_total_amount

The vault holds NEVM coins that back the UTXO side, so they would otherwise
be counted twice. Every input is validated before use.
"""

import logging
import math
from typing import Any

from supply_info.constants import EXPLORER_STATUS_OK, UNIT_SCALE
from supply_info.exceptions import CalculationError, ValidationError

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid amount
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def extract_utxo_amount(utxo_info: Any) -> float:
    """Pull total_amount out of a gettxoutsetinfo result."""
    if not isinstance(utxo_info, dict) or not _is_number(utxo_info.get("total_amount")):
        raise ValidationError(
            f"Invalid data structure in gettxoutsetinfo result: {utxo_info!r}",
            source="utxo",
        )
    return float(utxo_info["total_amount"])


def validate_nevm_supply(nevm_supply: Any) -> float:
    if not _is_number(nevm_supply) or nevm_supply < 0:
        raise ValidationError(f"Invalid nevmSupply (explorer-v5): {nevm_supply!r}", source="nevm_supply")
    return float(nevm_supply)


def convert_vault_balance(balance_response: Any) -> float:
    """Validate an explorer balance response and convert wei to SYS."""
    if (
        not isinstance(balance_response, dict)
        or balance_response.get("status") != EXPLORER_STATUS_OK
        or not isinstance(balance_response.get("result"), str)
    ):
        raise ValidationError(
            f"Invalid vault balance response structure or status: {balance_response!r}",
            source="vault_balance",
        )

    raw = balance_response["result"]
    try:
        balance = float(raw) / UNIT_SCALE
    except ValueError:
        balance = math.nan
    if math.isnan(balance):
        raise ValidationError(f"Could not parse vault balance: {raw!r}", source="vault_balance")
    return balance


def calculate_total_supply(utxo_info: Any, nevm_supply: Any, balance_response: Any) -> float:
    """
    Combine raw upstream payloads into the total supply.

    Args:
        utxo_info: gettxoutsetinfo result object
        nevm_supply: coin supply reported by the NEVM explorer
        balance_response: explorer balance response for the vault address

    Raises:
        ValidationError: an input has the wrong shape or type
        CalculationError: the result is NaN or negative
    """
    utxo_supply = extract_utxo_amount(utxo_info)
    nevm = validate_nevm_supply(nevm_supply)
    vault_balance = convert_vault_balance(balance_response)

    logger.debug(f"Supply components: utxo={utxo_supply}, nevm={nevm}, vault={vault_balance}")

    total = nevm - vault_balance + utxo_supply
    if math.isnan(total) or total < 0:
        raise CalculationError(f"Calculated total supply is invalid: {total}")

    return total
