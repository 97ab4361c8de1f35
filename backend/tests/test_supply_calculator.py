"""
Tests for backend/supply_info/services/supply_calculator.py

Covers input validation for each upstream payload, wei conversion,
and the final NaN / negative checks.
"""

import math

import pytest

from supply_info.exceptions import CalculationError, ErrorKind, ValidationError
from supply_info.services.supply_calculator import (
    calculate_total_supply,
    convert_vault_balance,
    extract_utxo_amount,
    validate_nevm_supply,
)

UTXO_INFO = {"total_amount": 100}
BALANCE = {"status": "1", "result": "2000000000000000000"}


class TestCalculateTotalSupply:
    """Tests for calculate_total_supply()"""

    def test_combines_components(self):
        """Happy path: 500 - 2 + 100 = 598."""
        assert calculate_total_supply(UTXO_INFO, 500, BALANCE) == pytest.approx(598.0)

    def test_formula_with_fractional_inputs(self):
        """Happy path: result equals nevm - balance/1e18 + utxo."""
        utxo = {"total_amount": 1234.56789}
        balance = {"status": "1", "result": "987654321000000000000"}
        expected = 7000.25 - 987.654321 + 1234.56789
        assert calculate_total_supply(utxo, 7000.25, balance) == pytest.approx(expected)

    def test_is_deterministic(self):
        """Edge case: same inputs give the same output and inputs are not mutated."""
        utxo = dict(UTXO_INFO)
        balance = dict(BALANCE)
        first = calculate_total_supply(utxo, 500, balance)
        second = calculate_total_supply(utxo, 500, balance)
        assert first == second
        assert utxo == UTXO_INFO
        assert balance == BALANCE

    def test_zero_balance(self):
        """Edge case: empty vault leaves nevm + utxo."""
        assert calculate_total_supply(UTXO_INFO, 500, {"status": "1", "result": "0"}) == 600

    def test_negative_result_raises(self):
        """Failure: vault balance larger than everything else is rejected."""
        balance = {"status": "1", "result": "1000000000000000000000"}  # 1000 SYS
        with pytest.raises(CalculationError) as exc_info:
            calculate_total_supply(UTXO_INFO, 500, balance)
        assert exc_info.value.kind == ErrorKind.CALCULATION
        assert "-400" in exc_info.value.message

    def test_nan_result_raises(self):
        """Failure: NaN coming from the UTXO side is rejected."""
        with pytest.raises(CalculationError):
            calculate_total_supply({"total_amount": math.nan}, 500, BALANCE)

    def test_bad_utxo_raises_validation_error(self):
        """Failure: missing total_amount names the UTXO input."""
        with pytest.raises(ValidationError) as exc_info:
            calculate_total_supply({"height": 1}, 500, BALANCE)
        assert exc_info.value.source == "utxo"


class TestExtractUtxoAmount:
    """Tests for extract_utxo_amount()"""

    def test_integer_amount(self):
        """Happy path: int amounts become floats."""
        assert extract_utxo_amount({"total_amount": 42}) == 42.0

    @pytest.mark.parametrize("payload", [None, [], {}, {"total_amount": "100"}, {"total_amount": True}])
    def test_rejects_malformed(self, payload):
        """Failure: anything but an object with a numeric total_amount."""
        with pytest.raises(ValidationError):
            extract_utxo_amount(payload)


class TestValidateNevmSupply:
    """Tests for validate_nevm_supply()"""

    def test_zero_is_valid(self):
        """Edge case: zero supply is allowed."""
        assert validate_nevm_supply(0) == 0.0

    @pytest.mark.parametrize("value", [-1, "500", None, False, {"result": 500}])
    def test_rejects_invalid(self, value):
        """Failure: negative or non-numeric supply names the input and value."""
        with pytest.raises(ValidationError) as exc_info:
            validate_nevm_supply(value)
        assert exc_info.value.source == "nevm_supply"
        assert repr(value) in exc_info.value.message


class TestConvertVaultBalance:
    """Tests for convert_vault_balance()"""

    def test_converts_wei(self):
        """Happy path: 2e18 wei is 2 SYS."""
        assert convert_vault_balance(BALANCE) == 2.0

    def test_status_not_ok(self):
        """Failure: explorer status other than "1"."""
        with pytest.raises(ValidationError) as exc_info:
            convert_vault_balance({"status": "0", "message": "NOTOK", "result": "Error! Invalid address format"})
        assert exc_info.value.source == "vault_balance"
        assert "NOTOK" in exc_info.value.message

    def test_result_not_string(self):
        """Failure: numeric result is rejected, only strings are accepted."""
        with pytest.raises(ValidationError):
            convert_vault_balance({"status": "1", "result": 2000000000000000000})

    @pytest.mark.parametrize("raw", ["abc", "", "nan"])
    def test_unparseable_result(self, raw):
        """Failure: result that does not parse to a number."""
        with pytest.raises(ValidationError) as exc_info:
            convert_vault_balance({"status": "1", "result": raw})
        assert "Could not parse" in exc_info.value.message

    def test_not_a_dict(self):
        """Failure: a bare string body."""
        with pytest.raises(ValidationError):
            convert_vault_balance("2000000000000000000")
