"""Tests for BalanceReader and balance normalization."""

import pytest
from decimal import Decimal

from agentcheckout.balance_reader import BalanceReader, matches_token
from agentcheckout.errors import RemoteCallError
from agentcheckout.models import BalanceRecord, format_balance

WALLET = "0xagentwallet"

BALANCES = f"/api/v1-alpha2/wallets/{WALLET}/balances"


@pytest.fixture
def reader(fake_http):
    return BalanceReader(fake_http)


class TestGetBalance:
    """Tests for BalanceReader.get_balance."""

    def test_scales_by_decimals(self, reader, fake_http):
        fake_http.add("GET", BALANCES, [
            {"token": "usdc", "decimals": 4, "balances": {"base-sepolia": "150000"}},
        ])
        balance = reader.get_balance(WALLET, "usdc", "base-sepolia")
        assert balance == Decimal("15.0000")

    def test_decimals_default_to_two(self, reader, fake_http):
        fake_http.add("GET", BALANCES, [
            {"token": "credit", "balances": {"ethereum-sepolia": "1234"}},
        ])
        assert reader.get_balance(WALLET, "credit", "ethereum-sepolia") == Decimal("12.34")

    def test_zero_decimals_respected(self, reader, fake_http):
        fake_http.add("GET", BALANCES, [
            {"token": "usdc", "decimals": 0, "balances": {"base-sepolia": "7"}},
        ])
        assert reader.get_balance(WALLET, "usdc", "base-sepolia") == Decimal("7")

    def test_requests_token_lowercased(self, reader, fake_http):
        fake_http.add("GET", BALANCES, [])
        reader.get_balance(WALLET, "USDC", "base-sepolia")
        assert fake_http.calls[0]["params"] == {"tokens": "usdc"}

    def test_token_match_is_case_insensitive(self, reader, fake_http):
        fake_http.add("GET", BALANCES, [
            {"token": "ETH", "decimals": 18, "balances": {"base-sepolia": "1"}},
            {"token": "USDC", "decimals": 6, "balances": {"base-sepolia": "2500000"}},
        ])
        assert reader.get_balance(WALLET, "usdc", "base-sepolia") == Decimal("2.5")

    @pytest.mark.parametrize("payload", [
        {"error": "not an array"},
        [],
        "garbage",
        [{"token": "eth", "balances": {"base-sepolia": "1"}}],
        [{"no_token": True}],
        [{"token": "usdc", "balances": {"ethereum-sepolia": "100"}}],
        [{"token": "usdc", "balances": {"base-sepolia": "not-a-number"}}],
        [{"token": "usdc", "decimals": -1, "balances": {"base-sepolia": "100"}}],
    ])
    def test_unusable_payload_is_not_found(self, reader, fake_http, payload):
        """Malformed payloads read as 'not found', never as an exception."""
        fake_http.add("GET", BALANCES, payload)
        assert reader.get_balance(WALLET, "usdc", "base-sepolia") is None

    def test_remote_failure_propagates(self, reader, fake_http):
        fake_http.add("GET", BALANCES, RemoteCallError("HTTP error! status: 500, message: boom", status_code=500))
        with pytest.raises(RemoteCallError):
            reader.get_balance(WALLET, "usdc", "base-sepolia")


class TestTokenMatching:
    """Credits match by keyword, other tokens by exact name."""

    def test_credit_keyword_match(self):
        assert matches_token("credit", "credit") is True
        assert matches_token("CREDITS", "credit") is True
        assert matches_token("usdc", "credit") is False

    def test_other_tokens_exact_match(self):
        assert matches_token("USDC", "usdc") is True
        assert matches_token("usdc.e", "usdc") is False

    def test_credit_record_found_by_keyword(self, reader, fake_http):
        fake_http.add("GET", BALANCES, [
            {"token": "Credits", "balances": {"base-sepolia": "500"}},
        ])
        assert reader.get_balance(WALLET, "credit", "base-sepolia") == Decimal("5.00")


class TestBalanceRecord:
    """Tests for BalanceRecord."""

    def test_effective_decimals(self):
        assert BalanceRecord(token="usdc").effective_decimals == 2
        assert BalanceRecord(token="usdc", decimals=6).effective_decimals == 6

    def test_from_payload_rejects_non_dicts(self):
        assert BalanceRecord.from_payload("usdc") is None
        assert BalanceRecord.from_payload({"token": 5}) is None

    def test_numeric_raw_amounts_accepted(self):
        record = BalanceRecord.from_payload({"token": "usdc", "decimals": 2, "balances": {"base-sepolia": 250}})
        assert record.amount_on("base-sepolia") == Decimal("2.50")


class TestFormatBalance:
    """Display never shows fewer than 2 fraction digits."""

    def test_trailing_zeros_trimmed_to_two(self):
        assert format_balance(Decimal("15.0000"), 4) == "15.00"

    def test_rounds_to_decimals(self):
        assert format_balance(Decimal("0.123456"), 4) == "0.1235"

    def test_keeps_significant_digits(self):
        assert format_balance(Decimal("1234.5678"), 6) == "1,234.5678"

    def test_low_decimals_still_two_places(self):
        assert format_balance(Decimal("7"), 0) == "7.00"

    def test_amount_beyond_default_precision(self):
        assert format_balance(Decimal("1E+28"), 2) == "10" + ",000" * 9 + ".00"

    def test_long_raw_amount_keeps_every_digit(self):
        record = BalanceRecord(token="usdc", decimals=2, balances={"base-sepolia": "1234567890123456789012345678901"})
        assert record.amount_on("base-sepolia") == Decimal("12345678901234567890123456789.01")
