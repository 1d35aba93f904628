"""Unit tests for fee calculation and formatting"""

import pytest
from proposal_gateway.domain.catalog import default_additional_fees, default_card_fees
from proposal_gateway.domain.fees import (
    compute_charge,
    enabled_lines,
    format_amount,
    format_fixed_column,
    format_rate,
    quote_enabled_fees,
    summarize_quotes,
)
from proposal_gateway.domain.models import (
    AdditionalFee,
    CardFee,
    ChargeKind,
    PercentageFixedCharge,
    ReserveHoldCharge,
)


def test_compute_charge_percentage_plus_fixed():
    """2.9% of 100.00 plus 0.30"""
    result = compute_charge(PercentageFixedCharge(2.9, 0.3, "USD"), 100)

    assert result == {"charged": 3.2, "held": 0.0}


def test_compute_charge_rounds_half_up_to_cents():
    # 0.29725 + 0.30 = 0.59725 -> 0.60
    assert compute_charge(PercentageFixedCharge(2.9, 0.3, "USD"), 10.25)["charged"] == 0.6
    # 0.025 -> 0.03, not banker's 0.02
    assert compute_charge(PercentageFixedCharge(2.5, 0, "USD"), 1)["charged"] == 0.03


def test_compute_charge_reserve_holds_instead_of_charging():
    result = compute_charge(ReserveHoldCharge(10, 180, "USD"), 250)

    assert result == {"charged": 0.0, "held": 25.0}


def test_compute_charge_rejects_negative_amount():
    with pytest.raises(ValueError):
        compute_charge(PercentageFixedCharge(1, 0, "USD"), -1)


def test_enabled_lines_preserves_order_and_skips_disabled():
    fees = [
        CardFee("VISA", True, 2.9, 0.3, "USD"),
        CardFee("Discover", False, 0, 0, "USD"),
        CardFee("Amex", True, 3.5, 0, "USD"),
    ]

    assert [fee.card_type for fee in enabled_lines(fees)] == ["VISA", "Amex"]


def test_quote_enabled_fees_ignores_disabled_lines():
    lines = [
        CardFee("VISA", True, 2.9, 0.3, "USD"),
        CardFee("MasterCard", False, 50, 50, "USD"),
        AdditionalFee("Reserve", True, ReserveHoldCharge(10, 180, "USD")),
    ]

    quotes = quote_enabled_fees(lines, 100)

    assert [q.label for q in quotes] == ["VISA", "Reserve"]
    assert quotes[1].kind == ChargeKind.RESERVE_HOLD
    assert quotes[1].hold_days == 180
    assert summarize_quotes(quotes) == {"USD": {"charged": 3.2, "held": 10.0}}


def test_summarize_quotes_groups_by_currency():
    lines = [
        CardFee("VISA", True, 1, 0, "USD"),
        CardFee("JCB", True, 2, 1, "EUR"),
    ]

    totals = summarize_quotes(quote_enabled_fees(lines, 100))

    assert totals == {"USD": {"charged": 1.0, "held": 0.0}, "EUR": {"charged": 3.0, "held": 0.0}}


def test_format_rate_uses_shortest_decimal():
    assert format_rate(PercentageFixedCharge(2.9, 0.3, "USD")) == "2.9%"
    assert format_rate(ReserveHoldCharge(10, 180, "USD")) == "10%"
    assert format_rate(PercentageFixedCharge(0, 0, "USD")) == "0%"


def test_format_fixed_column_by_charge_kind():
    assert format_fixed_column(PercentageFixedCharge(2.9, 0.3, "USD")) == "0.30"
    assert format_fixed_column(PercentageFixedCharge(0, 0, "USD")) == "0.00"
    assert format_fixed_column(PercentageFixedCharge(0, 55, "USD")) == "55.00"
    assert format_fixed_column(ReserveHoldCharge(10, 180, "USD")) == "180 days"


def test_format_amount():
    assert format_amount(0) == "0"
    assert format_amount(100.0) == "100"
    assert format_amount(0.55) == "0.55"


def test_default_catalogs():
    cards = default_card_fees()
    enabled = [fee.card_type for fee in cards if fee.enabled]

    assert enabled == ["VISA", "MasterCard"]
    assert all(fee.percentage_fee == 2.9 and fee.fixed_fee == 0.3 for fee in cards if fee.enabled)
    assert all(fee.percentage_fee == 0 and fee.fixed_fee == 0 for fee in cards if not fee.enabled)

    additional = default_additional_fees()
    assert not any(fee.enabled for fee in additional)
    reserve = additional[-1]
    assert reserve.fee_type == "Reserve"
    assert reserve.charge == ReserveHoldCharge(10, 180, "USD")


def test_default_catalogs_return_fresh_lists():
    first = default_card_fees()
    first.pop()

    assert len(default_card_fees()) == 8


def test_format_fixed_column_rounds_entered_value_half_up():
    # 1.005 is rounded as typed, not from its binary expansion
    assert format_fixed_column(PercentageFixedCharge(0, 1.005, "USD")) == "1.01"
    assert format_fixed_column(PercentageFixedCharge(0, 0.125, "USD")) == "0.13"
