"""Fee calculator - charge computation and display formatting for fee lines"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Sequence, TypeVar

from proposal_gateway.domain.models import (
    ChargeKind,
    FeeCharge,
    FeeLine,
    FeeQuote,
    PercentageFixedCharge,
    ReserveHoldCharge,
)

CENTS = Decimal("0.01")

L = TypeVar("L", bound=FeeLine)


def _to_decimal(value: float) -> Decimal:
    # str() keeps 2.9 as 2.9 instead of its binary expansion
    return Decimal(str(value))


def _to_money(value: Decimal) -> float:
    return float(value.quantize(CENTS, rounding=ROUND_HALF_UP))


def enabled_lines(lines: Sequence[L]) -> List[L]:
    """Enabled fee lines in their original order"""
    return [line for line in lines if line.enabled]


def compute_charge(charge: FeeCharge, amount: float) -> Dict[str, float]:
    """
    Apply one charge to a transaction amount.

    - percentageFixed: charged = amount * pct / 100 + fixed_fee
    - reserveHold: nothing charged; amount * pct / 100 is held for `days`

    Returns:
        {"charged": ..., "held": ...} rounded to cents
    """
    if amount < 0:
        raise ValueError("Transaction amount must be non-negative")

    portion = _to_decimal(amount) * _to_decimal(charge.percentage_fee) / 100

    if charge.kind == ChargeKind.RESERVE_HOLD:
        return {"charged": 0.0, "held": _to_money(portion)}

    return {"charged": _to_money(portion + _to_decimal(charge.fixed_fee)), "held": 0.0}


def quote_fee(line: FeeLine, amount: float) -> FeeQuote:
    charge = line.charge
    result = compute_charge(charge, amount)
    return FeeQuote(
        label=line.label,
        kind=charge.kind,
        currency=charge.currency,
        charged=result["charged"],
        held=result["held"],
        hold_days=charge.days if isinstance(charge, ReserveHoldCharge) else 0,
    )


def quote_enabled_fees(lines: Sequence[FeeLine], amount: float) -> List[FeeQuote]:
    """Quote every enabled line against a single transaction amount"""
    return [quote_fee(line, amount) for line in enabled_lines(lines)]


def summarize_quotes(quotes: Sequence[FeeQuote]) -> Dict[str, Dict[str, float]]:
    """Total charged and held amounts per currency"""
    totals: Dict[str, Dict[str, Decimal]] = {}
    for quote in quotes:
        bucket = totals.setdefault(quote.currency, {"charged": Decimal(0), "held": Decimal(0)})
        bucket["charged"] += _to_decimal(quote.charged)
        bucket["held"] += _to_decimal(quote.held)

    return {
        currency: {key: _to_money(value) for key, value in bucket.items()}
        for currency, bucket in totals.items()
    }


def format_amount(value: float) -> str:
    """Shortest decimal form: 2.9 -> '2.9', 10.0 -> '10', 0 -> '0'"""
    text = format(_to_decimal(value).normalize(), "f")
    return "0" if text == "-0" else text


def format_rate(charge: FeeCharge) -> str:
    return f"{format_amount(charge.percentage_fee)}%"


def format_fixed_column(charge: FeeCharge) -> str:
    """Fixed Fee column: two-decimal amount, or the hold period for reserves"""
    if isinstance(charge, ReserveHoldCharge):
        return f"{charge.days} days"
    if isinstance(charge, PercentageFixedCharge):
        return str(_to_decimal(charge.fixed_fee).quantize(CENTS, rounding=ROUND_HALF_UP))
    raise TypeError(f"Unsupported fee charge: {type(charge).__name__}")
