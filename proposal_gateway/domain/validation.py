"""Structural validation of proposal data and custom fee management"""

from typing import Dict, List, Sequence

from proposal_gateway.domain.catalog import CURRENCIES, SETTLEMENT_CURRENCIES, SETTLEMENT_PERIODS
from proposal_gateway.domain.exceptions import DuplicateFeeError, ProposalValidationError
from proposal_gateway.domain.models import (
    AdditionalFee,
    PercentageFixedCharge,
    ProposalData,
    ReserveHoldCharge,
)


def _normalize_name(name: str) -> str:
    return name.strip().casefold()


def _check_unique(names: Sequence[str], field: str, issues: List[Dict[str, str]]) -> None:
    seen = set()
    for index, name in enumerate(names):
        key = _normalize_name(name)
        if not key:
            issues.append({"field": f"{field}[{index}]", "message": "name must not be empty"})
        elif key in seen:
            issues.append({"field": f"{field}[{index}]", "message": f"duplicate '{name.strip()}'"})
        seen.add(key)


def _check_non_negative(value: float, field: str, issues: List[Dict[str, str]]) -> None:
    if value < 0:
        issues.append({"field": field, "message": "must be greater than or equal to 0"})


def _check_choice(value: str, choices: Sequence[str], field: str, issues: List[Dict[str, str]]) -> None:
    if value not in choices:
        issues.append({"field": field, "message": f"'{value}' is not one of {', '.join(choices)}"})


def collect_issues(data: ProposalData) -> List[Dict[str, str]]:
    """Return every validation problem found in `data` (empty when valid)"""
    issues: List[Dict[str, str]] = []

    if not data.company.name.strip():
        issues.append({"field": "company.name", "message": "company name is required"})

    if data.valid_until < data.proposal_date:
        issues.append({"field": "valid_until", "message": "must not be before proposal_date"})

    _check_unique([fee.card_type for fee in data.card_fees], "card_fees", issues)
    for index, fee in enumerate(data.card_fees):
        prefix = f"card_fees[{index}]"
        _check_non_negative(fee.percentage_fee, f"{prefix}.percentage_fee", issues)
        _check_non_negative(fee.fixed_fee, f"{prefix}.fixed_fee", issues)
        _check_choice(fee.currency, CURRENCIES, f"{prefix}.currency", issues)

    _check_unique([fee.fee_type for fee in data.additional_fees], "additional_fees", issues)
    for index, fee in enumerate(data.additional_fees):
        prefix = f"additional_fees[{index}].charge"
        _check_non_negative(fee.charge.percentage_fee, f"{prefix}.percentage_fee", issues)
        if isinstance(fee.charge, ReserveHoldCharge):
            _check_non_negative(fee.charge.days, f"{prefix}.days", issues)
        else:
            _check_non_negative(fee.charge.fixed_fee, f"{prefix}.fixed_fee", issues)
        _check_choice(fee.charge.currency, CURRENCIES, f"{prefix}.currency", issues)

    terms = data.settlement_terms
    _check_choice(terms.settlement_period, SETTLEMENT_PERIODS, "settlement_terms.settlement_period", issues)
    _check_choice(
        terms.settlement_currency, SETTLEMENT_CURRENCIES, "settlement_terms.settlement_currency", issues
    )
    _check_non_negative(terms.settlement_fee, "settlement_terms.settlement_fee", issues)
    _check_non_negative(terms.minimum_settlement, "settlement_terms.minimum_settlement", issues)

    return issues


def validate_proposal(data: ProposalData) -> ProposalData:
    """
    Raise ProposalValidationError listing every problem, else return `data`.

    Checked: required company name, date window, unique card/fee names,
    non-negative amounts, and currencies/periods from the offered value sets.
    """
    issues = collect_issues(data)
    if issues:
        raise ProposalValidationError(issues)
    return data


def add_custom_fee(
    fees: Sequence[AdditionalFee],
    name: str,
    percentage_fee: float = 0,
    fixed_fee: float = 0,
    currency: str = "USD",
) -> List[AdditionalFee]:
    """Return a new list with an enabled custom fee appended"""
    fee_type = name.strip()
    if not fee_type:
        raise ProposalValidationError([{"field": "name", "message": "custom fee name is required"}])

    if any(_normalize_name(fee.fee_type) == _normalize_name(fee_type) for fee in fees):
        raise DuplicateFeeError("name", fee_type)

    custom = AdditionalFee(
        fee_type=fee_type,
        enabled=True,
        charge=PercentageFixedCharge(percentage_fee, fixed_fee, currency),
        is_custom=True,
    )
    return list(fees) + [custom]


def remove_custom_fee(fees: Sequence[AdditionalFee], name: str) -> List[AdditionalFee]:
    """Return a new list without the custom fee `name`; built-in fees stay"""
    key = _normalize_name(name)
    match = next((fee for fee in fees if _normalize_name(fee.fee_type) == key), None)

    if match is None:
        raise ProposalValidationError([{"field": "name", "message": f"'{name}' not found"}])
    if not match.is_custom:
        raise ProposalValidationError([{"field": "name", "message": f"'{match.fee_type}' is a built-in fee"}])

    return [fee for fee in fees if fee is not match]
