"""Conversion between domain records and JSON-ready dictionaries.

Stored proposals use the snake_case shape produced by `proposal_to_dict`.
`proposal_from_dict` also reads the flat camelCase shape exported by the
earlier browser-only tool (``companyName``, ``feeType == "Reserve"`` with
``days``...) so old exports can be imported and rendered.
"""

from datetime import date
from typing import Any, Dict, Optional

from proposal_gateway.domain.catalog import RESERVE_FEE_TYPE
from proposal_gateway.domain.models import (
    AdditionalFee,
    CardFee,
    ChargeKind,
    ClientInfo,
    CompanyInfo,
    FeeCharge,
    PercentageFixedCharge,
    ProposalData,
    ReserveHoldCharge,
    SettlementTerms,
)
from proposal_gateway.utils.date_utils import parse_iso_date


def _pick(data: Dict[str, Any], snake: str, camel: Optional[str] = None, default: Any = None) -> Any:
    if snake in data:
        return data[snake]
    if camel and camel in data:
        return data[camel]
    return default


def _as_date(value: Any) -> date:
    return value if isinstance(value, date) else parse_iso_date(str(value))


def charge_to_dict(charge: FeeCharge) -> Dict[str, Any]:
    if isinstance(charge, ReserveHoldCharge):
        return {
            "kind": charge.kind.value,
            "percentage_fee": charge.percentage_fee,
            "days": charge.days,
            "currency": charge.currency,
        }
    return {
        "kind": charge.kind.value,
        "percentage_fee": charge.percentage_fee,
        "fixed_fee": charge.fixed_fee,
        "currency": charge.currency,
    }


def charge_from_dict(data: Dict[str, Any]) -> FeeCharge:
    kind = ChargeKind(data["kind"])
    if kind == ChargeKind.RESERVE_HOLD:
        return ReserveHoldCharge(
            percentage_fee=data["percentage_fee"],
            days=int(data.get("days") or 0),
            currency=data["currency"],
        )
    return PercentageFixedCharge(
        percentage_fee=data["percentage_fee"],
        fixed_fee=data["fixed_fee"],
        currency=data["currency"],
    )


def card_fee_to_dict(fee: CardFee) -> Dict[str, Any]:
    return {
        "card_type": fee.card_type,
        "enabled": fee.enabled,
        "percentage_fee": fee.percentage_fee,
        "fixed_fee": fee.fixed_fee,
        "currency": fee.currency,
    }


def card_fee_from_dict(data: Dict[str, Any]) -> CardFee:
    return CardFee(
        card_type=_pick(data, "card_type", "cardType"),
        enabled=bool(data["enabled"]),
        percentage_fee=_pick(data, "percentage_fee", "percentageFee", 0),
        fixed_fee=_pick(data, "fixed_fee", "fixedFee", 0),
        currency=data["currency"],
    )


def additional_fee_to_dict(fee: AdditionalFee) -> Dict[str, Any]:
    return {
        "fee_type": fee.fee_type,
        "enabled": fee.enabled,
        "is_custom": fee.is_custom,
        "charge": charge_to_dict(fee.charge),
    }


def additional_fee_from_dict(data: Dict[str, Any]) -> AdditionalFee:
    fee_type = _pick(data, "fee_type", "feeType")

    if "charge" in data:
        charge = charge_from_dict(data["charge"])
    elif fee_type == RESERVE_FEE_TYPE:
        # Legacy records overloaded the Reserve row with a day count
        charge = ReserveHoldCharge(
            percentage_fee=_pick(data, "percentage_fee", "percentageFee", 0),
            days=int(data.get("days") or 0),
            currency=data["currency"],
        )
    else:
        charge = PercentageFixedCharge(
            percentage_fee=_pick(data, "percentage_fee", "percentageFee", 0),
            fixed_fee=_pick(data, "fixed_fee", "fixedFee", 0),
            currency=data["currency"],
        )

    return AdditionalFee(
        fee_type=fee_type,
        enabled=bool(data["enabled"]),
        charge=charge,
        is_custom=bool(_pick(data, "is_custom", "isCustom", False)),
    )


def settlement_terms_to_dict(terms: SettlementTerms) -> Dict[str, Any]:
    return {
        "settlement_period": terms.settlement_period,
        "settlement_fee": terms.settlement_fee,
        "settlement_currency": terms.settlement_currency,
        "minimum_settlement": terms.minimum_settlement,
    }


def settlement_terms_from_dict(data: Dict[str, Any]) -> SettlementTerms:
    return SettlementTerms(
        settlement_period=_pick(data, "settlement_period", "settlementPeriod"),
        settlement_fee=_pick(data, "settlement_fee", "settlementFee", 0),
        settlement_currency=_pick(data, "settlement_currency", "settlementCurrency"),
        minimum_settlement=_pick(data, "minimum_settlement", "minimumSettlement", 0),
    )


def proposal_to_dict(data: ProposalData) -> Dict[str, Any]:
    return {
        "company": {
            "name": data.company.name,
            "address": data.company.address,
            "phone": data.company.phone,
            "email": data.company.email,
            "logo": data.company.logo,
        },
        "client": {
            "name": data.client.name,
            "company": data.client.company,
            "address": data.client.address,
            "email": data.client.email,
        },
        "proposal_date": data.proposal_date.isoformat(),
        "valid_until": data.valid_until.isoformat(),
        "card_fees": [card_fee_to_dict(fee) for fee in data.card_fees],
        "additional_fees": [additional_fee_to_dict(fee) for fee in data.additional_fees],
        "settlement_terms": settlement_terms_to_dict(data.settlement_terms),
    }


def proposal_from_dict(data: Dict[str, Any]) -> ProposalData:
    """
    Build ProposalData from either the nested snake_case shape or the legacy
    flat camelCase shape.

    Raises:
        KeyError, ValueError, TypeError: On missing or malformed fields
    """
    if "company" in data:
        company = CompanyInfo(**data["company"])
        client = ClientInfo(**data.get("client", {}))
    else:
        company = CompanyInfo(
            name=data["companyName"],
            address=data.get("companyAddress", ""),
            phone=data.get("companyPhone", ""),
            email=data.get("companyEmail", ""),
            logo=data.get("companyLogo") or None,
        )
        client = ClientInfo(
            name=data.get("clientName", ""),
            company=data.get("clientCompany", ""),
            address=data.get("clientAddress", ""),
            email=data.get("clientEmail", ""),
        )

    return ProposalData(
        company=company,
        client=client,
        proposal_date=_as_date(_pick(data, "proposal_date", "proposalDate")),
        valid_until=_as_date(_pick(data, "valid_until", "validUntil")),
        card_fees=[card_fee_from_dict(fee) for fee in _pick(data, "card_fees", "cardFees", [])],
        additional_fees=[
            additional_fee_from_dict(fee) for fee in _pick(data, "additional_fees", "additionalFees", [])
        ],
        settlement_terms=settlement_terms_from_dict(_pick(data, "settlement_terms", "settlementTerms")),
    )
