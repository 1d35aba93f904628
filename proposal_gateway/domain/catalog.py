"""Default fee catalogs and the value sets offered to users"""

from datetime import date
from typing import List, Optional

from proposal_gateway.domain.models import (
    AdditionalFee,
    CardFee,
    ClientInfo,
    CompanyInfo,
    PercentageFixedCharge,
    ProposalData,
    ReserveHoldCharge,
    SettlementTerms,
)
from proposal_gateway.utils.date_utils import validity_window

CURRENCIES = ("USD", "EUR", "GBP", "CAD")
SETTLEMENT_CURRENCIES = CURRENCIES + ("Cryptocurrency",)
SETTLEMENT_PERIODS = (
    "T+1 Business Day",
    "T+2 Business Days",
    "T+3 Business Days",
    "Weekly",
    "Monthly",
)

RESERVE_FEE_TYPE = "Reserve"


def default_card_fees() -> List[CardFee]:
    """VISA and MasterCard enabled at 2.9% + 0.30, every other network off"""
    fees = [
        CardFee("VISA", True, 2.9, 0.3, "USD"),
        CardFee("MasterCard", True, 2.9, 0.3, "USD"),
    ]
    for card_type in ("Discover", "Amex", "MaestroCard", "DinersClub", "JCB", "UnionPay"):
        fees.append(CardFee(card_type, False, 0, 0, "USD"))
    return fees


def default_additional_fees() -> List[AdditionalFee]:
    """Ancillary fees, all disabled until the user opts in"""
    flat = [
        ("Setup Fee", 0),
        ("Chargeback Fee", 55),
        ("Dispute Fee", 25),
        ("Declined Transaction Fee", 0.55),
        ("Refunded Transaction Fee", 15),
    ]
    fees = [
        AdditionalFee(fee_type, False, PercentageFixedCharge(0, fixed_fee, "USD"))
        for fee_type, fixed_fee in flat
    ]
    fees.append(AdditionalFee(RESERVE_FEE_TYPE, False, ReserveHoldCharge(10, 180, "USD")))
    return fees


def default_settlement_terms() -> SettlementTerms:
    return SettlementTerms(
        settlement_period="T+2 Business Days",
        settlement_fee=0,
        settlement_currency="USD",
        minimum_settlement=0,
    )


def default_proposal_data(
    company: CompanyInfo,
    today: Optional[date] = None,
    validity_days: int = 30,
) -> ProposalData:
    """Blank proposal for `company` dated today and valid for `validity_days`"""
    proposal_date, valid_until = validity_window(today, validity_days)
    return ProposalData(
        company=company,
        client=ClientInfo(),
        proposal_date=proposal_date,
        valid_until=valid_until,
        card_fees=default_card_fees(),
        additional_fees=default_additional_fees(),
        settlement_terms=default_settlement_terms(),
    )
