"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union


class ChargeKind(str, Enum):
    """Discriminator for the fee charge variants"""

    PERCENTAGE_FIXED = "percentageFixed"
    RESERVE_HOLD = "reserveHold"


@dataclass(frozen=True)
class PercentageFixedCharge:
    """Percentage of the transaction amount plus a fixed amount in `currency`"""

    percentage_fee: float
    fixed_fee: float
    currency: str
    kind: ChargeKind = field(default=ChargeKind.PERCENTAGE_FIXED, init=False)


@dataclass(frozen=True)
class ReserveHoldCharge:
    """Percentage of funds held back for `days` instead of being charged"""

    percentage_fee: float
    days: int
    currency: str
    kind: ChargeKind = field(default=ChargeKind.RESERVE_HOLD, init=False)


FeeCharge = Union[PercentageFixedCharge, ReserveHoldCharge]


@dataclass(frozen=True)
class CardFee:
    """Per-network processing charge"""

    card_type: str
    enabled: bool
    percentage_fee: float
    fixed_fee: float
    currency: str

    @property
    def label(self) -> str:
        return self.card_type

    @property
    def charge(self) -> PercentageFixedCharge:
        return PercentageFixedCharge(
            percentage_fee=self.percentage_fee,
            fixed_fee=self.fixed_fee,
            currency=self.currency,
        )


@dataclass(frozen=True)
class AdditionalFee:
    """Ancillary charge (setup, chargeback, reserve, or a custom line)"""

    fee_type: str
    enabled: bool
    charge: FeeCharge
    is_custom: bool = False

    @property
    def label(self) -> str:
        return self.fee_type


FeeLine = Union[CardFee, AdditionalFee]


@dataclass(frozen=True)
class SettlementTerms:
    """Cadence, currency and threshold governing fund disbursement"""

    settlement_period: str
    settlement_fee: float
    settlement_currency: str
    minimum_settlement: float


@dataclass(frozen=True)
class CompanyInfo:
    """Identity of the company issuing the proposal"""

    name: str
    address: str = ""
    phone: str = ""
    email: str = ""
    logo: Optional[str] = None


@dataclass(frozen=True)
class ClientInfo:
    """Identity of the proposal recipient"""

    name: str = ""
    company: str = ""
    address: str = ""
    email: str = ""


@dataclass
class ProposalData:
    """Everything needed to produce one pricing proposal"""

    company: CompanyInfo
    client: ClientInfo
    proposal_date: date
    valid_until: date
    card_fees: List[CardFee]
    additional_fees: List[AdditionalFee]
    settlement_terms: SettlementTerms


@dataclass
class SavedProposal:
    """Named proposal persisted for a user"""

    id: str
    user_id: str
    name: str
    data: ProposalData
    created_at: datetime
    updated_at: datetime


@dataclass
class User:
    """Application user account (never carries the password hash)"""

    id: str
    username: str
    email: str
    role: str  # "admin" or "user"
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass
class FeeQuote:
    """Result of applying one enabled fee line to a transaction amount"""

    label: str
    kind: ChargeKind
    currency: str
    charged: float
    held: float
    hold_days: int = 0
