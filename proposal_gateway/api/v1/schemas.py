"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from proposal_gateway.domain.models import AdditionalFee, CardFee, ProposalData, SavedProposal, User
from proposal_gateway.domain.serialization import (
    additional_fee_from_dict,
    additional_fee_to_dict,
    card_fee_from_dict,
    proposal_from_dict,
    proposal_to_dict,
)


class PercentageFixedChargeSchema(BaseModel):
    kind: Literal["percentageFixed"] = "percentageFixed"
    percentage_fee: float = Field(..., ge=0)
    fixed_fee: float = Field(..., ge=0)
    currency: str


class ReserveHoldChargeSchema(BaseModel):
    kind: Literal["reserveHold"] = "reserveHold"
    percentage_fee: float = Field(..., ge=0)
    days: int = Field(..., ge=0, description="Hold period in days")
    currency: str


FeeChargeSchema = Annotated[
    Union[PercentageFixedChargeSchema, ReserveHoldChargeSchema],
    Field(discriminator="kind"),
]


class CardFeeSchema(BaseModel):
    """Per-network processing charge"""

    card_type: str = Field(..., min_length=1)
    enabled: bool
    percentage_fee: float = Field(..., ge=0)
    fixed_fee: float = Field(..., ge=0)
    currency: str

    def to_domain(self) -> CardFee:
        return card_fee_from_dict(self.model_dump())


class AdditionalFeeSchema(BaseModel):
    """Ancillary charge; `charge.kind` selects fixed-fee or reserve-hold"""

    fee_type: str = Field(..., min_length=1)
    enabled: bool
    is_custom: bool = False
    charge: FeeChargeSchema

    def to_domain(self) -> AdditionalFee:
        return additional_fee_from_dict(self.model_dump())


class SettlementTermsSchema(BaseModel):
    settlement_period: str
    settlement_fee: float = Field(..., ge=0)
    settlement_currency: str
    minimum_settlement: float = Field(..., ge=0)


class CompanySchema(BaseModel):
    name: str
    address: str = ""
    phone: str = ""
    email: str = ""
    logo: Optional[str] = None


class ClientSchema(BaseModel):
    name: str = ""
    company: str = ""
    address: str = ""
    email: str = ""


class ProposalDataSchema(BaseModel):
    """Request/response body carrying a whole proposal"""

    company: CompanySchema
    client: ClientSchema = Field(default_factory=ClientSchema)
    proposal_date: date
    valid_until: date
    card_fees: List[CardFeeSchema]
    additional_fees: List[AdditionalFeeSchema] = Field(default_factory=list)
    settlement_terms: SettlementTermsSchema

    def to_domain(self) -> ProposalData:
        return proposal_from_dict(self.model_dump(mode="json"))

    @classmethod
    def from_domain(cls, data: ProposalData) -> "ProposalDataSchema":
        return cls.model_validate(proposal_to_dict(data))


class SaveProposalRequest(BaseModel):
    """Request body for POST /v1/proposals"""

    name: str = Field(..., min_length=1, max_length=255)
    data: ProposalDataSchema
    id: Optional[str] = Field(None, description="Existing proposal to overwrite")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("name must not be blank")
        return name


class SavedProposalResponse(BaseModel):
    id: str
    name: str
    data: ProposalDataSchema
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, proposal: SavedProposal) -> "SavedProposalResponse":
        return cls(
            id=proposal.id,
            name=proposal.name,
            data=ProposalDataSchema.from_domain(proposal.data),
            created_at=proposal.created_at,
            updated_at=proposal.updated_at,
        )


class ProposalListResponse(BaseModel):
    proposals: List[SavedProposalResponse]


class LoginRequest(BaseModel):
    """Request body for POST /v1/auth/login; username may also be the email"""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    role: str
    is_active: bool

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
        )


class LoginResponse(BaseModel):
    token: str
    expires_at: datetime
    user: UserResponse


class FeeQuoteRequest(BaseModel):
    """Request body for POST /v1/fees/quote"""

    amount: float = Field(..., ge=0, description="Single transaction amount")
    card_fees: List[CardFeeSchema] = Field(default_factory=list)
    additional_fees: List[AdditionalFeeSchema] = Field(default_factory=list)


class FeeQuoteItem(BaseModel):
    label: str
    kind: str
    currency: str
    charged: float
    held: float
    hold_days: int = 0


class FeeQuoteResponse(BaseModel):
    amount: float
    quotes: List[FeeQuoteItem]
    totals: Dict[str, Dict[str, float]]


class CustomFeeRequest(BaseModel):
    """Request body for POST /v1/fees/custom"""

    additional_fees: List[AdditionalFeeSchema]
    name: str
    percentage_fee: float = Field(0, ge=0)
    fixed_fee: float = Field(0, ge=0)
    currency: str = "USD"


class CustomFeeResponse(BaseModel):
    additional_fees: List[AdditionalFeeSchema]

    @classmethod
    def from_domain(cls, fees: List[AdditionalFee]) -> "CustomFeeResponse":
        return cls.model_validate({"additional_fees": [additional_fee_to_dict(fee) for fee in fees]})


class RemoveCustomFeeRequest(BaseModel):
    """Request body for POST /v1/fees/custom/remove"""

    additional_fees: List[AdditionalFeeSchema]
    name: str
