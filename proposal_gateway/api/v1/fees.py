"""Fee quoting and custom fee endpoints"""

from fastapi import APIRouter, Depends, HTTPException

from proposal_gateway.api.v1.schemas import (
    CustomFeeRequest,
    CustomFeeResponse,
    FeeQuoteItem,
    FeeQuoteRequest,
    FeeQuoteResponse,
    RemoveCustomFeeRequest,
)
from proposal_gateway.api.dependencies import require_user
from proposal_gateway.domain.exceptions import ProposalValidationError
from proposal_gateway.domain.fees import quote_enabled_fees, summarize_quotes
from proposal_gateway.domain.models import User
from proposal_gateway.domain.validation import add_custom_fee, remove_custom_fee

router = APIRouter()


@router.post("/fees/quote", response_model=FeeQuoteResponse)
def quote_fees(request_body: FeeQuoteRequest, user: User = Depends(require_user)):
    """
    Apply every enabled fee line to one transaction amount.

    Reserve lines report the held amount and hold period; nothing is charged
    for them. Disabled lines are ignored.
    """
    lines = [fee.to_domain() for fee in request_body.card_fees]
    lines += [fee.to_domain() for fee in request_body.additional_fees]

    quotes = quote_enabled_fees(lines, request_body.amount)

    return FeeQuoteResponse(
        amount=request_body.amount,
        quotes=[
            FeeQuoteItem(
                label=q.label,
                kind=q.kind.value,
                currency=q.currency,
                charged=q.charged,
                held=q.held,
                hold_days=q.hold_days,
            )
            for q in quotes
        ],
        totals=summarize_quotes(quotes),
    )


@router.post("/fees/custom", response_model=CustomFeeResponse)
def create_custom_fee(request_body: CustomFeeRequest, user: User = Depends(require_user)):
    """Append an enabled custom fee, rejecting blank or duplicate names"""
    fees = [fee.to_domain() for fee in request_body.additional_fees]

    try:
        updated = add_custom_fee(
            fees,
            request_body.name,
            percentage_fee=request_body.percentage_fee,
            fixed_fee=request_body.fixed_fee,
            currency=request_body.currency,
        )
    except ProposalValidationError as e:
        raise HTTPException(status_code=422, detail=e.issues)

    return CustomFeeResponse.from_domain(updated)


@router.post("/fees/custom/remove", response_model=CustomFeeResponse)
def delete_custom_fee(request_body: RemoveCustomFeeRequest, user: User = Depends(require_user)):
    """Drop a custom fee by name; built-in fees cannot be removed"""
    fees = [fee.to_domain() for fee in request_body.additional_fees]

    try:
        updated = remove_custom_fee(fees, request_body.name)
    except ProposalValidationError as e:
        raise HTTPException(status_code=422, detail=e.issues)

    return CustomFeeResponse.from_domain(updated)
