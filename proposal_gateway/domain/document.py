"""Document assembler - merges proposal data into a read-only document model"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional, Tuple

from proposal_gateway.domain.fees import enabled_lines, format_amount, format_fixed_column, format_rate
from proposal_gateway.domain.models import FeeCharge, ProposalData

DEFAULT_TITLE = "Payment Processing Proposal"


@dataclass(frozen=True)
class DocumentHeader:
    title: str
    company_name: str
    company_address: str
    company_phone: str
    company_email: str
    company_logo: Optional[str]
    proposal_date: date
    valid_until: date


@dataclass(frozen=True)
class DocumentRecipient:
    name: str
    company: str
    address: str
    email: str


@dataclass(frozen=True)
class FeeRow:
    """One table row; the charge variant decides how it is displayed"""

    label: str
    charge: FeeCharge


@dataclass(frozen=True)
class FeeTable:
    title: str
    label_header: str
    rows: Tuple[FeeRow, ...]


@dataclass(frozen=True)
class SettlementBlock:
    settlement_period: str
    settlement_fee: float
    settlement_currency: str
    minimum_settlement: float


@dataclass(frozen=True)
class DocumentFooter:
    valid_until: date
    contact_email: str


@dataclass(frozen=True)
class DocumentModel:
    """Renderable projection of one proposal"""

    header: DocumentHeader
    recipient: DocumentRecipient
    card_fee_table: FeeTable
    additional_fee_table: Optional[FeeTable]
    settlement: SettlementBlock
    footer: DocumentFooter


def assemble_document(proposal: ProposalData, title: str = DEFAULT_TITLE) -> DocumentModel:
    """
    Build the document model for a proposal.

    Only enabled card and additional fees are kept, in their original order.
    The additional-fee table is None when no additional fee is enabled.
    `proposal` is not modified.
    """
    company = proposal.company
    client = proposal.client

    card_rows = tuple(FeeRow(fee.card_type, fee.charge) for fee in enabled_lines(proposal.card_fees))
    additional_rows = tuple(
        FeeRow(fee.fee_type, fee.charge) for fee in enabled_lines(proposal.additional_fees)
    )

    terms = proposal.settlement_terms

    return DocumentModel(
        header=DocumentHeader(
            title=title,
            company_name=company.name,
            company_address=company.address,
            company_phone=company.phone,
            company_email=company.email,
            company_logo=company.logo or None,
            proposal_date=proposal.proposal_date,
            valid_until=proposal.valid_until,
        ),
        recipient=DocumentRecipient(
            name=client.name,
            company=client.company,
            address=client.address,
            email=client.email,
        ),
        card_fee_table=FeeTable("Schedule A - Card Processing Fees", "Card Type", card_rows),
        additional_fee_table=(
            FeeTable("Additional Fees", "Fee Type", additional_rows) if additional_rows else None
        ),
        settlement=SettlementBlock(
            settlement_period=terms.settlement_period,
            settlement_fee=terms.settlement_fee,
            settlement_currency=terms.settlement_currency,
            minimum_settlement=terms.minimum_settlement,
        ),
        footer=DocumentFooter(valid_until=proposal.valid_until, contact_email=company.email),
    )


def _table_to_dict(table: FeeTable) -> Dict[str, Any]:
    return {
        "title": table.title,
        "columns": [table.label_header, "Rate", "Fixed Fee", "Currency"],
        "rows": [
            {
                "label": row.label,
                "kind": row.charge.kind.value,
                "rate": format_rate(row.charge),
                "fixed": format_fixed_column(row.charge),
                "currency": row.charge.currency,
            }
            for row in table.rows
        ],
    }


def document_to_dict(document: DocumentModel) -> Dict[str, Any]:
    """JSON-ready projection with every cell already formatted for display"""
    header = document.header
    settlement = document.settlement
    return {
        "header": {
            "title": header.title,
            "company_name": header.company_name,
            "company_address": header.company_address,
            "company_phone": header.company_phone,
            "company_email": header.company_email,
            "company_logo": header.company_logo,
            "proposal_date": header.proposal_date.isoformat(),
            "valid_until": header.valid_until.isoformat(),
        },
        "recipient": {
            "name": document.recipient.name,
            "company": document.recipient.company,
            "address": document.recipient.address,
            "email": document.recipient.email,
        },
        "card_fee_table": _table_to_dict(document.card_fee_table),
        "additional_fee_table": (
            _table_to_dict(document.additional_fee_table) if document.additional_fee_table else None
        ),
        "settlement": {
            "settlement_period": settlement.settlement_period,
            "settlement_fee": format_amount(settlement.settlement_fee),
            "settlement_currency": settlement.settlement_currency,
            "minimum_settlement": format_amount(settlement.minimum_settlement),
        },
        "footer": {
            "valid_until": document.footer.valid_until.isoformat(),
            "contact_email": document.footer.contact_email,
        },
    }
