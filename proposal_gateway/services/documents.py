"""Proposal-to-HTML pipeline shared by the API and the CLI"""

import time
from typing import Optional

from proposal_gateway.config import settings
from proposal_gateway.domain.document import assemble_document
from proposal_gateway.domain.exceptions import DocumentRenderError
from proposal_gateway.domain.models import ProposalData
from proposal_gateway.domain.validation import validate_proposal
from proposal_gateway.infrastructure.clients.logo import LogoClient
from proposal_gateway.infrastructure.observability.logging import log_document_rendered
from proposal_gateway.infrastructure.observability.metrics import (
    document_render_failures_counter,
    record_document_rendered,
)
from proposal_gateway.rendering.html import render_document


async def render_proposal(
    proposal: ProposalData,
    print_on_load: bool = False,
    logo_client: Optional[LogoClient] = None,
    request_id: str = "unknown",
) -> str:
    """
    Validate, assemble and render a proposal.

    Flow:
    1. Reject structurally invalid data (ProposalValidationError)
    2. Inline a remote logo when a client is given and inlining is enabled
    3. Assemble the document model from enabled fees only
    4. Render HTML
    """
    start_time = time.time()

    validate_proposal(proposal)

    if logo_client is not None and settings.inline_remote_logo:
        proposal = await logo_client.inline_logo(proposal)

    document = assemble_document(proposal, title=settings.document_title)

    try:
        html = render_document(document, print_on_load=print_on_load)
    except DocumentRenderError:
        document_render_failures_counter.inc()
        raise

    duration_ms = (time.time() - start_time) * 1000
    record_document_rendered(print_on_load)
    log_document_rendered(
        request_id,
        document.header.company_name,
        len(document.card_fee_table.rows),
        len(document.additional_fee_table.rows) if document.additional_fee_table else 0,
        print_on_load,
        duration_ms,
    )
    return html
