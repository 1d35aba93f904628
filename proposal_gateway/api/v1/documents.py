"""Document assembly and HTML rendering endpoints"""

import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from proposal_gateway.api.v1.schemas import ProposalDataSchema
from proposal_gateway.api.dependencies import get_logo_client, get_request_id, require_user
from proposal_gateway.config import settings
from proposal_gateway.domain.document import assemble_document, document_to_dict
from proposal_gateway.domain.exceptions import DocumentRenderError, ProposalValidationError
from proposal_gateway.domain.models import User
from proposal_gateway.domain.validation import validate_proposal
from proposal_gateway.infrastructure.clients.logo import LogoClient
from proposal_gateway.services.documents import render_proposal

router = APIRouter()

RENDER_HINT = "Document could not be rendered; check the proposal fields and try again"


@router.post("/documents/assemble", response_model=Dict[str, Any])
def assemble(request_body: ProposalDataSchema, user: User = Depends(require_user)):
    """Return the document model (enabled fees only, cells formatted for display)"""
    proposal = request_body.to_domain()

    try:
        validate_proposal(proposal)
    except ProposalValidationError as e:
        raise HTTPException(status_code=422, detail=e.issues)

    return document_to_dict(assemble_document(proposal, title=settings.document_title))


@router.post("/documents/render", response_class=HTMLResponse)
async def render(
    request_body: ProposalDataSchema,
    request: Request,
    print_on_load: bool = Query(False, description="Open the print dialog when the page loads"),
    user: User = Depends(require_user),
    logo_client: LogoClient = Depends(get_logo_client),
):
    """Render an unsaved proposal as a printable HTML page"""
    request_id = get_request_id(request)

    try:
        html = await render_proposal(request_body.to_domain(), print_on_load, logo_client, request_id)
    except ProposalValidationError as e:
        raise HTTPException(status_code=422, detail=e.issues)
    except DocumentRenderError as e:
        logging.error(f"Render error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=RENDER_HINT)

    return HTMLResponse(content=html)
