"""Saved proposal endpoints - defaults, save/update, list, fetch, delete, print"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from proposal_gateway.api.v1.schemas import (
    ProposalDataSchema,
    ProposalListResponse,
    SaveProposalRequest,
    SavedProposalResponse,
)
from proposal_gateway.api.v1.documents import RENDER_HINT
from proposal_gateway.api.dependencies import (
    get_logo_client,
    get_proposal_repository,
    get_request_id,
    get_settings_repository,
    require_user,
)
from proposal_gateway.config import settings
from proposal_gateway.domain.exceptions import (
    DocumentRenderError,
    ProposalNotFoundError,
    ProposalValidationError,
)
from proposal_gateway.domain.models import User
from proposal_gateway.domain.validation import validate_proposal
from proposal_gateway.infrastructure.clients.logo import LogoClient
from proposal_gateway.infrastructure.database.repositories import ProposalRepository, SettingsRepository
from proposal_gateway.infrastructure.database.session import get_db
from proposal_gateway.infrastructure.observability.logging import log_proposal_saved
from proposal_gateway.infrastructure.observability.metrics import proposal_deleted_counter, record_proposal_saved
from proposal_gateway.services.documents import render_proposal

router = APIRouter()


@router.get("/proposals/defaults", response_model=ProposalDataSchema)
def get_default_proposal(
    request: Request,
    user: User = Depends(require_user),
    settings_repo: SettingsRepository = Depends(get_settings_repository),
):
    """Blank proposal pre-filled with company identity and default fee catalogs"""
    try:
        data = settings_repo.get_default_proposal(validity_days=settings.proposal_validity_days)
    except SQLAlchemyError as e:
        logging.error(f"Settings store error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Default settings could not be loaded, please retry")
    return ProposalDataSchema.from_domain(data)


@router.get("/proposals", response_model=ProposalListResponse)
def list_proposals(
    request: Request,
    user: User = Depends(require_user),
    repo: ProposalRepository = Depends(get_proposal_repository),
):
    """Caller's saved proposals, most recently updated first"""
    try:
        proposals = repo.list_for_user(user.id)
    except SQLAlchemyError as e:
        logging.error(f"Proposal store error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Proposals could not be loaded, please retry")
    return ProposalListResponse(proposals=[SavedProposalResponse.from_domain(p) for p in proposals])


@router.post("/proposals", response_model=SavedProposalResponse)
def save_proposal(
    request_body: SaveProposalRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
    repo: ProposalRepository = Depends(get_proposal_repository),
):
    """
    Save a proposal for the caller.

    Without `id` a new proposal is created (201). With `id` the existing
    proposal is overwritten in place (200), keeping its id.
    """
    request_id = get_request_id(request)
    created = request_body.id is None

    try:
        data = validate_proposal(request_body.data.to_domain())
        saved = repo.save(user.id, request_body.name.strip(), data, request_body.id)
        db.commit()

    except ProposalValidationError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=e.issues)

    except ProposalNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Proposal not found")

    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Proposal store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Proposal could not be saved, please retry")

    record_proposal_saved(created)
    log_proposal_saved(request_id, user.id, saved.id, created)

    response.status_code = 201 if created else 200
    return SavedProposalResponse.from_domain(saved)


@router.get("/proposals/{proposal_id}", response_model=SavedProposalResponse)
def get_proposal(
    proposal_id: str,
    request: Request,
    user: User = Depends(require_user),
    repo: ProposalRepository = Depends(get_proposal_repository),
):
    try:
        return SavedProposalResponse.from_domain(repo.get(user.id, proposal_id))
    except ProposalNotFoundError:
        raise HTTPException(status_code=404, detail="Proposal not found")
    except SQLAlchemyError as e:
        logging.error(f"Proposal store error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Proposal could not be loaded, please retry")


@router.delete("/proposals/{proposal_id}", status_code=204)
def delete_proposal(
    proposal_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
    repo: ProposalRepository = Depends(get_proposal_repository),
):
    request_id = get_request_id(request)

    try:
        deleted = repo.delete(user.id, proposal_id)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Proposal store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Proposal could not be deleted, please retry")

    if not deleted:
        raise HTTPException(status_code=404, detail="Proposal not found")

    proposal_deleted_counter.inc()
    return Response(status_code=204)


@router.get("/proposals/{proposal_id}/document", response_class=HTMLResponse)
async def render_saved_proposal(
    proposal_id: str,
    request: Request,
    print_on_load: bool = Query(False, description="Open the print dialog when the page loads"),
    user: User = Depends(require_user),
    repo: ProposalRepository = Depends(get_proposal_repository),
    logo_client: LogoClient = Depends(get_logo_client),
):
    """Render a saved proposal as a printable HTML page"""
    request_id = get_request_id(request)

    try:
        saved = repo.get(user.id, proposal_id)
        html = await render_proposal(saved.data, print_on_load, logo_client, request_id)
    except ProposalNotFoundError:
        raise HTTPException(status_code=404, detail="Proposal not found")
    except SQLAlchemyError as e:
        logging.error(f"Proposal store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Proposal could not be loaded, please retry")
    except ProposalValidationError as e:
        raise HTTPException(status_code=422, detail=e.issues)
    except DocumentRenderError as e:
        logging.error(f"Render error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=RENDER_HINT)

    return HTMLResponse(content=html)
