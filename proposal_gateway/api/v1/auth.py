"""Login, logout and current-user endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from proposal_gateway.api.v1.schemas import LoginRequest, LoginResponse, UserResponse
from proposal_gateway.api.dependencies import get_auth_service, get_request_id, get_session_context, require_user
from proposal_gateway.domain.exceptions import AuthenticationError
from proposal_gateway.domain.models import User
from proposal_gateway.infrastructure.database.session import get_db
from proposal_gateway.services.auth import AuthService, SessionContext

router = APIRouter()


@router.post("/auth/login", response_model=LoginResponse)
def login(
    request_body: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchange username (or email) and password for a bearer token"""
    request_id = get_request_id(request)

    try:
        context = auth_service.login(request_body.username, request_body.password)
        db.commit()
    except AuthenticationError as e:
        db.rollback()
        raise HTTPException(status_code=401, detail=str(e))
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Session store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Session store unavailable, please retry")

    return LoginResponse(
        token=context.token,
        expires_at=context.expires_at,
        user=UserResponse.from_domain(context.user),
    )


@router.post("/auth/logout", status_code=204)
def logout(
    request: Request,
    db: Session = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
    auth_service: AuthService = Depends(get_auth_service),
):
    """End the caller's session; logging out twice is harmless"""
    try:
        auth_service.logout(context)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Session store error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Session store unavailable, please retry")
    return Response(status_code=204)


@router.get("/auth/me", response_model=UserResponse)
def current_user(user: User = Depends(require_user)):
    return UserResponse.from_domain(user)
