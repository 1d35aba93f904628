"""Dependency injection for FastAPI endpoints"""

import logging
from typing import Optional
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from proposal_gateway.config import settings
from proposal_gateway.domain.models import CompanyInfo, User
from proposal_gateway.infrastructure.clients.logo import LogoClient
from proposal_gateway.infrastructure.database.repositories import ProposalRepository, SettingsRepository
from proposal_gateway.infrastructure.database.session import get_db
from proposal_gateway.services.auth import AuthService, SessionContext


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_logo_client() -> LogoClient:
    """Provide logo download client instance"""
    return LogoClient()


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_proposal_repository(db: Session = Depends(get_db)) -> ProposalRepository:
    return ProposalRepository(db)


def get_settings_repository(db: Session = Depends(get_db)) -> SettingsRepository:
    company = CompanyInfo(
        name=settings.default_company_name,
        address=settings.default_company_address,
        phone=settings.default_company_phone,
        email=settings.default_company_email,
        logo=settings.default_company_logo or None,
    )
    return SettingsRepository(db, company)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_session_context(
    request: Request,
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> SessionContext:
    """Session context derived from the bearer token (empty when absent or stale)"""
    try:
        return auth_service.refresh(_bearer_token(authorization))
    except SQLAlchemyError as e:
        logging.error(f"Session store error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Session store unavailable, please retry")


def require_user(context: SessionContext = Depends(get_session_context)) -> User:
    """Reject the request unless it carries a valid session"""
    if not context.is_authenticated:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context.user
