"""Identity and session handling.

A `SessionContext` is created per request from the bearer token and handed
to whatever needs the caller's identity; nothing is cached at module level.
Login persists a session row and returns a populated context, logout deletes
the row and clears the context, refresh rebuilds the context from a token.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from sqlalchemy.orm import Session

from proposal_gateway.config import settings
from proposal_gateway.domain.exceptions import AuthenticationError
from proposal_gateway.domain.models import User
from proposal_gateway.infrastructure.database.models import utcnow
from proposal_gateway.infrastructure.database.repositories import (
    SessionRepository,
    UserRepository,
    as_aware,
    to_domain_user,
)
from proposal_gateway.infrastructure.observability.logging import log_login
from proposal_gateway.infrastructure.observability.metrics import record_login

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password using bcrypt"""
    if not password:
        raise ValueError("Password cannot be empty")
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash; malformed hashes never match"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass
class SessionContext:
    """Identity of the caller for the duration of one request"""

    user: Optional[User] = None
    token: Optional[str] = None
    expires_at: Optional[datetime] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def current_user(self) -> Optional[User]:
        return self.user

    def clear(self) -> None:
        self.user = None
        self.token = None
        self.expires_at = None


class AuthService:
    """Login, logout and session refresh backed by the database"""

    def __init__(self, db: Session, session_ttl: Optional[timedelta] = None):
        self.db = db
        self.users = UserRepository(db)
        self.sessions = SessionRepository(db)
        self.session_ttl = session_ttl or timedelta(hours=settings.session_ttl_hours)

    def create_user(self, username: str, email: str, password: str, role: str = "user") -> User:
        if role not in ("admin", "user"):
            raise ValueError(f"Unknown role: {role}")
        account = self.users.create_user(username, email, hash_password(password), role)
        return to_domain_user(account)

    def login(self, username_or_email: str, password: str) -> SessionContext:
        """
        Verify credentials and open a new session.

        Raises:
            AuthenticationError: Unknown user, wrong password, or inactive account
        """
        account = self.users.get_by_login(username_or_email)

        if account is None or not verify_password(password, account.password_hash):
            record_login(success=False)
            log_login(username_or_email, success=False)
            raise AuthenticationError("Invalid username or password")

        if not account.is_active:
            record_login(success=False)
            log_login(username_or_email, success=False)
            raise AuthenticationError("Account is disabled")

        self.sessions.delete_expired()
        token = secrets.token_urlsafe(32)
        expires_at = utcnow() + self.session_ttl
        self.sessions.create_session(account.id, hash_token(token), expires_at)

        record_login(success=True)
        log_login(username_or_email, success=True)
        return SessionContext(user=to_domain_user(account), token=token, expires_at=expires_at)

    def refresh(self, token: Optional[str]) -> SessionContext:
        """Rebuild the context for a token; empty if unknown, expired, or the user is inactive"""
        if not token:
            return SessionContext()

        record = self.sessions.get_by_token_hash(hash_token(token))
        if record is None:
            return SessionContext()

        expires_at = as_aware(record.expires_at)
        if expires_at <= utcnow():
            return SessionContext()

        account = self.users.get_by_id(record.user_id)
        if account is None or not account.is_active:
            return SessionContext()

        return SessionContext(user=to_domain_user(account), token=token, expires_at=expires_at)

    def logout(self, context: SessionContext) -> None:
        if context.token:
            self.sessions.delete_by_token_hash(hash_token(context.token))
        context.clear()
