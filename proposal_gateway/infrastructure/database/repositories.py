"""Data access layer for accounts, sessions, proposals and system settings"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional, Union
from sqlalchemy import or_
from sqlalchemy.orm import Session
from proposal_gateway.infrastructure.database.models import (
    Proposal,
    SystemSettings,
    UserAccount,
    UserSession,
    utcnow,
)
from proposal_gateway.domain.catalog import (
    default_additional_fees,
    default_card_fees,
    default_proposal_data,
    default_settlement_terms,
)
from proposal_gateway.domain.exceptions import ProposalNotFoundError
from proposal_gateway.domain.models import CompanyInfo, ProposalData, SavedProposal, User
from proposal_gateway.domain.serialization import (
    additional_fee_from_dict,
    additional_fee_to_dict,
    card_fee_from_dict,
    card_fee_to_dict,
    proposal_from_dict,
    proposal_to_dict,
    settlement_terms_from_dict,
    settlement_terms_to_dict,
)

IdLike = Union[str, uuid.UUID]


def _as_uuid(value: IdLike) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def as_aware(value: datetime) -> datetime:
    """SQLite drops tzinfo; stored values are always UTC"""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def to_domain_user(account: UserAccount) -> User:
    return User(
        id=str(account.id),
        username=account.username,
        email=account.email,
        role=account.role,
        is_active=account.is_active,
        created_at=as_aware(account.created_at),
        updated_at=as_aware(account.updated_at),
    )


def to_saved_proposal(row: Proposal) -> SavedProposal:
    return SavedProposal(
        id=str(row.id),
        user_id=str(row.user_id),
        name=row.name,
        data=proposal_from_dict(row.data),
        created_at=as_aware(row.created_at),
        updated_at=as_aware(row.updated_at),
    )


class UserRepository:
    """Repository for user accounts"""

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, username: str, email: str, password_hash: str, role: str = "user") -> UserAccount:
        account = UserAccount(username=username, email=email, password_hash=password_hash, role=role)
        self.db.add(account)
        self.db.flush()
        return account

    def get_by_login(self, username_or_email: str) -> Optional[UserAccount]:
        """Look up an account by username or email"""
        return (
            self.db.query(UserAccount)
            .filter(or_(UserAccount.username == username_or_email, UserAccount.email == username_or_email))
            .first()
        )

    def get_by_id(self, user_id: IdLike) -> Optional[UserAccount]:
        key = _as_uuid(user_id)
        if key is None:
            return None
        return self.db.get(UserAccount, key)


class SessionRepository:
    """Repository for persisted login sessions"""

    def __init__(self, db: Session):
        self.db = db

    def create_session(self, user_id: IdLike, token_hash: str, expires_at: datetime) -> UserSession:
        record = UserSession(user_id=_as_uuid(user_id), token_hash=token_hash, expires_at=expires_at)
        self.db.add(record)
        self.db.flush()
        return record

    def get_by_token_hash(self, token_hash: str) -> Optional[UserSession]:
        return self.db.query(UserSession).filter(UserSession.token_hash == token_hash).first()

    def delete_by_token_hash(self, token_hash: str) -> bool:
        deleted = (
            self.db.query(UserSession)
            .filter(UserSession.token_hash == token_hash)
            .delete(synchronize_session=False)
        )
        return deleted > 0

    def delete_expired(self, now: Optional[datetime] = None) -> int:
        now = now or utcnow()
        return (
            self.db.query(UserSession)
            .filter(UserSession.expires_at < now)
            .delete(synchronize_session=False)
        )


class ProposalRepository:
    """Repository for saved proposals, always scoped to the owning user"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, user_id: IdLike, proposal_id: IdLike) -> Optional[Proposal]:
        key = _as_uuid(proposal_id)
        owner = _as_uuid(user_id)
        if key is None or owner is None:
            return None
        return (
            self.db.query(Proposal)
            .filter(Proposal.id == key, Proposal.user_id == owner)
            .first()
        )

    def save(
        self,
        user_id: IdLike,
        name: str,
        data: ProposalData,
        proposal_id: Optional[IdLike] = None,
    ) -> SavedProposal:
        """
        Create a proposal, or replace name/data of an existing one.

        Updating keeps the id and created_at and bumps updated_at.

        Raises:
            ProposalNotFoundError: `proposal_id` is not one of the user's proposals
        """
        payload = proposal_to_dict(data)

        if proposal_id is None:
            row = Proposal(user_id=_as_uuid(user_id), name=name, data=payload)
            self.db.add(row)
        else:
            row = self._get_row(user_id, proposal_id)
            if row is None:
                raise ProposalNotFoundError(str(proposal_id))
            row.name = name
            row.data = payload
            row.updated_at = utcnow()

        self.db.flush()
        return to_saved_proposal(row)

    def list_for_user(self, user_id: IdLike) -> List[SavedProposal]:
        """Fetch a user's proposals, most recently updated first"""
        owner = _as_uuid(user_id)
        if owner is None:
            return []
        rows = (
            self.db.query(Proposal)
            .filter(Proposal.user_id == owner)
            .order_by(Proposal.updated_at.desc(), Proposal.created_at.desc())
            .all()
        )
        return [to_saved_proposal(row) for row in rows]

    def get(self, user_id: IdLike, proposal_id: IdLike) -> SavedProposal:
        row = self._get_row(user_id, proposal_id)
        if row is None:
            raise ProposalNotFoundError(str(proposal_id))
        return to_saved_proposal(row)

    def delete(self, user_id: IdLike, proposal_id: IdLike) -> bool:
        row = self._get_row(user_id, proposal_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True


class SettingsRepository:
    """Repository for organisation-wide proposal defaults"""

    def __init__(self, db: Session, fallback_company: CompanyInfo):
        self.db = db
        self.fallback_company = fallback_company

    def get(self) -> Optional[SystemSettings]:
        return self.db.query(SystemSettings).first()

    def initialize(self) -> SystemSettings:
        """Seed the settings row from the built-in catalog if none exists"""
        existing = self.get()
        if existing is not None:
            return existing

        company = self.fallback_company
        row = SystemSettings(
            company_name=company.name,
            company_address=company.address,
            company_phone=company.phone,
            company_email=company.email,
            company_logo=company.logo,
            default_card_fees=[card_fee_to_dict(fee) for fee in default_card_fees()],
            default_additional_fees=[additional_fee_to_dict(fee) for fee in default_additional_fees()],
            default_settlement_terms=settlement_terms_to_dict(default_settlement_terms()),
        )
        self.db.add(row)
        self.db.flush()
        return row

    def get_default_proposal(self, today=None, validity_days: int = 30) -> ProposalData:
        """Blank proposal from stored settings, or the built-in catalog when unset"""
        row = self.get()
        if row is None:
            return default_proposal_data(self.fallback_company, today, validity_days)

        proposal = default_proposal_data(
            CompanyInfo(
                name=row.company_name,
                address=row.company_address,
                phone=row.company_phone,
                email=row.company_email,
                logo=row.company_logo,
            ),
            today,
            validity_days,
        )
        proposal.card_fees = [card_fee_from_dict(fee) for fee in row.default_card_fees]
        proposal.additional_fees = [additional_fee_from_dict(fee) for fee in row.default_additional_fees]
        proposal.settlement_terms = settlement_terms_from_dict(row.default_settlement_terms)
        return proposal
