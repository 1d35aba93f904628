"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from proposal_gateway.api.main import create_app
from proposal_gateway.config import settings
from proposal_gateway.infrastructure.database.models import Base
from proposal_gateway.infrastructure.database.session import get_db
from proposal_gateway.domain.models import (
    AdditionalFee,
    CardFee,
    ClientInfo,
    CompanyInfo,
    PercentageFixedCharge,
    ProposalData,
    ReserveHoldCharge,
    SettlementTerms,
)
from proposal_gateway.services.auth import AuthService

# Cheap hashes keep the suite fast
settings.bcrypt_rounds = 4

# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "correct horse battery"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def user(db: Session):
    """Active account with a known password"""
    created = AuthService(db).create_user("alice", "alice@example.com", TEST_PASSWORD)
    db.commit()
    return created


@pytest.fixture
def auth_headers(client: TestClient, user) -> dict:
    """Bearer header for `user` obtained through the login endpoint"""
    response = client.post("/v1/auth/login", json={"username": "alice", "password": TEST_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def sample_proposal() -> ProposalData:
    """Proposal mixing enabled and disabled fees, including an enabled reserve"""
    return ProposalData(
        company=CompanyInfo(
            name="Transfer Global Inc.",
            address="2135 De la Montagnes\nMontreal, QC, H3G 1Z8",
            phone="+1 514 555 0100",
            email="finance@linx.fi",
            logo="/linx-logo.png",
        ),
        client=ClientInfo(
            name="Jane Doe",
            company="Acme Corp",
            address="1 Main St\nSpringfield",
            email="jane@acme.test",
        ),
        proposal_date=date(2024, 1, 1),
        valid_until=date(2024, 1, 31),
        card_fees=[
            CardFee("VISA", True, 2.9, 0.3, "USD"),
            CardFee("MasterCard", False, 2.9, 0.3, "USD"),
            CardFee("Amex", True, 3.5, 0, "USD"),
        ],
        additional_fees=[
            AdditionalFee("Chargeback Fee", False, PercentageFixedCharge(0, 55, "USD")),
            AdditionalFee("Dispute Fee", True, PercentageFixedCharge(0, 25, "USD")),
            AdditionalFee("Reserve", True, ReserveHoldCharge(10, 180, "USD")),
        ],
        settlement_terms=SettlementTerms("T+2 Business Days", 0, "USD", 100),
    )


@pytest.fixture
def proposal_payload(sample_proposal: ProposalData) -> dict:
    """JSON body equivalent of `sample_proposal`"""
    from proposal_gateway.domain.serialization import proposal_to_dict

    return proposal_to_dict(sample_proposal)
