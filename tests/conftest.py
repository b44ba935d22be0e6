"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from ptz_gateway.api.main import create_app
from ptz_gateway.api.dependencies import get_mailer, get_sheets_client
from ptz_gateway.config import settings
from ptz_gateway.domain.eligibility import calculate
from ptz_gateway.domain.exceptions import NotificationError
from ptz_gateway.domain.models import Contact, HouseholdProfile, HousingType, Submission, Zone
from ptz_gateway.infrastructure.clients.sheets import SheetsClient
from ptz_gateway.infrastructure.database.models import Base
from ptz_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeMailer:
    """Records outgoing messages instead of talking to an SMTP relay"""

    def __init__(self, enabled: bool = True, fail: bool = False):
        self.enabled = enabled
        self.fail = fail
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise NotificationError("SMTP relay unavailable")
        self.sent.append((to, subject, html))


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
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def client(db: Session, mailer: FakeMailer) -> TestClient:
    """Create FastAPI test client with test database and fake notifications"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_sheets_client] = lambda: SheetsClient(webhook_url="")
    return TestClient(app)


@pytest.fixture
def admin_auth() -> tuple[str, str]:
    return (settings.admin_username, settings.admin_password)


@pytest.fixture
def submission_payload() -> dict:
    """Form payload for an eligible zone A couple"""
    return {
        "firstName": "Camille",
        "lastName": "Durand",
        "email": "camille.durand@example.fr",
        "phone": "06 12 34 56 78",
        "address": "12 rue des Lilas",
        "commune": "Montreuil",
        "householdSize": 2,
        "zone": "A",
        "income": 70000,
        "housingType": "individual",
        "projectCost": 300000,
        "notPriorOwner": True,
    }


@pytest.fixture
def make_submission():
    """Factory for domain submissions with the eligibility already computed"""

    def _make(
        submission_date: str | None = "01/01/2024 10:00:00",
        id: str | None = None,
        first_name: str = "Camille",
        last_name: str = "Durand",
        email: str = "camille.durand@example.fr",
        household_size: int = 2,
        zone: Zone = Zone.A,
        income: int = 70000,
        housing_type: HousingType = HousingType.INDIVIDUAL,
        project_cost: int = 300000,
        **extra,
    ) -> Submission:
        profile = HouseholdProfile(
            household_size=household_size,
            zone=zone,
            income=income,
            housing_type=housing_type,
            project_cost=project_cost,
        )
        return Submission(
            id=id,
            contact=Contact(first_name=first_name, last_name=last_name, email=email, phone=extra.pop("phone", None)),
            profile=profile,
            result=calculate(profile),
            submission_date=submission_date,
            **extra,
        )

    return _make
