"""
Pytest fixtures for Wellness Tracker API tests
"""
import os

# Must be set before the application modules read their settings
TEST_DATABASE_URL = "sqlite:///./test_wellness_tracker.db"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["OTP_CLEANUP_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wellness_tracker.main import app
from wellness_tracker.database import Base, User, get_db
from wellness_tracker.auth import hash_password, create_user_token
from wellness_tracker.email_service import EmailService
from wellness_tracker.sms_service import SMSService


engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database session override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    """Captures outgoing email and SMS instead of contacting the providers"""
    sent = {"email": [], "sms": [], "fail": False}

    def fake_send_email(self, to_email, subject, html_content, text_content=None):
        sent["email"].append({"to": to_email, "subject": subject, "text": text_content})
        return not sent["fail"]

    def fake_send_sms(self, to_number, body):
        sent["sms"].append({"to": to_number, "body": body})
        return not sent["fail"]

    monkeypatch.setattr(EmailService, "send_email", fake_send_email)
    monkeypatch.setattr(SMSService, "send_sms", fake_send_sms)
    return sent


def _create_user(db_session, name, email=None, mobile=None, verified=True):
    user = User(
        name=name,
        email=email,
        mobile=mobile,
        password=hash_password(TEST_PASSWORD),
        is_verified=verified,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session):
    """Verified user stored in the test database"""
    return _create_user(db_session, "Test User", email="test@example.com", mobile="+15550001111")


@pytest.fixture
def other_user(db_session):
    return _create_user(db_session, "Other User", email="other@example.com")


@pytest.fixture
def auth_headers(test_user):
    """Generate authentication headers with valid JWT"""
    return {"Authorization": f"Bearer {create_user_token(test_user.id)}"}


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {create_user_token(other_user.id)}"}


@pytest.fixture
def sample_habit():
    """Sample habit data for testing"""
    return {
        "name": "Drink water",
        "icon": "💧",
        "frequency": "daily",
        "reminder_time": "8:30"
    }


@pytest.fixture
def create_habit(client, auth_headers, sample_habit):
    """Factory creating habits through the API"""
    def _create(**overrides):
        payload = {**sample_habit, **overrides}
        response = client.post("/api/habits", json=payload, headers=auth_headers)
        assert response.status_code == 201
        return response.json()["habit"]
    return _create
