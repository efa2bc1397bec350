from contextlib import nullcontext
from datetime import date
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.check_in.dependencies import get_today
from app.api.event_staff.models import EventStaff
from app.api.profiles.models import Profile
from app.api.tickets.models import Ticket
from app.core.config import Environment, settings
from app.core.database import Base, get_session_factory
from app.core.security import create_access_token, get_identity_provider
from app.core.ticket_tokens import sign_as_token
from main import app

QR_SECRET = 'shh'
TODAY = date(2025, 6, 1)
EVENT_ID = 'event-1'
OTHER_EVENT_ID = 'event-2'


@pytest.fixture(scope='session', autouse=True)
def check_test_environment():
    if settings.ENVIRONMENT != Environment.TEST:
        raise RuntimeError(
            f'Tests can only be executed in test environment. Current environment: {settings.ENVIRONMENT}'
        )


@pytest.fixture(scope='session', autouse=True)
def setup_test_secrets():
    """Set secrets for testing so startup validation passes"""
    original_secret_key = settings.SECRET_KEY
    original_qr_secret = settings.QR_SIGNING_SECRET

    settings.SECRET_KEY = 'test_secret_key'
    settings.QR_SIGNING_SECRET = QR_SECRET
    get_identity_provider.cache_clear()

    yield

    settings.SECRET_KEY = original_secret_key
    settings.QR_SIGNING_SECRET = original_qr_secret
    get_identity_provider.cache_clear()


@pytest.fixture(scope='session')
def test_db_engine():
    engine = create_engine(
        settings.SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope='function')
def db_session(test_db_engine):
    """Create a fresh database session for each test"""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_db_engine
    )

    # Drop and recreate all tables before each test
    Base.metadata.drop_all(bind=test_db_engine)
    Base.metadata.create_all(bind=test_db_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope='function')
def client(db_session):
    def override_session_factory():
        # The route opens its own session, tests hand it the shared one
        return lambda: nullcontext(db_session)

    app.dependency_overrides[get_session_factory] = override_session_factory
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def get_auth_headers_for_user(profile: Profile) -> dict:
    """Generate auth headers for a specific profile"""
    access_token = create_access_token(
        data={'user_id': profile.id, 'email': profile.email}
    )
    return {'Authorization': f'Bearer {access_token}'}


@pytest.fixture(scope='function')
def create_profile(db_session):
    """Factory fixture to create profiles"""

    def _create_profile(user_id: str, role: str = 'attendee'):
        profile = Profile(
            id=user_id,
            email=f'{user_id}@example.com',
            full_name=f'User {user_id}',
            role=role,
        )
        db_session.add(profile)
        db_session.commit()
        return profile

    yield _create_profile


@pytest.fixture(scope='function')
def staff_user(db_session, create_profile):
    """An attendee-role profile assigned as staff to the test event"""
    profile = create_profile('staff-1')
    db_session.add(EventStaff(event_id=EVENT_ID, user_id=profile.id))
    db_session.commit()
    return profile


@pytest.fixture(scope='function')
def staff_headers(staff_user):
    return get_auth_headers_for_user(staff_user)


@pytest.fixture(scope='function')
def create_ticket(db_session):
    """Factory fixture to create tickets signed with the test QR secret"""

    def _create_ticket(
        ticket_code: str = 'ABC123',
        event_id: str = EVENT_ID,
        valid_for_date: date = TODAY,
        attendee_name: str = 'Ada Lovelace',
        ticket_tier: str = 'VIP',
    ):
        ticket = Ticket(
            event_id=event_id,
            ticket_code=ticket_code,
            qr_payload=sign_as_token(QR_SECRET, ticket_code),
            status='active',
            valid_for_date=valid_for_date,
            attendee_name=attendee_name,
            ticket_tier=ticket_tier,
        )
        db_session.add(ticket)
        db_session.commit()
        return ticket

    yield _create_ticket


@pytest.fixture(scope='function')
def test_ticket(create_ticket):
    return create_ticket()


def scan(client, ticket_or_payload, headers, event_id=EVENT_ID, **extra):
    """POST a scan of a ticket (or raw payload) to the check-in endpoint"""
    payload = getattr(ticket_or_payload, 'qr_payload', ticket_or_payload)
    return client.post(
        '/verify-qr',
        json={'qr_payload': payload, 'event_id': event_id, **extra},
        headers=headers,
    )


@pytest.fixture
def mock_auth_response():
    """Build fake responses for the remote identity provider"""

    def _mock_response(status_code: int, body: dict = None):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = body or {}
        return response

    return _mock_response
