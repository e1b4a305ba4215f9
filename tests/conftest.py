"""
Pytest configuration and fixtures
"""
import os

# Configure the app before it is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["SMS_ENABLED"] = "true"
os.environ["SMS_SIMULATION"] = "true"
os.environ["REMINDER_API_KEY"] = "test-reminder-key"
os.environ["SKIP_REMINDER_AUTH"] = "false"
os.environ["ADMIN_API_KEY"] = ""
os.environ["SCHEDULER_ENABLED"] = "false"

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.database import Base, get_db
from app.models import Booking, Customer, Event, EventCategory
from app.services.sms_service import TwilioService


# Use in-memory database for testing
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="session")
def test_engine():
    """Create test database engine"""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_engine):
    """Create test database session"""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()

    # Create tables for this test
    Base.metadata.create_all(bind=test_engine)

    yield session

    # Cleanup
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(test_db_session):
    """Test client wired to the test database session"""
    from app.main import app

    def override_get_db():
        yield test_db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def simulated_service():
    """Twilio service that only simulates sends"""
    return TwilioService(Settings(sms_enabled=True, sms_simulation=True, environment="test"))


@pytest.fixture
def production_service():
    """Twilio service on the production path with a mocked client"""
    service = TwilioService(
        Settings(
            sms_enabled=True,
            sms_simulation=False,
            environment="production",
            twilio_account_sid="AC00000000000000000000000000000000",
            twilio_auth_token="test-token",
            twilio_phone_number="+447700900000",
        )
    )
    service.client = MagicMock()
    service.client.messages.create.return_value = MagicMock(sid="SM123", status="queued")
    return service


@pytest.fixture
def sample_customer(test_db_session):
    """Create sample customer with a UK mobile"""
    customer = Customer(first_name="Jane", last_name="Smith", mobile_number="+447123456789")
    test_db_session.add(customer)
    test_db_session.commit()
    test_db_session.refresh(customer)
    return customer


@pytest.fixture
def customer_without_mobile(test_db_session):
    customer = Customer(first_name="Bob", last_name="Jones", mobile_number=None)
    test_db_session.add(customer)
    test_db_session.commit()
    test_db_session.refresh(customer)
    return customer


@pytest.fixture
def sample_category(test_db_session):
    category = EventCategory(name="Quiz Night")
    test_db_session.add(category)
    test_db_session.commit()
    test_db_session.refresh(category)
    return category


@pytest.fixture
def sample_event(test_db_session, sample_category):
    """Create sample event a week from now"""
    start = (datetime.now() + timedelta(days=7)).replace(hour=19, minute=30, second=0, microsecond=0)
    event = Event(
        title="Quiz Night",
        description="Monthly pub quiz",
        start_time=start,
        capacity=50,
        category_id=sample_category.id,
    )
    test_db_session.add(event)
    test_db_session.commit()
    test_db_session.refresh(event)
    return event


@pytest.fixture
def sample_booking(test_db_session, sample_customer, sample_event):
    """Create sample booking without sending a confirmation"""
    booking = Booking(
        customer_id=sample_customer.id,
        event_id=sample_event.id,
        seats=2,
        notes="Test booking",
        send_notification=False,
    )
    test_db_session.add(booking)
    test_db_session.commit()
    test_db_session.refresh(booking)
    return booking


# Test markers
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
