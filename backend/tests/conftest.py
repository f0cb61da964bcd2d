"""
Central pytest configuration for the BarberBoss tests.

This file provides common fixtures, test markers, and setup
for both unit and integration tests.
"""

import io
import os
import sys
from datetime import date, time
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to sys.path for imports to work
backend_root = Path(__file__).parent.parent  # backend/
sys.path.insert(0, str(backend_root))

# Test database configuration (set early so import-time engines use it)
TEST_DATABASE_URL = "sqlite:///:memory:"  # In-memory SQLite for fast tests
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"
os.environ["LOG_TO_FILE"] = "false"

from tests.config.markers import (  # noqa: E402,F401
    pytest_collection_modifyitems,
    pytest_configure,
)

from barberboss.db import base as models  # noqa: E402
from barberboss.db.session import Base  # noqa: E402

# =====================================================
# DATABASE FIXTURES
# =====================================================


@pytest.fixture
def db_engine():
    """Fresh in-memory database with every table created."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session bound to the per-test engine."""
    Session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_db(db_session):
    """
    Barbershop data for January 2024.

    Completed appointments inside January 2024:
        2024-01-05 09:00  Ana    Corte  João   PIX        50.00
        2024-01-05 14:30  Bruno  Barba  Pedro  Dinheiro   35.00
        2024-01-20 10:00  Carla  Corte  Pedro  PIX        45.50
    Total: 3 appointments, 130.50.

    Also present, and never reported for January:
        a cancelled appointment on 2024-01-10
        a scheduled appointment on 2024-01-31
        completed appointments on 2023-12-31 and 2024-02-01
    """
    joao = models.User(name="João", email="joao@barberboss.test", role="barber")
    pedro = models.User(name="Pedro", role="barber")
    ana = models.Client(name="Ana", phone="11999990001")
    bruno = models.Client(name="Bruno")
    carla = models.Client(name="Carla")
    corte = models.Service(name="Corte", price=Decimal("50.00"), duration_minutes=30)
    barba = models.Service(name="Barba", price=Decimal("35.00"), duration_minutes=20)
    db_session.add_all([joao, pedro, ana, bruno, carla, corte, barba])
    db_session.flush()

    def appointment(day, start, client, service, barber, method, price, status):
        return models.Appointment(
            appointment_date=day,
            start_time=start,
            client_id=client.id,
            service_id=service.id,
            barber_id=barber.id,
            payment_method=method,
            price=Decimal(price),
            status=status,
        )

    db_session.add_all(
        [
            # Inserted out of order on purpose: reports sort by date and time
            appointment(
                date(2024, 1, 20), time(10, 0), carla, corte, pedro, "PIX", "45.50",
                "completed",
            ),
            appointment(
                date(2024, 1, 5), time(14, 30), bruno, barba, pedro, "Dinheiro",
                "35.00", "completed",
            ),
            appointment(
                date(2024, 1, 5), time(9, 0), ana, corte, joao, "PIX", "50.00",
                "completed",
            ),
            appointment(
                date(2024, 1, 10), time(11, 0), ana, barba, joao, "PIX", "35.00",
                "cancelled",
            ),
            appointment(
                date(2024, 1, 31), time(16, 0), bruno, corte, joao, "PIX", "50.00",
                "scheduled",
            ),
            appointment(
                date(2023, 12, 31), time(9, 0), carla, corte, joao, "Dinheiro",
                "50.00", "completed",
            ),
            appointment(
                date(2024, 2, 1), time(9, 0), carla, barba, pedro, "PIX", "35.00",
                "completed",
            ),
        ]
    )
    db_session.commit()

    return {
        "session": db_session,
        "barbers": {"joao": joao.id, "pedro": pedro.id},
        "services": {"corte": corte.id, "barba": barba.id},
    }


# =====================================================
# BASIC MOCK FIXTURES
# =====================================================


@pytest.fixture
def mock_reader():
    """Reader mock with empty defaults; see tests.factories."""
    from tests.factories.repository_factories import ReportReaderFactory

    return ReportReaderFactory.create_mock_reader()


@pytest.fixture
def mock_db_session():
    """Create a mock database session for testing."""
    session = Mock()
    session.query = Mock()
    session.close = Mock()
    return session


# =====================================================
# FLASK APPLICATION FIXTURES
# =====================================================


@pytest.fixture
def app():
    """Flask application configured for testing."""
    from barberboss.main import create_app

    flask_app = create_app(testing=True)
    yield flask_app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


# =====================================================
# WORKBOOK HELPERS
# =====================================================


@pytest.fixture
def load_workbook():
    """Open XLSX bytes with openpyxl for assertions."""
    import openpyxl

    def _load(payload: bytes):
        return openpyxl.load_workbook(io.BytesIO(payload))

    return _load
