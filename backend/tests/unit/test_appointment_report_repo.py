"""
Unit tests for AppointmentReportRepository failure handling.

Successful reads are covered against SQLite in the integration tests.
"""

from datetime import date
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from barberboss.core.exceptions import InfrastructureError
from barberboss.db.base import APPOINTMENT_STATUSES
from barberboss.repositories.appointment_report_repo import (
    REPORTABLE_STATUS,
    AppointmentReportRepository,
)

JANUARY = (date(2024, 1, 1), date(2024, 1, 31))


@pytest.fixture
def broken_session():
    session = Mock()
    session.query.side_effect = OperationalError(
        "SELECT 1", {}, Exception("connection refused")
    )
    return session


@pytest.mark.parametrize("method", ["list_completed", "totals_by_service"])
def test_database_failure_becomes_infrastructure_error(broken_session, method):
    repo = AppointmentReportRepository(broken_session)

    with pytest.raises(InfrastructureError) as exc_info:
        getattr(repo, method)(*JANUARY)

    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert exc_info.value.message == "Não foi possível consultar os agendamentos"


def test_repository_never_writes(broken_session):
    repo = AppointmentReportRepository(broken_session)

    with pytest.raises(InfrastructureError):
        repo.list_completed(*JANUARY)

    broken_session.add.assert_not_called()
    broken_session.commit.assert_not_called()


def test_reportable_status_is_a_known_appointment_status():
    assert REPORTABLE_STATUS in APPOINTMENT_STATUSES
