"""
Abstract interfaces following the Interface Segregation Principle.

These define the contracts between the report use-case and its
collaborators, enabling dependency injection and easier testing.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from .entities import AppointmentRecord, ReportRequest, ReportResult, ServiceTotal


class IAppointmentReportReader(ABC):
    """Read-only access to completed appointments for reporting.

    Implementations raise InfrastructureError when the store cannot be read.
    Every method applies the same inclusive date range and filters.
    """

    @abstractmethod
    def list_completed(
        self,
        start_date: date,
        end_date: date,
        service_id: Optional[int] = None,
        barber_id: Optional[int] = None,
        payment_method: Optional[str] = None,
    ) -> List[AppointmentRecord]:
        """Completed appointments in chronological order."""
        pass

    @abstractmethod
    def totals_by_service(
        self,
        start_date: date,
        end_date: date,
        service_id: Optional[int] = None,
        barber_id: Optional[int] = None,
        payment_method: Optional[str] = None,
    ) -> List[ServiceTotal]:
        """Per-service totals ordered by service name."""
        pass


class IReportQuery(ABC):
    """Turns a request into rows and aggregates."""

    @abstractmethod
    def execute(self, request: ReportRequest) -> ReportResult:
        """Validate the request, then read and project the data."""
        pass


class IReportGenerator(ABC):
    """Use-case: produce the downloadable workbook for a request."""

    @abstractmethod
    def generate(self, request: ReportRequest) -> bytes:
        """Return the complete spreadsheet document."""
        pass
