"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Report values and the records read from the data store
- interfaces.py: Reader, query and generator contracts
"""

from .entities import (
    AppointmentRecord,
    ReportRequest,
    ReportResult,
    ReportRow,
    ReportSummary,
    ServiceTotal,
)
from .interfaces import IAppointmentReportReader, IReportGenerator, IReportQuery

__all__ = [
    # Domain entities
    "ReportRequest",
    "ReportRow",
    "ReportSummary",
    "ReportResult",
    "AppointmentRecord",
    "ServiceTotal",
    # Interfaces
    "IAppointmentReportReader",
    "IReportQuery",
    "IReportGenerator",
]
