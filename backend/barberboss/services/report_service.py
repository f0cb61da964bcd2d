"""
Report service - the "generate report workbook" use-case.

A single ReportGenerator runs any report type; the type is chosen from
REPORT_DEFINITIONS by configuration (REPORT_DEFAULT_TYPE) or by the
caller, never by subclassing the generator.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Type

from sqlalchemy.orm import Session

from barberboss.core import config
from barberboss.core.logging_config import log_performance
from barberboss.core.validation import ValidationError
from barberboss.domain.entities import ReportRequest
from barberboss.domain.interfaces import (
    IAppointmentReportReader,
    IReportGenerator,
    IReportQuery,
)
from barberboss.repositories.appointment_report_repo import (
    AppointmentReportRepository,
)
from barberboss.services.report_query import (
    BillingReportQuery,
    ServiceSummaryReportQuery,
)
from barberboss.services.workbook_builder import Column, WorkbookBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportDefinition:
    """A named report type: what it is called and which query feeds it."""

    key: str
    title: str
    filename_prefix: str
    query_class: Type[IReportQuery]

    @property
    def columns(self) -> Tuple[Column, ...]:
        return self.query_class.columns


REPORT_DEFINITIONS: Dict[str, ReportDefinition] = {
    "billing": ReportDefinition(
        key="billing",
        title="Faturamento",
        filename_prefix="faturamento",
        query_class=BillingReportQuery,
    ),
    "services": ReportDefinition(
        key="services",
        title="Serviços",
        filename_prefix="servicos",
        query_class=ServiceSummaryReportQuery,
    ),
}


class ReportGenerator(IReportGenerator):
    """Run a report query and render its result into an XLSX workbook."""

    def __init__(
        self,
        definition: ReportDefinition,
        query: IReportQuery,
        builder: Optional[WorkbookBuilder] = None,
    ) -> None:
        self.definition = definition
        self.query = query
        self.builder = builder or WorkbookBuilder()

    def generate(self, request: ReportRequest) -> bytes:
        """
        Produce the complete workbook for a request.

        Raises:
            ValidationError: malformed request; nothing was read
            InfrastructureError: the data store could not be read
            RenderError: the workbook could not be serialized
        """
        started = time.perf_counter()

        result = self.query.execute(request)
        payload = self.builder.build(
            self.definition.columns,
            result.rows,
            result.summary,
            sheet_name=self.definition.title,
            title=self.document_title(request),
        )

        log_performance(
            "report.generate",
            (time.perf_counter() - started) * 1000,
            report_type=self.definition.key,
            rows=len(result.rows),
            size_bytes=len(payload),
        )
        return payload

    def execute(self, request: ReportRequest) -> bytes:
        """Alias of generate(), the name the web layer's use-cases expose."""
        return self.generate(request)

    def document_title(self, request: ReportRequest) -> str:
        return (
            f"{self.definition.title} "
            f"{request.start_date:%d/%m/%Y} a {request.end_date:%d/%m/%Y}"
        )

    def suggested_filename(self, request: ReportRequest) -> str:
        """Download name, e.g. faturamento_2024-01-01_2024-01-31.xlsx."""
        return (
            f"{self.definition.filename_prefix}_"
            f"{request.start_date.isoformat()}_{request.end_date.isoformat()}.xlsx"
        )


def resolve_report_definition(report_type: Optional[str] = None) -> ReportDefinition:
    """Look up a report type, falling back to the configured default."""
    key = (report_type or config.get_report_default_type()).strip().lower()
    definition = REPORT_DEFINITIONS.get(key)
    if definition is None:
        raise ValidationError(
            f"Tipo de relatório inválido. Use um dos: {', '.join(REPORT_DEFINITIONS)}",
            "type",
        )
    return definition


def build_report_generator(
    report_type: Optional[str],
    reader: IAppointmentReportReader,
    builder: Optional[WorkbookBuilder] = None,
) -> ReportGenerator:
    """Wire a generator for the given report type around any reader."""
    definition = resolve_report_definition(report_type)
    return ReportGenerator(definition, definition.query_class(reader), builder)


def get_report_generator(
    report_type: Optional[str], db: Session
) -> ReportGenerator:
    """Wire a generator backed by the SQLAlchemy appointment repository."""
    return build_report_generator(report_type, AppointmentReportRepository(db))
