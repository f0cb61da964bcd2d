"""
Report queries - turn a ReportRequest into rows and aggregates.

Each query owns the column schema of its rows, so the keys produced here
and the header rendered by the workbook builder come from one place.
Requests are validated before the reader is touched.

Each query performs a single read; the summary is computed from the rows
that read returned, so the footer always totals the rows shown above it.
"""

import logging
from decimal import Decimal
from typing import Tuple

from barberboss.core.validation import validate_report_request
from barberboss.domain.entities import (
    ReportRequest,
    ReportResult,
    ReportRow,
    ReportSummary,
)
from barberboss.domain.interfaces import IAppointmentReportReader, IReportQuery
from barberboss.services.workbook_builder import CURRENCY, DATE, NUMBER, TEXT, Column

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class BillingReportQuery(IReportQuery):
    """One row per completed appointment, totalled by amount charged."""

    columns: Tuple[Column, ...] = (
        Column("date", "Data", DATE),
        Column("customer", "Cliente", TEXT),
        Column("service", "Serviço", TEXT),
        Column("barber", "Barbeiro", TEXT, width=22),
        Column("payment_method", "Forma de pagamento", TEXT, width=22),
        Column("amount", "Valor", CURRENCY, aggregate="sum"),
    )

    def __init__(self, reader: IAppointmentReportReader) -> None:
        self.reader = reader

    def execute(self, request: ReportRequest) -> ReportResult:
        validate_report_request(request)
        filters = request.filters

        records = self.reader.list_completed(
            request.start_date, request.end_date, **filters
        )

        rows = tuple(
            ReportRow(
                [
                    ("date", record.date),
                    ("customer", record.customer_name),
                    ("service", record.service_name),
                    ("barber", record.barber_name),
                    ("payment_method", record.payment_method),
                    ("amount", record.price),
                ]
            )
            for record in records
        )
        revenue = sum((record.price for record in records), ZERO)

        logger.info(
            "Billing report query executed",
            extra={
                "context": {
                    "start_date": str(request.start_date),
                    "end_date": str(request.end_date),
                    "filters": filters,
                    "rows": len(rows),
                    "revenue": str(revenue),
                }
            },
        )
        return ReportResult(
            rows=rows,
            summary=ReportSummary(values={"amount": revenue}, record_count=len(rows)),
        )


class ServiceSummaryReportQuery(IReportQuery):
    """One row per service: appointments completed and revenue."""

    columns: Tuple[Column, ...] = (
        Column("service", "Serviço", TEXT),
        Column("appointments", "Atendimentos", NUMBER, aggregate="sum"),
        Column("revenue", "Faturamento", CURRENCY, aggregate="sum"),
    )

    def __init__(self, reader: IAppointmentReportReader) -> None:
        self.reader = reader

    def execute(self, request: ReportRequest) -> ReportResult:
        validate_report_request(request)
        filters = request.filters

        service_totals = self.reader.totals_by_service(
            request.start_date, request.end_date, **filters
        )

        rows = tuple(
            ReportRow(
                [
                    ("service", total.service_name),
                    ("appointments", total.appointment_count),
                    ("revenue", total.revenue),
                ]
            )
            for total in service_totals
        )
        count = sum(total.appointment_count for total in service_totals)
        revenue = sum((total.revenue for total in service_totals), ZERO)

        logger.info(
            "Service summary report query executed",
            extra={
                "context": {
                    "start_date": str(request.start_date),
                    "end_date": str(request.end_date),
                    "filters": filters,
                    "rows": len(rows),
                    "revenue": str(revenue),
                }
            },
        )
        return ReportResult(
            rows=rows,
            summary=ReportSummary(
                values={"appointments": count, "revenue": revenue},
                record_count=count,
            ),
        )
