"""
Read-only appointment repository backing the report queries.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from barberboss.core.exceptions import InfrastructureError
from barberboss.db.base import Appointment, Client, Service, User
from barberboss.domain.entities import AppointmentRecord, ServiceTotal
from barberboss.domain.interfaces import IAppointmentReportReader

logger = logging.getLogger(__name__)

REPORTABLE_STATUS = "completed"
CENTS = Decimal("0.01")


def _to_money(value: Any) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS)


class AppointmentReportRepository(IAppointmentReportReader):
    """Repository for report reads over Appointment following SOLID principles.

    Never writes. Any SQLAlchemy failure is logged and re-raised as
    InfrastructureError so callers can tell it apart from an empty result.
    """

    def __init__(self, db: Session):
        """
        Initialize the repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def _apply_filters(
        self,
        query: Query,
        start_date: date,
        end_date: date,
        service_id: Optional[int],
        barber_id: Optional[int],
        payment_method: Optional[str],
    ) -> Query:
        query = query.filter(
            Appointment.status == REPORTABLE_STATUS,
            Appointment.appointment_date >= start_date,
            Appointment.appointment_date <= end_date,
        )
        if service_id is not None:
            query = query.filter(Appointment.service_id == service_id)
        if barber_id is not None:
            query = query.filter(Appointment.barber_id == barber_id)
        if payment_method is not None:
            query = query.filter(Appointment.payment_method == payment_method)
        return query

    def _fail(self, operation: str, error: Exception, **context: Any) -> None:
        logger.error(
            f"Error reading appointments for report ({operation})",
            extra={"context": {"error": str(error), **context}},
            exc_info=True,
        )
        raise InfrastructureError(
            "Não foi possível consultar os agendamentos"
        ) from error

    def list_completed(
        self,
        start_date: date,
        end_date: date,
        service_id: Optional[int] = None,
        barber_id: Optional[int] = None,
        payment_method: Optional[str] = None,
    ) -> List[AppointmentRecord]:
        """
        List completed appointments in [start_date, end_date].

        Returns:
            Records ordered by date, start time and id (all ascending)
        """
        try:
            query = (
                self.db.query(
                    Appointment.id,
                    Appointment.appointment_date,
                    Appointment.start_time,
                    Client.name.label("customer_name"),
                    Service.name.label("service_name"),
                    User.name.label("barber_name"),
                    Appointment.payment_method,
                    Appointment.price,
                )
                .join(Client, Appointment.client_id == Client.id)
                .join(Service, Appointment.service_id == Service.id)
                .join(User, Appointment.barber_id == User.id)
            )
            query = self._apply_filters(
                query, start_date, end_date, service_id, barber_id, payment_method
            )
            rows = query.order_by(
                Appointment.appointment_date.asc(),
                Appointment.start_time.asc(),
                Appointment.id.asc(),
            ).all()
        except SQLAlchemyError as e:
            self._fail(
                "list_completed",
                e,
                start_date=str(start_date),
                end_date=str(end_date),
            )

        return [
            AppointmentRecord(
                id=row.id,
                date=row.appointment_date,
                start_time=row.start_time,
                customer_name=row.customer_name,
                service_name=row.service_name,
                barber_name=row.barber_name,
                payment_method=row.payment_method or "",
                price=_to_money(row.price),
            )
            for row in rows
        ]

    def totals_by_service(
        self,
        start_date: date,
        end_date: date,
        service_id: Optional[int] = None,
        barber_id: Optional[int] = None,
        payment_method: Optional[str] = None,
    ) -> List[ServiceTotal]:
        """
        Group completed appointments in [start_date, end_date] by service.

        Returns:
            One ServiceTotal per service with at least one appointment,
            ordered by service name then id
        """
        try:
            query = self.db.query(
                Service.id,
                Service.name,
                func.count(Appointment.id).label("appointment_count"),
                func.coalesce(func.sum(Appointment.price), 0).label("revenue"),
            ).join(Appointment, Appointment.service_id == Service.id)
            query = self._apply_filters(
                query, start_date, end_date, service_id, barber_id, payment_method
            )
            rows = (
                query.group_by(Service.id, Service.name)
                .order_by(Service.name.asc(), Service.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self._fail(
                "totals_by_service",
                e,
                start_date=str(start_date),
                end_date=str(end_date),
            )

        return [
            ServiceTotal(
                service_id=row.id,
                service_name=row.name,
                appointment_count=int(row.appointment_count),
                revenue=_to_money(row.revenue),
            )
            for row in rows
        ]
