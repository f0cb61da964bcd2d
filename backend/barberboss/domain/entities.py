"""
Domain entities - Pure business logic, no framework dependencies.

Report values are immutable: a request, its rows and its summary are
created once per report generation and never modified afterwards.
"""

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple


@dataclass(frozen=True)
class ReportRequest:
    """A date range (inclusive) plus optional filters.

    Validation happens in the report query, not here, so that an inverted
    range can still be expressed and rejected with a ValidationError.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    service_id: Optional[int] = None
    barber_id: Optional[int] = None
    payment_method: Optional[str] = None

    @classmethod
    def for_month(cls, year: int, month: int, **filters: Any) -> "ReportRequest":
        """Request covering every day of the given calendar month.

        Raises:
            ValidationError: if month is not in 1..12
        """
        if not 1 <= month <= 12:
            # Imported here: core.validation depends on this module
            from barberboss.core.validation import ValidationError

            raise ValidationError("Mês inválido. Use um valor entre 1 e 12", "month")
        last_day = monthrange(year, month)[1]
        return cls(
            start_date=date(year, month, 1),
            end_date=date(year, month, last_day),
            **filters,
        )

    @property
    def filters(self) -> Dict[str, Any]:
        """Filters that were actually set."""
        candidates = {
            "service_id": self.service_id,
            "barber_id": self.barber_id,
            "payment_method": self.payment_method,
        }
        return {key: value for key, value in candidates.items() if value is not None}


class ReportRow(Mapping[str, Any]):
    """One normalized record: an ordered, read-only column -> value mapping."""

    __slots__ = ("_items",)

    def __init__(self, items: Any):
        pairs = items.items() if isinstance(items, Mapping) else items
        object.__setattr__(self, "_items", tuple((str(k), v) for k, v in pairs))

    def __setattr__(self, name, value):
        raise AttributeError("ReportRow is immutable")

    def __getitem__(self, key: str) -> Any:
        for item_key, value in self._items:
            if item_key == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ReportRow):
            return self._items == other._items
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"ReportRow({dict(self._items)!r})"

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self._items)


@dataclass(frozen=True)
class ReportSummary:
    """Aggregates over the filtered set, keyed by the column they total."""

    values: Mapping[str, Any] = field(default_factory=dict)
    record_count: int = 0

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


@dataclass(frozen=True)
class ReportResult:
    """What a report query hands to the workbook builder."""

    rows: Tuple[ReportRow, ...] = ()
    summary: Optional[ReportSummary] = None


@dataclass(frozen=True)
class AppointmentRecord:
    """A completed appointment as read from the data store."""

    id: int
    date: date
    start_time: Optional[time]
    customer_name: str
    service_name: str
    barber_name: str
    payment_method: str
    price: Decimal


@dataclass(frozen=True)
class ServiceTotal:
    """Completed appointments and revenue of one service."""

    service_id: int
    service_name: str
    appointment_count: int
    revenue: Decimal
