"""
Common validation utilities for BarberBoss reports.

This module provides the validation patterns shared by the HTTP layer
(raw query-string values) and the report query (typed ReportRequest
values), so both reject the same malformed requests with the same
messages.
"""

import logging
from calendar import monthrange
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from barberboss.core import config
from barberboss.domain.entities import ReportRequest

logger = logging.getLogger(__name__)

ALLOWED_PAYMENT_METHODS = [
    "PIX",
    "Dinheiro",
    "Cartão de Crédito",
    "Cartão de Débito",
    "Transferência Bancária",
    "Outros",
]


class ValidationError(Exception):
    """Custom exception for validation errors."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.error_fields: List[Optional[str]] = []
        self.is_valid: bool = True
        self.cleaned_data: Dict[str, Any] = {}

    def add_error(self, message: str, field: Optional[str] = None):
        """Add validation error."""
        error_msg = f"{field}: {message}" if field else message
        self.errors.append(error_msg)
        self.error_fields.append(field)
        self.is_valid = False
        logger.warning(f"Validation error: {error_msg}")

    def raise_if_invalid(self) -> None:
        """Raise ValidationError carrying every collected message."""
        if not self.is_valid:
            raise ValidationError("; ".join(self.errors), self.error_fields[0])


class BaseValidator:
    """Base validator with common validation methods."""

    def validate(
        self, data: Dict[str, Any]
    ) -> ValidationResult:  # pragma: no cover - interface definition
        """Validate data for a specific entity type."""
        raise NotImplementedError("Subclasses must implement validate")

    @staticmethod
    def validate_required_field(
        value: Any, field_name: str, result: ValidationResult
    ) -> bool:
        """Validate that a required field is present and not empty."""
        if (
            value is None
            or value == ""
            or (isinstance(value, str) and value.strip() == "")
        ):
            result.add_error(f"{field_name} é obrigatório", field_name)
            return False
        return True

    @staticmethod
    def validate_date(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[date]:
        """Validate and convert date field."""
        if value is None or value == "":
            return None

        # datetime is a date subclass; keep only the calendar day
        if isinstance(value, datetime):
            return value.date()

        if isinstance(value, date):
            return value

        if isinstance(value, str):
            try:
                return datetime.strptime(value.strip(), "%Y-%m-%d").date()
            except ValueError:
                result.add_error("Data inválida. Use formato YYYY-MM-DD", field_name)
                return None

        result.add_error("Formato de data inválido", field_name)
        return None

    @staticmethod
    def validate_integer(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
    ) -> Optional[int]:
        """Validate and convert integer field."""
        if value is None or value == "":
            return None

        if isinstance(value, bool):
            result.add_error("Valor deve ser um número inteiro", field_name)
            return None

        try:
            int_value = int(value)
        except (ValueError, TypeError):
            result.add_error("Valor deve ser um número inteiro", field_name)
            return None

        if min_value is not None and int_value < min_value:
            result.add_error(f"Valor deve ser maior ou igual a {min_value}", field_name)
            return None

        if max_value is not None and int_value > max_value:
            result.add_error(f"Valor deve ser menor ou igual a {max_value}", field_name)
            return None

        return int_value

    @staticmethod
    def validate_string(
        value: Any,
        field_name: str,
        result: ValidationResult,
        max_length: Optional[int] = None,
        allowed_values: Optional[List[str]] = None,
    ) -> Optional[str]:
        """Validate string field."""
        if value is None:
            return None

        if not isinstance(value, str):
            value = str(value)

        value = value.strip()

        if max_length is not None and len(value) > max_length:
            result.add_error(f"Deve ter no máximo {max_length} caracteres", field_name)
            return None

        if value and allowed_values is not None and value not in allowed_values:
            result.add_error(
                f"Valor deve ser um dos: {', '.join(allowed_values)}", field_name
            )
            return None

        return value if value else None


class ReportRequestValidator(BaseValidator):
    """Validator for report requests.

    Accepts either explicit ``start_date``/``end_date`` or a ``month``
    (YYYY-MM) that expands to the whole calendar month.
    """

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        month = data.get("month")
        if month not in (None, "") and not data.get("start_date") and not data.get(
            "end_date"
        ):
            bounds = self.validate_month(month, "month", result)
            if bounds:
                result.cleaned_data["start_date"], result.cleaned_data["end_date"] = (
                    bounds
                )
        else:
            has_start = self.validate_required_field(
                data.get("start_date"), "start_date", result
            )
            has_end = self.validate_required_field(
                data.get("end_date"), "end_date", result
            )
            if has_start:
                start_date = self.validate_date(
                    data.get("start_date"), "start_date", result
                )
                if start_date:
                    result.cleaned_data["start_date"] = start_date
            if has_end:
                end_date = self.validate_date(data.get("end_date"), "end_date", result)
                if end_date:
                    result.cleaned_data["end_date"] = end_date

        start_date = result.cleaned_data.get("start_date")
        end_date = result.cleaned_data.get("end_date")
        if start_date and end_date:
            self.validate_range(start_date, end_date, result)

        for field_name in ("service_id", "barber_id"):
            identifier = self.validate_integer(
                data.get(field_name), field_name, result, min_value=1
            )
            if identifier is not None:
                result.cleaned_data[field_name] = identifier

        payment_method = self.validate_string(
            data.get("payment_method"),
            "payment_method",
            result,
            max_length=50,
            allowed_values=ALLOWED_PAYMENT_METHODS,
        )
        if payment_method:
            result.cleaned_data["payment_method"] = payment_method

        return result

    @staticmethod
    def validate_month(value: Any, field_name: str, result: ValidationResult):
        """Validate a YYYY-MM month and return its (first_day, last_day)."""
        try:
            parsed = datetime.strptime(str(value).strip(), "%Y-%m")
        except ValueError:
            result.add_error("Mês inválido. Use formato YYYY-MM", field_name)
            return None
        last_day = monthrange(parsed.year, parsed.month)[1]
        return (
            date(parsed.year, parsed.month, 1),
            date(parsed.year, parsed.month, last_day),
        )

    @staticmethod
    def validate_range(start_date: date, end_date: date, result: ValidationResult):
        """Validate an inclusive date range against ordering and size limits."""
        if start_date > end_date:
            result.add_error(
                "Data inicial deve ser anterior ou igual à data final", "start_date"
            )
            return

        max_days = config.get_report_max_range_days()
        if (end_date - start_date).days + 1 > max_days:
            result.add_error(
                f"Período deve ter no máximo {max_days} dias", "end_date"
            )


def parse_report_request(data: Dict[str, Any]) -> ReportRequest:
    """Build a ReportRequest from raw (query-string) values.

    Raises:
        ValidationError: with every problem found, field of the first one
    """
    result = ReportRequestValidator().validate(data)
    result.raise_if_invalid()
    return ReportRequest(**result.cleaned_data)


def validate_report_request(request: ReportRequest) -> None:
    """Check an already-typed ReportRequest.

    Raises:
        ValidationError: if dates are missing or inverted, a filter is
            malformed, or the range exceeds the configured maximum
    """
    result = ReportRequestValidator().validate(
        {
            "start_date": request.start_date,
            "end_date": request.end_date,
            "service_id": request.service_id,
            "barber_id": request.barber_id,
            "payment_method": request.payment_method,
        }
    )
    result.raise_if_invalid()
