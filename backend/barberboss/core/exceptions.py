"""
Custom exceptions for the application.

Report generation either returns a complete document or raises one of
these; there is no partial workbook.
"""

from typing import Optional


class ReportError(Exception):
    """Base class for report generation failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InfrastructureError(ReportError):
    """
    Raised when the data store is unreachable or faults during a read.

    Kept distinct from an empty result so callers can tell "no data"
    from "could not fetch data". Never retried here.
    """

    pass


class RenderError(ReportError):
    """
    Raised when the workbook cannot be serialized.

    Always a defect. Carries the offending data row (1-based, header
    excluded) and column key when known.
    """

    def __init__(
        self,
        message: str,
        row: Optional[int] = None,
        column: Optional[str] = None,
    ):
        location = []
        if row is not None:
            location.append(f"row={row}")
        if column is not None:
            location.append(f"column={column}")
        full_message = f"{message} ({', '.join(location)})" if location else message
        super().__init__(full_message)
        self.row = row
        self.column = column
