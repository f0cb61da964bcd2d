# Services package initialization
# This file makes the services directory a Python package
# and allows importing service modules

from . import report_query
from . import report_service
from . import workbook_builder

__all__ = [
    "report_query",
    "report_service",
    "workbook_builder",
]
