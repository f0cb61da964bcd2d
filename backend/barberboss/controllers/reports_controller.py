"""
Reports controller - spreadsheet export of completed appointments.

Provides endpoints for:
- Downloading the billing or per-service workbook for a date range
- Listing the available report types
"""

import io
import logging

from flask import Blueprint, jsonify, request, send_file

from barberboss.core import config
from barberboss.core.exceptions import InfrastructureError, RenderError
from barberboss.core.validation import ValidationError, parse_report_request
from barberboss.db.session import SessionLocal
from barberboss.services.report_service import (
    REPORT_DEFINITIONS,
    get_report_generator,
    resolve_report_definition,
)
from barberboss.services.workbook_builder import XLSX_MIMETYPE

logger = logging.getLogger(__name__)

reports_bp = Blueprint("reports", __name__, url_prefix="/reports")


@reports_bp.route("/types", methods=["GET"])
def list_report_types():
    """List report types and the columns each one renders."""
    return jsonify(
        {
            "success": True,
            "default": config.get_report_default_type(),
            "data": [
                {
                    "type": definition.key,
                    "title": definition.title,
                    "columns": [column.label for column in definition.columns],
                }
                for definition in REPORT_DEFINITIONS.values()
            ],
        }
    )


@reports_bp.route("/excel", methods=["GET"])
def download_excel_report():
    """
    Download a report workbook.

    Query parameters:
    - start_date, end_date: inclusive range, YYYY-MM-DD
    - month: YYYY-MM, used when start_date/end_date are absent
    - service_id, barber_id, payment_method: optional filters
    - type: report type (default: REPORT_DEFAULT_TYPE)

    Status codes:
        200: workbook attached
        400: malformed request
        503: database unavailable
        500: workbook could not be produced
    """
    db = None
    try:
        definition = resolve_report_definition(request.args.get("type"))
        report_request = parse_report_request(request.args.to_dict())

        db = SessionLocal()
        generator = get_report_generator(definition.key, db)
        payload = generator.generate(report_request)

        logger.info(
            "Report downloaded",
            extra={
                "context": {
                    "type": definition.key,
                    "start_date": str(report_request.start_date),
                    "end_date": str(report_request.end_date),
                    "filters": report_request.filters,
                    "size_bytes": len(payload),
                }
            },
        )
        return send_file(
            io.BytesIO(payload),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=generator.suggested_filename(report_request),
        )

    except ValidationError as e:
        logger.info(
            "Report request rejected",
            extra={"context": {"field": e.field, "error": e.message}},
        )
        return (
            jsonify({"success": False, "message": e.message, "field": e.field}),
            400,
        )
    except InfrastructureError as e:
        logger.error(
            "Report failed: database unavailable",
            extra={"context": {"error": e.message}},
        )
        return (
            jsonify(
                {
                    "success": False,
                    "message": "Banco de dados indisponível. Tente novamente.",
                }
            ),
            503,
        )
    except RenderError as e:
        logger.error(
            "Report failed: workbook could not be rendered",
            extra={
                "context": {"error": e.message, "row": e.row, "column": e.column}
            },
            exc_info=True,
        )
        return (
            jsonify({"success": False, "message": "Erro ao gerar o relatório"}),
            500,
        )
    finally:
        if db is not None:
            db.close()
