import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()

from barberboss.core import config  # noqa: E402
from barberboss.core.logging_config import setup_logging  # noqa: E402
from barberboss.db.session import get_engine  # noqa: E402

logger = logging.getLogger(__name__)


def test_database_connection() -> bool:
    """Return True when a trivial query succeeds on the configured database."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(
            "Database connection check failed",
            extra={"context": {"error": str(e)}},
        )
        return False


def create_app(testing: bool = False) -> Flask:
    app = Flask(__name__)
    app.config["TESTING"] = testing or os.getenv("TESTING", "").lower() in (
        "1",
        "true",
        "yes",
    )
    app.config["JSON_AS_ASCII"] = False

    setup_logging(
        app=app,  # Pass app to register request/response hooks
        log_level=config.get_log_level(),
        enable_sql_timing=config.get_log_sql_timing(),
        log_to_file=config.get_log_to_file() and not app.config["TESTING"],
        use_json_format=config.get_log_json(),
    )
    config.log_report_config()

    @app.route("/health")
    def health_check():
        """Health check endpoint for Docker"""
        db_status = test_database_connection()
        return jsonify(
            {
                "status": "healthy" if db_status else "unhealthy",
                "database": "connected" if db_status else "disconnected",
            }
        ), (200 if db_status else 503)

    from barberboss.controllers.reports_controller import reports_bp

    app.register_blueprint(reports_bp)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=False)
