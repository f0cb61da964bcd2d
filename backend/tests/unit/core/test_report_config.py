"""
Unit tests for environment-driven report configuration and error types.
"""

from unittest.mock import patch

import pytest

from barberboss.core import config
from barberboss.core.exceptions import InfrastructureError, RenderError, ReportError
from barberboss.core.validation import ValidationError


class TestReportConfig:
    def test_defaults(self, monkeypatch):
        for name in (
            "REPORT_CURRENCY_SYMBOL",
            "REPORT_DATE_FORMAT",
            "REPORT_DEFAULT_TYPE",
            "REPORT_MAX_RANGE_DAYS",
        ):
            monkeypatch.delenv(name, raising=False)

        assert config.get_report_currency_symbol() == "R$"
        assert config.get_report_date_format() == "dd/mm/yyyy"
        assert config.get_report_default_type() == "billing"
        assert config.get_report_max_range_days() == 366

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("REPORT_CURRENCY_SYMBOL", "€")
        monkeypatch.setenv("REPORT_DATE_FORMAT", "yyyy-mm-dd")
        monkeypatch.setenv("REPORT_DEFAULT_TYPE", "SERVICES")
        monkeypatch.setenv("REPORT_MAX_RANGE_DAYS", "90")

        assert config.get_report_currency_symbol() == "€"
        assert config.get_report_date_format() == "yyyy-mm-dd"
        assert config.get_report_default_type() == "services"
        assert config.get_report_max_range_days() == 90

    @pytest.mark.parametrize(
        "name, value, getter, expected",
        [
            ("REPORT_CURRENCY_SYMBOL", "  ", config.get_report_currency_symbol, "R$"),
            ("REPORT_DATE_FORMAT", "###", config.get_report_date_format, "dd/mm/yyyy"),
            ("REPORT_DEFAULT_TYPE", "payroll", config.get_report_default_type, "billing"),
            ("REPORT_MAX_RANGE_DAYS", "many", config.get_report_max_range_days, 366),
            ("REPORT_MAX_RANGE_DAYS", "-5", config.get_report_max_range_days, 366),
        ],
    )
    def test_invalid_values_fall_back(self, monkeypatch, name, value, getter, expected):
        monkeypatch.setenv(name, value)

        assert getter() == expected

    @pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("0", False)])
    def test_log_flags(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LOG_JSON", raw)

        assert config.get_log_json() is expected

    @pytest.mark.parametrize("raw, expected", [("true", True), ("false", False)])
    def test_sql_timing_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LOG_SQL_TIMING", raw)

        assert config.get_log_sql_timing() is expected

    def test_sql_timing_defaults_off(self, monkeypatch):
        monkeypatch.delenv("LOG_SQL_TIMING", raising=False)

        assert config.get_log_sql_timing() is False

    def test_logged_config_reflects_current_environment(self, monkeypatch):
        monkeypatch.setenv("REPORT_CURRENCY_SYMBOL", "US$")
        monkeypatch.setenv("REPORT_MAX_RANGE_DAYS", "31")

        with patch.object(config, "logger") as logger:
            config.log_report_config()

        context = logger.info.call_args.kwargs["extra"]["context"]
        assert context["currency_symbol"] == "US$"
        assert context["max_range_days"] == 31

    def test_database_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")

        assert config.get_database_url() == "sqlite:///:memory:"


class TestErrorTypes:
    def test_report_errors_share_a_base(self):
        assert issubclass(InfrastructureError, ReportError)
        assert issubclass(RenderError, ReportError)
        assert not issubclass(ValidationError, ReportError)

    def test_render_error_location(self):
        error = RenderError("Expected a number", row=3, column="amount")

        assert error.row == 3
        assert error.column == "amount"
        assert str(error) == "Expected a number (row=3, column=amount)"

    def test_render_error_without_location(self):
        error = RenderError("Could not serialize workbook")

        assert error.row is None
        assert str(error) == "Could not serialize workbook"
        assert error.message == "Could not serialize workbook"
