"""Pytest configuration and shared fixtures."""

import copy
import os
from typing import Any

import pytest

# Set test environment before importing settings
os.environ["REPORTING_ENVIRONMENT"] = "development"
os.environ["REPORTING_LOG_LEVEL"] = "DEBUG"
os.environ["REPORTING_LOG_FORMAT"] = "text"

from reporting.models import ReportDefinition  # noqa: E402

BASE_URL = "http://localhost:5601/app/kibana#/dashboard/7adfa750"


@pytest.fixture
def scheduled_definition_data() -> dict[str, Any]:
    """Recurring, active, channel-delivered definition as the backend sends it."""
    return {
        "report_params": {
            "report_name": "Daily ops",
            "description": "Ops dashboard snapshot",
            "report_source": "Dashboard",
            "core_params": {
                "base_url": BASE_URL,
                "report_format": "pdf",
                "time_duration": "PT1H",
                "window_width": 1200,
            },
        },
        "trigger": {
            "trigger_type": "Schedule",
            "trigger_params": {
                "enabled": True,
                "enabled_time": 1704067200000,
                "schedule_type": "Recurring",
                "schedule": {
                    "interval": {"period": 1, "unit": "DAYS", "start_time": 1704067200000},
                },
            },
        },
        "delivery": {
            "delivery_type": "Channel",
            "delivery_params": {
                "kibana_recipients": ["admin"],
                "recipients": ["ops@example.com", "oncall@example.com"],
                "title": "Daily ops report",
                "text_description": "Attached is the daily report",
                "email_format": "Attachment",
            },
        },
        "status": "Active",
        # 2024-01-01T12:00:00Z and 2024-01-01T13:00:00Z
        "time_created": 1704110400000,
        "last_updated": 1704114000000,
    }


@pytest.fixture
def cron_definition_data(scheduled_definition_data: dict[str, Any]) -> dict[str, Any]:
    """Cron based definition."""
    data = copy.deepcopy(scheduled_definition_data)
    data["trigger"]["trigger_params"]["schedule_type"] = "Cron based"
    data["trigger"]["trigger_params"]["schedule"] = {
        "cron": {"expression": "0 9 * * 1", "timezone": "UTC"},
    }
    return data


@pytest.fixture
def on_demand_definition_data(scheduled_definition_data: dict[str, Any]) -> dict[str, Any]:
    """On-demand definition delivered to dashboard users only."""
    data = copy.deepcopy(scheduled_definition_data)
    data["trigger"] = {"trigger_type": "On demand"}
    data["delivery"] = {
        "delivery_type": "Kibana user",
        "delivery_params": {"kibana_recipients": ["admin"]},
    }
    return data


@pytest.fixture
def scheduled_definition(scheduled_definition_data: dict[str, Any]) -> ReportDefinition:
    return ReportDefinition.model_validate(scheduled_definition_data)


@pytest.fixture
def cron_definition(cron_definition_data: dict[str, Any]) -> ReportDefinition:
    return ReportDefinition.model_validate(cron_definition_data)


@pytest.fixture
def on_demand_definition(on_demand_definition_data: dict[str, Any]) -> ReportDefinition:
    return ReportDefinition.model_validate(on_demand_definition_data)


@pytest.fixture
def corrupted_definition(scheduled_definition_data: dict[str, Any]) -> ReportDefinition:
    """Recurring definition that also carries a stale cron schedule."""
    data = copy.deepcopy(scheduled_definition_data)
    data["trigger"]["trigger_params"]["schedule"]["cron"] = {
        "expression": "0 0 * * *",
        "timezone": "UTC",
    }
    return ReportDefinition.model_validate(data)


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (require external services)"
    )
