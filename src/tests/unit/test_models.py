"""Unit tests for report definition models."""

from datetime import datetime, timezone
from typing import Any

import pytest
from pydantic import ValidationError

from reporting.models import (
    DefinitionStatus,
    ReportDefinition,
    ReportDefinitionResponse,
    ScheduleType,
    TriggerType,
    to_epoch_millis,
)


class TestDecoding:
    """Test decoding backend documents."""

    def test_scheduled_definition(self, scheduled_definition: ReportDefinition) -> None:
        assert scheduled_definition.report_params.report_name == "Daily ops"
        assert scheduled_definition.trigger.trigger_type == TriggerType.SCHEDULE
        params = scheduled_definition.trigger.trigger_params
        assert params is not None
        assert params.schedule_type == ScheduleType.RECURRING
        assert params.schedule.interval is not None
        assert params.schedule.interval.period == 1
        assert params.schedule.cron is None
        assert scheduled_definition.status == DefinitionStatus.ACTIVE
        assert scheduled_definition.is_enabled is True

    def test_epoch_millis_timestamps(self, scheduled_definition: ReportDefinition) -> None:
        assert scheduled_definition.time_created == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
        assert scheduled_definition.last_updated == datetime(2024, 1, 1, 13, tzinfo=timezone.utc)

    def test_iso_timestamps(self, scheduled_definition_data: dict[str, Any]) -> None:
        scheduled_definition_data["time_created"] = "2024-01-01T12:00:00"
        definition = ReportDefinition.model_validate(scheduled_definition_data)
        assert definition.time_created == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

    def test_on_demand_has_no_trigger_params(
        self, on_demand_definition: ReportDefinition
    ) -> None:
        assert on_demand_definition.trigger.is_on_demand is True
        assert on_demand_definition.trigger.trigger_params is None
        assert on_demand_definition.is_enabled is False

    def test_camel_case_text_description(self, scheduled_definition_data: dict[str, Any]) -> None:
        params = scheduled_definition_data["delivery"]["delivery_params"]
        params["textDescription"] = params.pop("text_description")
        definition = ReportDefinition.model_validate(scheduled_definition_data)
        assert definition.delivery.delivery_params.text_description == (
            "Attached is the daily report"
        )

    def test_envelope(self, scheduled_definition_data: dict[str, Any]) -> None:
        response = ReportDefinitionResponse.model_validate(
            {"report_definition": scheduled_definition_data}
        )
        assert response.report_definition.report_params.report_source == "Dashboard"


class TestValidation:
    """Test schema violations fail fast."""

    def test_missing_report_params(self, scheduled_definition_data: dict[str, Any]) -> None:
        del scheduled_definition_data["report_params"]
        with pytest.raises(ValidationError):
            ReportDefinition.model_validate(scheduled_definition_data)

    def test_unknown_status(self, scheduled_definition_data: dict[str, Any]) -> None:
        scheduled_definition_data["status"] = "Paused"
        with pytest.raises(ValidationError):
            ReportDefinition.model_validate(scheduled_definition_data)

    def test_invalid_duration(self, scheduled_definition_data: dict[str, Any]) -> None:
        scheduled_definition_data["report_params"]["core_params"]["time_duration"] = "soon"
        with pytest.raises(ValidationError):
            ReportDefinition.model_validate(scheduled_definition_data)

    def test_non_positive_duration(self, scheduled_definition_data: dict[str, Any]) -> None:
        scheduled_definition_data["report_params"]["core_params"]["time_duration"] = "-PT1H"
        with pytest.raises(ValidationError):
            ReportDefinition.model_validate(scheduled_definition_data)

    def test_recurring_without_interval(self, scheduled_definition_data: dict[str, Any]) -> None:
        scheduled_definition_data["trigger"]["trigger_params"]["schedule"] = {
            "cron": {"expression": "0 9 * * *"}
        }
        with pytest.raises(ValidationError, match="interval"):
            ReportDefinition.model_validate(scheduled_definition_data)

    def test_cron_without_expression(self, cron_definition_data: dict[str, Any]) -> None:
        cron_definition_data["trigger"]["trigger_params"]["schedule"] = {}
        with pytest.raises(ValidationError, match="cron"):
            ReportDefinition.model_validate(cron_definition_data)


class TestSerialization:
    """Test the wire format written back on save."""

    def test_unknown_fields_round_trip(self, scheduled_definition: ReportDefinition) -> None:
        wire = scheduled_definition.to_wire()
        assert wire["report_params"]["core_params"]["window_width"] == 1200
        assert wire["trigger"]["trigger_params"]["enabled_time"] == 1704067200000

    def test_timestamps_as_epoch_millis(self, scheduled_definition: ReportDefinition) -> None:
        wire = scheduled_definition.to_wire()
        assert wire["time_created"] == 1704110400000
        assert wire["last_updated"] == 1704114000000

    def test_absent_schedule_field_omitted(self, scheduled_definition: ReportDefinition) -> None:
        schedule = scheduled_definition.to_wire()["trigger"]["trigger_params"]["schedule"]
        assert "interval" in schedule
        assert "cron" not in schedule

    def test_explicit_nulls_written_back(self, scheduled_definition_data: dict[str, Any]) -> None:
        scheduled_definition_data["report_params"]["description"] = None
        scheduled_definition_data["report_params"]["core_params"]["header"] = None

        wire = ReportDefinition.model_validate(scheduled_definition_data).to_wire()

        assert wire["report_params"]["description"] is None
        assert wire["report_params"]["core_params"]["header"] is None

    def test_enums_as_backend_strings(self, cron_definition: ReportDefinition) -> None:
        wire = cron_definition.to_wire()
        assert wire["trigger"]["trigger_type"] == "Schedule"
        assert wire["trigger"]["trigger_params"]["schedule_type"] == "Cron based"
        assert wire["status"] == "Active"


def test_to_epoch_millis_naive_is_utc() -> None:
    assert to_epoch_millis(datetime(1970, 1, 1, 0, 0, 1)) == 1000
    assert to_epoch_millis(datetime(2024, 1, 1, 11, tzinfo=timezone.utc)) == 1704106800000
