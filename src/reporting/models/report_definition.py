"""Report definition models.

Mirrors the reporting backend's report definition document. Decoding is
strict about the fields this client relies on and lenient about everything
else, which is carried through unchanged.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    Field,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)

from reporting.durations import ReportDuration

from .base import ReportingBaseModel


class TriggerType(str, Enum):
    """What starts report generation."""

    ON_DEMAND = "On demand"
    SCHEDULE = "Schedule"


class ScheduleType(str, Enum):
    """How a scheduled trigger expresses its schedule."""

    RECURRING = "Recurring"
    CRON_BASED = "Cron based"


class DefinitionStatus(str, Enum):
    """Schedule status of a report definition."""

    ACTIVE = "Active"
    DISABLED = "Disabled"


class StatusAction(str, Enum):
    """User action on a scheduled definition's status."""

    ENABLE = "Enable"
    DISABLE = "Disable"


class DeliveryType(str, Enum):
    """Known delivery types. Other values are accepted as-is."""

    CHANNEL = "Channel"


class EmailFormat(str, Enum):
    """Known channel email formats."""

    ATTACHMENT = "Attachment"


class CoreParams(ReportingBaseModel):
    """Source location, output format and lookback window."""

    base_url: str
    report_format: str
    time_duration: str = Field(description="ISO 8601 or short duration, e.g. 'PT1H' or '7d'")

    @field_validator("time_duration")
    @classmethod
    def validate_time_duration(cls, v: str) -> str:
        if ReportDuration.from_string(v).total_milliseconds() <= 0:
            raise ValueError("time_duration must be a positive duration")
        return v

    @property
    def duration(self) -> ReportDuration:
        return ReportDuration.from_string(self.time_duration)


class ReportParams(ReportingBaseModel):
    """What the report is about."""

    report_name: str
    description: str | None = None
    report_source: str
    core_params: CoreParams


class RecurringInterval(ReportingBaseModel):
    """Fixed-period schedule."""

    period: int = Field(ge=1)
    unit: str
    start_time: int | None = None


class CronExpression(ReportingBaseModel):
    """Cron schedule."""

    expression: str
    timezone: str | None = None


class Schedule(ReportingBaseModel):
    """Holds one of ``interval`` or ``cron``, selected by the schedule type."""

    interval: RecurringInterval | None = None
    cron: CronExpression | None = None

    @model_serializer(mode="wrap")
    def drop_unselected(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # A pruned interval or cron is removed, never written as null
        data = handler(self)
        for key in ("interval", "cron"):
            if key in data and data[key] is None:
                del data[key]
        return data


class TriggerParams(ReportingBaseModel):
    """Schedule configuration of a scheduled trigger."""

    enabled: bool
    schedule_type: ScheduleType
    schedule: Schedule

    @model_validator(mode="after")
    def validate_selected_schedule(self) -> "TriggerParams":
        if self.schedule_type == ScheduleType.RECURRING and self.schedule.interval is None:
            raise ValueError("Recurring schedule requires an interval")
        if self.schedule_type == ScheduleType.CRON_BASED and self.schedule.cron is None:
            raise ValueError("Cron based schedule requires a cron expression")
        return self


class Trigger(ReportingBaseModel):
    """When reports get generated."""

    trigger_type: TriggerType
    trigger_params: TriggerParams | None = None

    @property
    def is_on_demand(self) -> bool:
        return self.trigger_type == TriggerType.ON_DEMAND


class DeliveryParams(ReportingBaseModel):
    """Recipients and formatting for delivered reports."""

    kibana_recipients: list[str] | None = None
    recipients: list[str] | None = None
    title: str | None = None
    text_description: str | None = Field(
        default=None,
        validation_alias=AliasChoices("text_description", "textDescription"),
    )
    email_format: str | None = None


class Delivery(ReportingBaseModel):
    """How generated reports are distributed."""

    delivery_type: str
    delivery_params: DeliveryParams = Field(default_factory=DeliveryParams)

    @property
    def is_channel(self) -> bool:
        return self.delivery_type == DeliveryType.CHANNEL


class ReportDefinition(ReportingBaseModel):
    """A persisted report definition.

    Timestamps decode from epoch milliseconds or ISO 8601 and are written
    back as epoch milliseconds.
    """

    id: str | None = None
    report_params: ReportParams
    trigger: Trigger
    delivery: Delivery
    status: DefinitionStatus
    time_created: datetime | None = None
    last_updated: datetime | None = None

    @field_validator("time_created", "last_updated")
    @classmethod
    def ensure_timezone(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_serializer("time_created", "last_updated")
    def serialize_timestamp(self, v: datetime | None) -> int | None:
        if v is None:
            return None
        return to_epoch_millis(v)

    @property
    def is_enabled(self) -> bool:
        params = self.trigger.trigger_params
        return bool(params and params.enabled)


class ReportDefinitionResponse(ReportingBaseModel):
    """Envelope returned by the backend for a single definition."""

    report_definition: ReportDefinition
    report_definition_id: str | None = None


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_millis(value: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware datetime."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - _EPOCH
    return delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000
