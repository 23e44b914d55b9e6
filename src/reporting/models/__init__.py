"""Data models for report definitions.

All models follow these conventions:
- Field names: lowercase snake_case, matching the backend wire format
- Timestamps: timezone-aware datetimes, epoch milliseconds on the wire
- Enums: uppercase SNAKE_CASE members with backend string values
"""

# Base
from .base import ReportingBaseModel

# Display projections
from .display import (
    EMPTY_VALUE,
    FILE_FORMAT_LABELS,
    DisplayAction,
    DisplayModel,
    GenerationRequest,
)

# Report definition documents
from .report_definition import (
    CoreParams,
    CronExpression,
    DefinitionStatus,
    Delivery,
    DeliveryParams,
    DeliveryType,
    EmailFormat,
    RecurringInterval,
    ReportDefinition,
    ReportDefinitionResponse,
    ReportParams,
    Schedule,
    ScheduleType,
    StatusAction,
    Trigger,
    TriggerParams,
    TriggerType,
    to_epoch_millis,
)

__all__ = [
    # Base
    "ReportingBaseModel",
    # Report definitions
    "CoreParams",
    "CronExpression",
    "DefinitionStatus",
    "Delivery",
    "DeliveryParams",
    "DeliveryType",
    "EmailFormat",
    "RecurringInterval",
    "ReportDefinition",
    "ReportDefinitionResponse",
    "ReportParams",
    "Schedule",
    "ScheduleType",
    "StatusAction",
    "Trigger",
    "TriggerParams",
    "TriggerType",
    "to_epoch_millis",
    # Display
    "EMPTY_VALUE",
    "FILE_FORMAT_LABELS",
    "DisplayAction",
    "DisplayModel",
    "GenerationRequest",
]
