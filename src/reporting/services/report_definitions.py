"""Report definition rules.

Pure functions over report definitions:
- Projection of a raw definition into its display model
- Status toggling with schedule pruning
- On-demand generation request construction

None of these touch the backend or mutate their inputs.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from reporting.exceptions import ReportDefinitionValidationError
from reporting.models import (
    EMPTY_VALUE,
    FILE_FORMAT_LABELS,
    DefinitionStatus,
    DisplayAction,
    DisplayModel,
    EmailFormat,
    GenerationRequest,
    ReportDefinition,
    ScheduleType,
    StatusAction,
    to_epoch_millis,
)
from reporting.observability import get_logger

logger = get_logger(__name__)

BREADCRUMB_PREFIX = "Report definition details"


def format_timestamp(value: datetime | None, tz: tzinfo = timezone.utc) -> str:
    """Render a timestamp as date plus 12-hour clock time.

    Example: ``Mon Jan 01 2024 12:00:00 PM``
    """
    if value is None:
        return EMPTY_VALUE
    local = value.astimezone(tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local:%a %b %d %Y} {hour}:{local:%M:%S} {meridiem}"


def format_iso(value: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision, e.g. ``2024-01-01T11:00:00.000Z``."""
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _text_or_empty(value: str | list[str] | None) -> str:
    if isinstance(value, list):
        value = ", ".join(item for item in value if item)
    if not value:
        return EMPTY_VALUE
    return value


def _available_action(definition: ReportDefinition) -> DisplayAction:
    if definition.trigger.is_on_demand:
        return DisplayAction.GENERATE_REPORT
    if definition.status == DefinitionStatus.ACTIVE:
        return DisplayAction.DISABLE
    return DisplayAction.ENABLE


def project_definition(
    definition: ReportDefinition,
    tz: tzinfo = timezone.utc,
) -> DisplayModel:
    """Derive the display model for a report definition.

    Channel-only delivery fields render ``EMPTY_VALUE`` for other delivery
    types. ``time_period`` is an approximation of the stored duration.
    """
    report_params = definition.report_params
    core_params = report_params.core_params
    trigger = definition.trigger
    delivery = definition.delivery
    delivery_params = delivery.delivery_params
    is_channel = delivery.is_channel

    return DisplayModel(
        name=report_params.report_name,
        description=_text_or_empty(report_params.description),
        created=format_timestamp(definition.time_created, tz),
        last_updated=format_timestamp(definition.last_updated, tz),
        source=report_params.report_source,
        base_url=core_params.base_url,
        time_period=core_params.duration.humanize(),
        file_format=core_params.report_format,
        file_format_label=FILE_FORMAT_LABELS.get(
            core_params.report_format.lower(), core_params.report_format.upper()
        ),
        trigger_type=trigger.trigger_type,
        schedule_details=(
            trigger.trigger_params.schedule_type if trigger.trigger_params else EMPTY_VALUE
        ),
        status=definition.status,
        channel=delivery.delivery_type,
        kibana_recipients=(
            _text_or_empty(delivery_params.kibana_recipients) if is_channel else EMPTY_VALUE
        ),
        email_recipients=(
            _text_or_empty(delivery_params.recipients) if is_channel else EMPTY_VALUE
        ),
        email_subject=_text_or_empty(delivery_params.title) if is_channel else EMPTY_VALUE,
        email_body=(
            _text_or_empty(delivery_params.text_description) if is_channel else EMPTY_VALUE
        ),
        report_as_attachment=str(
            is_channel and delivery_params.email_format == EmailFormat.ATTACHMENT
        ),
        breadcrumb_title=f"{BREADCRUMB_PREFIX}: {report_params.report_name}",
        available_action=_available_action(definition),
    )


def toggle_status(
    definition: ReportDefinition,
    action: StatusAction | str,
) -> ReportDefinition:
    """Return a copy of ``definition`` enabled or disabled.

    The schedule field not selected by the schedule type is always dropped,
    even if the input was already consistent.

    Raises:
        ReportDefinitionValidationError: Unknown action, or a definition
            without schedule parameters.
    """
    try:
        action = StatusAction(action)
    except ValueError as e:
        raise ReportDefinitionValidationError(
            f"Unknown status action: {action!r}", definition.id
        ) from e

    if definition.trigger.trigger_params is None:
        raise ReportDefinitionValidationError(
            "Only scheduled report definitions can be enabled or disabled",
            definition.id,
        )

    updated = definition.model_copy(deep=True)
    params = updated.trigger.trigger_params
    enable = action == StatusAction.ENABLE

    params.enabled = enable
    updated.status = DefinitionStatus.ACTIVE.value if enable else DefinitionStatus.DISABLED.value

    if params.schedule_type == ScheduleType.RECURRING:
        params.schedule.cron = None
    elif params.schedule_type == ScheduleType.CRON_BASED:
        params.schedule.interval = None

    logger.debug(
        "Report definition status toggled",
        definition_id=definition.id,
        action=action.value,
        schedule_type=params.schedule_type,
    )
    return updated


def build_query_url(base_url: str, time_from: datetime, time_to: datetime) -> str:
    """Dashboard URL scoped to a time window."""
    return f"{base_url}?_g=(time:(from:'{format_iso(time_from)}',to:'{format_iso(time_to)}'))"


def build_on_demand_request(
    definition: ReportDefinition,
    now: datetime,
) -> GenerationRequest:
    """Build an on-demand generation request covering the definition's lookback window.

    Naive ``now`` values are taken as UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    core_params = definition.report_params.core_params
    time_to = now
    time_from = now - core_params.duration.to_timedelta()

    return GenerationRequest(
        query_url=build_query_url(core_params.base_url, time_from, time_to),
        time_from=to_epoch_millis(time_from),
        time_to=to_epoch_millis(time_to),
        report_definition=definition,
    )
