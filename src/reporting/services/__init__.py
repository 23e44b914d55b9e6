"""Report definition services."""

from .controller import (
    ControllerEvent,
    ControllerState,
    Navigator,
    ReportDefinitionBackend,
    ReportDefinitionController,
    ReportGenerator,
)
from .report_definitions import (
    build_on_demand_request,
    build_query_url,
    format_iso,
    format_timestamp,
    project_definition,
    toggle_status,
)

__all__ = [
    "ControllerEvent",
    "ControllerState",
    "Navigator",
    "ReportDefinitionBackend",
    "ReportDefinitionController",
    "ReportGenerator",
    "build_on_demand_request",
    "build_query_url",
    "format_iso",
    "format_timestamp",
    "project_definition",
    "toggle_status",
]
