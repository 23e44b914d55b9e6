"""Display models derived from report definitions.

None of these are persisted. They are rebuilt from the raw definition after
every load or mutation.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .report_definition import ReportDefinition

# Marks a field that does not apply, as opposed to one left unset
EMPTY_VALUE = "—"

FILE_FORMAT_LABELS = {
    "csv": "CSV",
    "pdf": "PDF",
    "png": "PNG",
}


class DisplayAction(str, Enum):
    """Label of the primary action offered for a definition."""

    GENERATE_REPORT = "Generate report"
    ENABLE = "Enable"
    DISABLE = "Disable"


class DisplayModel(BaseModel):
    """Read-only view of a report definition for the details screen."""

    model_config = ConfigDict(frozen=True)

    # Report settings
    name: str
    description: str
    created: str
    last_updated: str
    source: str
    base_url: str
    time_period: str = Field(description="Approximate lookback, e.g. 'an hour'")
    file_format: str
    file_format_label: str
    report_header: str = EMPTY_VALUE
    report_footer: str = EMPTY_VALUE

    # Report trigger
    trigger_type: str
    schedule_details: str
    alert_details: str = EMPTY_VALUE
    status: str

    # Delivery settings
    channel: str
    kibana_recipients: str
    email_recipients: str
    email_subject: str
    email_body: str
    report_as_attachment: str

    # Page chrome
    breadcrumb_title: str
    available_action: DisplayAction

    @property
    def time_period_label(self) -> str:
        """Lookback as shown on the details screen, e.g. ``Last an hour``."""
        return f"Last {self.time_period}"


class GenerationRequest(BaseModel):
    """On-demand report generation request.

    ``time_from`` and ``time_to`` are epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    query_url: str
    time_from: int
    time_to: int
    report_definition: ReportDefinition

    def to_wire(self) -> dict[str, Any]:
        return {
            "query_url": self.query_url,
            "time_from": self.time_from,
            "time_to": self.time_to,
            "report_definition": self.report_definition.to_wire(),
        }
