"""Clients for the reporting backend."""

from .report_definitions import ReportDefinitionClient

__all__ = [
    "ReportDefinitionClient",
]
