"""Errors raised by report definition operations.

Callers tell them apart to decide what to show: a missing definition is
terminal, a backend outage can be retried by the user and a validation
error needs the definition fixed.
"""


class ReportDefinitionError(Exception):
    """Base class for report definition errors."""

    def __init__(self, message: str, definition_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.definition_id = definition_id


class ReportDefinitionNotFoundError(ReportDefinitionError):
    """Raised when a report definition does not exist."""

    pass


class BackendUnavailableError(ReportDefinitionError):
    """Raised when the backend cannot be reached or fails unexpectedly."""

    def __init__(
        self,
        message: str,
        definition_id: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, definition_id)
        self.status_code = status_code


class ReportDefinitionValidationError(ReportDefinitionError):
    """Raised when a definition is malformed or a mutation is not allowed."""

    def __init__(
        self,
        message: str,
        definition_id: str | None = None,
        errors: list[dict] | None = None,
    ):
        super().__init__(message, definition_id)
        self.errors = errors or []


class ReportDefinitionConflictError(ReportDefinitionError):
    """Raised when a save loses a race with a concurrent modification."""

    pass
