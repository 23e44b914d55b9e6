"""Reporting backend client.

Wraps the report definition REST API:
- GET    /reportDefinitions/{id}
- PUT    /reportDefinitions/{id}
- DELETE /reportDefinitions/{id}
- POST   /generateReport

HTTP failures are mapped onto the report definition error taxonomy.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
from pydantic import ValidationError

from reporting.config import BackendSettings, get_settings
from reporting.exceptions import (
    BackendUnavailableError,
    ReportDefinitionConflictError,
    ReportDefinitionError,
    ReportDefinitionNotFoundError,
    ReportDefinitionValidationError,
)
from reporting.models import GenerationRequest, ReportDefinition, ReportDefinitionResponse
from reporting.observability import (
    get_logger,
    log_external_call_end,
    log_external_call_start,
)

logger = get_logger(__name__)

SERVICE_NAME = "reporting-backend"


class ReportDefinitionClient:
    """Client for the reporting backend API."""

    def __init__(
        self,
        base_url: str | None = None,
        settings: BackendSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings().backend
        self.base_url = (base_url or self.settings.api_base_url).rstrip("/")
        self._client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    self.settings.request_timeout_seconds,
                    connect=self.settings.connect_timeout_seconds,
                ),
            )
        return self._client

    def _definition_url(self, definition_id: str) -> str:
        return f"{self.base_url}/reportDefinitions/{definition_id}"

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        definition_id: str | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Send a request and raise on any non-success response."""
        client = await self._get_client()
        log_external_call_start(logger, SERVICE_NAME, operation)
        start = time.perf_counter()

        try:
            response = await client.request(method, url, json=json)
        except httpx.HTTPError as e:
            log_external_call_end(
                logger,
                SERVICE_NAME,
                operation,
                success=False,
                duration_ms=(time.perf_counter() - start) * 1000,
                error=str(e),
            )
            raise BackendUnavailableError(
                f"Reporting backend unreachable during {operation}: {e}",
                definition_id,
            ) from e

        success = response.is_success
        log_external_call_end(
            logger,
            SERVICE_NAME,
            operation,
            success=success,
            duration_ms=(time.perf_counter() - start) * 1000,
            error=None if success else f"HTTP {response.status_code}",
        )
        if not success:
            raise self._error_for_response(response, operation, definition_id)
        return response

    @staticmethod
    def _error_for_response(
        response: httpx.Response,
        operation: str,
        definition_id: str | None,
    ) -> ReportDefinitionError:
        """Map a failed response to an error."""
        status = response.status_code
        detail = response.text[:200]

        if status == 404:
            return ReportDefinitionNotFoundError(
                f"Report definition '{definition_id}' not found",
                definition_id,
            )
        if status in (409, 412):
            return ReportDefinitionConflictError(
                f"Report definition '{definition_id}' was modified concurrently",
                definition_id,
            )
        if status in (400, 422):
            return ReportDefinitionValidationError(
                f"Backend rejected report definition during {operation}: {detail}",
                definition_id,
            )
        return BackendUnavailableError(
            f"Reporting backend failed during {operation} with HTTP {status}",
            definition_id,
            status_code=status,
        )

    @staticmethod
    def _json_body(response: httpx.Response, definition_id: str | None) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ReportDefinitionValidationError(
                "Reporting backend returned a non-JSON body",
                definition_id,
            ) from e

    @staticmethod
    def _decode_definition(data: Any, definition_id: str) -> ReportDefinition:
        """Validate a ``{report_definition: ...}`` envelope."""
        try:
            return ReportDefinitionResponse.model_validate(data).report_definition
        except ValidationError as e:
            logger.warning(
                "Malformed report definition",
                definition_id=definition_id,
                errors=e.error_count(),
            )
            raise ReportDefinitionValidationError(
                f"Malformed report definition '{definition_id}'",
                definition_id,
                errors=e.errors(include_url=False),
            ) from e

    async def get_report_definition(self, definition_id: str) -> ReportDefinition:
        """Get a report definition by ID.

        Raises:
            ReportDefinitionNotFoundError: Unknown ID
            BackendUnavailableError: Transport failure or server error
            ReportDefinitionValidationError: Response does not match the schema
        """
        response = await self._request(
            "get_report_definition",
            "GET",
            self._definition_url(definition_id),
            definition_id,
        )
        data = self._json_body(response, definition_id)
        return self._decode_definition(data, definition_id)

    async def update_report_definition(
        self,
        definition_id: str,
        definition: ReportDefinition,
    ) -> ReportDefinition | None:
        """Replace a report definition.

        Returns:
            The stored definition when the backend echoes it, otherwise None
        """
        response = await self._request(
            "update_report_definition",
            "PUT",
            self._definition_url(definition_id),
            definition_id,
            json=definition.to_wire(),
        )
        data = self._json_body(response, definition_id)
        if not isinstance(data, dict) or "report_definition" not in data:
            return None
        return self._decode_definition(data, definition_id)

    async def delete_report_definition(self, definition_id: str) -> None:
        """Delete a report definition."""
        await self._request(
            "delete_report_definition",
            "DELETE",
            self._definition_url(definition_id),
            definition_id,
        )

    async def generate_report(self, request: GenerationRequest) -> dict[str, Any]:
        """Request on-demand report generation.

        Returns:
            The backend's artifact reference
        """
        response = await self._request(
            "generate_report",
            "POST",
            f"{self.base_url}/generateReport",
            request.report_definition.id,
            json=request.to_wire(),
        )
        data = self._json_body(response, request.report_definition.id)
        return data if isinstance(data, dict) else {}

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> ReportDefinitionClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
