"""Report definition details controller.

Holds the currently loaded definition together with its display model and
replaces both at once after every successful operation. Backend access,
report generation and navigation are injected collaborators.
"""

from __future__ import annotations

import itertools
import uuid
from collections.abc import Callable
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from reporting.config import Settings, get_settings
from reporting.exceptions import (
    ReportDefinitionError,
    ReportDefinitionNotFoundError,
    ReportDefinitionValidationError,
)
from reporting.models import (
    DisplayModel,
    GenerationRequest,
    ReportDefinition,
    StatusAction,
)
from reporting.observability import RequestContextManager, get_logger

from .report_definitions import (
    build_on_demand_request,
    project_definition,
    toggle_status,
)

logger = get_logger(__name__)


class ReportDefinitionBackend(Protocol):
    """CRUD access to report definitions keyed by ID."""

    async def get_report_definition(self, definition_id: str) -> ReportDefinition: ...

    async def update_report_definition(
        self, definition_id: str, definition: ReportDefinition
    ) -> ReportDefinition | None: ...

    async def delete_report_definition(self, definition_id: str) -> None: ...


class ReportGenerator(Protocol):
    """Renders and delivers a report for a generation request."""

    async def generate_report(self, request: GenerationRequest) -> dict[str, Any]: ...


class Navigator(Protocol):
    """Moves the UI shell to another route."""

    def go_to(self, route: str) -> None: ...


class ControllerEvent(str, Enum):
    """Events the controller emits for the UI shell."""

    DELETED = "deleted"
    EDIT_REQUESTED = "edit_requested"


EventListener = Callable[[ControllerEvent, str], None]


class ControllerState(BaseModel):
    """A raw definition and the display model derived from it."""

    model_config = ConfigDict(frozen=True)

    definition_id: str
    definition: ReportDefinition
    display: DisplayModel
    sequence: int


class ReportDefinitionController:
    """Controller behind the report definition details screen.

    Every load and save is tagged with a sequence number. A response that
    completes after a newer one has been installed is returned to its caller
    but not installed.
    """

    def __init__(
        self,
        backend: ReportDefinitionBackend,
        generator: ReportGenerator | None = None,
        navigator: Navigator | None = None,
        settings: Settings | None = None,
        tz: tzinfo | None = None,
    ):
        self.backend = backend
        self.generator = generator
        self.navigator = navigator
        self.settings = settings or get_settings()
        self.tz = tz or self.settings.display.tzinfo
        self._state: ControllerState | None = None
        self._sequence = itertools.count(1)
        self._installed_sequence = 0
        self._active_id: str | None = None
        self._deleted_ids: set[str] = set()
        self._listeners: list[EventListener] = []

    @property
    def state(self) -> ControllerState | None:
        return self._state

    @property
    def definition(self) -> ReportDefinition | None:
        return self._state.definition if self._state else None

    @property
    def display(self) -> DisplayModel | None:
        return self._state.display if self._state else None

    def subscribe(self, listener: EventListener) -> None:
        """Register a listener for controller events."""
        self._listeners.append(listener)

    def _emit(self, event: ControllerEvent, definition_id: str) -> None:
        logger.info("Controller event", controller_event=event.value, definition_id=definition_id)
        for listener in self._listeners:
            try:
                listener(event, definition_id)
            except Exception as e:
                logger.warning(
                    "Controller event listener failed",
                    controller_event=event.value,
                    definition_id=definition_id,
                    error=str(e),
                )

    def _navigate(self, route: str) -> None:
        if self.navigator is not None:
            self.navigator.go_to(f"{self.settings.display.app_route_prefix}{route}")

    def _install(
        self,
        sequence: int,
        definition_id: str,
        definition: ReportDefinition,
    ) -> DisplayModel:
        """Project and install a definition unless a newer result already landed."""
        display = project_definition(definition, self.tz)
        if sequence < self._installed_sequence or definition_id in self._deleted_ids:
            logger.info(
                "Discarding stale report definition result",
                definition_id=definition_id,
                sequence=sequence,
                installed_sequence=self._installed_sequence,
            )
            return display
        self._state = ControllerState(
            definition_id=definition_id,
            definition=definition,
            display=display,
            sequence=sequence,
        )
        self._installed_sequence = sequence
        return display

    @staticmethod
    def _context(definition_id: str | None) -> RequestContextManager:
        """Log context for one controller operation."""
        return RequestContextManager(request_id=uuid.uuid4().hex, definition_id=definition_id)

    def _ensure_not_deleted(self, definition_id: str) -> None:
        if definition_id in self._deleted_ids:
            raise ReportDefinitionNotFoundError(
                f"Report definition '{definition_id}' was deleted",
                definition_id,
            )

    def _require_state(self) -> ControllerState:
        if self._active_id is not None:
            self._ensure_not_deleted(self._active_id)
        if self._state is None or self._state.definition_id != self._active_id:
            raise ReportDefinitionError("No report definition loaded", self._active_id)
        return self._state

    async def load(self, definition_id: str) -> tuple[ReportDefinition, DisplayModel]:
        """Fetch a definition and derive its display model.

        On failure nothing is installed. A reload of the same definition keeps
        the previous state. State held for another definition is cleared.
        """
        sequence = next(self._sequence)
        self._active_id = definition_id

        async with self._context(definition_id):
            try:
                definition = await self.backend.get_report_definition(definition_id)
            except ReportDefinitionError as e:
                logger.error(
                    "Failed to load report definition",
                    error_type=type(e).__name__,
                    error=e.message,
                )
                if (
                    self._state is not None
                    and self._state.definition_id != definition_id
                    and sequence > self._installed_sequence
                ):
                    self._state = None
                    self._installed_sequence = sequence
                raise

            display = self._install(sequence, definition_id, definition)
            logger.info("Report definition loaded", sequence=sequence)
            return definition, display

    async def save(
        self,
        definition_id: str,
        updated: ReportDefinition,
    ) -> ReportDefinition:
        """Replace a definition on the backend.

        The stored document, echoed by the backend or re-fetched after a bare
        acknowledgement, becomes the new state.
        """
        self._ensure_not_deleted(definition_id)
        sequence = next(self._sequence)

        async with self._context(definition_id):
            try:
                stored = await self.backend.update_report_definition(definition_id, updated)
                if stored is None:
                    stored = await self.backend.get_report_definition(definition_id)
            except ReportDefinitionError as e:
                logger.error(
                    "Failed to save report definition",
                    error_type=type(e).__name__,
                    error=e.message,
                )
                raise

            self._install(sequence, definition_id, stored)
            logger.info("Report definition saved", sequence=sequence, status=stored.status)
            return stored

    async def change_status(self, action: StatusAction | str) -> ReportDefinition:
        """Enable or disable the loaded definition and save it."""
        state = self._require_state()
        updated = toggle_status(state.definition, action)
        return await self.save(state.definition_id, updated)

    def build_on_demand_request(self, now: datetime | None = None) -> GenerationRequest:
        """Generation request for the loaded definition's lookback window."""
        state = self._require_state()
        return build_on_demand_request(state.definition, now or datetime.now(timezone.utc))

    async def generate_report(self, now: datetime | None = None) -> dict[str, Any]:
        """Generate an on-demand report from the loaded definition."""
        if self.generator is None:
            raise ReportDefinitionValidationError(
                "No report generator configured", self._active_id
            )
        request = self.build_on_demand_request(now)

        async with self._context(self._active_id):
            try:
                artifact = await self.generator.generate_report(request)
            except ReportDefinitionError as e:
                logger.error(
                    "Failed to generate report",
                    error_type=type(e).__name__,
                    error=e.message,
                )
                raise

            logger.info(
                "On-demand report requested",
                time_from=request.time_from,
                time_to=request.time_to,
            )
            return artifact

    async def delete(self, definition_id: str) -> None:
        """Delete a definition, then notify listeners and go back to the list.

        Later saves for the same ID fail with ReportDefinitionNotFoundError.
        """
        self._ensure_not_deleted(definition_id)

        async with self._context(definition_id):
            try:
                await self.backend.delete_report_definition(definition_id)
            except ReportDefinitionError as e:
                logger.error(
                    "Failed to delete report definition",
                    error_type=type(e).__name__,
                    error=e.message,
                )
                raise

            self._deleted_ids.add(definition_id)
            if self._state is not None and self._state.definition_id == definition_id:
                self._state = None
                # Anything still in flight for this definition is now stale
                self._installed_sequence = next(self._sequence)
            logger.info("Report definition deleted")

        self._emit(ControllerEvent.DELETED, definition_id)
        self._navigate("")

    def request_edit(self) -> None:
        """Ask the shell to open the edit view for the active definition."""
        state = self._require_state()
        self._emit(ControllerEvent.EDIT_REQUESTED, state.definition_id)
        self._navigate(f"edit/{state.definition_id}")
