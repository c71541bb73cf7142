"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing.

Repositories report "nothing found" with ``None`` / ``False`` / an empty
list and reserve exceptions for genuine storage failures.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from .entities import (
    Appointment,
    Flow,
    Location,
    PaginatedResult,
    PaginationParams,
    Stage,
)


class IAppointmentReader(ABC):
    """Interface for appointment read operations."""

    @abstractmethod
    def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    def find_all(self) -> List[Appointment]:
        """Get every appointment (unfiltered, unpaginated)."""
        pass


class IAppointmentWriter(ABC):
    """Interface for appointment write operations."""

    @abstractmethod
    def create(self, appointment: Appointment) -> Appointment:
        """Create a new appointment."""
        pass

    @abstractmethod
    def update(
        self, appointment_id: str, changes: Mapping[str, Any]
    ) -> Optional[Appointment]:
        """Apply the present fields of ``changes``; None if no such row."""
        pass

    @abstractmethod
    def delete(self, appointment_id: str) -> bool:
        """Delete an appointment; False if it did not exist."""
        pass


class IAppointmentRepository(IAppointmentReader, IAppointmentWriter):
    """Complete appointment repository interface."""

    pass


class IFlowReader(ABC):
    """Interface for flow read operations."""

    @abstractmethod
    def find_by_id(self, flow_id: str) -> Optional[Flow]:
        pass

    @abstractmethod
    def find_all(self, params: Optional[PaginationParams] = None) -> PaginatedResult:
        """Get one page of flows plus the total count."""
        pass


class IFlowWriter(ABC):
    """Interface for flow write operations."""

    @abstractmethod
    def create(self, flow: Flow) -> Flow:
        pass

    @abstractmethod
    def update(self, flow_id: str, changes: Mapping[str, Any]) -> Optional[Flow]:
        pass

    @abstractmethod
    def delete(self, flow_id: str) -> bool:
        """Delete the flow row only; its stages are left in place."""
        pass


class IFlowRepository(IFlowReader, IFlowWriter):
    """Complete flow repository interface."""

    pass


class ILocationReader(ABC):
    """Interface for location read operations."""

    @abstractmethod
    def find_by_id(self, location_id: str) -> Optional[Location]:
        pass

    @abstractmethod
    def find_all(self, params: Optional[PaginationParams] = None) -> PaginatedResult:
        pass


class ILocationWriter(ABC):
    """Interface for location write operations."""

    @abstractmethod
    def create(self, location: Location) -> Location:
        pass

    @abstractmethod
    def update(
        self, location_id: str, changes: Mapping[str, Any]
    ) -> Optional[Location]:
        pass

    @abstractmethod
    def delete(self, location_id: str) -> bool:
        pass


class ILocationRepository(ILocationReader, ILocationWriter):
    """Complete location repository interface."""

    pass


class IStageReader(ABC):
    """Interface for stage aggregate read operations."""

    @abstractmethod
    def find_by_id(self, stage_id: str) -> Optional[Stage]:
        """Get the stage with its sales items and location ids."""
        pass

    @abstractmethod
    def find_all_by_flow_id(self, flow_id: str) -> List[Stage]:
        """Get every stage of a flow, oldest first, fully assembled."""
        pass


class IStageWriter(ABC):
    """Interface for stage aggregate write operations."""

    @abstractmethod
    def create(self, stage: Stage) -> Stage:
        """Insert the stage, its sales items and location links atomically."""
        pass

    @abstractmethod
    def update(self, stage_id: str, changes: Mapping[str, Any]) -> Optional[Stage]:
        """Apply scalar changes and replace any child collection present in
        ``changes``; None if no such stage."""
        pass

    @abstractmethod
    def delete(self, stage_id: str) -> bool:
        """Delete the stage and its children; False if it did not exist."""
        pass


class IStageRepository(IStageReader, IStageWriter):
    """Complete stage repository interface."""

    pass


class IEventPublisher(ABC):
    """
    Outbound notification hook.
    Implementations raise NotificationError on delivery failure; callers
    log it and never propagate it.
    """

    @abstractmethod
    def publish(self, event_name: str, payload: Dict[str, Any]) -> None:
        pass
