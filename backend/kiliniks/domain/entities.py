"""
Domain entities - Pure business logic, no framework dependencies.

Following SOLID principles:
- Single Responsibility: Each entity represents one business concept
- Open/Closed: Entities can be extended without modification
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Generic, List, Optional, TypeVar

from kiliniks.core.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT


class AppointmentStatus:
    """Allowed appointment statuses."""

    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    ALL = (SCHEDULED, COMPLETED, CANCELLED)


@dataclass
class Appointment:
    """Domain entity for an appointment between a patient and a doctor."""

    patient_name: str = ""
    doctor_name: str = ""
    date: Optional[datetime] = None
    status: str = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None
    created_by: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        """Validate business rules."""
        if not self.patient_name:
            raise ValueError("patientName is required")
        if not self.doctor_name:
            raise ValueError("doctorName is required")
        if self.date is None:
            raise ValueError("date is required")
        if self.status not in AppointmentStatus.ALL:
            raise ValueError(f"Invalid status: {self.status}")


@dataclass
class Flow:
    """Domain entity for a care flow (a reusable template of stages)."""

    name: str = ""
    created_by: str = ""
    updated_by: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("name is required")
        if not self.created_by:
            raise ValueError("createdBy is required")


@dataclass
class Location:
    """Domain entity for a location stages can be linked to."""

    name: str = ""
    description: Optional[str] = None
    created_by: str = ""
    updated_by: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("name is required")
        if not self.created_by:
            raise ValueError("createdBy is required")


@dataclass
class SalesItem:
    """Domain entity for a sellable item owned by a stage.

    ``id`` and ``stage_id`` are assigned by the stage repository; a caller
    may pin ``id`` when replacing a stage's items on update.
    """

    name: str = ""
    price: Decimal = Decimal("0")
    default_quantity: float = 0.0
    item_type: Optional[str] = None
    cost_price: Optional[Decimal] = None
    default_panel_category: Optional[str] = None
    panel_categories: Optional[Any] = None
    id: Optional[str] = None
    stage_id: Optional[str] = None

    def __post_init__(self):
        """Validate business rules."""
        if not self.name:
            raise ValueError("Sales item name is required")
        if self.price is None:
            raise ValueError("Sales item price is required")
        if self.default_quantity is None:
            raise ValueError("Sales item defaultQuantity is required")
        if not isinstance(self.price, Decimal):
            self.price = Decimal(str(self.price))
        if self.cost_price is not None and not isinstance(self.cost_price, Decimal):
            self.cost_price = Decimal(str(self.cost_price))


@dataclass
class Stage:
    """
    Domain entity for a flow stage.

    A stage is an aggregate root: it owns its sales items outright and
    holds references to locations (which it does not own).
    """

    flow_id: str = ""
    name: str = ""
    has_notes: bool = False
    sound_url: Optional[str] = None
    sales_items: List[SalesItem] = field(default_factory=list)
    location_ids: List[str] = field(default_factory=list)
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.flow_id:
            raise ValueError("flowId is required")
        if not self.name:
            raise ValueError("name is required")
        if self.has_notes is None:
            self.has_notes = False


@dataclass
class PaginationParams:
    """Limit/offset window for list queries."""

    limit: int = DEFAULT_PAGE_LIMIT
    offset: int = 0

    def __post_init__(self):
        # Non-positive or missing limits fall back to the default page size
        if not self.limit or self.limit < 1:
            self.limit = DEFAULT_PAGE_LIMIT
        self.limit = min(self.limit, MAX_PAGE_LIMIT)
        if not self.offset or self.offset < 0:
            self.offset = 0


T = TypeVar("T")


@dataclass
class PaginatedResult(Generic[T]):
    """One page of results plus the total row count."""

    data: List[T] = field(default_factory=list)
    total: int = 0
