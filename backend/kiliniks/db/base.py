from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Numeric,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .session import Base

# Identifiers are UUID4 strings generated by the repositories
ID_LENGTH = 36

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class Appointment(Base):
    """Appointment between a patient and a doctor"""

    __tablename__ = "appointments"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    patient_name: Mapped[str] = mapped_column(Text, nullable=False)
    doctor_name: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(
        "appointment_date", DateTime(timezone=True), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient='{self.patient_name}', status={self.status})>"


class Flow(Base):
    """Care flow: an ordered template of stages"""

    __tablename__ = "flows"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(Text, nullable=False)
    updated_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self):
        return f"<Flow(id={self.id}, name='{self.name}')>"


class Location(Base):
    """Physical location a stage can take place in"""

    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(Text, nullable=False)
    updated_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self):
        return f"<Location(id={self.id}, name='{self.name}')>"


class Stage(Base):
    """Stage of a flow; parent of sales items and location links"""

    __tablename__ = "stages"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    # No foreign key: deleting a flow leaves its stages in place
    flow_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    has_notes: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sound_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self):
        return f"<Stage(id={self.id}, flow_id={self.flow_id}, name='{self.name}')>"


class SalesItem(Base):
    """Sellable item exclusively owned by one stage"""

    __tablename__ = "sales_items"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    stage_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        ForeignKey("stages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    item_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    cost_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    default_quantity: Mapped[float] = mapped_column(Float, nullable=False)
    default_panel_category: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True
    )
    panel_categories: Mapped[Optional[Any]] = mapped_column(JSONType, nullable=True)

    def __repr__(self):
        return f"<SalesItem(id={self.id}, stage_id={self.stage_id}, name='{self.name}', price={self.price})>"


# Link rows carry no identity of their own and duplicates are kept as given,
# so this is a plain Core table rather than a mapped class.
# location_id has no foreign key: links are not checked against locations.
stage_locations = Table(
    "stage_locations",
    Base.metadata,
    Column(
        "stage_id",
        String(ID_LENGTH),
        ForeignKey("stages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("location_id", String(ID_LENGTH), nullable=False),
)
