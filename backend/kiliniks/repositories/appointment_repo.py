"""
Appointment repository implementation following SOLID principles.
"""

from typing import Any, List, Mapping, Optional

from sqlalchemy import delete, select

from kiliniks.db.base import Appointment as DbAppointment
from kiliniks.domain.entities import Appointment as DomainAppointment
from kiliniks.domain.interfaces import IAppointmentRepository
from kiliniks.utils.ids import IdFactory, generate_id


class AppointmentRepository(IAppointmentRepository):
    """Repository for Appointment persistence operations."""

    # createdBy is fixed at creation
    MUTABLE_FIELDS = ("patient_name", "doctor_name", "date", "status", "notes")

    def __init__(self, db_session, id_factory: IdFactory = generate_id) -> None:
        self.db = db_session
        self.id_factory = id_factory

    def create(self, appointment: DomainAppointment) -> DomainAppointment:
        db_appointment = DbAppointment(
            id=self.id_factory(),
            patient_name=appointment.patient_name,
            doctor_name=appointment.doctor_name,
            date=appointment.date,
            status=appointment.status,
            notes=appointment.notes,
            created_by=appointment.created_by,
        )
        try:
            self.db.add(db_appointment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_appointment)
        return self._to_domain(db_appointment)

    def find_by_id(self, appointment_id: str) -> Optional[DomainAppointment]:
        db_appointment = self.db.scalars(
            select(DbAppointment).where(DbAppointment.id == appointment_id)
        ).first()
        return self._to_domain(db_appointment) if db_appointment else None

    def find_all(self) -> List[DomainAppointment]:
        rows = self.db.scalars(
            select(DbAppointment).order_by(DbAppointment.date.asc())
        ).all()
        return [self._to_domain(row) for row in rows]

    def update(
        self, appointment_id: str, changes: Mapping[str, Any]
    ) -> Optional[DomainAppointment]:
        present = [name for name in self.MUTABLE_FIELDS if name in changes]
        if not present:
            return self.find_by_id(appointment_id)

        try:
            db_appointment = self.db.scalars(
                select(DbAppointment).where(DbAppointment.id == appointment_id)
            ).first()
            if db_appointment is None:
                self.db.rollback()
                return None
            for field_name in present:
                setattr(db_appointment, field_name, changes[field_name])
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_appointment)
        return self._to_domain(db_appointment)

    def delete(self, appointment_id: str) -> bool:
        try:
            result = self.db.execute(
                delete(DbAppointment)
                .where(DbAppointment.id == appointment_id)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.expire_all()
        return (result.rowcount or 0) > 0

    def _to_domain(self, db_appointment: DbAppointment) -> DomainAppointment:
        """Convert database model to domain entity."""
        return DomainAppointment(
            id=db_appointment.id,
            patient_name=db_appointment.patient_name,
            doctor_name=db_appointment.doctor_name,
            date=db_appointment.date,
            status=db_appointment.status,
            notes=db_appointment.notes,
            created_by=db_appointment.created_by,
        )
