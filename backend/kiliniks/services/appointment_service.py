"""
Appointment service following SOLID principles.

Every successful write is followed by a best-effort notification through
the injected event publisher. A failed notification is logged and never
turns a successful write into an error.
"""

import dataclasses
import logging
from typing import Any, Dict, List, Mapping

from kiliniks.core.exceptions import NotFoundError
from kiliniks.domain.entities import Appointment, AppointmentStatus
from kiliniks.domain.interfaces import IAppointmentRepository, IEventPublisher
from kiliniks.schemas.dtos import appointment_to_dict

logger = logging.getLogger(__name__)

APPOINTMENT_CREATED = "AppointmentCreated"
APPOINTMENT_UPDATED = "AppointmentUpdated"
APPOINTMENT_DELETED = "AppointmentDeleted"


class AppointmentService:
    """Application service for appointment use-cases.

    Depends on the repository and publisher interfaces only, so both can be
    swapped for test doubles.
    """

    def __init__(
        self, appointment_repo: IAppointmentRepository, publisher: IEventPublisher
    ):
        self.appointment_repo = appointment_repo
        self.publisher = publisher

    def create_appointment(self, appointment: Appointment) -> Appointment:
        """Create an appointment; new appointments always start SCHEDULED."""
        scheduled = dataclasses.replace(
            appointment, status=AppointmentStatus.SCHEDULED
        )
        created = self.appointment_repo.create(scheduled)
        self._notify(APPOINTMENT_CREATED, appointment_to_dict(created))
        return created

    def get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.appointment_repo.find_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    def list_appointments(self) -> List[Appointment]:
        return self.appointment_repo.find_all()

    def update_appointment(
        self, appointment_id: str, changes: Mapping[str, Any]
    ) -> Appointment:
        updated = self.appointment_repo.update(appointment_id, changes)
        if updated is None:
            raise NotFoundError("Appointment", appointment_id)
        self._notify(APPOINTMENT_UPDATED, appointment_to_dict(updated))
        return updated

    def delete_appointment(self, appointment_id: str) -> None:
        if not self.appointment_repo.delete(appointment_id):
            raise NotFoundError("Appointment", appointment_id)
        self._notify(APPOINTMENT_DELETED, {"id": appointment_id})

    def _notify(self, event_name: str, payload: Dict[str, Any]) -> None:
        try:
            self.publisher.publish(event_name, payload)
        except Exception as e:
            logger.warning(
                "Event publish failed",
                extra={
                    "context": {
                        "event": event_name,
                        "appointment_id": payload.get("id"),
                        "error": str(e),
                    }
                },
                exc_info=True,
            )
