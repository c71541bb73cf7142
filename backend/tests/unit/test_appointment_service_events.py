"""
Unit tests for AppointmentService.

Covers:
- status forced to SCHEDULED on create
- NotFoundError on get/update/delete of unknown ids
- one event per successful write, with the expected payload
- publisher failures logged and never propagated
"""

import logging
from datetime import datetime
from unittest.mock import Mock

import pytest

from kiliniks.core.exceptions import NotFoundError, NotificationError
from kiliniks.domain.entities import Appointment, AppointmentStatus
from kiliniks.services.appointment_service import AppointmentService
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    EventPublisherFactory,
)


def make_appointment(**overrides) -> Appointment:
    values = {
        "patient_name": "Ana Souza",
        "doctor_name": "Dr. Lima",
        "date": datetime(2030, 5, 1, 9, 30),
        "notes": "first visit",
        "created_by": "local-user",
    }
    values.update(overrides)
    return Appointment(**values)


@pytest.fixture
def mock_appointment_repo() -> Mock:
    return AppointmentRepositoryFactory.create_mock_full()


@pytest.fixture
def mock_publisher() -> Mock:
    return EventPublisherFactory.create_mock()


@pytest.fixture
def service(mock_appointment_repo, mock_publisher) -> AppointmentService:
    return AppointmentService(mock_appointment_repo, mock_publisher)


@pytest.mark.unit
@pytest.mark.services
class TestAppointmentServiceCreate:
    def test_status_is_forced_to_scheduled(self, service, mock_appointment_repo):
        mock_appointment_repo.create.side_effect = lambda a: make_appointment(
            id="appt-1", status=a.status
        )

        created = service.create_appointment(
            make_appointment(status=AppointmentStatus.COMPLETED)
        )

        stored = mock_appointment_repo.create.call_args[0][0]
        assert stored.status == AppointmentStatus.SCHEDULED
        assert created.status == AppointmentStatus.SCHEDULED

    def test_caller_entity_is_not_mutated(self, service, mock_appointment_repo):
        mock_appointment_repo.create.return_value = make_appointment(id="appt-1")
        original = make_appointment(status=AppointmentStatus.CANCELLED)

        service.create_appointment(original)

        assert original.status == AppointmentStatus.CANCELLED

    def test_publishes_created_event_with_full_record(
        self, service, mock_appointment_repo, mock_publisher
    ):
        mock_appointment_repo.create.return_value = make_appointment(id="appt-1")

        service.create_appointment(make_appointment())

        mock_publisher.publish.assert_called_once()
        event_name, payload = mock_publisher.publish.call_args[0]
        assert event_name == "AppointmentCreated"
        assert payload["id"] == "appt-1"
        assert payload["patientName"] == "Ana Souza"
        assert payload["status"] == "SCHEDULED"

    def test_publisher_failure_does_not_fail_create(
        self, mock_appointment_repo, caplog
    ):
        publisher = EventPublisherFactory.create_failing(
            NotificationError("bus unreachable")
        )
        service = AppointmentService(mock_appointment_repo, publisher)
        mock_appointment_repo.create.return_value = make_appointment(id="appt-1")

        with caplog.at_level(logging.WARNING):
            created = service.create_appointment(make_appointment())

        assert created.id == "appt-1"
        assert "Event publish failed" in caplog.text

    def test_unexpected_publisher_error_is_also_contained(
        self, mock_appointment_repo
    ):
        publisher = EventPublisherFactory.create_failing(RuntimeError("boom"))
        service = AppointmentService(mock_appointment_repo, publisher)
        mock_appointment_repo.create.return_value = make_appointment(id="appt-1")

        assert service.create_appointment(make_appointment()).id == "appt-1"

    def test_store_failure_propagates_without_event(
        self, service, mock_appointment_repo, mock_publisher
    ):
        mock_appointment_repo.create.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            service.create_appointment(make_appointment())

        mock_publisher.publish.assert_not_called()


@pytest.mark.unit
@pytest.mark.services
class TestAppointmentServiceReads:
    def test_get_returns_appointment(self, service, mock_appointment_repo):
        mock_appointment_repo.find_by_id.return_value = make_appointment(id="appt-1")

        assert service.get_appointment("appt-1").id == "appt-1"

    def test_get_missing_raises_not_found(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            service.get_appointment("missing")

        assert str(exc_info.value) == "Appointment not found"
        assert exc_info.value.entity_id == "missing"

    def test_list_returns_repository_rows(self, service, mock_appointment_repo):
        rows = [make_appointment(id="a"), make_appointment(id="b")]
        mock_appointment_repo.find_all.return_value = rows

        assert service.list_appointments() == rows

    def test_reads_publish_nothing(self, service, mock_appointment_repo, mock_publisher):
        mock_appointment_repo.find_by_id.return_value = make_appointment(id="appt-1")

        service.get_appointment("appt-1")
        service.list_appointments()

        mock_publisher.publish.assert_not_called()


@pytest.mark.unit
@pytest.mark.services
class TestAppointmentServiceUpdateDelete:
    def test_update_publishes_updated_record(
        self, service, mock_appointment_repo, mock_publisher
    ):
        mock_appointment_repo.update.return_value = make_appointment(
            id="appt-1", status=AppointmentStatus.COMPLETED
        )

        updated = service.update_appointment("appt-1", {"status": "COMPLETED"})

        assert updated.status == AppointmentStatus.COMPLETED
        mock_appointment_repo.update.assert_called_once_with(
            "appt-1", {"status": "COMPLETED"}
        )
        event_name, payload = mock_publisher.publish.call_args[0]
        assert event_name == "AppointmentUpdated"
        assert payload["status"] == "COMPLETED"

    def test_update_missing_raises_and_publishes_nothing(
        self, service, mock_publisher
    ):
        with pytest.raises(NotFoundError):
            service.update_appointment("missing", {"notes": "x"})

        mock_publisher.publish.assert_not_called()

    def test_update_survives_publisher_failure(self, mock_appointment_repo):
        publisher = EventPublisherFactory.create_failing(NotificationError("down"))
        service = AppointmentService(mock_appointment_repo, publisher)
        mock_appointment_repo.update.return_value = make_appointment(id="appt-1")

        assert service.update_appointment("appt-1", {}).id == "appt-1"

    def test_delete_publishes_id_only(
        self, service, mock_appointment_repo, mock_publisher
    ):
        mock_appointment_repo.delete.return_value = True

        assert service.delete_appointment("appt-1") is None

        mock_publisher.publish.assert_called_once_with(
            "AppointmentDeleted", {"id": "appt-1"}
        )

    def test_delete_missing_raises_not_found(self, service, mock_publisher):
        with pytest.raises(NotFoundError):
            service.delete_appointment("missing")

        mock_publisher.publish.assert_not_called()

    def test_delete_survives_publisher_failure(self, mock_appointment_repo):
        publisher = EventPublisherFactory.create_failing(NotificationError("down"))
        service = AppointmentService(mock_appointment_repo, publisher)
        mock_appointment_repo.delete.return_value = True

        service.delete_appointment("appt-1")

        publisher.publish.assert_called_once()
