"""
HTTP tests for the /appointments endpoints.
"""

import pytest

from kiliniks.core.exceptions import NotificationError

pytestmark = pytest.mark.api

APPOINTMENT = {
    "patientName": "Ana Souza",
    "doctorName": "Dr. Lima",
    "date": "2030-05-01T09:30:00",
    "notes": "first visit",
}


def create_appointment(client, **overrides):
    body = dict(APPOINTMENT, **overrides)
    response = client.post("/appointments", json=body)
    assert response.status_code == 201
    return response.get_json()


def test_create_forces_scheduled_and_stamps_actor(client, event_publisher):
    created = create_appointment(client, status="COMPLETED")

    assert created["status"] == "SCHEDULED"
    assert created["createdBy"] == "local-user"
    assert created["id"]
    event_publisher.publish.assert_called_once()
    assert event_publisher.publish.call_args[0][0] == "AppointmentCreated"


def test_create_rejects_missing_fields(client, event_publisher):
    response = client.post("/appointments", json={"patientName": "Ana"})

    assert response.status_code == 400
    assert "error" in response.get_json()
    event_publisher.publish.assert_not_called()


def test_create_rejects_non_json_body(client):
    response = client.post("/appointments", data="nope", content_type="text/plain")

    assert response.status_code == 400


def test_get_and_list(client):
    created = create_appointment(client)

    fetched = client.get(f"/appointments/{created['id']}")
    listed = client.get("/appointments")

    assert fetched.status_code == 200
    assert fetched.get_json()["patientName"] == "Ana Souza"
    assert [a["id"] for a in listed.get_json()] == [created["id"]]


def test_get_missing_is_404(client):
    response = client.get("/appointments/missing")

    assert response.status_code == 404
    assert response.get_json() == {"error": "Appointment not found"}


def test_update_publishes_updated_event(client, event_publisher):
    created = create_appointment(client)

    response = client.put(
        f"/appointments/{created['id']}", json={"status": "COMPLETED"}
    )

    assert response.status_code == 200
    assert response.get_json()["status"] == "COMPLETED"
    assert response.get_json()["notes"] == "first visit"
    assert event_publisher.publish.call_args[0][0] == "AppointmentUpdated"


def test_update_missing_is_404(client):
    response = client.put("/appointments/missing", json={"notes": "x"})

    assert response.status_code == 404


def test_delete_then_get_is_404(client, event_publisher):
    created = create_appointment(client)

    response = client.delete(f"/appointments/{created['id']}")

    assert response.status_code == 200
    assert response.get_json() == {"success": True}
    event_publisher.publish.assert_called_with(
        "AppointmentDeleted", {"id": created["id"]}
    )
    assert client.get(f"/appointments/{created['id']}").status_code == 404


def test_delete_nonexistent_is_404(client):
    response = client.delete("/appointments/nonexistent")

    assert response.status_code == 404
    assert response.get_json() == {"error": "Appointment not found"}


def test_publisher_failure_still_returns_201(client, event_publisher):
    event_publisher.publish.side_effect = NotificationError("bus down")

    response = client.post("/appointments", json=APPOINTMENT)

    assert response.status_code == 201
    assert client.get(f"/appointments/{response.get_json()['id']}").status_code == 200
