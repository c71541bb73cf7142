"""
Appointment controller for handling HTTP requests.

Handles HTTP concerns only; NotFoundError and ValidationError raised below
are turned into JSON responses by the app-level error handlers.
"""

from flask import Blueprint, current_app, jsonify, request

from kiliniks.core.config import get_local_actor
from kiliniks.db.session import SessionLocal
from kiliniks.repositories.appointment_repo import AppointmentRepository
from kiliniks.schemas.dtos import (
    appointment_to_dict,
    parse_appointment_create,
    parse_appointment_update,
)
from kiliniks.services.appointment_service import AppointmentService

appointments_bp = Blueprint("appointments", __name__, url_prefix="/appointments")


def _service(db) -> AppointmentService:
    return AppointmentService(
        AppointmentRepository(db), current_app.extensions["event_publisher"]
    )


@appointments_bp.route("", methods=["POST"])
def create_appointment():
    appointment = parse_appointment_create(
        request.get_json(silent=True), get_local_actor()
    )
    db = SessionLocal()
    try:
        created = _service(db).create_appointment(appointment)
        return jsonify(appointment_to_dict(created)), 201
    finally:
        db.close()


@appointments_bp.route("", methods=["GET"])
def list_appointments():
    db = SessionLocal()
    try:
        appointments = _service(db).list_appointments()
        return jsonify([appointment_to_dict(a) for a in appointments]), 200
    finally:
        db.close()


@appointments_bp.route("/<appointment_id>", methods=["GET"])
def get_appointment(appointment_id: str):
    db = SessionLocal()
    try:
        appointment = _service(db).get_appointment(appointment_id)
        return jsonify(appointment_to_dict(appointment)), 200
    finally:
        db.close()


@appointments_bp.route("/<appointment_id>", methods=["PUT"])
def update_appointment(appointment_id: str):
    changes = parse_appointment_update(request.get_json(silent=True))
    db = SessionLocal()
    try:
        updated = _service(db).update_appointment(appointment_id, changes)
        return jsonify(appointment_to_dict(updated)), 200
    finally:
        db.close()


@appointments_bp.route("/<appointment_id>", methods=["DELETE"])
def delete_appointment(appointment_id: str):
    db = SessionLocal()
    try:
        _service(db).delete_appointment(appointment_id)
        return jsonify({"success": True}), 200
    finally:
        db.close()
