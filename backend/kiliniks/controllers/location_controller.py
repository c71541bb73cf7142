"""
Location controller: CRUD for the locations stages can be linked to.
"""

from flask import Blueprint, jsonify, request

from kiliniks.core.config import get_local_actor
from kiliniks.core.exceptions import NotFoundError
from kiliniks.db.session import SessionLocal
from kiliniks.schemas.dtos import (
    location_to_dict,
    paginated_to_dict,
    parse_location_create,
    parse_location_update,
    parse_pagination,
)

from .flow_service_factory import build_flow_service

locations_bp = Blueprint("locations", __name__, url_prefix="/locations")


@locations_bp.route("", methods=["POST"])
def create_location():
    location = parse_location_create(request.get_json(silent=True), get_local_actor())
    db = SessionLocal()
    try:
        created = build_flow_service(db).create_location(location)
        return jsonify(location_to_dict(created)), 201
    finally:
        db.close()


@locations_bp.route("", methods=["GET"])
def list_locations():
    params = parse_pagination(request.args)
    db = SessionLocal()
    try:
        result = build_flow_service(db).list_locations(params)
        return jsonify(paginated_to_dict(result, location_to_dict)), 200
    finally:
        db.close()


@locations_bp.route("/<location_id>", methods=["GET"])
def get_location(location_id: str):
    db = SessionLocal()
    try:
        location = build_flow_service(db).get_location(location_id)
        if location is None:
            raise NotFoundError("Location", location_id)
        return jsonify(location_to_dict(location)), 200
    finally:
        db.close()


@locations_bp.route("/<location_id>", methods=["PUT"])
def update_location(location_id: str):
    changes = parse_location_update(request.get_json(silent=True), get_local_actor())
    db = SessionLocal()
    try:
        updated = build_flow_service(db).update_location(location_id, changes)
        if updated is None:
            raise NotFoundError("Location", location_id)
        return jsonify(location_to_dict(updated)), 200
    finally:
        db.close()


@locations_bp.route("/<location_id>", methods=["DELETE"])
def delete_location(location_id: str):
    db = SessionLocal()
    try:
        if not build_flow_service(db).delete_location(location_id):
            raise NotFoundError("Location", location_id)
        return jsonify({"success": True}), 200
    finally:
        db.close()
