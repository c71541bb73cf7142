"""
Flow controller: CRUD for flows plus the stages-of-a-flow listing.
"""

from flask import Blueprint, jsonify, request

from kiliniks.core.config import get_local_actor
from kiliniks.core.exceptions import NotFoundError
from kiliniks.db.session import SessionLocal
from kiliniks.schemas.dtos import (
    flow_to_dict,
    paginated_to_dict,
    parse_flow_create,
    parse_flow_update,
    parse_pagination,
    stage_to_dict,
)

from .flow_service_factory import build_flow_service

flows_bp = Blueprint("flows", __name__, url_prefix="/flows")


@flows_bp.route("", methods=["POST"])
def create_flow():
    flow = parse_flow_create(request.get_json(silent=True), get_local_actor())
    db = SessionLocal()
    try:
        created = build_flow_service(db).create_flow(flow)
        return jsonify(flow_to_dict(created)), 201
    finally:
        db.close()


@flows_bp.route("", methods=["GET"])
def list_flows():
    """List flows one page at a time (?limit=&offset=)."""
    params = parse_pagination(request.args)
    db = SessionLocal()
    try:
        result = build_flow_service(db).list_flows(params)
        return jsonify(paginated_to_dict(result, flow_to_dict)), 200
    finally:
        db.close()


@flows_bp.route("/<flow_id>", methods=["GET"])
def get_flow(flow_id: str):
    db = SessionLocal()
    try:
        flow = build_flow_service(db).get_flow(flow_id)
        if flow is None:
            raise NotFoundError("Flow", flow_id)
        return jsonify(flow_to_dict(flow)), 200
    finally:
        db.close()


@flows_bp.route("/<flow_id>", methods=["PUT"])
def update_flow(flow_id: str):
    changes = parse_flow_update(request.get_json(silent=True), get_local_actor())
    db = SessionLocal()
    try:
        updated = build_flow_service(db).update_flow(flow_id, changes)
        if updated is None:
            raise NotFoundError("Flow", flow_id)
        return jsonify(flow_to_dict(updated)), 200
    finally:
        db.close()


@flows_bp.route("/<flow_id>", methods=["DELETE"])
def delete_flow(flow_id: str):
    db = SessionLocal()
    try:
        if not build_flow_service(db).delete_flow(flow_id):
            raise NotFoundError("Flow", flow_id)
        return jsonify({"success": True}), 200
    finally:
        db.close()


@flows_bp.route("/<flow_id>/stages", methods=["GET"])
def list_flow_stages(flow_id: str):
    # An unknown flow simply has no stages
    db = SessionLocal()
    try:
        stages = build_flow_service(db).list_stages_by_flow(flow_id)
        return jsonify([stage_to_dict(stage) for stage in stages]), 200
    finally:
        db.close()
