"""
Stage controller.

A stage is written together with its sales items and location links.
On PUT, ``salesItems`` / ``locationIds`` replace the stored collections
only when the keys are present in the body.
"""

from flask import Blueprint, jsonify, request

from kiliniks.core.config import get_local_actor
from kiliniks.core.exceptions import NotFoundError
from kiliniks.db.session import SessionLocal
from kiliniks.schemas.dtos import parse_stage_create, parse_stage_update, stage_to_dict

from .flow_service_factory import build_flow_service

stages_bp = Blueprint("stages", __name__, url_prefix="/stages")


@stages_bp.route("", methods=["POST"])
def create_stage():
    stage = parse_stage_create(request.get_json(silent=True), get_local_actor())
    db = SessionLocal()
    try:
        created = build_flow_service(db).create_stage(stage)
        return jsonify(stage_to_dict(created)), 201
    finally:
        db.close()


@stages_bp.route("/<stage_id>", methods=["GET"])
def get_stage(stage_id: str):
    db = SessionLocal()
    try:
        stage = build_flow_service(db).get_stage(stage_id)
        if stage is None:
            raise NotFoundError("Stage", stage_id)
        return jsonify(stage_to_dict(stage)), 200
    finally:
        db.close()


@stages_bp.route("/<stage_id>", methods=["PUT"])
def update_stage(stage_id: str):
    changes = parse_stage_update(request.get_json(silent=True), get_local_actor())
    db = SessionLocal()
    try:
        updated = build_flow_service(db).update_stage(stage_id, changes)
        if updated is None:
            raise NotFoundError("Stage", stage_id)
        return jsonify(stage_to_dict(updated)), 200
    finally:
        db.close()


@stages_bp.route("/<stage_id>", methods=["DELETE"])
def delete_stage(stage_id: str):
    db = SessionLocal()
    try:
        if not build_flow_service(db).delete_stage(stage_id):
            raise NotFoundError("Stage", stage_id)
        return jsonify({"success": True}), 200
    finally:
        db.close()
