"""
Data Transfer Objects (DTOs) and validation schemas.

Translates the camelCase JSON bodies crossing the HTTP boundary into
domain entities (for creates) and snake_case change dicts (for updates),
and domain entities back into JSON-ready dicts.

Update parsers only emit keys that were present in the body, so
repositories can tell "field absent" (leave as is) from "field present"
(apply it; an empty list replaces a collection with nothing).
"""

import math
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional

from kiliniks.core.exceptions import ValidationError
from kiliniks.domain.entities import (
    Appointment,
    AppointmentStatus,
    Flow,
    Location,
    PaginatedResult,
    PaginationParams,
    SalesItem,
    Stage,
)

# ===========================
# Field parsers
# ===========================


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _string(payload: Mapping[str, Any], key: str, required: bool = False) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    if required and not value.strip():
        raise ValidationError(f"{key} must not be empty")
    return value


# NUMERIC(12,2) holds at most ten integer digits
MAX_MONEY = Decimal("1e10")


def _decimal(
    payload: Mapping[str, Any],
    key: str,
    required: bool = False,
    limit: Optional[Decimal] = MAX_MONEY,
) -> Optional[Decimal]:
    value = payload.get(key)
    if value is None:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(f"{key} must be a number")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{key} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{key} must be a finite number")
    if limit is not None and abs(number) >= limit:
        raise ValidationError(f"{key} must be less than {limit:,.0f} in magnitude")
    return number


def _float(payload: Mapping[str, Any], key: str) -> float:
    value = float(_decimal(payload, key, required=True, limit=None))
    if not math.isfinite(value):
        raise ValidationError(f"{key} is out of range")
    return value


def _bool(payload: Mapping[str, Any], key: str) -> bool:
    value = payload.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValidationError(f"{key} must be a boolean")
    return value


def _datetime(payload: Mapping[str, Any], key: str) -> datetime:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{key} must be an ISO-8601 date string")
    try:
        # fromisoformat only accepts a trailing "Z" from Python 3.11 on
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{key} must be an ISO-8601 date string")


def _status(payload: Mapping[str, Any], key: str = "status") -> str:
    value = payload.get(key)
    if value not in AppointmentStatus.ALL:
        raise ValidationError(
            f"{key} must be one of {', '.join(AppointmentStatus.ALL)}"
        )
    return value


def _string_list(payload: Mapping[str, Any], key: str) -> List[str]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{key} must be a list of strings")
    return list(value)


def _build(factory: Callable, **kwargs):
    """Construct a domain entity, surfacing its own rule checks as 400s."""
    try:
        return factory(**kwargs)
    except ValueError as e:
        raise ValidationError(str(e)) from e


# ===========================
# Appointments
# ===========================


def parse_appointment_create(payload: Any, actor: Optional[str]) -> Appointment:
    data = _require_mapping(payload)
    status = AppointmentStatus.SCHEDULED
    if data.get("status") is not None:
        status = _status(data)
    return _build(
        Appointment,
        patient_name=_string(data, "patientName", required=True),
        doctor_name=_string(data, "doctorName", required=True),
        date=_datetime(data, "date"),
        status=status,
        notes=_string(data, "notes"),
        created_by=actor,
    )


def parse_appointment_update(payload: Any) -> Dict[str, Any]:
    data = _require_mapping(payload)
    changes: Dict[str, Any] = {}
    if "patientName" in data:
        changes["patient_name"] = _string(data, "patientName", required=True)
    if "doctorName" in data:
        changes["doctor_name"] = _string(data, "doctorName", required=True)
    if "date" in data:
        changes["date"] = _datetime(data, "date")
    if "status" in data:
        changes["status"] = _status(data)
    if "notes" in data:
        changes["notes"] = _string(data, "notes")
    return changes


# ===========================
# Flows and locations
# ===========================


def parse_flow_create(payload: Any, actor: str) -> Flow:
    data = _require_mapping(payload)
    return _build(
        Flow,
        name=_string(data, "name", required=True),
        created_by=actor,
        updated_by=actor,
    )


def parse_flow_update(payload: Any, actor: str) -> Dict[str, Any]:
    data = _require_mapping(payload)
    changes: Dict[str, Any] = {"updated_by": actor}
    if "name" in data:
        changes["name"] = _string(data, "name", required=True)
    return changes


def parse_location_create(payload: Any, actor: str) -> Location:
    data = _require_mapping(payload)
    return _build(
        Location,
        name=_string(data, "name", required=True),
        description=_string(data, "description"),
        created_by=actor,
        updated_by=actor,
    )


def parse_location_update(payload: Any, actor: str) -> Dict[str, Any]:
    data = _require_mapping(payload)
    changes: Dict[str, Any] = {"updated_by": actor}
    if "name" in data:
        changes["name"] = _string(data, "name", required=True)
    if "description" in data:
        changes["description"] = _string(data, "description")
    return changes


# ===========================
# Stages and sales items
# ===========================


def parse_sales_item(payload: Any) -> SalesItem:
    data = _require_mapping(payload)
    return _build(
        SalesItem,
        id=_string(data, "id"),
        name=_string(data, "name", required=True),
        item_type=_string(data, "itemType"),
        price=_decimal(data, "price", required=True),
        cost_price=_decimal(data, "costPrice"),
        default_quantity=_float(data, "defaultQuantity"),
        default_panel_category=_string(data, "defaultPanelCategory"),
        panel_categories=data.get("panelCategories"),
    )


def _sales_items(payload: Mapping[str, Any]) -> List[SalesItem]:
    value = payload.get("salesItems")
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError("salesItems must be a list")
    return [parse_sales_item(item) for item in value]


def parse_stage_create(payload: Any, actor: str) -> Stage:
    data = _require_mapping(payload)
    return _build(
        Stage,
        flow_id=_string(data, "flowId", required=True),
        name=_string(data, "name", required=True),
        has_notes=_bool(data, "hasNotes"),
        sound_url=_string(data, "soundUrl"),
        sales_items=_sales_items(data),
        location_ids=_string_list(data, "locationIds"),
        created_by=actor,
        updated_by=actor,
    )


def parse_stage_update(payload: Any, actor: str) -> Dict[str, Any]:
    """
    Build the change set for a stage update.

    ``salesItems`` / ``locationIds`` keys are carried over only when present
    in the body; ``null`` is treated like an empty list.
    """
    data = _require_mapping(payload)
    changes: Dict[str, Any] = {"updated_by": actor}
    if "name" in data:
        changes["name"] = _string(data, "name", required=True)
    if "hasNotes" in data:
        changes["has_notes"] = _bool(data, "hasNotes")
    if "soundUrl" in data:
        changes["sound_url"] = _string(data, "soundUrl")
    if "salesItems" in data:
        changes["sales_items"] = _sales_items(data)
    if "locationIds" in data:
        changes["location_ids"] = _string_list(data, "locationIds")
    return changes


# ===========================
# Pagination
# ===========================


def parse_pagination(args: Mapping[str, Any]) -> PaginationParams:
    values = {}
    for key in ("limit", "offset"):
        raw = args.get(key)
        if raw is None or raw == "":
            continue
        try:
            values[key] = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"{key} must be an integer")
    return PaginationParams(**values)


# ===========================
# Serializers
# ===========================


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _number(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def appointment_to_dict(appointment: Appointment) -> Dict[str, Any]:
    return {
        "id": appointment.id,
        "patientName": appointment.patient_name,
        "doctorName": appointment.doctor_name,
        "date": _iso(appointment.date),
        "status": appointment.status,
        "notes": appointment.notes,
        "createdBy": appointment.created_by,
    }


def flow_to_dict(flow: Flow) -> Dict[str, Any]:
    return {
        "id": flow.id,
        "name": flow.name,
        "createdBy": flow.created_by,
        "updatedBy": flow.updated_by,
        "createdAt": _iso(flow.created_at),
    }


def location_to_dict(location: Location) -> Dict[str, Any]:
    return {
        "id": location.id,
        "name": location.name,
        "description": location.description,
        "createdBy": location.created_by,
        "updatedBy": location.updated_by,
        "createdAt": _iso(location.created_at),
    }


def sales_item_to_dict(item: SalesItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "stageId": item.stage_id,
        "name": item.name,
        "itemType": item.item_type,
        "price": _number(item.price),
        "costPrice": _number(item.cost_price),
        "defaultQuantity": item.default_quantity,
        "defaultPanelCategory": item.default_panel_category,
        "panelCategories": item.panel_categories,
    }


def stage_to_dict(stage: Stage) -> Dict[str, Any]:
    return {
        "id": stage.id,
        "flowId": stage.flow_id,
        "name": stage.name,
        "hasNotes": stage.has_notes,
        "soundUrl": stage.sound_url,
        "salesItems": [sales_item_to_dict(item) for item in stage.sales_items],
        "locationIds": list(stage.location_ids),
        "createdBy": stage.created_by,
        "updatedBy": stage.updated_by,
        "createdAt": _iso(stage.created_at),
    }


def paginated_to_dict(result: PaginatedResult, serializer: Callable) -> Dict[str, Any]:
    return {"data": [serializer(row) for row in result.data], "total": result.total}
