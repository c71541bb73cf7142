"""
End-to-end smoke checks run against a live store.

Each check function returns a list of ``(label, passed)`` pairs and cleans
up the rows it created. Exceptions are left to the caller.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Tuple

from kiliniks.domain.entities import (
    Appointment,
    AppointmentStatus,
    Flow,
    Location,
    PaginationParams,
    SalesItem,
    Stage,
)
from kiliniks.events.publishers import ConsolePublisher
from kiliniks.repositories import (
    AppointmentRepository,
    FlowRepository,
    LocationRepository,
    StageRepository,
)
from kiliniks.services import AppointmentService, FlowService

logger = logging.getLogger(__name__)

VERIFICATION_USER = "verification-user"

CheckResults = List[Tuple[str, bool]]


def verify_flow(db) -> CheckResults:
    service = FlowService(
        FlowRepository(db), LocationRepository(db), StageRepository(db)
    )
    results: CheckResults = []

    location = service.create_location(
        Location(
            name="Verification Location",
            description="Created by verify-flow",
            created_by=VERIFICATION_USER,
            updated_by=VERIFICATION_USER,
        )
    )
    flow = service.create_flow(
        Flow(
            name="Verification Flow",
            created_by=VERIFICATION_USER,
            updated_by=VERIFICATION_USER,
        )
    )
    stage = service.create_stage(
        Stage(
            flow_id=flow.id,
            name="Triage Stage",
            has_notes=True,
            sound_url="ding.mp3",
            sales_items=[
                SalesItem(
                    name="Consultation Fee",
                    item_type="Service",
                    price=Decimal("50.00"),
                    default_quantity=1,
                    default_panel_category="General",
                    panel_categories={},
                )
            ],
            location_ids=[location.id],
            created_by=VERIFICATION_USER,
            updated_by=VERIFICATION_USER,
        )
    )
    logger.info(
        "Verification fixtures created",
        extra={
            "context": {
                "location_id": location.id,
                "flow_id": flow.id,
                "stage_id": stage.id,
            }
        },
    )

    try:
        fetched_flow = service.get_flow(flow.id)
        results.append(
            ("flow fetched", bool(fetched_flow and fetched_flow.name == flow.name))
        )
        fetched_location = service.get_location(location.id)
        results.append(
            (
                "location fetched",
                bool(fetched_location and fetched_location.name == location.name),
            )
        )
        fetched_stage = service.get_stage(stage.id)
        results.append(
            ("stage fetched", bool(fetched_stage and fetched_stage.name == stage.name))
        )
        results.append(
            (
                "stage sales items",
                bool(fetched_stage and len(fetched_stage.sales_items) == 1),
            )
        )
        results.append(
            (
                "stage locations",
                bool(fetched_stage and fetched_stage.location_ids == [location.id]),
            )
        )
        page = service.list_flows(PaginationParams(limit=1))
        results.append(("flows page of one", len(page.data) == 1 and page.total >= 1))
    finally:
        service.delete_stage(stage.id)
        service.delete_flow(flow.id)
        service.delete_location(location.id)

    results.append(("stage deleted", service.get_stage(stage.id) is None))
    return results


def verify_appointment(db) -> CheckResults:
    service = AppointmentService(AppointmentRepository(db), ConsolePublisher())
    results: CheckResults = []

    created = service.create_appointment(
        Appointment(
            patient_name="Test Patient",
            doctor_name="Dr. Verify",
            date=datetime.now(timezone.utc),
            notes="Created by verify-appointment",
            created_by=VERIFICATION_USER,
        )
    )
    results.append(
        ("appointment scheduled", created.status == AppointmentStatus.SCHEDULED)
    )

    fetched = service.get_appointment(created.id)
    results.append(("appointment fetched", fetched.patient_name == "Test Patient"))

    updated = service.update_appointment(
        created.id,
        {"status": AppointmentStatus.COMPLETED, "notes": "Updated by verify-appointment"},
    )
    results.append(
        ("appointment updated", updated.status == AppointmentStatus.COMPLETED)
    )

    listed = service.list_appointments()
    results.append(
        ("appointment listed", any(a.id == created.id for a in listed))
    )

    service.delete_appointment(created.id)
    results.append(
        ("appointment deleted", service.appointment_repo.find_by_id(created.id) is None)
    )
    return results
