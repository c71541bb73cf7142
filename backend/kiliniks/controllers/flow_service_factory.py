from kiliniks.repositories.flow_repo import FlowRepository
from kiliniks.repositories.location_repo import LocationRepository
from kiliniks.repositories.stage_repo import StageRepository
from kiliniks.services.flow_service import FlowService


def build_flow_service(db) -> FlowService:
    """Wire a FlowService whose repositories share one session."""
    return FlowService(
        FlowRepository(db), LocationRepository(db), StageRepository(db)
    )
