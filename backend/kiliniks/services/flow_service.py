"""
Flow service: flows, locations and stages.

A thin pass-through over the three repositories. "Not found" is reported
as ``None`` / ``False`` and left for the caller to translate.
"""

from typing import Any, List, Mapping, Optional

from kiliniks.domain.entities import (
    Flow,
    Location,
    PaginatedResult,
    PaginationParams,
    Stage,
)
from kiliniks.domain.interfaces import (
    IFlowRepository,
    ILocationRepository,
    IStageRepository,
)


class FlowService:
    def __init__(
        self,
        flow_repo: IFlowRepository,
        location_repo: ILocationRepository,
        stage_repo: IStageRepository,
    ):
        self.flow_repo = flow_repo
        self.location_repo = location_repo
        self.stage_repo = stage_repo

    # Flows

    def create_flow(self, flow: Flow) -> Flow:
        return self.flow_repo.create(flow)

    def get_flow(self, flow_id: str) -> Optional[Flow]:
        return self.flow_repo.find_by_id(flow_id)

    def list_flows(self, params: Optional[PaginationParams] = None) -> PaginatedResult:
        return self.flow_repo.find_all(params)

    def update_flow(self, flow_id: str, changes: Mapping[str, Any]) -> Optional[Flow]:
        return self.flow_repo.update(flow_id, changes)

    def delete_flow(self, flow_id: str) -> bool:
        return self.flow_repo.delete(flow_id)

    # Locations

    def create_location(self, location: Location) -> Location:
        return self.location_repo.create(location)

    def get_location(self, location_id: str) -> Optional[Location]:
        return self.location_repo.find_by_id(location_id)

    def list_locations(
        self, params: Optional[PaginationParams] = None
    ) -> PaginatedResult:
        return self.location_repo.find_all(params)

    def update_location(
        self, location_id: str, changes: Mapping[str, Any]
    ) -> Optional[Location]:
        return self.location_repo.update(location_id, changes)

    def delete_location(self, location_id: str) -> bool:
        return self.location_repo.delete(location_id)

    # Stages

    def create_stage(self, stage: Stage) -> Stage:
        return self.stage_repo.create(stage)

    def get_stage(self, stage_id: str) -> Optional[Stage]:
        return self.stage_repo.find_by_id(stage_id)

    def list_stages_by_flow(self, flow_id: str) -> List[Stage]:
        """Stages of one flow, oldest first, with children attached."""
        return self.stage_repo.find_all_by_flow_id(flow_id)

    def update_stage(
        self, stage_id: str, changes: Mapping[str, Any]
    ) -> Optional[Stage]:
        return self.stage_repo.update(stage_id, changes)

    def delete_stage(self, stage_id: str) -> bool:
        return self.stage_repo.delete(stage_id)
