"""
Integration tests for the Flow and Location repositories.
"""

import pytest

from kiliniks.domain.entities import Flow, Location, PaginationParams, Stage
from kiliniks.repositories.flow_repo import FlowRepository
from kiliniks.repositories.location_repo import LocationRepository
from kiliniks.repositories.stage_repo import StageRepository

pytestmark = pytest.mark.repositories


@pytest.fixture
def flow_repo(db_session) -> FlowRepository:
    return FlowRepository(db_session)


@pytest.fixture
def location_repo(db_session) -> LocationRepository:
    return LocationRepository(db_session)


def make_flow(name="Intake", **overrides) -> Flow:
    values = {"name": name, "created_by": "u1", "updated_by": "u1"}
    values.update(overrides)
    return Flow(**values)


class TestFlowRepository:
    def test_create_and_find(self, flow_repo):
        created = flow_repo.create(make_flow())

        fetched = flow_repo.find_by_id(created.id)

        assert fetched.name == "Intake"
        assert fetched.created_by == "u1"
        assert fetched.created_at is not None
        assert fetched.updated_at is None

    def test_find_missing_returns_none(self, flow_repo):
        assert flow_repo.find_by_id("missing") is None

    def test_pagination_limit_one_of_three(self, flow_repo):
        for name in ("A", "B", "C"):
            flow_repo.create(make_flow(name))

        page = flow_repo.find_all(PaginationParams(limit=1))

        assert len(page.data) == 1
        assert page.total == 3

    def test_pages_cover_every_row_once(self, flow_repo):
        ids = {flow_repo.create(make_flow(name)).id for name in ("A", "B", "C")}

        first = flow_repo.find_all(PaginationParams(limit=2, offset=0))
        second = flow_repo.find_all(PaginationParams(limit=2, offset=2))

        seen = [f.id for f in first.data] + [f.id for f in second.data]
        assert sorted(seen) == sorted(ids)
        assert len(second.data) == 1

    def test_default_page(self, flow_repo):
        for i in range(12):
            flow_repo.create(make_flow(f"Flow {i}"))

        page = flow_repo.find_all()

        assert len(page.data) == 10
        assert page.total == 12

    def test_offset_past_end_is_empty(self, flow_repo):
        flow_repo.create(make_flow())

        page = flow_repo.find_all(PaginationParams(limit=5, offset=50))

        assert page.data == []
        assert page.total == 1

    def test_update_applies_present_fields_and_stamps(self, flow_repo):
        created = flow_repo.create(make_flow())

        updated = flow_repo.update(created.id, {"name": "Renamed", "updated_by": "u2"})

        assert updated.name == "Renamed"
        assert updated.updated_by == "u2"
        assert updated.created_by == "u1"
        assert updated.updated_at is not None

    def test_update_missing_returns_none(self, flow_repo):
        assert flow_repo.update("missing", {"name": "x"}) is None

    def test_delete(self, flow_repo):
        created = flow_repo.create(make_flow())

        assert flow_repo.delete(created.id) is True
        assert flow_repo.delete(created.id) is False
        assert flow_repo.find_by_id(created.id) is None

    def test_delete_keeps_stages_of_the_flow(self, flow_repo, db_session):
        flow = flow_repo.create(make_flow())
        stage_repo = StageRepository(db_session)
        stage = stage_repo.create(Stage(flow_id=flow.id, name="Triage"))

        flow_repo.delete(flow.id)

        assert stage_repo.find_by_id(stage.id) is not None
        assert len(stage_repo.find_all_by_flow_id(flow.id)) == 1


class TestLocationRepository:
    def test_create_with_description(self, location_repo):
        created = location_repo.create(
            Location(name="Room 1", description="Ground floor", created_by="u1")
        )

        fetched = location_repo.find_by_id(created.id)

        assert fetched.description == "Ground floor"

    def test_update_can_clear_description(self, location_repo):
        created = location_repo.create(
            Location(name="Room 1", description="Ground floor", created_by="u1")
        )

        updated = location_repo.update(created.id, {"description": None})

        assert updated.description is None
        assert updated.name == "Room 1"

    def test_pagination_limit_one_of_three(self, location_repo):
        for name in ("Room 1", "Room 2", "Room 3"):
            location_repo.create(Location(name=name, created_by="u1"))

        page = location_repo.find_all(PaginationParams(limit=1))

        assert len(page.data) == 1
        assert page.total == 3

    def test_delete_missing_returns_false(self, location_repo):
        assert location_repo.delete("missing") is False
