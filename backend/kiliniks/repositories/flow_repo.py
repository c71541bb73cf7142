"""
Flow repository implementation following SOLID principles.

Single-table CRUD over ``flows``. Deleting a flow does not touch its
stages; flows are treated as reusable templates and stage cleanup is left
to the caller.
"""

from typing import Any, Mapping, Optional

from sqlalchemy import delete, func, select

from kiliniks.db.base import Flow as DbFlow
from kiliniks.domain.entities import Flow as DomainFlow
from kiliniks.domain.entities import PaginatedResult, PaginationParams
from kiliniks.domain.interfaces import IFlowRepository
from kiliniks.utils.ids import IdFactory, generate_id

from .pagination import paginate


class FlowRepository(IFlowRepository):
    """Repository for Flow persistence operations."""

    MUTABLE_FIELDS = ("name", "updated_by")

    def __init__(self, db_session, id_factory: IdFactory = generate_id) -> None:
        self.db = db_session
        self.id_factory = id_factory

    def create(self, flow: DomainFlow) -> DomainFlow:
        db_flow = DbFlow(
            id=self.id_factory(),
            name=flow.name,
            created_by=flow.created_by,
            updated_by=flow.updated_by,
        )
        try:
            self.db.add(db_flow)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_flow)
        return self._to_domain(db_flow)

    def update(self, flow_id: str, changes: Mapping[str, Any]) -> Optional[DomainFlow]:
        try:
            db_flow = self.db.scalars(select(DbFlow).where(DbFlow.id == flow_id)).first()
            if db_flow is None:
                self.db.rollback()
                return None
            for field_name in self.MUTABLE_FIELDS:
                if field_name in changes:
                    setattr(db_flow, field_name, changes[field_name])
            db_flow.updated_at = func.now()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_flow)
        return self._to_domain(db_flow)

    def find_by_id(self, flow_id: str) -> Optional[DomainFlow]:
        db_flow = self.db.scalars(select(DbFlow).where(DbFlow.id == flow_id)).first()
        return self._to_domain(db_flow) if db_flow else None

    def find_all(self, params: Optional[PaginationParams] = None) -> PaginatedResult:
        return paginate(self.db, DbFlow, params, self._to_domain)

    def delete(self, flow_id: str) -> bool:
        try:
            result = self.db.execute(
                delete(DbFlow)
                .where(DbFlow.id == flow_id)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.expire_all()
        return (result.rowcount or 0) > 0

    def _to_domain(self, db_flow: DbFlow) -> DomainFlow:
        return DomainFlow(
            id=db_flow.id,
            name=db_flow.name,
            created_by=db_flow.created_by,
            updated_by=db_flow.updated_by,
            created_at=db_flow.created_at,
            updated_at=db_flow.updated_at,
        )
