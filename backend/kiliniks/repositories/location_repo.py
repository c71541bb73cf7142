"""Location repository implementation following SOLID principles."""

from typing import Any, Mapping, Optional

from sqlalchemy import delete, func, select

from kiliniks.db.base import Location as DbLocation
from kiliniks.domain.entities import Location as DomainLocation
from kiliniks.domain.entities import PaginatedResult, PaginationParams
from kiliniks.domain.interfaces import ILocationRepository
from kiliniks.utils.ids import IdFactory, generate_id

from .pagination import paginate


class LocationRepository(ILocationRepository):
    """Repository for Location persistence operations.

    Stage links in ``stage_locations`` are not checked or removed when a
    location is deleted.
    """

    MUTABLE_FIELDS = ("name", "description", "updated_by")

    def __init__(self, db_session, id_factory: IdFactory = generate_id) -> None:
        self.db = db_session
        self.id_factory = id_factory

    def create(self, location: DomainLocation) -> DomainLocation:
        db_location = DbLocation(
            id=self.id_factory(),
            name=location.name,
            description=location.description,
            created_by=location.created_by,
            updated_by=location.updated_by,
        )
        try:
            self.db.add(db_location)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_location)
        return self._to_domain(db_location)

    def update(
        self, location_id: str, changes: Mapping[str, Any]
    ) -> Optional[DomainLocation]:
        try:
            db_location = self.db.scalars(
                select(DbLocation).where(DbLocation.id == location_id)
            ).first()
            if db_location is None:
                self.db.rollback()
                return None
            for field_name in self.MUTABLE_FIELDS:
                if field_name in changes:
                    setattr(db_location, field_name, changes[field_name])
            db_location.updated_at = func.now()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_location)
        return self._to_domain(db_location)

    def find_by_id(self, location_id: str) -> Optional[DomainLocation]:
        db_location = self.db.scalars(
            select(DbLocation).where(DbLocation.id == location_id)
        ).first()
        return self._to_domain(db_location) if db_location else None

    def find_all(self, params: Optional[PaginationParams] = None) -> PaginatedResult:
        return paginate(self.db, DbLocation, params, self._to_domain)

    def delete(self, location_id: str) -> bool:
        try:
            result = self.db.execute(
                delete(DbLocation)
                .where(DbLocation.id == location_id)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.expire_all()
        return (result.rowcount or 0) > 0

    def _to_domain(self, db_location: DbLocation) -> DomainLocation:
        return DomainLocation(
            id=db_location.id,
            name=db_location.name,
            description=db_location.description,
            created_by=db_location.created_by,
            updated_by=db_location.updated_by,
            created_at=db_location.created_at,
            updated_at=db_location.updated_at,
        )
