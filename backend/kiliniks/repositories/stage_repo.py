"""
Stage repository implementation following SOLID principles.

A stage is persisted as an aggregate spread over three tables: the
``stages`` row, its ``sales_items`` rows and its ``stage_locations`` link
rows. Every write touches all three inside one transaction on the
repository's session; any failure rolls the whole operation back and the
original exception is re-raised.

Child collections follow full-replace semantics on update: a collection
present in the changes (even empty) replaces the stored one entirely, an
absent collection is left untouched.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import delete, func, insert, select

from kiliniks.db.base import SalesItem as DbSalesItem
from kiliniks.db.base import Stage as DbStage
from kiliniks.db.base import stage_locations
from kiliniks.domain.entities import SalesItem as DomainSalesItem
from kiliniks.domain.entities import Stage as DomainStage
from kiliniks.domain.interfaces import IStageRepository
from kiliniks.utils.ids import IdFactory, generate_id

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def _to_money(value) -> Optional[Decimal]:
    """Round a monetary value to cents, matching the NUMERIC(12,2) columns."""
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(_CENT)


class StageRepository(IStageRepository):
    """Repository for Stage aggregate persistence operations."""

    # Scalar columns an update may change; flow_id is fixed at creation
    MUTABLE_FIELDS = ("name", "has_notes", "sound_url", "updated_by")

    def __init__(self, db_session, id_factory: IdFactory = generate_id) -> None:
        self.db = db_session
        self.id_factory = id_factory

    def create(self, stage: DomainStage) -> DomainStage:
        stage_id = self.id_factory()
        try:
            db_stage = DbStage(
                id=stage_id,
                flow_id=stage.flow_id,
                name=stage.name,
                has_notes=bool(stage.has_notes),
                sound_url=stage.sound_url,
                created_by=stage.created_by,
                updated_by=stage.updated_by,
            )
            self.db.add(db_stage)
            self.db.flush()

            # Ids supplied by the caller are ignored on create
            sales_items = self._insert_sales_items(
                stage_id, stage.sales_items, keep_ids=False
            )
            location_ids = self._insert_location_links(stage_id, stage.location_ids)

            self.db.refresh(db_stage)
            created = self._to_domain(db_stage, sales_items, location_ids)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(
                "Stage create rolled back",
                extra={"context": {"stage_id": stage_id, "flow_id": stage.flow_id}},
                exc_info=True,
            )
            raise

        logger.info(
            "Stage created",
            extra={
                "context": {
                    "stage_id": stage_id,
                    "flow_id": stage.flow_id,
                    "sales_items": len(sales_items),
                    "location_links": len(location_ids),
                }
            },
        )
        return created

    def update(
        self, stage_id: str, changes: Mapping[str, Any]
    ) -> Optional[DomainStage]:
        try:
            db_stage = self.db.scalars(
                select(DbStage).where(DbStage.id == stage_id)
            ).first()
            if db_stage is None:
                self.db.rollback()
                return None

            for field_name in self.MUTABLE_FIELDS:
                if field_name in changes:
                    value = changes[field_name]
                    if field_name == "has_notes":
                        value = bool(value)
                    setattr(db_stage, field_name, value)
            # Touched on every update, even when no scalar field changed
            db_stage.updated_at = func.now()

            if "sales_items" in changes:
                self._delete_sales_items(stage_id)
                sales_items = self._insert_sales_items(
                    stage_id, changes["sales_items"] or [], keep_ids=True
                )
            else:
                sales_items = self._load_sales_items([stage_id]).get(stage_id, [])

            if "location_ids" in changes:
                self.db.execute(
                    delete(stage_locations).where(
                        stage_locations.c.stage_id == stage_id
                    )
                )
                location_ids = self._insert_location_links(
                    stage_id, changes["location_ids"] or []
                )
            else:
                location_ids = self._load_location_ids([stage_id]).get(stage_id, [])

            self.db.flush()
            self.db.refresh(db_stage)
            updated = self._to_domain(db_stage, sales_items, location_ids)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(
                "Stage update rolled back",
                extra={"context": {"stage_id": stage_id}},
                exc_info=True,
            )
            raise

        logger.info(
            "Stage updated",
            extra={
                "context": {
                    "stage_id": stage_id,
                    "replaced_sales_items": "sales_items" in changes,
                    "replaced_location_ids": "location_ids" in changes,
                }
            },
        )
        return updated

    def find_by_id(self, stage_id: str) -> Optional[DomainStage]:
        # The three reads share the session's transaction
        db_stage = self.db.scalars(
            select(DbStage).where(DbStage.id == stage_id)
        ).first()
        if db_stage is None:
            return None
        sales_items = self._load_sales_items([stage_id]).get(stage_id, [])
        location_ids = self._load_location_ids([stage_id]).get(stage_id, [])
        return self._to_domain(db_stage, sales_items, location_ids)

    def find_all_by_flow_id(self, flow_id: str) -> List[DomainStage]:
        db_stages = self.db.scalars(
            select(DbStage)
            .where(DbStage.flow_id == flow_id)
            .order_by(DbStage.created_at.asc(), DbStage.id.asc())
        ).all()
        if not db_stages:
            return []

        stage_ids = [db_stage.id for db_stage in db_stages]
        items_by_stage = self._load_sales_items(stage_ids)
        locations_by_stage = self._load_location_ids(stage_ids)
        return [
            self._to_domain(
                db_stage,
                items_by_stage.get(db_stage.id, []),
                locations_by_stage.get(db_stage.id, []),
            )
            for db_stage in db_stages
        ]

    def delete(self, stage_id: str) -> bool:
        try:
            # Children are removed explicitly; ON DELETE CASCADE may not be
            # configured on every deployed schema.
            self.db.execute(
                delete(DbSalesItem)
                .where(DbSalesItem.stage_id == stage_id)
                .execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(stage_locations).where(stage_locations.c.stage_id == stage_id)
            )
            result = self.db.execute(
                delete(DbStage)
                .where(DbStage.id == stage_id)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(
                "Stage delete rolled back",
                extra={"context": {"stage_id": stage_id}},
                exc_info=True,
            )
            raise

        # The ORM-level objects for the removed rows are stale now
        self.db.expire_all()
        deleted = (result.rowcount or 0) > 0
        if deleted:
            logger.info("Stage deleted", extra={"context": {"stage_id": stage_id}})
        return deleted

    def _insert_sales_items(
        self, stage_id: str, items: Iterable[DomainSalesItem], keep_ids: bool
    ) -> List[DomainSalesItem]:
        db_items = []
        for item in items:
            item_id = item.id if keep_ids and item.id else self.id_factory()
            db_item = DbSalesItem(
                id=item_id,
                stage_id=stage_id,
                name=item.name,
                item_type=item.item_type,
                price=_to_money(item.price),
                cost_price=_to_money(item.cost_price),
                default_quantity=item.default_quantity,
                default_panel_category=item.default_panel_category,
                panel_categories=item.panel_categories,
            )
            self.db.add(db_item)
            db_items.append(db_item)
        if db_items:
            self.db.flush()
        return [self._item_to_domain(db_item) for db_item in db_items]

    def _insert_location_links(
        self, stage_id: str, location_ids: Iterable[str]
    ) -> List[str]:
        # Duplicates are stored as given; locations are not checked for existence
        linked = list(location_ids or [])
        if linked:
            self.db.execute(
                insert(stage_locations),
                [{"stage_id": stage_id, "location_id": loc_id} for loc_id in linked],
            )
        return linked

    def _delete_sales_items(self, stage_id: str) -> None:
        existing = self.db.scalars(
            select(DbSalesItem).where(DbSalesItem.stage_id == stage_id)
        ).all()
        for db_item in existing:
            self.db.delete(db_item)
        # Flush the deletes so a replacement item may reuse an old id
        self.db.flush()

    def _load_sales_items(self, stage_ids: List[str]) -> Dict[str, List[DomainSalesItem]]:
        rows = self.db.scalars(
            select(DbSalesItem)
            .where(DbSalesItem.stage_id.in_(stage_ids))
            .order_by(DbSalesItem.name.asc(), DbSalesItem.id.asc())
        ).all()
        grouped: Dict[str, List[DomainSalesItem]] = {}
        for row in rows:
            grouped.setdefault(row.stage_id, []).append(self._item_to_domain(row))
        return grouped

    def _load_location_ids(self, stage_ids: List[str]) -> Dict[str, List[str]]:
        rows = self.db.execute(
            select(stage_locations.c.stage_id, stage_locations.c.location_id)
            .where(stage_locations.c.stage_id.in_(stage_ids))
            .order_by(stage_locations.c.location_id.asc())
        ).all()
        grouped: Dict[str, List[str]] = {}
        for stage_id, location_id in rows:
            grouped.setdefault(stage_id, []).append(location_id)
        return grouped

    def _item_to_domain(self, db_item: DbSalesItem) -> DomainSalesItem:
        return DomainSalesItem(
            id=db_item.id,
            stage_id=db_item.stage_id,
            name=db_item.name,
            item_type=db_item.item_type,
            price=_to_money(db_item.price),
            cost_price=_to_money(db_item.cost_price),
            default_quantity=float(db_item.default_quantity),
            default_panel_category=db_item.default_panel_category,
            panel_categories=db_item.panel_categories,
        )

    def _to_domain(
        self,
        db_stage: DbStage,
        sales_items: List[DomainSalesItem],
        location_ids: List[str],
    ) -> DomainStage:
        return DomainStage(
            id=db_stage.id,
            flow_id=db_stage.flow_id,
            name=db_stage.name,
            has_notes=bool(db_stage.has_notes),
            sound_url=db_stage.sound_url,
            sales_items=list(sales_items),
            location_ids=list(location_ids),
            created_by=db_stage.created_by,
            updated_by=db_stage.updated_by,
            created_at=db_stage.created_at,
            updated_at=db_stage.updated_at,
        )
