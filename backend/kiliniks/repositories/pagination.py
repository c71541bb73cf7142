"""Limit/offset paging shared by the single-table repositories."""

from typing import Callable, Optional

from sqlalchemy import func, select

from kiliniks.domain.entities import PaginatedResult, PaginationParams


def paginate(
    db_session, model, params: Optional[PaginationParams], to_domain: Callable
) -> PaginatedResult:
    """Return one page of ``model`` rows (oldest first) and the total count."""
    params = params or PaginationParams()

    total = db_session.scalar(select(func.count()).select_from(model)) or 0
    rows = db_session.scalars(
        select(model)
        .order_by(model.created_at.asc(), model.id.asc())
        .limit(params.limit)
        .offset(params.offset)
    ).all()
    return PaginatedResult(data=[to_domain(row) for row in rows], total=int(total))
