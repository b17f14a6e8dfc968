from typing import Any, Dict, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession


async def paginate_select(
    db: AsyncSession,
    base_stmt,
    count_stmt,
    page: int,
    size: int,
) -> Tuple[list[Any], Dict[str, int]]:
    """
    Simple async pagination helper for SQLAlchemy 2.0 style select statements.
    Returns (items, pagination_dict)
    """
    page = max(1, page or 1)
    size = max(1, min(size or 10, 100))
    total_res = await db.execute(count_stmt)
    total = int(total_res.scalar_one() or 0)
    items_res = await db.execute(base_stmt.limit(size).offset((page - 1) * size))
    items = list(items_res.scalars().unique().all())
    total_pages = (total + size - 1) // size if total else 0
    return items, {"page": page, "size": size, "total": total, "total_pages": total_pages}


def apply_sorting(stmt, model: Any, sort_by: Optional[str], sort_order: str, default):
    """
    Apply dynamic ORDER BY from query params, falling back to `default`.
    """
    if sort_by and hasattr(model, sort_by):
        col = getattr(model, sort_by)
        if (sort_order or "asc").lower() == "desc":
            return stmt.order_by(col.desc())
        return stmt.order_by(col.asc())
    return stmt.order_by(default)
