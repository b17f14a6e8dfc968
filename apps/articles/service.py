from typing import Iterable, List, Optional, Tuple
from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from apps.articles.schemas import ArticleCreate, ArticleUpdate
from common.errors import Conflict, NotFound
from common.numbers import round_currency, round_quantity
from common.pagination import apply_sorting, paginate_select
from models.article import Article


class ArticleService:
    @staticmethod
    async def get_article(db: AsyncSession, article_id: int) -> Article:
        stmt = select(Article).where(and_(Article.id == article_id, Article.is_active.is_(True)))
        res = await db.execute(stmt)
        article = res.scalar_one_or_none()
        if not article:
            raise NotFound(f"Article {article_id} not found.")
        return article

    @staticmethod
    async def _ensure_code_free(db: AsyncSession, code: str, exclude_id: Optional[int] = None) -> None:
        stmt = select(Article.id).where(func.lower(Article.code) == code.lower())
        if exclude_id is not None:
            stmt = stmt.where(Article.id != exclude_id)
        res = await db.execute(stmt)
        if res.first():
            raise Conflict(f"Article code {code} is already in use.")

    @staticmethod
    async def create_article(db: AsyncSession, payload: ArticleCreate) -> Article:
        await ArticleService._ensure_code_free(db, payload.code)
        article = Article(
            code=payload.code,
            name=payload.name,
            description=payload.description,
            article_type=payload.article_type,
            unit_price=round_currency(payload.unit_price),
            quantity_on_hand=round_quantity(payload.quantity_on_hand),
        )
        db.add(article)
        await db.commit()
        await db.refresh(article)
        return article

    @staticmethod
    async def update_article(db: AsyncSession, article_id: int, payload: ArticleUpdate) -> Article:
        article = await ArticleService.get_article(db, article_id)
        if payload.code is not None and payload.code != article.code:
            await ArticleService._ensure_code_free(db, payload.code, exclude_id=article.id)
            article.code = payload.code
        if payload.name is not None:
            article.name = payload.name
        if payload.description is not None:
            article.description = payload.description
        if payload.article_type is not None:
            article.article_type = payload.article_type
        if payload.unit_price is not None:
            article.unit_price = round_currency(payload.unit_price)
        if payload.quantity_on_hand is not None:
            article.quantity_on_hand = round_quantity(payload.quantity_on_hand)
        await db.commit()
        await db.refresh(article)
        return article

    @staticmethod
    async def deactivate_article(db: AsyncSession, article_id: int) -> None:
        # Logical delete; order lines keep pointing at the row
        article = await ArticleService.get_article(db, article_id)
        article.is_active = False
        await db.commit()

    @staticmethod
    async def restore_article(db: AsyncSession, article_id: int) -> Article:
        stmt = select(Article).where(and_(Article.id == article_id, Article.is_active.is_(False)))
        res = await db.execute(stmt)
        article = res.scalar_one_or_none()
        if not article:
            raise NotFound(f"Article {article_id} not found or already active.")
        article.is_active = True
        await db.commit()
        await db.refresh(article)
        return article

    @staticmethod
    async def list_articles(
        db: AsyncSession,
        page: int,
        size: int,
        search: Optional[str],
        sort_by: Optional[str],
        sort_order: str,
        include_inactive: bool = False,
    ) -> Tuple[List[Article], dict]:
        where_clause = []
        if not include_inactive:
            where_clause.append(Article.is_active.is_(True))
        if search:
            s = f"%{search.lower()}%"
            where_clause.append(or_(func.lower(Article.name).like(s), func.lower(Article.code).like(s)))

        stmt = select(Article)
        if where_clause:
            stmt = stmt.where(and_(*where_clause))
        stmt = apply_sorting(stmt, Article, sort_by, sort_order, Article.code.asc())

        count_stmt = select(func.count()).select_from(stmt.with_only_columns(Article.id).order_by(None).subquery())
        return await paginate_select(db, stmt, count_stmt, page, size)

    @staticmethod
    async def count_by_state(db: AsyncSession) -> Tuple[int, int]:
        """
        Returns (active, inactive) article counts.
        """
        res = await db.execute(select(Article.is_active, func.count(Article.id)).group_by(Article.is_active))
        counts = {bool(active): int(n) for active, n in res.all()}
        return counts.get(True, 0), counts.get(False, 0)

    @staticmethod
    async def ensure_active(db: AsyncSession, article_ids: Iterable[int]) -> None:
        """
        Raise NotFound for the lowest id that is missing or inactive.
        """
        wanted = set(article_ids)
        if not wanted:
            return
        res = await db.execute(select(Article.id).where(and_(Article.id.in_(wanted), Article.is_active.is_(True))))
        missing = wanted - set(res.scalars().all())
        if missing:
            raise NotFound(f"Article {min(missing)} not found.")
