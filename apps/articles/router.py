from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from apps.articles.schemas import ArticleCreate, ArticleUpdate, ArticleResponse, ArticleListResponse
from apps.articles.service import ArticleService
from models.base import get_db


router = APIRouter(prefix="/api/articles", tags=["Articles"])


@router.get("", response_model=ArticleListResponse)
async def list_articles(
    search: Optional[str] = Query(default=None, description="Search by code or name"),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    sort_by: Optional[str] = Query(default=None, description="Field to sort by (e.g., code, name)"),
    sort_order: str = Query(default="asc", pattern="^(asc|desc|ASC|DESC)$"),
    include_inactive: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
):
    items, pagination = await ArticleService.list_articles(db, page, size, search, sort_by, sort_order, include_inactive)
    return ArticleListResponse(items=[ArticleResponse.model_validate(a) for a in items], pagination=pagination)


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(article_id: int, db: AsyncSession = Depends(get_db)):
    article = await ArticleService.get_article(db, article_id)
    return ArticleResponse.model_validate(article)


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(payload: ArticleCreate, db: AsyncSession = Depends(get_db)):
    article = await ArticleService.create_article(db, payload)
    return ArticleResponse.model_validate(article)


@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(article_id: int, payload: ArticleUpdate, db: AsyncSession = Depends(get_db)):
    article = await ArticleService.update_article(db, article_id, payload)
    return ArticleResponse.model_validate(article)


@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article(article_id: int, db: AsyncSession = Depends(get_db)):
    await ArticleService.deactivate_article(db, article_id)
    return None


@router.patch("/{article_id}/restore", response_model=ArticleResponse)
async def restore_article(article_id: int, db: AsyncSession = Depends(get_db)):
    article = await ArticleService.restore_article(db, article_id)
    return ArticleResponse.model_validate(article)
