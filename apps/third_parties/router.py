from typing import Literal, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from apps.third_parties.schemas import (
    ThirdPartyCreate,
    ThirdPartyUpdate,
    ThirdPartyResponse,
    ThirdPartyListResponse,
)
from apps.third_parties.service import ThirdPartyService
from models.base import get_db


router = APIRouter(prefix="/api/third-parties", tags=["Third Parties"])


@router.get("", response_model=ThirdPartyListResponse)
async def list_third_parties(
    search: Optional[str] = Query(default=None, description="Search by name or tax identifier"),
    relation: Optional[Literal["client", "supplier", "both"]] = Query(default=None),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    sort_by: Optional[str] = Query(default=None, description="Field to sort by (e.g., name, created_at)"),
    sort_order: str = Query(default="asc", pattern="^(asc|desc|ASC|DESC)$"),
    include_inactive: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
):
    items, pagination = await ThirdPartyService.list_third_parties(
        db, page, size, search, relation, sort_by, sort_order, include_inactive
    )
    return ThirdPartyListResponse(
        items=[ThirdPartyResponse.model_validate(t) for t in items],
        pagination=pagination,
    )


@router.get("/{third_party_id}", response_model=ThirdPartyResponse)
async def get_third_party(third_party_id: int, db: AsyncSession = Depends(get_db)):
    third_party = await ThirdPartyService.get_third_party(db, third_party_id)
    return ThirdPartyResponse.model_validate(third_party)


@router.post("", response_model=ThirdPartyResponse, status_code=status.HTTP_201_CREATED)
async def create_third_party(payload: ThirdPartyCreate, db: AsyncSession = Depends(get_db)):
    third_party = await ThirdPartyService.create_third_party(db, payload)
    return ThirdPartyResponse.model_validate(third_party)


@router.patch("/{third_party_id}", response_model=ThirdPartyResponse)
async def update_third_party(third_party_id: int, payload: ThirdPartyUpdate, db: AsyncSession = Depends(get_db)):
    third_party = await ThirdPartyService.update_third_party(db, third_party_id, payload)
    return ThirdPartyResponse.model_validate(third_party)


# Soft delete: the partner stays referenced by orders and invoices
@router.delete("/{third_party_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_third_party(third_party_id: int, db: AsyncSession = Depends(get_db)):
    await ThirdPartyService.deactivate_third_party(db, third_party_id)
    return None


@router.patch("/{third_party_id}/restore", response_model=ThirdPartyResponse)
async def restore_third_party(third_party_id: int, db: AsyncSession = Depends(get_db)):
    third_party = await ThirdPartyService.restore_third_party(db, third_party_id)
    return ThirdPartyResponse.model_validate(third_party)
