from typing import List, Optional, Tuple
from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from apps.third_parties.schemas import ThirdPartyCreate, ThirdPartyUpdate
from common.errors import Conflict, NotFound
from common.pagination import apply_sorting, paginate_select
from constants.catalog import BOTH
from models.third_party import ThirdParty


class ThirdPartyService:
    @staticmethod
    async def check_third_party_exists(db: AsyncSession, third_party_id: int) -> Optional[ThirdParty]:
        stmt = select(ThirdParty).where(and_(ThirdParty.id == third_party_id, ThirdParty.is_active.is_(True)))
        res = await db.execute(stmt)
        return res.scalar_one_or_none()

    @staticmethod
    async def get_third_party(db: AsyncSession, third_party_id: int) -> ThirdParty:
        third_party = await ThirdPartyService.check_third_party_exists(db, third_party_id)
        if not third_party:
            raise NotFound(f"Third party {third_party_id} not found.")
        return third_party

    @staticmethod
    async def _ensure_tax_id_free(db: AsyncSession, tax_id: str, exclude_id: Optional[int] = None) -> None:
        # Check both active and inactive rows to avoid collisions
        stmt = select(ThirdParty.id).where(func.lower(ThirdParty.tax_id) == tax_id.lower())
        if exclude_id is not None:
            stmt = stmt.where(ThirdParty.id != exclude_id)
        res = await db.execute(stmt)
        if res.first():
            raise Conflict(f"Tax identifier {tax_id} is already registered.")

    @staticmethod
    async def create_third_party(db: AsyncSession, payload: ThirdPartyCreate) -> ThirdParty:
        await ThirdPartyService._ensure_tax_id_free(db, payload.tax_id)
        third_party = ThirdParty(
            tax_id=payload.tax_id.upper(),
            name=payload.name,
            relation=payload.relation,
            email=payload.email,
            phone=payload.phone,
            address=payload.address,
        )
        db.add(third_party)
        await db.commit()
        await db.refresh(third_party)
        return third_party

    @staticmethod
    async def update_third_party(db: AsyncSession, third_party_id: int, payload: ThirdPartyUpdate) -> ThirdParty:
        third_party = await ThirdPartyService.get_third_party(db, third_party_id)
        if payload.tax_id is not None and payload.tax_id.upper() != third_party.tax_id:
            await ThirdPartyService._ensure_tax_id_free(db, payload.tax_id, exclude_id=third_party.id)
            third_party.tax_id = payload.tax_id.upper()
        if payload.name is not None:
            third_party.name = payload.name
        if payload.relation is not None:
            third_party.relation = payload.relation
        if payload.email is not None:
            third_party.email = payload.email
        if payload.phone is not None:
            third_party.phone = payload.phone
        if payload.address is not None:
            third_party.address = payload.address
        await db.commit()
        await db.refresh(third_party)
        return third_party

    @staticmethod
    async def deactivate_third_party(db: AsyncSession, third_party_id: int) -> None:
        third_party = await ThirdPartyService.get_third_party(db, third_party_id)
        third_party.is_active = False
        await db.commit()

    @staticmethod
    async def restore_third_party(db: AsyncSession, third_party_id: int) -> ThirdParty:
        stmt = select(ThirdParty).where(and_(ThirdParty.id == third_party_id, ThirdParty.is_active.is_(False)))
        res = await db.execute(stmt)
        third_party = res.scalar_one_or_none()
        if not third_party:
            raise NotFound(f"Third party {third_party_id} not found or already active.")
        third_party.is_active = True
        await db.commit()
        await db.refresh(third_party)
        return third_party

    @staticmethod
    async def list_third_parties(
        db: AsyncSession,
        page: int,
        size: int,
        search: Optional[str],
        relation: Optional[str],
        sort_by: Optional[str],
        sort_order: str,
        include_inactive: bool = False,
    ) -> Tuple[List[ThirdParty], dict]:
        where_clause = []
        if not include_inactive:
            where_clause.append(ThirdParty.is_active.is_(True))
        if relation:
            # "both" partners qualify for either side
            where_clause.append(ThirdParty.relation.in_([relation, BOTH]))
        if search:
            s = f"%{search.lower()}%"
            where_clause.append(or_(func.lower(ThirdParty.name).like(s), func.lower(ThirdParty.tax_id).like(s)))

        stmt = select(ThirdParty)
        if where_clause:
            stmt = stmt.where(and_(*where_clause))
        stmt = apply_sorting(stmt, ThirdParty, sort_by, sort_order, ThirdParty.name.asc())

        count_stmt = select(func.count()).select_from(stmt.with_only_columns(ThirdParty.id).order_by(None).subquery())
        return await paginate_select(db, stmt, count_stmt, page, size)
