from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field as PydanticField, constr, EmailStr


Relation = Literal["client", "supplier", "both"]


# -------------------------------
# Third party schemas
# -------------------------------

class ThirdPartyCreate(BaseModel):
    tax_id: constr(strip_whitespace=True, min_length=1, max_length=50) = PydanticField(alias="taxId")
    name: constr(strip_whitespace=True, min_length=1, max_length=255)
    relation: Relation
    email: Optional[EmailStr] = None
    phone: Optional[constr(strip_whitespace=True, min_length=1, max_length=50)] = None
    address: Optional[constr(strip_whitespace=True, min_length=1, max_length=500)] = None

    class Config:
        populate_by_name = True


class ThirdPartyUpdate(BaseModel):
    tax_id: Optional[constr(strip_whitespace=True, min_length=1, max_length=50)] = PydanticField(default=None, alias="taxId")
    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    relation: Optional[Relation] = None
    email: Optional[EmailStr] = None
    phone: Optional[constr(strip_whitespace=True, min_length=1, max_length=50)] = None
    address: Optional[constr(strip_whitespace=True, min_length=1, max_length=500)] = None

    class Config:
        populate_by_name = True


class ThirdPartyResponse(BaseModel):
    id: int
    tax_id: str = PydanticField(alias="taxId")
    name: str
    relation: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    is_active: bool = PydanticField(alias="isActive")
    created_at: datetime = PydanticField(alias="createdAt")
    updated_at: datetime = PydanticField(alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class ThirdPartyListResponse(BaseModel):
    items: List[ThirdPartyResponse]
    pagination: dict
