from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field as PydanticField, constr


class WarehouseCreate(BaseModel):
    code: constr(strip_whitespace=True, min_length=1, max_length=50)
    name: constr(strip_whitespace=True, min_length=1, max_length=255)
    location: Optional[constr(strip_whitespace=True, max_length=500)] = None


class WarehouseUpdate(BaseModel):
    code: Optional[constr(strip_whitespace=True, min_length=1, max_length=50)] = None
    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    location: Optional[constr(strip_whitespace=True, max_length=500)] = None


class WarehouseResponse(BaseModel):
    id: int
    code: str
    name: str
    location: Optional[str] = None
    is_active: bool = PydanticField(alias="isActive")
    created_at: datetime = PydanticField(alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class WarehouseListResponse(BaseModel):
    items: List[WarehouseResponse]
