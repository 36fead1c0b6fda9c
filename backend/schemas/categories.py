from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
import re

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

class CategoryBase(BaseModel):
    name: str
    description: Optional[str] = None
    color: str = "#9e9e9e"

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        if not HEX_COLOR.match(v):
            raise ValueError("color must be a hex colour like #4caf50")
        return v

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None

    @field_validator('name', 'color')
    @classmethod
    def validate_required(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        if info.field_name == 'color' and not HEX_COLOR.match(v):
            raise ValueError("color must be a hex colour like #4caf50")
        return v

class Category(CategoryBase):
    id: int
    tenant_id: str
    is_default: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
