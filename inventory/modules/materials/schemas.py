from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from inventory.core.records import coerce_number


class MaterialCreate(BaseModel):
    material_number: str = Field(min_length=1)
    name: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    stock: Optional[float] = Field(default=None, ge=0)
    minimum_stock: Optional[float] = Field(default=None, ge=0)
    price: Optional[float] = Field(default=None, ge=0)
    supplier: Optional[str] = None
    status: Optional[str] = "active"


class MaterialUpdate(BaseModel):
    material_number: Optional[str] = None
    name: Optional[str] = None
    unit: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    stock: Optional[float] = Field(default=None, ge=0)
    minimum_stock: Optional[float] = Field(default=None, ge=0)
    price: Optional[float] = Field(default=None, ge=0)
    supplier: Optional[str] = None
    status: Optional[str] = None


class MaterialResponse(BaseModel):
    id: str
    material_number: str = ""
    name: str = ""
    unit: str = ""
    description: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    stock: Optional[float] = None
    minimum_stock: Optional[float] = None
    price: Optional[float] = None
    supplier: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("stock", "minimum_stock", "price", mode="before")
    @classmethod
    def lenient_numbers(cls, value):
        return coerce_number(value)

    class Config:
        from_attributes = True
