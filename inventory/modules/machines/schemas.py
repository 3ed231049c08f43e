from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime
from inventory.core.records import coerce_number


class MachineCreate(BaseModel):
    asset_number: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    location: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    status: Optional[str] = "operational"


class MachineUpdate(BaseModel):
    asset_number: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    location: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    status: Optional[str] = None


class MachineResponse(BaseModel):
    id: str
    asset_number: str = ""
    name: str = ""
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    location: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("purchase_price", mode="before")
    @classmethod
    def lenient_numbers(cls, value):
        return coerce_number(value)

    class Config:
        from_attributes = True
