from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Literal, Optional
from datetime import datetime
from inventory.core.records import coerce_number

MachineTransactionType = Literal["local_borrow", "site_borrow", "service", "damage_report"]
DamageLevel = Literal["low", "medium", "high", "critical"]

# Fields each machine transaction type must carry
REQUIRED_FIELDS_BY_TYPE = {
    "local_borrow": ("end_date", "borrower", "borrower_department"),
    "site_borrow": ("end_date", "borrower", "borrower_department", "site_location"),
    "service": ("service_type", "service_provider"),
    "damage_report": ("damage_description", "damage_level"),
}


class MaterialTransactionCreate(BaseModel):
    transaction_number: str = Field(min_length=1)
    material_id: str = Field(min_length=1)
    transaction_type: str = Field(min_length=1)
    movement_type: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: Optional[str] = None  # defaults to the material's unit
    reference_document: Optional[str] = None
    notes: Optional[str] = None
    transaction_date: Optional[datetime] = None


class MaterialTransactionResponse(BaseModel):
    id: str
    transaction_number: str = ""
    material_id: Optional[str] = None
    transaction_type: Optional[str] = None
    movement_type: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    reference_document: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    transaction_date: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    materials: Optional[dict] = None  # embedded material_number, name, unit

    @field_validator("quantity", mode="before")
    @classmethod
    def lenient_numbers(cls, value):
        return coerce_number(value)

    class Config:
        from_attributes = True


class MachineTransactionCreate(BaseModel):
    transaction_number: str = Field(min_length=1)
    machine_id: str = Field(min_length=1)
    transaction_type: MachineTransactionType
    start_date: datetime
    end_date: Optional[datetime] = None
    borrower: Optional[str] = None
    borrower_department: Optional[str] = None
    site_location: Optional[str] = None
    service_type: Optional[str] = None
    service_provider: Optional[str] = None
    damage_description: Optional[str] = None
    damage_level: Optional[DamageLevel] = None
    repair_cost: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_type_fields(self):
        missing = [name for name in REQUIRED_FIELDS_BY_TYPE[self.transaction_type] if not getattr(self, name)]
        if missing:
            raise ValueError(f"{self.transaction_type} requires: {', '.join(missing)}")
        same_awareness = self.end_date is not None and (self.end_date.tzinfo is None) == (self.start_date.tzinfo is None)
        if same_awareness and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class MachineTransactionResponse(BaseModel):
    id: str
    transaction_number: str = ""
    machine_id: Optional[str] = None
    transaction_type: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    borrower: Optional[str] = None
    borrower_department: Optional[str] = None
    site_location: Optional[str] = None
    service_type: Optional[str] = None
    service_provider: Optional[str] = None
    damage_description: Optional[str] = None
    damage_level: Optional[str] = None
    repair_cost: Optional[float] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    machines: Optional[dict] = None  # embedded asset_number, name

    @field_validator("repair_cost", mode="before")
    @classmethod
    def lenient_numbers(cls, value):
        return coerce_number(value)

    class Config:
        from_attributes = True
