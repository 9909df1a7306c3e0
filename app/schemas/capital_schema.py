from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional


class CapitalSet(BaseModel):
    amount: float


class CapitalAdjust(BaseModel):
    delta: float
    note: Optional[str] = None

    @field_validator("note", mode="before")
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class CapitalOut(BaseModel):
    amount: float
    updated_at: datetime

    class Config:
        from_attributes = True


class CapitalMovementOut(BaseModel):
    id: int
    type: str
    amount: float
    loan_id: Optional[int] = None
    payment_id: Optional[int] = None
    note: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
