from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List

from app.schemas.loan_schema import LoanOut


class ClientCreate(BaseModel):
    full_name: str = Field(alias="fullName", min_length=1)
    document: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    address: Optional[str] = None

    @field_validator("full_name", "document", "phone", mode="before")
    def strip_required(cls, v):
        return str(v).strip() if v is not None else v

    @field_validator("address", mode="before")
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    class Config:
        populate_by_name = True


class ClientOut(BaseModel):
    id: int
    full_name: str
    document: str
    phone: str
    address: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ClientDetailOut(ClientOut):
    loans: List[LoanOut] = []


class ClientDeleteResult(BaseModel):
    ok: bool = True
    deleted_loans: int


class ClientCreated(BaseModel):
    id: int
