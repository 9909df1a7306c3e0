from pydantic import BaseModel, Field, field_validator
from datetime import date
from typing import Optional

from app.schemas.loan_schema import LoanPaymentOut


class PaymentCreate(BaseModel):
    loan_id: Optional[int] = Field(default=None, alias="loanId")
    installment_id: Optional[int] = Field(default=None, alias="installmentId")
    amount: Optional[float] = None
    payment_date: Optional[date] = Field(default=None, alias="paymentDate")
    notes: Optional[str] = None
    payoff: bool = False

    @field_validator("notes", mode="before")
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    class Config:
        populate_by_name = True


class PaymentResult(BaseModel):
    id: int
    amount: float


class RecentPaymentOut(LoanPaymentOut):
    client_name: str
    loan_amount: float
