from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List


class LoanCreate(BaseModel):
    client_id: int = Field(alias="clientId")
    amount: float = Field(gt=0)
    loan_date: Optional[date] = Field(default=None, alias="loanDate")
    installments_count: int = Field(alias="installmentsCount", gt=0)
    notes: Optional[str] = None

    @field_validator("notes", mode="before")
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    class Config:
        populate_by_name = True


class LoanCreated(BaseModel):
    id: int


class LoanOut(BaseModel):
    id: int
    client_id: int
    amount: float
    loan_date: date
    installments_count: int
    status: str
    notes: Optional[str] = None

    base_installment: float
    interest_per_installment: float
    installment_total: float
    total_payable: float
    paid_total: float
    pending_total: float

    created_at: datetime

    class Config:
        from_attributes = True


class LoanListOut(LoanOut):
    client_name: str


class InstallmentOut(BaseModel):
    id: int
    loan_id: int
    number: int
    due_date: date
    amount: float
    paid_amount: float
    status: str
    paid_date: Optional[date] = None

    class Config:
        from_attributes = True


class LoanPaymentOut(BaseModel):
    id: int
    client_id: int
    loan_id: int
    installment_id: Optional[int] = None
    payment_date: date
    amount: float
    type: str
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class LoanDetailOut(LoanOut):
    installments: List[InstallmentOut] = []
    payments: List[LoanPaymentOut] = []


class LoanStatusUpdate(BaseModel):
    status: str


class LoanStatusOut(BaseModel):
    status: str


class LoanDeleteResult(BaseModel):
    ok: bool = True
