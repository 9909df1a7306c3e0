from pydantic import BaseModel


class DebtorRowOut(BaseModel):
    client_id: int
    full_name: str
    document: str

    total_loaned: float
    total_paid: float
    total_pending: float
    total_with_interest: float

    active_loans: int
    morose_loans: int

    installments_paid: int
    installments_pending: int
    installments_late: int


class DashboardOut(BaseModel):
    capital_available: float
    total_loaned: float
    total_pending: float
    total_recovered: float
    active_clients: int
    loans_in_mora: int


class ScheduleRepairResult(BaseModel):
    ok: bool = True
    loans_checked: int
    loans_fixed: int
