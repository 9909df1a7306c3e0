from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.utils.database import get_db, transaction
from app.models.loan_model import Loan
from app.models.client_model import Client
from app.models.payment_model import Payment
from app.services import loan_service
from app.services.cascade_eraser import delete_loan
from app.services.schedule_service import repair_loan_schedule

from app.schemas.loan_schema import (
    LoanCreate,
    LoanCreated,
    LoanOut,
    LoanListOut,
    LoanDetailOut,
    InstallmentOut,
    LoanPaymentOut,
    LoanStatusUpdate,
    LoanStatusOut,
    LoanDeleteResult,
)

router = APIRouter(prefix="/loans", tags=["Loans"])


# =================================================
# 🔹 LOAN CREATION
# =================================================
@router.post("", response_model=LoanCreated, status_code=status.HTTP_201_CREATED)
def create_loan(payload: LoanCreate, db: Session = Depends(get_db)):
    loan = loan_service.create_loan(
        db,
        client_id=payload.client_id,
        amount=payload.amount,
        loan_date=payload.loan_date,
        installments_count=payload.installments_count,
        notes=payload.notes,
    )
    return {"id": loan.id}


# =================================================
# 🔹 LIST (optional filters)
# =================================================
@router.get("", response_model=list[LoanListOut])
def list_loans(
        status: Optional[str] = Query(None),
        client_id: Optional[int] = Query(None, alias="clientId"),
        db: Session = Depends(get_db),
):
    q = db.query(Loan, Client.full_name).join(Client, Loan.client_id == Client.id)

    if status:
        q = q.filter(Loan.status == status)

    if client_id is not None:
        q = q.filter(Loan.client_id == client_id)

    rows = q.order_by(Loan.id.desc()).all()

    return [
        {**LoanOut.model_validate(loan).model_dump(), "client_name": client_name}
        for loan, client_name in rows
    ]


# =================================================
# 🔹 DETAIL (repairs schedule + refreshes installment states)
# =================================================
@router.get("/{loan_id}", response_model=LoanDetailOut)
def get_loan(loan_id: int, db: Session = Depends(get_db)):
    loan = loan_service.get_loan(db, loan_id)

    repair_loan_schedule(db, loan)
    with transaction(db):
        installments = loan_service.refresh_installment_statuses(db, loan.id)

    payments = (
        db.query(Payment)
        .filter(Payment.loan_id == loan_id)
        .order_by(Payment.payment_date.desc(), Payment.id.desc())
        .all()
    )

    return {
        **LoanOut.model_validate(loan).model_dump(),
        "installments": [InstallmentOut.model_validate(i) for i in installments],
        "payments": [LoanPaymentOut.model_validate(p) for p in payments],
    }


# =================================================
# 🔹 MANUAL STATUS OVERRIDE (bypasses aggregation)
# =================================================
@router.put("/{loan_id}/status", response_model=LoanStatusOut)
def update_status(loan_id: int, payload: LoanStatusUpdate, db: Session = Depends(get_db)):
    loan = loan_service.set_loan_status(db, loan_id, payload.status)
    return {"status": loan.status}


# =================================================
# 🔹 DELETE (cascade)
# =================================================
@router.delete("/{loan_id}", response_model=LoanDeleteResult)
def remove_loan(loan_id: int, db: Session = Depends(get_db)):
    delete_loan(db, loan_id)
    return {"ok": True}
