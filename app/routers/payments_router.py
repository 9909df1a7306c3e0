from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.utils.database import get_db
from app.models.client_model import Client
from app.models.loan_model import Loan
from app.models.payment_model import Payment
from app.services.payment_allocator import record_payment
from app.schemas.loan_schema import LoanPaymentOut
from app.schemas.payment_schema import PaymentCreate, PaymentResult, RecentPaymentOut

router = APIRouter(prefix="/payments", tags=["Payments"])

RECENT_PAYMENTS_LIMIT = 20


# =================================================
# ✅ RECORD PAYMENT (normal or payoff)
# =================================================
@router.post("", response_model=PaymentResult, status_code=status.HTTP_201_CREATED)
def create_payment(payload: PaymentCreate, db: Session = Depends(get_db)):
    payment = record_payment(
        db,
        loan_id=payload.loan_id,
        installment_id=payload.installment_id,
        amount=payload.amount,
        payment_date=payload.payment_date,
        notes=payload.notes,
        payoff=payload.payoff,
    )
    return PaymentResult(id=payment.id, amount=float(payment.amount))


# =================================================
# 🔹 RECENT HISTORY
# =================================================
@router.get("", response_model=list[RecentPaymentOut])
def recent_payments(db: Session = Depends(get_db)):
    rows = (
        db.query(Payment, Client.full_name, Loan.amount)
        .join(Client, Payment.client_id == Client.id)
        .join(Loan, Payment.loan_id == Loan.id)
        .order_by(Payment.id.desc())
        .limit(RECENT_PAYMENTS_LIMIT)
        .all()
    )

    return [
        {
            **LoanPaymentOut.model_validate(p).model_dump(),
            "client_name": client_name,
            "loan_amount": float(loan_amount),
        }
        for p, client_name, loan_amount in rows
    ]
