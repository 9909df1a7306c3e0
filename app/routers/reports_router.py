from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import func, case
from typing import Optional

from app.utils.database import get_db
from app.utils.loan_calculations import round2
from app.models.client_model import Client
from app.models.loan_model import Loan, LOAN_ACTIVE, LOAN_FINISHED, LOAN_MOROSE
from app.models.installment_model import (
    Installment,
    INSTALLMENT_PAID,
    INSTALLMENT_PENDING,
    INSTALLMENT_LATE,
)
from app.models.payment_model import Payment
from app.services.capital_ledger import get_capital
from app.schemas.report_schema import DebtorRowOut, DashboardOut

router = APIRouter(tags=["Reports"])

DEBTOR_STATUS_FILTERS = {
    "active": LOAN_ACTIVE,
    "finished": LOAN_FINISHED,
    "morose": LOAN_MOROSE,
}


def _count_when(column, value):
    return func.coalesce(func.sum(case((column == value, 1), else_=0)), 0)


@router.get("/debtors", response_model=list[DebtorRowOut])
def debtors(
        status: Optional[str] = Query(None),
        client_id: Optional[int] = Query(None, alias="clientId"),
        db: Session = Depends(get_db),
):
    q = (
        db.query(
            Client.id.label("client_id"),
            Client.full_name,
            Client.document,
            func.coalesce(func.sum(Loan.amount), 0).label("total_loaned"),
            func.coalesce(func.sum(Loan.paid_total), 0).label("total_paid"),
            func.coalesce(func.sum(Loan.pending_total), 0).label("total_pending"),
            func.coalesce(func.sum(Loan.total_payable), 0).label("total_with_interest"),
            _count_when(Loan.status, LOAN_ACTIVE).label("active_loans"),
            _count_when(Loan.status, LOAN_MOROSE).label("morose_loans"),
        )
        .join(Loan, Loan.client_id == Client.id)
    )

    loan_status = DEBTOR_STATUS_FILTERS.get(status or "")
    if loan_status:
        q = q.filter(Loan.status == loan_status)

    if client_id is not None:
        q = q.filter(Client.id == client_id)

    rows = (
        q.group_by(Client.id, Client.full_name, Client.document)
        .order_by(Client.full_name.asc())
        .all()
    )

    out = []
    for r in rows:
        counts = (
            db.query(
                _count_when(Installment.status, INSTALLMENT_PAID).label("paid"),
                _count_when(Installment.status, INSTALLMENT_PENDING).label("pending"),
                _count_when(Installment.status, INSTALLMENT_LATE).label("late"),
            )
            .join(Loan, Installment.loan_id == Loan.id)
            .filter(Loan.client_id == r.client_id)
            .one()
        )

        out.append(
            DebtorRowOut(
                client_id=r.client_id,
                full_name=r.full_name,
                document=r.document,
                total_loaned=float(round2(r.total_loaned)),
                total_paid=float(round2(r.total_paid)),
                total_pending=float(round2(r.total_pending)),
                total_with_interest=float(round2(r.total_with_interest)),
                active_loans=int(r.active_loans),
                morose_loans=int(r.morose_loans),
                installments_paid=int(counts.paid),
                installments_pending=int(counts.pending),
                installments_late=int(counts.late),
            )
        )
    return out


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db)):
    capital = get_capital(db)

    totals = db.query(
        func.coalesce(func.sum(Loan.amount), 0).label("total_loaned"),
        func.coalesce(func.sum(Loan.pending_total), 0).label("total_pending"),
    ).one()

    recovered = db.query(func.coalesce(func.sum(Payment.amount), 0)).scalar()

    active_clients = (
        db.query(func.count(func.distinct(Loan.client_id)))
        .filter(Loan.status == LOAN_ACTIVE)
        .scalar()
    )
    loans_in_mora = db.query(func.count(Loan.id)).filter(Loan.status == LOAN_MOROSE).scalar()

    return DashboardOut(
        capital_available=float(round2(capital.amount)),
        total_loaned=float(round2(totals.total_loaned)),
        total_pending=float(round2(totals.total_pending)),
        total_recovered=float(round2(recovered)),
        active_clients=int(active_clients or 0),
        loans_in_mora=int(loans_in_mora or 0),
    )
