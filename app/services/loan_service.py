import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.capital_model import MOVEMENT_LOAN
from app.models.client_model import Client
from app.models.installment_model import (
    INSTALLMENT_LATE,
    INSTALLMENT_PENDING,
    Installment,
)
from app.models.loan_model import (
    LOAN_ACTIVE,
    LOAN_FINISHED,
    LOAN_MOROSE,
    LOAN_STATUSES,
    Loan,
)
from app.services.capital_ledger import load_capital, record_movement
from app.utils.database import transaction
from app.utils.loan_calculations import (
    compute_loan_fields,
    derive_installment_status,
    round2,
)
from app.utils.schedule import build_schedule

logger = logging.getLogger(__name__)


def get_loan(db: Session, loan_id: int) -> Loan:
    loan = db.query(Loan).filter(Loan.id == loan_id).first()
    if not loan:
        raise NotFoundError("loan not found")
    return loan


def loan_installments(db: Session, loan_id: int, lock: bool = False) -> list[Installment]:
    q = (
        db.query(Installment)
        .filter(Installment.loan_id == loan_id)
        .order_by(Installment.number.asc())
    )
    if lock:
        q = q.with_for_update()
    return q.all()


# -------------------------------------------------
# Aggregator
# -------------------------------------------------
def refresh_installment_statuses(
        db: Session, loan_id: int, today: Optional[date] = None
) -> list[Installment]:
    """Re-derive every installment's status against ``today``. Never commits."""
    today = today or date.today()
    installments = loan_installments(db, loan_id)
    for inst in installments:
        status = derive_installment_status(inst.due_date, inst.amount, inst.paid_amount, today)
        if inst.status != status:
            inst.status = status
    return installments


def refresh_loan(db: Session, loan: Loan, today: Optional[date] = None) -> Loan:
    """
    Recompute paid/pending totals and the loan status from its installments.

    This is the only place loan-level totals and status are derived.
    Runs inside the caller's transaction; never commits.
    """
    installments = refresh_installment_statuses(db, loan.id, today)

    paid_total = round2(sum((Decimal(i.paid_amount) for i in installments), Decimal("0")))
    amount_total = round2(sum((Decimal(i.amount) for i in installments), Decimal("0")))
    pending_total = round2(amount_total - paid_total)

    if pending_total <= 0:
        status = LOAN_FINISHED
    elif any(i.status == INSTALLMENT_LATE for i in installments):
        status = LOAN_MOROSE
    else:
        status = LOAN_ACTIVE

    loan.paid_total = paid_total
    loan.pending_total = pending_total
    loan.status = status
    db.flush()
    return loan


# -------------------------------------------------
# Loan creation
# -------------------------------------------------
def create_loan(
        db: Session,
        client_id: int,
        amount,
        loan_date: Optional[date],
        installments_count: int,
        notes: Optional[str] = None,
        today: Optional[date] = None,
) -> Loan:
    if not client_id:
        raise ValidationError("clientId, amount and installmentsCount are required")

    fields = compute_loan_fields(amount, installments_count)
    principal = round2(amount)
    loan_date = loan_date or date.today()

    with transaction(db):
        client = db.query(Client).filter(Client.id == client_id).first()
        if not client:
            raise NotFoundError("client not found")

        capital = load_capital(db, lock=True)
        if Decimal(capital.amount) < principal:
            raise ConflictError("insufficient capital")

        loan = Loan(
            client_id=client.id,
            amount=principal,
            loan_date=loan_date,
            installments_count=installments_count,
            status=LOAN_ACTIVE,
            notes=notes,
            base_installment=fields["base_installment"],
            interest_per_installment=fields["interest_per_installment"],
            installment_total=fields["installment_total"],
            total_payable=fields["total_payable"],
            paid_total=round2(0),
            pending_total=fields["total_payable"],
        )
        db.add(loan)
        db.flush()

        for number, due in enumerate(build_schedule(loan_date, installments_count), start=1):
            db.add(
                Installment(
                    loan_id=loan.id,
                    number=number,
                    due_date=due,
                    amount=fields["installment_total"],
                    paid_amount=round2(0),
                    status=INSTALLMENT_PENDING,
                )
            )
        db.flush()

        record_movement(db, MOVEMENT_LOAN, -principal, loan_id=loan.id, note="Loan disbursed")
        refresh_loan(db, loan, today)

    logger.info(
        "Loan %s created for client %s: principal=%s installments=%s total_payable=%s",
        loan.id, client_id, principal, installments_count, fields["total_payable"],
        extra={"client_id": client_id, "loan_id": loan.id},
    )
    return loan


# -------------------------------------------------
# Manual override
# -------------------------------------------------
def set_loan_status(db: Session, loan_id: int, status: str) -> Loan:
    """
    Operator override: write ``status`` directly, bypassing the aggregator.

    The stored status may then disagree with pending_total until the next
    payment triggers a refresh.
    """
    if status not in LOAN_STATUSES:
        raise ValidationError("status must be Activo, Finalizado or En mora")

    with transaction(db):
        loan = get_loan(db, loan_id)
        previous = loan.status
        loan.status = status

    logger.warning(
        "Loan %s status manually overridden: %s -> %s", loan_id, previous, status,
        extra={"loan_id": loan_id},
    )
    return loan
