import logging

from sqlalchemy.orm import Session

from app.models.loan_model import Loan
from app.services.loan_service import loan_installments
from app.utils.database import transaction
from app.utils.schedule import build_schedule

logger = logging.getLogger(__name__)


def needs_schedule_repair(installments) -> bool:
    """More than one installment, all sharing a single due date."""
    if len(installments) <= 1:
        return False
    return len({i.due_date for i in installments}) == 1


def repair_loan_schedule(db: Session, loan: Loan) -> bool:
    """
    Rebuild the due dates of ``loan`` when they were all persisted equal.

    Returns True when the installments were rewritten. A loan whose dates
    are already distinct is left untouched.
    """
    with transaction(db):
        installments = loan_installments(db, loan.id, lock=True)
        if not needs_schedule_repair(installments):
            return False

        schedule = build_schedule(loan.loan_date, loan.installments_count)
        for inst, due in zip(installments, schedule):
            inst.due_date = due

    logger.info("Repaired installment due dates for loan %s", loan.id)
    return True


def repair_all_schedules(db: Session) -> dict:
    loans = db.query(Loan).order_by(Loan.id.asc()).all()
    fixed = 0
    for loan in loans:
        if repair_loan_schedule(db, loan):
            fixed += 1

    logger.info("Schedule repair: %s loans checked, %s fixed", len(loans), fixed)
    return {"loans_checked": len(loans), "loans_fixed": fixed}
