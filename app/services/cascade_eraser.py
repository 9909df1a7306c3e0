import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.capital_model import CapitalMovement
from app.models.client_model import Client
from app.models.installment_model import Installment
from app.models.loan_model import Loan
from app.models.payment_model import Payment
from app.utils.database import transaction

logger = logging.getLogger(__name__)


def _erase_loan_rows(db: Session, loan_id: int) -> None:
    """Delete a loan and everything hanging off it. Caller owns the transaction."""
    payment_ids = [
        pid for (pid,) in db.query(Payment.id).filter(Payment.loan_id == loan_id).all()
    ]

    movement_filter = CapitalMovement.loan_id == loan_id
    if payment_ids:
        movement_filter = or_(movement_filter, CapitalMovement.payment_id.in_(payment_ids))

    db.query(CapitalMovement).filter(movement_filter).delete(synchronize_session=False)
    db.query(Payment).filter(Payment.loan_id == loan_id).delete(synchronize_session=False)
    db.query(Installment).filter(Installment.loan_id == loan_id).delete(synchronize_session=False)
    db.query(Loan).filter(Loan.id == loan_id).delete(synchronize_session=False)


def delete_loan(db: Session, loan_id: int) -> None:
    with transaction(db):
        loan = db.query(Loan.id).filter(Loan.id == loan_id).with_for_update().first()
        if not loan:
            raise NotFoundError("loan not found")
        _erase_loan_rows(db, loan_id)

    db.expire_all()
    logger.info(
        "Loan %s deleted with its installments, payments and movements", loan_id,
        extra={"loan_id": loan_id},
    )


def delete_client(db: Session, client_id: int) -> int:
    """Delete a client and all of its loans. Returns how many loans went with it."""
    with transaction(db):
        client = db.query(Client.id).filter(Client.id == client_id).with_for_update().first()
        if not client:
            raise NotFoundError("client not found")

        loan_ids = [lid for (lid,) in db.query(Loan.id).filter(Loan.client_id == client_id).all()]
        for loan_id in loan_ids:
            _erase_loan_rows(db, loan_id)

        db.query(Client).filter(Client.id == client_id).delete(synchronize_session=False)

    db.expire_all()
    logger.info(
        "Client %s deleted with %s loans", client_id, len(loan_ids),
        extra={"client_id": client_id},
    )
    return len(loan_ids)
