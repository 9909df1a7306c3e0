"""
Capital ledger: the single fund balance and its append-only audit trail.

Every change of ``capital.amount`` goes through ``record_movement`` so that
the sum of all movements always equals the current balance.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, StorageError, ValidationError
from app.models.capital_model import (
    CAPITAL_ROW_ID,
    MOVEMENT_MANUAL_ADJUST,
    MOVEMENT_MANUAL_SET,
    Capital,
    CapitalMovement,
)
from app.utils.database import transaction
from app.utils.loan_calculations import is_finite_number, round2

logger = logging.getLogger(__name__)


def load_capital(db: Session, lock: bool = False) -> Capital:
    q = db.query(Capital).filter(Capital.id == CAPITAL_ROW_ID)
    if lock:
        q = q.with_for_update()
    capital = q.first()
    if capital is None:
        raise StorageError("capital row is not initialised")
    return capital


def get_capital(db: Session) -> Capital:
    return load_capital(db)


def record_movement(
        db: Session,
        movement_type: str,
        delta,
        loan_id: Optional[int] = None,
        payment_id: Optional[int] = None,
        note: Optional[str] = None,
) -> CapitalMovement:
    """
    Apply ``delta`` to the capital balance and append its movement.

    Must run inside the caller's transaction; never commits.
    """
    delta = round2(delta)
    capital = load_capital(db, lock=True)

    new_amount = round2(Decimal(capital.amount) + delta)
    if new_amount < 0:
        raise ConflictError("capital cannot be negative")

    capital.amount = new_amount
    capital.updated_at = datetime.now()

    movement = CapitalMovement(
        type=movement_type,
        amount=delta,
        loan_id=loan_id,
        payment_id=payment_id,
        note=note,
    )
    db.add(movement)
    db.flush()
    return movement


def set_capital(db: Session, amount) -> Capital:
    if not is_finite_number(amount) or round2(amount) < 0:
        raise ValidationError("amount must be a non-negative number")
    amount = round2(amount)

    with transaction(db):
        capital = load_capital(db, lock=True)
        delta = round2(amount - Decimal(capital.amount))
        if delta != 0:
            record_movement(
                db,
                MOVEMENT_MANUAL_SET,
                delta,
                note="Capital set manually",
            )
        else:
            capital.updated_at = datetime.now()

    logger.info("Capital set to %s (delta %s)", amount, delta)
    return get_capital(db)


def adjust_capital(db: Session, delta, note: Optional[str] = None) -> Capital:
    if not is_finite_number(delta):
        raise ValidationError("delta must be a number")
    delta = round2(delta)

    with transaction(db):
        record_movement(db, MOVEMENT_MANUAL_ADJUST, delta, note=note)

    logger.info("Capital adjusted by %s", delta)
    return get_capital(db)


def list_movements(db: Session, limit: int = 100) -> list[CapitalMovement]:
    return (
        db.query(CapitalMovement)
        .order_by(CapitalMovement.id.desc())
        .limit(limit)
        .all()
    )
