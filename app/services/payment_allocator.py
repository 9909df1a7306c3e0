"""
Payment allocation against a loan's installments.

Two modes:

* normal  - the amount is spread over installments in ascending number,
            starting at the targeted installment when one is given.
* payoff  - settles the remaining *principal only*; interest that was not
            collected yet is forgiven and every open installment is closed
            at its new, lower amount.

Both modes run as one transaction holding row locks on the loan and all
of its installments, so concurrent payments on the same loan serialize.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.capital_model import MOVEMENT_PAYMENT, MOVEMENT_PAYOFF
from app.models.installment_model import INSTALLMENT_PAID, Installment
from app.models.loan_model import LOAN_FINISHED, Loan
from app.models.payment_model import PAYMENT_NORMAL, PAYMENT_PAYOFF, Payment
from app.services.capital_ledger import record_movement
from app.services.loan_service import loan_installments, refresh_loan
from app.utils.database import transaction
from app.utils.loan_calculations import is_finite_number, round2

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass
class PayoffLine:
    installment: Installment
    principal_pending: Decimal


def pending_of(installments) -> Decimal:
    paid_total = round2(sum((Decimal(i.paid_amount) for i in installments), ZERO))
    amount_total = round2(sum((Decimal(i.amount) for i in installments), ZERO))
    return round2(amount_total - paid_total)


def principal_pending(inst: Installment, base_installment, interest_per_installment) -> Decimal:
    """
    Principal still owed on one installment.

    Collected money pays the installment's interest first; only what exceeds
    the interest counts as principal.
    """
    base = Decimal(base_installment)
    interest = Decimal(interest_per_installment)
    principal_paid = min(base, max(ZERO, Decimal(inst.paid_amount) - interest))
    return round2(base - principal_paid)


def payoff_lines(loan: Loan, installments) -> list[PayoffLine]:
    lines = []
    for inst in installments:
        pending = principal_pending(inst, loan.base_installment, loan.interest_per_installment)
        if pending <= 0:
            continue
        lines.append(PayoffLine(installment=inst, principal_pending=pending))
    return lines


def apply_payoff(lines: list[PayoffLine], payment_date: date) -> None:
    for line in lines:
        inst = line.installment
        new_paid = round2(Decimal(inst.paid_amount) + line.principal_pending)
        inst.amount = new_paid
        inst.paid_amount = new_paid
        inst.status = INSTALLMENT_PAID
        inst.paid_date = payment_date


def allocate(
        installments,
        amount: Decimal,
        payment_date: date,
        start_number: Optional[int] = None,
) -> Decimal:
    """
    Spread ``amount`` over installments in ascending number.

    Installments numbered below ``start_number`` and installments with
    nothing pending are skipped. Returns whatever could not be applied.
    """
    remaining = round2(amount)
    for inst in sorted(installments, key=lambda i: i.number):
        if remaining <= 0:
            break
        if start_number is not None and inst.number < start_number:
            continue

        pending = round2(Decimal(inst.amount) - Decimal(inst.paid_amount))
        if pending <= 0:
            continue

        applied = pending if remaining >= pending else remaining
        new_paid = round2(Decimal(inst.paid_amount) + applied)
        inst.paid_amount = new_paid
        if new_paid >= Decimal(inst.amount):
            inst.status = INSTALLMENT_PAID
            inst.paid_date = payment_date

        remaining = round2(remaining - applied)

    return remaining


def record_payment(
        db: Session,
        loan_id: Optional[int] = None,
        installment_id: Optional[int] = None,
        amount=None,
        payment_date: Optional[date] = None,
        notes: Optional[str] = None,
        payoff: bool = False,
        today: Optional[date] = None,
) -> Payment:
    payoff = bool(payoff)
    if not payoff and (not is_finite_number(amount) or round2(amount) <= 0):
        raise ValidationError("amount must be greater than 0")
    if not loan_id and not installment_id:
        raise ValidationError("loanId is required")

    requested = round2(amount) if is_finite_number(amount) else ZERO
    payment_date = payment_date or date.today()

    with transaction(db):
        if installment_id:
            owner = (
                db.query(Installment.loan_id)
                .filter(Installment.id == installment_id)
                .first()
            )
            if not owner:
                raise NotFoundError("installment not found")
            loan_id = owner.loan_id

        # lock order is always loan, then its installments, then capital
        loan = db.query(Loan).filter(Loan.id == loan_id).with_for_update().first()
        if not loan:
            raise NotFoundError("loan not found")

        installments = loan_installments(db, loan.id, lock=True)

        target = None
        if installment_id:
            target = next((i for i in installments if i.id == installment_id), None)
            if target is None:
                raise NotFoundError("installment not found")

        if pending_of(installments) <= 0:
            raise ConflictError("loan already paid")

        lines = []
        if payoff:
            lines = payoff_lines(loan, installments)
            payment_amount = round2(sum((line.principal_pending for line in lines), ZERO))
            if payment_amount <= 0:
                raise ConflictError("loan already paid")
        else:
            payment_amount = requested
            if payment_amount > pending_of(installments):
                raise ConflictError("amount exceeds loan pending total")

        payment = Payment(
            client_id=loan.client_id,
            loan_id=loan.id,
            installment_id=None if payoff or target is None else target.id,
            payment_date=payment_date,
            amount=payment_amount,
            type=PAYMENT_PAYOFF if payoff else PAYMENT_NORMAL,
            notes=notes,
        )
        db.add(payment)
        db.flush()

        if payoff:
            apply_payoff(lines, payment_date)
        else:
            leftover = allocate(
                installments,
                payment_amount,
                payment_date,
                start_number=target.number if target is not None else None,
            )
            if leftover > 0:
                # kept as collected: recorded on the payment, not applied to any installment
                logger.warning(
                    "Payment %s on loan %s left %s unapplied",
                    payment.id, loan.id, leftover,
                    extra={"loan_id": loan.id, "payment_id": payment.id},
                )

        record_movement(
            db,
            MOVEMENT_PAYOFF if payoff else MOVEMENT_PAYMENT,
            payment_amount,
            loan_id=loan.id,
            payment_id=payment.id,
            note="Payoff recorded" if payoff else "Payment recorded",
        )

        refresh_loan(db, loan, today)

        if payoff:
            # the forgiven interest shrinks what the loan will ever collect
            loan.total_payable = round2(sum((Decimal(i.amount) for i in installments), ZERO))
            loan.paid_total = loan.total_payable
            loan.pending_total = ZERO
            loan.status = LOAN_FINISHED

    logger.info(
        "Payment %s recorded on loan %s: type=%s amount=%s",
        payment.id, loan_id, payment.type, payment_amount,
        extra={"client_id": payment.client_id, "loan_id": loan_id, "payment_id": payment.id},
    )
    return payment
