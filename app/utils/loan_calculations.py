import math
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from app.core.exceptions import ValidationError
from app.models.installment_model import (
    INSTALLMENT_LATE,
    INSTALLMENT_PAID,
    INSTALLMENT_PENDING,
)

TWO_PLACES = Decimal("0.01")

# flat interest charged on every installment, as a share of the original principal
FLAT_INTEREST_RATE = Decimal("0.05")


def round2(x) -> Decimal:
    """
    Canonical money rounding: 2 decimals, half away from zero.

    Floats go through their shortest repr first, so 1.005 rounds to 1.01
    instead of drifting down because of its binary representation.
    """
    if x is None:
        x = 0
    if not isinstance(x, Decimal):
        x = Decimal(str(x))
    return x.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def is_finite_number(x) -> bool:
    """True for real, finite numbers (numeric strings included, bools excluded)."""
    if x is None or isinstance(x, bool):
        return False
    if isinstance(x, Decimal):
        return x.is_finite()
    if isinstance(x, (int, float)):
        return math.isfinite(x)
    if isinstance(x, str):
        try:
            return Decimal(x.strip()).is_finite()
        except InvalidOperation:
            return False
    return False


def compute_loan_fields(principal, installments_count: int) -> dict:
    """
    FLAT PER INSTALLMENT:
      base_installment         = principal / n
      interest_per_installment = principal * 5%   (same for every installment)
      installment_total        = base + interest
      total_payable            = installment_total * n

    Example:
      principal=1000, n=4 => 250 / 50 / 300 / 1200
    """
    if not is_finite_number(principal) or round2(principal) <= 0:
        raise ValidationError("amount must be greater than 0")
    if isinstance(installments_count, bool) or not isinstance(installments_count, int):
        raise ValidationError("installmentsCount must be an integer")
    if installments_count < 1:
        raise ValidationError("installmentsCount must be greater than 0")

    principal = round2(principal)

    base_installment = round2(principal / installments_count)
    interest_per_installment = round2(principal * FLAT_INTEREST_RATE)
    installment_total = round2(base_installment + interest_per_installment)
    total_payable = round2(installment_total * installments_count)

    return {
        "base_installment": base_installment,
        "interest_per_installment": interest_per_installment,
        "installment_total": installment_total,
        "total_payable": total_payable,
    }


def derive_installment_status(due_date: date, amount, paid_amount, today: date) -> str:
    amount = round2(amount)
    paid_amount = round2(paid_amount)

    if paid_amount >= amount:
        return INSTALLMENT_PAID
    if due_date < today:
        return INSTALLMENT_LATE
    return INSTALLMENT_PENDING
