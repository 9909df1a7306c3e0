"""Tests for the capital ledger and its audit trail."""

from decimal import Decimal

import pytest
from sqlalchemy import func

from app.core.exceptions import ConflictError, ValidationError
from app.models.capital_model import CapitalMovement
from app.services.capital_ledger import (
    adjust_capital,
    get_capital,
    list_movements,
    set_capital,
)


def movements_total(db) -> Decimal:
    total = db.query(func.coalesce(func.sum(CapitalMovement.amount), 0)).scalar()
    return Decimal(str(total)).quantize(Decimal("0.01"))


def test_seeded_at_zero(db):
    capital = get_capital(db)
    assert capital.amount == Decimal("0.00")
    assert capital.updated_at is not None
    assert list_movements(db) == []


class TestSetCapital:
    def test_records_delta_as_manual_set(self, db):
        set_capital(db, 500)
        capital = set_capital(db, 350.5)

        assert capital.amount == Decimal("350.50")
        movements = list_movements(db)
        assert [m.type for m in movements] == ["manual_set", "manual_set"]
        assert [m.amount for m in movements] == [Decimal("-149.50"), Decimal("500.00")]

    def test_same_amount_appends_no_movement(self, db):
        set_capital(db, 200)
        set_capital(db, 200)
        assert len(list_movements(db)) == 1

    @pytest.mark.parametrize("amount", [-1, float("nan"), float("inf"), None, "abc"])
    def test_rejects_invalid_amount(self, db, amount):
        with pytest.raises(ValidationError):
            set_capital(db, amount)
        assert get_capital(db).amount == Decimal("0.00")
        assert list_movements(db) == []


class TestAdjustCapital:
    def test_positive_and_negative_deltas(self, db):
        adjust_capital(db, 300, note="initial funding")
        capital = adjust_capital(db, -120.25, note="office rent")

        assert capital.amount == Decimal("179.75")
        latest = list_movements(db)[0]
        assert latest.type == "manual_adjust"
        assert latest.amount == Decimal("-120.25")
        assert latest.note == "office rent"

    def test_cannot_go_negative(self, db):
        adjust_capital(db, 100)
        with pytest.raises(ConflictError):
            adjust_capital(db, -100.01)

        assert get_capital(db).amount == Decimal("100.00")
        assert len(list_movements(db)) == 1

    def test_may_reach_exactly_zero(self, db):
        adjust_capital(db, 100)
        assert adjust_capital(db, -100).amount == Decimal("0.00")

    @pytest.mark.parametrize("delta", [float("nan"), float("-inf"), None, "x"])
    def test_rejects_non_finite_delta(self, db, delta):
        with pytest.raises(ValidationError):
            adjust_capital(db, delta)


def test_balance_equals_sum_of_movements(db):
    set_capital(db, 1000)
    adjust_capital(db, 0.1)
    adjust_capital(db, 0.2)
    set_capital(db, 999.99)
    adjust_capital(db, -0.33)
    adjust_capital(db, 12.345)

    assert get_capital(db).amount == movements_total(db)
