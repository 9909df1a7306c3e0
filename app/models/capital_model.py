# app/models/capital_model.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Numeric,
    CheckConstraint,
    Index,
)
from sqlalchemy.sql import func
from app.utils.database import Base

CAPITAL_ROW_ID = 1

MOVEMENT_MANUAL_SET = "manual_set"
MOVEMENT_MANUAL_ADJUST = "manual_adjust"
MOVEMENT_LOAN = "loan"
MOVEMENT_PAYMENT = "payment"
MOVEMENT_PAYOFF = "payoff"


class Capital(Base):
    __tablename__ = "capital"
    __table_args__ = (
        CheckConstraint(f"id = {CAPITAL_ROW_ID}", name="ck_capital_singleton"),
        CheckConstraint("amount >= 0", name="ck_capital_non_negative"),
    )

    id = Column(Integer, primary_key=True, default=CAPITAL_ROW_ID)
    amount = Column(Numeric(14, 2), nullable=False, default=0)
    updated_at = Column(DateTime, server_default=func.now(), nullable=False)


class CapitalMovement(Base):
    __tablename__ = "capital_movements"
    __table_args__ = (
        Index("ix_capital_movements_loan", "loan_id"),
        Index("ix_capital_movements_payment", "payment_id"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # manual_set / manual_adjust / loan / payment / payoff
    type = Column(String(20), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)  # signed delta

    # no FK: rows are erased explicitly together with their loan
    loan_id = Column(Integer, nullable=True)
    payment_id = Column(Integer, nullable=True)

    note = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<CapitalMovement(id={self.id}, type={self.type}, amount={self.amount})>"
