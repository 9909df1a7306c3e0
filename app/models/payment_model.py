from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Numeric, Text, ForeignKey
)
from sqlalchemy.sql import func
from app.utils.database import Base

PAYMENT_NORMAL = "payment"
PAYMENT_PAYOFF = "payoff"


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)

    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False, index=True)
    # only set for a normal payment aimed at a specific installment
    installment_id = Column(Integer, ForeignKey("installments.id"), nullable=True)

    payment_date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)

    type = Column(String(20), nullable=False, default=PAYMENT_NORMAL)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
