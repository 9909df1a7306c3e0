from sqlalchemy import (
    Column, Integer, String, Date, Numeric, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.utils.database import Base

INSTALLMENT_PENDING = "Pendiente"
INSTALLMENT_LATE = "Atrasada"
INSTALLMENT_PAID = "Pagada"


class Installment(Base):
    __tablename__ = "installments"
    __table_args__ = (
        UniqueConstraint("loan_id", "number", name="uq_loan_installment_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False, index=True)

    number = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=False, index=True)

    # amount owed; lowered only by a payoff, together with paid_amount
    amount = Column(Numeric(14, 2), nullable=False)
    paid_amount = Column(Numeric(14, 2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default=INSTALLMENT_PENDING)
    paid_date = Column(Date, nullable=True)

    loan = relationship("Loan", back_populates="installments")
