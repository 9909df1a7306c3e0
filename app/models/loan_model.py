# app/models/loan_model.py

from sqlalchemy import (
    Column,
    Integer,
    Date,
    DateTime,
    Numeric,
    Text,
    String,
    ForeignKey,
    Index,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.utils.database import Base

LOAN_ACTIVE = "Activo"
LOAN_FINISHED = "Finalizado"
LOAN_MOROSE = "En mora"

LOAN_STATUSES = (LOAN_ACTIVE, LOAN_FINISHED, LOAN_MOROSE)


class Loan(Base):
    __tablename__ = "loans"

    __table_args__ = (
        Index("ix_loans_status", "status"),
        Index("ix_loans_client_status", "client_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)

    amount = Column(Numeric(14, 2), nullable=False)  # principal disbursed
    loan_date = Column(Date, nullable=False)
    installments_count = Column(Integer, nullable=False)

    # Activo / Finalizado / En mora
    status = Column(String(20), nullable=False, default=LOAN_ACTIVE)
    notes = Column(Text, nullable=True)

    # amortization snapshot, computed once at creation
    base_installment = Column(Numeric(14, 2), nullable=False)
    interest_per_installment = Column(Numeric(14, 2), nullable=False)
    installment_total = Column(Numeric(14, 2), nullable=False)
    total_payable = Column(Numeric(14, 2), nullable=False)

    # derived by the aggregator
    paid_total = Column(Numeric(14, 2), nullable=False, default=0)
    pending_total = Column(Numeric(14, 2), nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    client = relationship("Client", back_populates="loans")
    installments = relationship(
        "Installment",
        back_populates="loan",
        order_by="Installment.number",
        lazy="selectin",
    )
