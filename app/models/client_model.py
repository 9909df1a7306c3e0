# app/models/client_model.py

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.utils.database import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(200), nullable=False)
    document = Column(String(50), nullable=False)
    phone = Column(String(50), nullable=False)
    address = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    loans = relationship("Loan", back_populates="client", order_by="desc(Loan.id)")

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name={self.full_name})>"
