import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.models.capital_model import CAPITAL_ROW_ID, Capital
from app.utils.database import SessionLocal, transaction

logger = logging.getLogger(__name__)


def seed_capital(db: Session) -> None:
    """Insert the capital singleton with amount 0 if it does not exist yet."""
    with transaction(db):
        existing = db.query(Capital).filter(Capital.id == CAPITAL_ROW_ID).first()
        if existing:
            return
        db.add(Capital(id=CAPITAL_ROW_ID, amount=0, updated_at=datetime.now()))
    logger.info("Capital row seeded with amount 0")


def init_seed(db: Optional[Session] = None) -> None:
    if db is not None:
        seed_capital(db)
        return

    db = SessionLocal()
    try:
        seed_capital(db)
    finally:
        db.close()
