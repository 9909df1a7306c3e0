from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.utils.database import get_db
from app.services import capital_ledger
from app.schemas.capital_schema import (
    CapitalSet,
    CapitalAdjust,
    CapitalOut,
    CapitalMovementOut,
)

router = APIRouter(prefix="/capital", tags=["Capital"])


@router.get("", response_model=CapitalOut)
def get_capital(db: Session = Depends(get_db)):
    return capital_ledger.get_capital(db)


# SET ABSOLUTE
@router.put("", response_model=CapitalOut)
def set_capital(payload: CapitalSet, db: Session = Depends(get_db)):
    return capital_ledger.set_capital(db, payload.amount)


# ADJUST BY DELTA
@router.post("/adjust", response_model=CapitalOut)
def adjust_capital(payload: CapitalAdjust, db: Session = Depends(get_db)):
    return capital_ledger.adjust_capital(db, payload.delta, note=payload.note)


# AUDIT TRAIL
@router.get("/movements", response_model=list[CapitalMovementOut])
def list_movements(
        limit: int = Query(100, ge=1, le=1000),
        db: Session = Depends(get_db),
):
    return capital_ledger.list_movements(db, limit=limit)
