from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.utils.database import get_db
from app.services.schedule_service import repair_all_schedules
from app.schemas.report_schema import ScheduleRepairResult

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


# ------------------------------
# Normalise installment due dates to the 1st / 15th schedule
# ------------------------------
@router.post("/fix-installment-dates", response_model=ScheduleRepairResult)
def fix_installment_dates(db: Session = Depends(get_db)):
    result = repair_all_schedules(db)
    return {"ok": True, **result}
