from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from schemas import ApiResponse
from schemas.analytics_schema import DailyBillOut, HistoryOut, SummaryOut
from services import Services, get_services
from utils.auth.jwt_bearer import ADMIN_ONLY, require_roles
from utils.coercion import parse_date
from utils.config import settings
from utils.exceptions import ValidationError
from utils.responses import ok

router = APIRouter(prefix="/analytics", tags=["Analytics"], dependencies=[Depends(require_roles(*ADMIN_ONLY))])


def _date_param(name: str, value: Optional[str]) -> Optional[date]:
    try:
        return parse_date(value)
    except ValueError as exc:
        raise ValidationError(
            "Validation failed", errors=[{"field": name, "message": str(exc)}]
        ) from exc


@router.get("/summary", response_model=ApiResponse[SummaryOut])
def get_summary(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.analytics.summary(db))


@router.get("/orders", response_model=ApiResponse[List[DailyBillOut]])
def get_daily_bills(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.analytics.daily_bills(db))


@router.get("/history", response_model=ApiResponse[HistoryOut])
def get_bill_history(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    return ok(services.analytics.bill_history(
        db,
        start=_date_param("startDate", start_date),
        end=_date_param("endDate", end_date),
        page=page,
        limit=min(limit, settings.PAGINATION_MAX_LIMIT),
    ))
