"""
Analytics and operations dashboard routes
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .auth import get_current_user
from .database import get_db, User
from .exceptions import api_error, send_response
from .services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/analytics", tags=["analytics"])
operations_router = APIRouter(prefix="/v1/operations", tags=["operations"])

# datetime cannot represent the January after year 9999
MAX_YEAR = 9998


def _resolve_year(year: Optional[int], now: datetime) -> int:
    if year is None:
        return now.year
    if year < 1 or year > MAX_YEAR:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid year")
    return year


@router.get("/invoices")
async def invoice_analytics(
    year: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Monthly invoice totals for a year plus current stock and month worth"""
    now = datetime.utcnow()
    data = AnalyticsService(db, current_user.id).invoice_analytics(_resolve_year(year, now), now)
    return send_response(status.HTTP_200_OK, "Invoice analytics fetched", data)


@router.get("/store")
async def store_stats(
    year: Optional[int] = Query(None),
    month: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    now = datetime.utcnow()
    report_year = _resolve_year(year, now)
    if month is None:
        month_number = now.month
    else:
        try:
            month_number = int(month)
        except ValueError:
            month_number = 0
    if month_number < 1 or month_number > 12:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid month. Use 1-12.")

    data = AnalyticsService(db, current_user.id).store_stats(report_year, month_number)
    return send_response(status.HTTP_200_OK, "Store stats fetched", data)


@operations_router.get("/summary")
async def operations_summary(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Product and customer totals with month-over-month restock and invoice change"""
    data = AnalyticsService(db, current_user.id).operations_summary()
    return send_response(status.HTTP_200_OK, "Operations summary fetched", data)
