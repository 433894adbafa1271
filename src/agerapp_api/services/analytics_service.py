"""
Analytics Service
Invoice totals per month, store worth, and month-over-month operations summary
"""
import calendar
import logging
from datetime import datetime
from typing import Dict, Any, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db.models import Customer, Invoice, Product, RestockHistory

logger = logging.getLogger(__name__)

MONTH_LABELS = list(calendar.month_name)[1:]


def percent_change(previous: float, current: float) -> float:
    """
    Change from previous to current in percent

    0 when both are zero, 100 when growing from zero.
    """
    if previous == 0 and current == 0:
        return 0
    if previous == 0:
        return 100
    return (current - previous) / previous * 100


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """[first instant of month, first instant of following month)"""
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


class AnalyticsService:
    """Aggregates scoped to one owner"""

    def __init__(self, db: Session, owner_id: str):
        self.db = db
        self.owner_id = owner_id

    def products_worth(self) -> float:
        """Sum of price * quantity over the owner's products"""
        worth = (
            self.db.query(func.sum(func.coalesce(Product.price, 0) * func.coalesce(Product.quantity, 0)))
            .filter(Product.owner_id == self.owner_id)
            .scalar()
        )
        return float(worth or 0)

    def _invoice_total_between(self, start: datetime, end: datetime) -> float:
        total = (
            self.db.query(func.sum(Invoice.total))
            .filter(
                Invoice.owner_id == self.owner_id,
                Invoice.created_at >= start,
                Invoice.created_at < end,
            )
            .scalar()
        )
        return float(total or 0)

    def _count_between(self, model, start: datetime, end: datetime) -> int:
        return (
            self.db.query(func.count(model.id))
            .filter(model.owner_id == self.owner_id, model.created_at >= start, model.created_at < end)
            .scalar()
        ) or 0

    def monthly_invoice_totals(self, year: int) -> List[Dict[str, Any]]:
        """Twelve {month, total} entries, zero for months without invoices"""
        totals = [0.0] * 12
        start, _ = month_bounds(year, 1)
        end = datetime(year + 1, 1, 1)

        rows = (
            self.db.query(Invoice.created_at, Invoice.total)
            .filter(
                Invoice.owner_id == self.owner_id,
                Invoice.created_at >= start,
                Invoice.created_at < end,
            )
            .all()
        )
        for created_at, total in rows:
            totals[created_at.month - 1] += float(total or 0)

        return [{"month": label, "total": totals[index]} for index, label in enumerate(MONTH_LABELS)]

    def invoice_analytics(self, year: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.utcnow()
        current_start, current_end = month_bounds(now.year, now.month)
        return {
            "year": year,
            "monthlyTotals": self.monthly_invoice_totals(year),
            "productsWorth": self.products_worth(),
            "currentMonthInvoicesWorth": self._invoice_total_between(current_start, current_end),
        }

    def store_stats(self, year: int, month: int) -> Dict[str, Any]:
        start, end = month_bounds(year, month)
        return {
            "year": year,
            "month": month,
            "monthLabel": MONTH_LABELS[month - 1],
            "monthlyCustomers": self._count_between(Invoice, start, end),
            "storeNetWorth": self.products_worth(),
        }

    def operations_summary(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Totals plus restock/invoice change against the previous calendar month"""
        now = now or datetime.utcnow()
        current_start, current_end = month_bounds(now.year, now.month)
        prev_start, prev_end = month_bounds(*previous_month(now.year, now.month))

        total_products = self.db.query(func.count(Product.id)).filter(Product.owner_id == self.owner_id).scalar() or 0
        total_customers = self.db.query(func.count(Customer.id)).filter(Customer.owner_id == self.owner_id).scalar() or 0

        return {
            "totalProducts": total_products,
            "totalCustomers": total_customers,
            "restocksChangePercent": percent_change(
                self._count_between(RestockHistory, prev_start, prev_end),
                self._count_between(RestockHistory, current_start, current_end),
            ),
            "invoicesChangePercent": percent_change(
                self._count_between(Invoice, prev_start, prev_end),
                self._count_between(Invoice, current_start, current_end),
            ),
        }
