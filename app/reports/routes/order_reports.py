"""Order report routes for the admin dashboard."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.reports.schemas import OrderStatusReportResponse
from app.reports.services.order_report_service import OrderReportService

router = APIRouter(prefix="/reports", tags=["admin-reports"])


@router.get("/order-status", response_model=OrderStatusReportResponse)
async def get_order_status_report(
    start_date: datetime = Query(..., description="Report start (ISO format, inclusive)"),
    end_date: datetime = Query(..., description="Report end (ISO format, exclusive)"),
    channel: str = Query(settings.METRICS_DEFAULT_CHANNEL, description='Sales channel or "all"'),
    include_cancelled: bool = Query(False, description="Count cancelled orders too"),
    db: Session = Depends(get_db),
) -> OrderStatusReportResponse:
    """
    Get order counts and revenue for a date range.

    Returns:
    - Total orders and revenue
    - Orders by status with percentages
    - Orders by channel with revenue
    """
    return OrderReportService.status_report(db, start_date, end_date, channel, include_cancelled)
