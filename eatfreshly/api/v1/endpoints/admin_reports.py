"""Back-office dashboard, reports and exports."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from eatfreshly.db.session import get_db
from eatfreshly.schemas.common import ApiResponse, ok
from eatfreshly.schemas.dashboard import Activity, DashboardMetrics, OrderStats, Predictions, TopItem
from eatfreshly.services import dashboard_service, report_service
from eatfreshly.services.pdf_exports import sanitize_filename
from eatfreshly.utils.time import utcnow

router: APIRouter = APIRouter()


@router.get("/dashboard/metrics", response_model=ApiResponse[DashboardMetrics])
def dashboard_metrics(db: Session = Depends(get_db)) -> dict:
    return ok(dashboard_service.dashboard_metrics(db))


@router.get("/dashboard/charts", response_model=ApiResponse[dict])
def dashboard_charts(days: int = Query(default=7, ge=1, le=365), db: Session = Depends(get_db)) -> dict:
    return ok(dashboard_service.chart_data(db, days))


@router.get("/dashboard/predictions", response_model=ApiResponse[Predictions])
def dashboard_predictions(db: Session = Depends(get_db)) -> dict:
    return ok(dashboard_service.predictions(db))


@router.get("/dashboard/activities", response_model=ApiResponse[list[Activity]])
def dashboard_activities(limit: int = Query(default=10, ge=1, le=50), db: Session = Depends(get_db)) -> dict:
    return ok(dashboard_service.recent_activities(db, limit))


@router.get("/reports/sales", response_model=ApiResponse[dict])
def sales_report(
    start_date: date | None = None,
    end_date: date | None = None,
    group_by: str = "day",
    db: Session = Depends(get_db),
) -> dict:
    return ok(report_service.sales_report(db, start_date=start_date, end_date=end_date, group_by=group_by))


@router.get("/reports/top-items", response_model=ApiResponse[list[TopItem]])
def top_items(
    days: int = Query(default=30, ge=1, le=365),
    limit: int = Query(default=10, ge=1, le=50),
    db: Session = Depends(get_db),
) -> dict:
    return ok(report_service.top_items_report(db, days=days, limit=limit))


@router.get("/reports/category-performance", response_model=ApiResponse[list[dict]])
def category_performance(days: int = Query(default=30, ge=1, le=365), db: Session = Depends(get_db)) -> dict:
    return ok(report_service.category_performance(db, days=days))


@router.get("/reports/user-growth", response_model=ApiResponse[list[dict]])
def user_growth(days: int = Query(default=30, ge=1, le=365), db: Session = Depends(get_db)) -> dict:
    return ok(report_service.user_growth(db, days=days))


@router.get("/reports/order-stats", response_model=ApiResponse[OrderStats])
def order_stats(start_date: date | None = None, end_date: date | None = None, db: Session = Depends(get_db)) -> dict:
    return ok(report_service.order_stats(db, start_date=start_date, end_date=end_date))


@router.get("/reports/export")
def export_data(
    export_type: str = Query(default="orders", alias="type"),
    export_format: str = Query(default="json", alias="format", pattern="^(json|csv)$"),
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
):
    """Export orders, users or menu items as an enveloped JSON list or a CSV attachment."""
    rows = report_service.export_rows(db, export_type, start_date=start_date, end_date=end_date)
    if export_format == "json":
        return ok(rows)
    filename = sanitize_filename(f"{export_type}-{utcnow().date().isoformat()}")
    return Response(
        content=report_service.rows_to_csv(export_type, rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}.csv"'},
    )


@router.get("/reports/orders.pdf")
def orders_pdf(start_date: date | None = None, end_date: date | None = None, db: Session = Depends(get_db)) -> Response:
    pdf_bytes = report_service.orders_pdf(db, start_date=start_date, end_date=end_date)
    filename = sanitize_filename(f"orders-{utcnow().date().isoformat()}")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}.pdf"'},
    )
