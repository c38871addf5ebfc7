"""
Report API Endpoints

Generate, list and fetch stored analytics report snapshots.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sales_analytics.analytics import reports
from sales_analytics.analytics.params import parse_date_range, parse_positive_int
from sales_analytics.analytics.schemas import ApiResponse, ReportDetail, ReportPage, ReportRequest
from sales_analytics.config import get_settings
from sales_analytics.database.connection import get_db_dependency
from sales_analytics.serving.api.errors import internal_errors

router = APIRouter()
logger = structlog.get_logger(__name__)
settings = get_settings()


@router.post(
    "/reports",
    response_model=ApiResponse[ReportDetail],
    response_model_exclude_none=True,
)
async def create_report(
    body: Optional[ReportRequest] = None,
) -> ApiResponse[ReportDetail]:
    """
    Generate and store a report for the requested range.

    The aggregates are read concurrently; the report is written only when
    all of them succeed.
    """
    body = body or ReportRequest()
    date_range = parse_date_range(body.start_date, body.end_date)

    with internal_errors("generate_report"):
        report = await reports.generate_report(date_range, settings.analytics.report_top_n)

    return ApiResponse(
        message="Analytics report generated successfully",
        data=report,
    )


@router.get(
    "/reports",
    response_model=ApiResponse[ReportPage],
    response_model_exclude_none=True,
)
async def list_reports(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Reports per page"),
    db: AsyncSession = Depends(get_db_dependency),
) -> ApiResponse[ReportPage]:
    """Stored reports, newest first, without their embedded collections."""
    page_number = parse_positive_int(page, default=1)
    page_size = parse_positive_int(
        limit,
        default=settings.analytics.default_page_size,
        maximum=settings.analytics.max_limit,
    )

    logger.info("list_reports called", page=page_number, limit=page_size)

    with internal_errors("list_reports"):
        result = await reports.list_reports(db, page_number, page_size)

    logger.info(
        "Report listing completed",
        returned=len(result.reports),
        total=result.pagination.total,
    )
    return ApiResponse(data=result)


@router.get(
    "/reports/{report_id}",
    response_model=ApiResponse[ReportDetail],
    response_model_exclude_none=True,
)
async def get_report(
    report_id: str,
    db: AsyncSession = Depends(get_db_dependency),
) -> ApiResponse[ReportDetail]:
    logger.info("get_report called", report_id=report_id)

    with internal_errors("get_report"):
        report = await reports.get_report(db, report_id)

    return ApiResponse(data=report)
