"""
Analytics Report Snapshots

Generation runs the five report aggregates concurrently, each on its own
session, and writes a single AnalyticsReport only after all of them have
succeeded. Stored reports are never modified afterwards.
"""

import asyncio
import math
from typing import Any, AsyncContextManager, Callable, Optional
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sales_analytics.analytics.params import DateRange
from sales_analytics.analytics.queries import (
    category_stats,
    region_stats,
    revenue_summary,
    top_customers,
    top_products,
)
from sales_analytics.analytics.schemas import (
    Pagination,
    ReportCategory,
    ReportCustomer,
    ReportDetail,
    ReportPage,
    ReportProduct,
    ReportRegion,
    ReportSummary,
)
from sales_analytics.config import get_settings
from sales_analytics.database.connection import get_db
from sales_analytics.database.models import AnalyticsReport, utcnow
from sales_analytics.exceptions import ReportNotFound

logger = structlog.get_logger(__name__)
settings = get_settings()

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]

# Columns returned by the listing; the embedded collections are left out
SUMMARY_COLUMNS = (
    AnalyticsReport.report_id,
    AnalyticsReport.report_date,
    AnalyticsReport.start_date,
    AnalyticsReport.end_date,
    AnalyticsReport.total_orders,
    AnalyticsReport.total_revenue,
    AnalyticsReport.avg_order_value,
    AnalyticsReport.created_at,
    AnalyticsReport.updated_at,
)


async def _read(session_factory: SessionFactory, query: Callable, *args: Any) -> Any:
    """Run one aggregate on a session of its own."""
    async with session_factory() as db:
        return await query(db, *args)


async def generate_report(
    date_range: DateRange,
    top_n: Optional[int] = None,
    session_factory: SessionFactory = get_db,
) -> ReportDetail:
    """
    Compute and persist a report snapshot for a date range.

    The five aggregates read independently of each other. If any of them
    fails the exception propagates and nothing is written.

    Args:
        date_range: Validated range to report on
        top_n: Size of the embedded product and customer rankings
        session_factory: Async context manager yielding sessions

    Returns:
        ReportDetail of the newly stored report
    """
    top_n = top_n or settings.analytics.report_top_n

    logger.info(
        "Generating analytics report",
        start_date=str(date_range.start),
        end_date=str(date_range.end),
        top_n=top_n,
    )

    # Wait for every read so none is left running when one fails
    results = await asyncio.gather(
        _read(session_factory, revenue_summary, date_range),
        _read(session_factory, top_products, date_range, top_n),
        _read(session_factory, top_customers, date_range, top_n),
        _read(session_factory, region_stats, date_range),
        _read(session_factory, category_stats, date_range),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    summary, products, customers, regions, categories = results

    now = utcnow()
    report = AnalyticsReport(
        report_id=uuid.uuid4(),
        report_date=now,
        start_date=date_range.start,
        end_date=date_range.end,
        total_orders=summary.total_orders,
        total_revenue=summary.total_revenue,
        avg_order_value=summary.avg_order_value,
        top_products=[
            ReportProduct(
                product_id=p.id,
                name=p.name,
                total_sold=p.total_sold,
                revenue=p.total_revenue,
            ).model_dump(mode="json")
            for p in products
        ],
        top_customers=[
            ReportCustomer(
                customer_id=c.id,
                name=c.name,
                total_orders=c.total_orders,
                total_spent=c.total_spent,
            ).model_dump(mode="json")
            for c in customers
        ],
        region_stats=[
            ReportRegion(
                region=r.region,
                total_orders=r.total_orders,
                total_revenue=r.total_revenue,
                avg_order_value=r.avg_order_value,
            ).model_dump(mode="json")
            for r in regions
        ],
        category_stats=[
            ReportCategory(
                category=c.category,
                total_orders=c.total_orders,
                total_revenue=c.total_revenue,
                avg_order_value=c.avg_order_value,
            ).model_dump(mode="json")
            for c in categories
        ],
        created_at=now,
        updated_at=now,
    )

    async with session_factory() as db:
        db.add(report)

    logger.info(
        "Analytics report stored",
        report_id=str(report.report_id),
        total_orders=report.total_orders,
        total_revenue=report.total_revenue,
    )
    return ReportDetail.model_validate(report)


async def list_reports(db: AsyncSession, page: int, limit: int) -> ReportPage:
    """
    One page of stored reports, newest first, without embedded collections.

    Pages past the end are empty rather than an error.
    """
    total = (await db.execute(
        select(func.count(AnalyticsReport.report_id))
    )).scalar() or 0

    pagination = Pagination(
        current=page,
        pages=math.ceil(total / limit),
        total=total,
        limit=limit,
    )

    # Offsets and limits past the last row can exceed the database integer range
    offset = (page - 1) * limit
    if offset >= total:
        return ReportPage(reports=[], pagination=pagination)

    result = await db.execute(
        select(*SUMMARY_COLUMNS)
        .order_by(AnalyticsReport.created_at.desc(), AnalyticsReport.report_id.desc())
        .offset(offset)
        .limit(min(limit, total - offset))
    )
    reports = [ReportSummary.model_validate(row) for row in result.all()]

    return ReportPage(reports=reports, pagination=pagination)


async def get_report(db: AsyncSession, report_id: str) -> ReportDetail:
    """
    Full stored report.

    Raises:
        ReportNotFound: The id is malformed or matches no report
    """
    try:
        key = uuid.UUID(str(report_id))
    except ValueError:
        raise ReportNotFound(report_id)

    report = await db.get(AnalyticsReport, key)
    if report is None:
        raise ReportNotFound(report_id)

    return ReportDetail.model_validate(report)
