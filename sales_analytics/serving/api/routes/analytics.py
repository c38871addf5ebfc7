"""
Analytics API Endpoints

Aggregates over sales in a date range, consumed by the dashboard widgets.
Every endpoint requires `startDate` and `endDate` (YYYY-MM-DD).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sales_analytics.analytics import queries
from sales_analytics.analytics.params import DateRange, parse_date_range, parse_positive_int
from sales_analytics.analytics.schemas import (
    ApiResponse,
    CategoryRollup,
    CustomerRollup,
    ProductRollup,
    RegionRollup,
    RevenueReport,
)
from sales_analytics.config import get_settings
from sales_analytics.database.connection import get_db_dependency
from sales_analytics.serving.api.errors import internal_errors

router = APIRouter()
logger = structlog.get_logger(__name__)
settings = get_settings()


def date_range_query(
    start_date: Optional[str] = Query(None, alias="startDate", description="First day, YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Last day, YYYY-MM-DD"),
) -> DateRange:
    """Dependency validating the date range before the handler runs."""
    return parse_date_range(start_date, end_date)


def limit_query(
    limit: Optional[str] = Query(None, description="Number of rows to return"),
) -> int:
    return parse_positive_int(
        limit,
        default=settings.analytics.default_limit,
        maximum=settings.analytics.max_limit,
    )


@router.get(
    "/revenue",
    response_model=ApiResponse[RevenueReport],
    response_model_exclude_none=True,
)
async def get_revenue(
    date_range: DateRange = Depends(date_range_query),
    db: AsyncSession = Depends(get_db_dependency),
) -> ApiResponse[RevenueReport]:
    """Daily revenue series and totals."""
    logger.info("get_revenue called", start_date=str(date_range.start), end_date=str(date_range.end))

    with internal_errors("revenue"):
        report = await queries.revenue_series(db, date_range)

    logger.info(
        "Revenue query completed",
        days=len(report.daily_revenue),
        total_revenue=report.summary.total_revenue,
    )
    return ApiResponse(data=report)


@router.get(
    "/top-products",
    response_model=ApiResponse[List[ProductRollup]],
    response_model_exclude_none=True,
)
async def get_top_products(
    date_range: DateRange = Depends(date_range_query),
    limit: int = Depends(limit_query),
    db: AsyncSession = Depends(get_db_dependency),
) -> ApiResponse[List[ProductRollup]]:
    """Best-selling products by units sold."""
    logger.info(
        "get_top_products called",
        start_date=str(date_range.start),
        end_date=str(date_range.end),
        limit=limit,
    )

    with internal_errors("top_products"):
        products = await queries.top_products(db, date_range, limit)

    logger.info("Top products query completed", count=len(products))
    return ApiResponse(data=products)


@router.get(
    "/top-customers",
    response_model=ApiResponse[List[CustomerRollup]],
    response_model_exclude_none=True,
)
async def get_top_customers(
    date_range: DateRange = Depends(date_range_query),
    limit: int = Depends(limit_query),
    db: AsyncSession = Depends(get_db_dependency),
) -> ApiResponse[List[CustomerRollup]]:
    """Customers ranked by total spend."""
    logger.info(
        "get_top_customers called",
        start_date=str(date_range.start),
        end_date=str(date_range.end),
        limit=limit,
    )

    with internal_errors("top_customers"):
        customers = await queries.top_customers(db, date_range, limit)

    logger.info("Top customers query completed", count=len(customers))
    return ApiResponse(data=customers)


@router.get(
    "/region-stats",
    response_model=ApiResponse[List[RegionRollup]],
    response_model_exclude_none=True,
)
async def get_region_stats(
    date_range: DateRange = Depends(date_range_query),
    db: AsyncSession = Depends(get_db_dependency),
) -> ApiResponse[List[RegionRollup]]:
    logger.info("get_region_stats called", start_date=str(date_range.start), end_date=str(date_range.end))

    with internal_errors("region_stats"):
        regions = await queries.region_stats(db, date_range)

    logger.info("Region stats query completed", regions=len(regions))
    return ApiResponse(data=regions)


@router.get(
    "/category-stats",
    response_model=ApiResponse[List[CategoryRollup]],
    response_model_exclude_none=True,
)
async def get_category_stats(
    date_range: DateRange = Depends(date_range_query),
    db: AsyncSession = Depends(get_db_dependency),
) -> ApiResponse[List[CategoryRollup]]:
    logger.info("get_category_stats called", start_date=str(date_range.start), end_date=str(date_range.end))

    with internal_errors("category_stats"):
        categories = await queries.category_stats(db, date_range)

    logger.info("Category stats query completed", categories=len(categories))
    return ApiResponse(data=categories)
