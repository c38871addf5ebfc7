"""
Sales Aggregation Queries

Grouping queries over the sales table. Every query filters sales whose
report date falls inside an inclusive DateRange, joins the customer or
product it needs, groups, and sorts in the database. Rankings break ties on
name and then id so repeated calls return the same order.
"""

from typing import List

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from sales_analytics.analytics.params import DateRange
from sales_analytics.analytics.schemas import (
    CategoryRollup,
    CustomerRollup,
    DailyRevenue,
    ProductRollup,
    RegionRollup,
    RevenueReport,
    RevenueSummary,
)
from sales_analytics.database.models import Customer, Product, Sale

logger = structlog.get_logger(__name__)


def in_range(date_range: DateRange):
    """Filter clause selecting sales inside the range"""
    return and_(
        Sale.report_date >= date_range.start_at,
        Sale.report_date <= date_range.end_at,
    )


async def revenue_summary(db: AsyncSession, date_range: DateRange) -> RevenueSummary:
    """Revenue, order count and mean order value over the whole range."""
    result = await db.execute(
        select(
            func.sum(Sale.total_revenue).label("revenue"),
            func.count(Sale.sale_id).label("orders"),
            func.avg(Sale.total_revenue).label("aov"),
        ).where(in_range(date_range))
    )
    row = result.one()

    return RevenueSummary(
        total_revenue=float(row.revenue or 0),
        total_orders=row.orders or 0,
        avg_order_value=float(row.aov or 0),
    )


async def revenue_series(db: AsyncSession, date_range: DateRange) -> RevenueReport:
    """
    Daily revenue series for the range, oldest day first, plus the summary.

    Days without sales are absent from the series.
    """
    day = func.date(Sale.report_date)
    result = await db.execute(
        select(
            day.label("day"),
            func.sum(Sale.total_revenue).label("revenue"),
            func.count(Sale.sale_id).label("orders"),
            func.avg(Sale.total_revenue).label("aov"),
        )
        .where(in_range(date_range))
        .group_by(day)
        .order_by(day)
    )

    # date() yields a date on PostgreSQL and an ISO string on SQLite
    daily = [
        DailyRevenue(
            day=str(row.day),
            total_revenue=float(row.revenue or 0),
            total_orders=row.orders,
            avg_order_value=float(row.aov or 0),
        )
        for row in result.all()
    ]
    summary = await revenue_summary(db, date_range)

    logger.debug("Revenue series computed", days=len(daily), total_orders=summary.total_orders)
    return RevenueReport(daily_revenue=daily, summary=summary)


async def top_products(
    db: AsyncSession,
    date_range: DateRange,
    limit: int,
) -> List[ProductRollup]:
    """Products ranked by units sold, at most `limit` of them."""
    total_sold = func.sum(Sale.quantity).label("total_sold")
    result = await db.execute(
        select(
            Product.product_id,
            Product.name,
            Product.category,
            Product.price,
            total_sold,
            func.sum(Sale.total_revenue).label("total_revenue"),
            func.count(Sale.sale_id).label("total_orders"),
        )
        .select_from(Sale)
        .join(Product, Sale.product_id == Product.product_id)
        .where(in_range(date_range))
        .group_by(Product.product_id, Product.name, Product.category, Product.price)
        .order_by(total_sold.desc(), Product.name, Product.product_id)
        .limit(limit)
    )

    return [
        ProductRollup(
            id=row.product_id,
            name=row.name,
            category=row.category,
            price=float(row.price),
            total_sold=int(row.total_sold),
            total_revenue=float(row.total_revenue or 0),
            total_orders=row.total_orders,
        )
        for row in result.all()
    ]


async def top_customers(
    db: AsyncSession,
    date_range: DateRange,
    limit: int,
) -> List[CustomerRollup]:
    """Customers ranked by total spend, at most `limit` of them."""
    total_spent = func.sum(Sale.total_revenue).label("total_spent")
    result = await db.execute(
        select(
            Customer.customer_id,
            Customer.name,
            Customer.region,
            Customer.customer_type,
            total_spent,
            func.count(Sale.sale_id).label("total_orders"),
            func.avg(Sale.total_revenue).label("aov"),
        )
        .select_from(Sale)
        .join(Customer, Sale.customer_id == Customer.customer_id)
        .where(in_range(date_range))
        .group_by(Customer.customer_id, Customer.name, Customer.region, Customer.customer_type)
        .order_by(total_spent.desc(), Customer.name, Customer.customer_id)
        .limit(limit)
    )

    return [
        CustomerRollup(
            id=row.customer_id,
            name=row.name,
            region=row.region,
            customer_type=row.customer_type,
            total_spent=float(row.total_spent or 0),
            total_orders=row.total_orders,
            avg_order_value=float(row.aov or 0),
        )
        for row in result.all()
    ]


async def region_stats(db: AsyncSession, date_range: DateRange) -> List[RegionRollup]:
    """Revenue per customer region, highest revenue first."""
    total_revenue = func.sum(Sale.total_revenue).label("total_revenue")
    result = await db.execute(
        select(
            Customer.region,
            total_revenue,
            func.count(Sale.sale_id).label("total_orders"),
            func.avg(Sale.total_revenue).label("aov"),
            func.count(func.distinct(Sale.customer_id)).label("unique_customers"),
        )
        .select_from(Sale)
        .join(Customer, Sale.customer_id == Customer.customer_id)
        .where(in_range(date_range))
        .group_by(Customer.region)
        .order_by(total_revenue.desc(), Customer.region)
    )

    return [
        RegionRollup(
            region=row.region,
            total_revenue=float(row.total_revenue or 0),
            total_orders=row.total_orders,
            avg_order_value=float(row.aov or 0),
            unique_customers=row.unique_customers,
        )
        for row in result.all()
    ]


async def category_stats(db: AsyncSession, date_range: DateRange) -> List[CategoryRollup]:
    """Revenue and volume per product category, highest revenue first."""
    total_revenue = func.sum(Sale.total_revenue).label("total_revenue")
    result = await db.execute(
        select(
            Product.category,
            total_revenue,
            func.count(Sale.sale_id).label("total_orders"),
            func.sum(Sale.quantity).label("total_quantity"),
            func.avg(Sale.total_revenue).label("aov"),
            func.count(func.distinct(Sale.product_id)).label("unique_products"),
        )
        .select_from(Sale)
        .join(Product, Sale.product_id == Product.product_id)
        .where(in_range(date_range))
        .group_by(Product.category)
        .order_by(total_revenue.desc(), Product.category)
    )

    return [
        CategoryRollup(
            category=row.category,
            total_revenue=float(row.total_revenue or 0),
            total_orders=row.total_orders,
            total_quantity=int(row.total_quantity or 0),
            avg_order_value=float(row.aov or 0),
            unique_products=row.unique_products,
        )
        for row in result.all()
    ]
