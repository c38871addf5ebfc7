"""
Integration Tests - Aggregation Queries
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from sales_analytics.analytics import queries
from sales_analytics.analytics.params import DateRange
from sales_analytics.database.connection import get_db
from sales_analytics.database.models import (
    Customer,
    CustomerRegion,
    CustomerType,
    Product,
    ProductCategory,
    Sale,
)

EMPTY_RANGE = DateRange(start=date(2020, 1, 1), end=date(2020, 12, 31))


class TestRevenue:
    """Tests for revenue_series and revenue_summary"""

    async def test_daily_series(self, sample_data, sample_range):
        async with get_db() as db:
            report = await queries.revenue_series(db, sample_range)

        assert [d.model_dump() for d in report.daily_revenue] == [
            {"day": "2024-01-01", "total_revenue": 150.0, "total_orders": 2, "avg_order_value": 75.0},
            {"day": "2024-01-02", "total_revenue": 75.0, "total_orders": 1, "avg_order_value": 75.0},
        ]
        assert report.summary.total_revenue == 225.0
        assert report.summary.total_orders == 3
        assert report.summary.avg_order_value == 75.0

    async def test_empty_range_gives_zero_summary(self, sample_data):
        async with get_db() as db:
            report = await queries.revenue_series(db, EMPTY_RANGE)

        assert report.daily_revenue == []
        assert report.summary.total_revenue == 0
        assert report.summary.total_orders == 0
        assert report.summary.avg_order_value == 0

    async def test_single_day_includes_last_second(self, sample_data):
        day = DateRange(start=date(2024, 1, 2), end=date(2024, 1, 2))

        async with get_db() as db:
            summary = await queries.revenue_summary(db, day)

        assert summary.total_orders == 1
        assert summary.total_revenue == 75.0

    async def test_default_report_date_is_local_today(self, sample_data):
        first_day = date.today()
        async with get_db() as db:
            db.add(Sale(customer_id=sample_data["alice"], product_id=sample_data["widget"],
                        quantity=1, total_revenue=Decimal("12")))

        today = DateRange(start=first_day, end=date.today())
        async with get_db() as db:
            summary = await queries.revenue_summary(db, today)

        assert summary.total_orders == 1
        assert summary.total_revenue == 12.0


class TestTopProducts:
    """Tests for top_products"""

    async def test_limit_and_order(self, sample_data, sample_range):
        async with get_db() as db:
            products = await queries.top_products(db, sample_range, 2)

        assert [p.name for p in products] == ["Gizmo", "Widget"]
        assert [p.total_sold for p in products] == [9, 5]
        assert products[0].id == sample_data["gizmo"]
        assert products[0].total_revenue == 75.0
        assert products[0].total_orders == 1
        assert products[0].category == ProductCategory.ELECTRONICS

    async def test_limit_larger_than_result(self, sample_data, sample_range):
        async with get_db() as db:
            products = await queries.top_products(db, sample_range, 10)

        assert [p.total_sold for p in products] == [9, 5, 3]

    async def test_ties_ordered_by_name(self, database):
        day = datetime(2024, 2, 1, 12, 0)
        async with get_db() as db:
            zeta = Product(name="Zeta", category=ProductCategory.HOME, price=Decimal("1"))
            alpha = Product(name="Alpha", category=ProductCategory.HOME, price=Decimal("1"))
            db.add_all([zeta, alpha])
            await db.flush()
            buyer = Customer(name="Buyer", region=CustomerRegion.EAST, customer_type=CustomerType.BUSINESS)
            db.add(buyer)
            await db.flush()
            for product in (zeta, alpha):
                db.add(Sale(customer_id=buyer.customer_id, product_id=product.product_id,
                            quantity=4, total_revenue=Decimal("4"), report_date=day))

        feb = DateRange(start=date(2024, 2, 1), end=date(2024, 2, 1))
        async with get_db() as db:
            products = await queries.top_products(db, feb, 10)

        assert [p.name for p in products] == ["Alpha", "Zeta"]

    async def test_empty_range(self, sample_data):
        async with get_db() as db:
            assert await queries.top_products(db, EMPTY_RANGE, 5) == []


class TestTopCustomers:
    """Tests for top_customers"""

    async def test_ranked_by_spend(self, sample_data, sample_range):
        async with get_db() as db:
            customers = await queries.top_customers(db, sample_range, 10)

        assert [c.name for c in customers] == ["Alice", "Carol", "Bob"]
        assert [c.total_spent for c in customers] == [100.0, 75.0, 50.0]
        assert customers[0].region == CustomerRegion.NORTH
        assert customers[0].avg_order_value == 100.0

    async def test_limit(self, sample_data, sample_range):
        async with get_db() as db:
            customers = await queries.top_customers(db, sample_range, 1)

        assert len(customers) == 1
        assert customers[0].id == sample_data["alice"]


class TestRollups:
    """Tests for region_stats and category_stats"""

    async def test_region_stats(self, sample_data, sample_range):
        async with get_db() as db:
            regions = await queries.region_stats(db, sample_range)

        assert [r.model_dump() for r in regions] == [
            {
                "region": CustomerRegion.NORTH,
                "total_revenue": 175.0,
                "total_orders": 2,
                "avg_order_value": 87.5,
                "unique_customers": 2,
            },
            {
                "region": CustomerRegion.SOUTH,
                "total_revenue": 50.0,
                "total_orders": 1,
                "avg_order_value": 50.0,
                "unique_customers": 1,
            },
        ]

    async def test_region_without_sales_is_absent(self, sample_data, sample_range):
        async with get_db() as db:
            regions = await queries.region_stats(db, sample_range)

        assert CustomerRegion.WEST not in {r.region for r in regions}

    async def test_category_stats(self, sample_data, sample_range):
        async with get_db() as db:
            categories = await queries.category_stats(db, sample_range)

        electronics, books = categories
        assert electronics.category == ProductCategory.ELECTRONICS
        assert electronics.total_revenue == 175.0
        assert electronics.total_quantity == 14
        assert electronics.unique_products == 2
        assert books.category == ProductCategory.BOOKS
        assert books.total_orders == 1

    @pytest.mark.parametrize("query", [queries.region_stats, queries.category_stats])
    async def test_empty_range(self, sample_data, query):
        async with get_db() as db:
            assert await query(db, EMPTY_RANGE) == []
