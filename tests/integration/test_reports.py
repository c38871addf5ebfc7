"""
Integration Tests - Report Snapshots
"""
from datetime import date
import uuid

import pytest
from sqlalchemy import func, select

from sales_analytics.analytics import reports
from sales_analytics.analytics.params import DateRange
from sales_analytics.database.connection import get_db
from sales_analytics.database.models import AnalyticsReport, CustomerRegion, ProductCategory
from sales_analytics.exceptions import ReportNotFound


async def count_reports() -> int:
    async with get_db() as db:
        return (await db.execute(select(func.count(AnalyticsReport.report_id)))).scalar()


class TestGenerateReport:
    """Tests for generate_report"""

    async def test_snapshot_contents(self, sample_data, sample_range):
        report = await reports.generate_report(sample_range, top_n=5)

        assert report.start_date == date(2024, 1, 1)
        assert report.end_date == date(2024, 1, 2)
        assert report.total_orders == 3
        assert report.total_revenue == 225.0
        assert report.avg_order_value == 75.0

        assert [p.name for p in report.top_products] == ["Gizmo", "Widget", "Gadget"]
        assert report.top_products[0].product_id == sample_data["gizmo"]
        assert report.top_products[0].total_sold == 9
        assert report.top_products[0].revenue == 75.0

        assert [c.name for c in report.top_customers] == ["Alice", "Carol", "Bob"]
        assert report.top_customers[0].total_spent == 100.0

        assert [r.region for r in report.region_stats] == [CustomerRegion.NORTH, CustomerRegion.SOUTH]
        assert [c.category for c in report.category_stats] == [ProductCategory.ELECTRONICS, ProductCategory.BOOKS]

    async def test_top_n_caps_embedded_rankings(self, sample_data, sample_range):
        report = await reports.generate_report(sample_range, top_n=1)

        assert len(report.top_products) == 1
        assert len(report.top_customers) == 1
        assert len(report.region_stats) == 2

    async def test_each_call_creates_new_report(self, sample_data, sample_range):
        first = await reports.generate_report(sample_range)
        second = await reports.generate_report(sample_range)

        assert first.id != second.id
        assert second.created_at >= first.created_at
        assert await count_reports() == 2

    async def test_empty_range_report(self, sample_data):
        report = await reports.generate_report(DateRange(start=date(2020, 1, 1), end=date(2020, 1, 31)))

        assert report.total_orders == 0
        assert report.total_revenue == 0
        assert report.top_products == []
        assert report.region_stats == []

    async def test_failed_aggregate_writes_nothing(self, sample_data, sample_range, monkeypatch):
        async def broken(db, date_range):
            raise RuntimeError("aggregation failed")

        monkeypatch.setattr(reports, "region_stats", broken)

        with pytest.raises(RuntimeError):
            await reports.generate_report(sample_range)

        assert await count_reports() == 0


class TestListReports:
    """Tests for list_reports"""

    async def test_pagination(self, sample_data, sample_range):
        generated = [await reports.generate_report(sample_range) for _ in range(3)]

        async with get_db() as db:
            page_one = await reports.list_reports(db, page=1, limit=2)
            page_two = await reports.list_reports(db, page=2, limit=2)

        assert page_one.pagination.model_dump() == {"current": 1, "pages": 2, "total": 3, "limit": 2}
        assert [r.id for r in page_one.reports] == [generated[2].id, generated[1].id]
        assert [r.id for r in page_two.reports] == [generated[0].id]

    async def test_page_past_end_is_empty(self, sample_data, sample_range):
        await reports.generate_report(sample_range)

        async with get_db() as db:
            page = await reports.list_reports(db, page=5, limit=10)

        assert page.reports == []
        assert page.pagination.total == 1
        assert page.pagination.pages == 1

    async def test_huge_page_is_empty(self, sample_data, sample_range):
        await reports.generate_report(sample_range)

        async with get_db() as db:
            page = await reports.list_reports(db, page=99999999999999999999, limit=10)

        assert page.reports == []
        assert page.pagination.current == 99999999999999999999
        assert page.pagination.total == 1
        assert page.pagination.pages == 1

    async def test_limit_beyond_total(self, sample_data, sample_range):
        await reports.generate_report(sample_range)

        async with get_db() as db:
            page = await reports.list_reports(db, page=1, limit=99999999999999999999)

        assert len(page.reports) == 1
        assert page.pagination.pages == 1

    async def test_no_reports(self, database):
        async with get_db() as db:
            page = await reports.list_reports(db, page=1, limit=10)

        assert page.reports == []
        assert page.pagination.pages == 0
        assert page.pagination.total == 0

    async def test_listing_omits_collections(self, sample_data, sample_range):
        await reports.generate_report(sample_range)

        async with get_db() as db:
            page = await reports.list_reports(db, page=1, limit=10)

        body = page.model_dump(by_alias=True)
        assert "topProducts" not in body["reports"][0]
        assert body["reports"][0]["totalOrders"] == 3


class TestGetReport:
    """Tests for get_report"""

    async def test_round_trip(self, sample_data, sample_range):
        created = await reports.generate_report(sample_range)

        async with get_db() as db:
            fetched = await reports.get_report(db, str(created.id))

        assert fetched.model_dump() == created.model_dump()

    @pytest.mark.parametrize("report_id", ["not-a-uuid", str(uuid.uuid4())])
    async def test_not_found(self, database, report_id):
        async with get_db() as db:
            with pytest.raises(ReportNotFound) as exc_info:
                await reports.get_report(db, report_id)

        assert exc_info.value.status_code == 404
