"""
Test Suite Configuration
"""
from datetime import date, datetime
from decimal import Decimal
from typing import AsyncGenerator, Dict
import uuid

import polars as pl
import pytest
from httpx import ASGITransport, AsyncClient

from sales_analytics.analytics.params import DateRange
from sales_analytics.database.connection import close_database, get_db, init_database
from sales_analytics.database.models import (
    Customer,
    CustomerRegion,
    CustomerType,
    Product,
    ProductCategory,
    Sale,
)
from sales_analytics.main import app


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[None, None]:
    """Database module bound to a fresh SQLite file with the schema created"""
    await init_database(
        url=f"sqlite+aiosqlite:///{tmp_path / 'analytics.db'}",
        create_tables=True,
    )
    yield
    await close_database()


@pytest.fixture
def sample_range() -> DateRange:
    """The two days covered by sample_data"""
    return DateRange(start=date(2024, 1, 1), end=date(2024, 1, 2))


@pytest.fixture
async def sample_data(database) -> Dict[str, uuid.UUID]:
    """
    Small known dataset.

    Inside 2024-01-01..2024-01-02:
        Alice  (North) bought 5 Widgets (Electronics) for 100 on 01-01
        Bob    (South) bought 3 Gadgets (Books)       for  50 on 01-01
        Carol  (North) bought 9 Gizmos  (Electronics) for  75 at 23:59:59 on 01-02
    Outside it, Dave (West) bought a Gizmo on 2023-12-31 and on 2024-01-03.
    """
    ids = {name: uuid.uuid4() for name in (
        "alice", "bob", "carol", "dave", "widget", "gadget", "gizmo",
    )}

    customers = [
        Customer(customer_id=ids["alice"], name="Alice", region=CustomerRegion.NORTH, customer_type=CustomerType.INDIVIDUAL),
        Customer(customer_id=ids["bob"], name="Bob", region=CustomerRegion.SOUTH, customer_type=CustomerType.BUSINESS),
        Customer(customer_id=ids["carol"], name="Carol", region=CustomerRegion.NORTH, customer_type=CustomerType.ENTERPRISE),
        Customer(customer_id=ids["dave"], name="Dave", region=CustomerRegion.WEST, customer_type=CustomerType.INDIVIDUAL),
    ]
    products = [
        Product(product_id=ids["widget"], name="Widget", category=ProductCategory.ELECTRONICS, price=Decimal("20.00")),
        Product(product_id=ids["gadget"], name="Gadget", category=ProductCategory.BOOKS, price=Decimal("16.67")),
        Product(product_id=ids["gizmo"], name="Gizmo", category=ProductCategory.ELECTRONICS, price=Decimal("8.33")),
    ]
    sales = [
        Sale(customer_id=ids["alice"], product_id=ids["widget"], quantity=5,
             total_revenue=Decimal("100"), report_date=datetime(2024, 1, 1, 9, 0)),
        Sale(customer_id=ids["bob"], product_id=ids["gadget"], quantity=3,
             total_revenue=Decimal("50"), report_date=datetime(2024, 1, 1, 15, 30)),
        Sale(customer_id=ids["carol"], product_id=ids["gizmo"], quantity=9,
             total_revenue=Decimal("75"), report_date=datetime(2024, 1, 2, 23, 59, 59)),
        Sale(customer_id=ids["dave"], product_id=ids["gizmo"], quantity=1,
             total_revenue=Decimal("8.33"), report_date=datetime(2023, 12, 31, 23, 0)),
        Sale(customer_id=ids["dave"], product_id=ids["gizmo"], quantity=1,
             total_revenue=Decimal("8.33"), report_date=datetime(2024, 1, 3, 0, 0)),
    ]

    async with get_db() as db:
        db.add_all(customers)
        db.add_all(products)
        await db.flush()
        db.add_all(sales)

    return ids


@pytest.fixture
async def client(database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client calling the app in-process"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sample_customers_df() -> pl.DataFrame:
    return pl.DataFrame({
        "customer_id": ["c-1", "c-2", "c-3"],
        "name": ["Acme Corp", "Globex", "Initech"],
        "region": ["North", "South", "Central"],
        "customer_type": ["Business", "Enterprise", "Individual"],
    })


@pytest.fixture
def sample_products_df() -> pl.DataFrame:
    return pl.DataFrame({
        "product_id": ["p-1", "p-2"],
        "name": ["Steel Lamp", "Blue Novel"],
        "category": ["Home", "Books"],
        "price": [49.99, 12.50],
    })


@pytest.fixture
def sample_sales_df() -> pl.DataFrame:
    return pl.DataFrame({
        "sale_id": ["s-1", "s-2", "s-3"],
        "customer_id": ["c-1", "c-2", "c-1"],
        "product_id": ["p-1", "p-2", "p-2"],
        "quantity": [2, 1, 4],
        "total_revenue": [99.98, 12.50, 50.00],
        "report_date": [datetime(2024, 1, 1), datetime(2024, 1, 1), datetime(2024, 1, 2)],
    })
