"""
Database Models

Source records and persisted report snapshots:

Source Tables:
- Customer: buyers, classified by region and customer type
- Product: catalogue entries with category and list price
- Sale: one line per sale, referencing a customer and a product

Snapshot Tables:
- AnalyticsReport: frozen aggregates for a date range, with embedded
  top-N and rollup collections stored as JSON
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List
import uuid

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# JSONB on PostgreSQL, plain JSON elsewhere
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


# =============================================================================
# ENUMERATIONS
# =============================================================================

class CustomerRegion(str, Enum):
    """Customer region enumeration"""
    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"
    CENTRAL = "Central"


class CustomerType(str, Enum):
    """Customer type enumeration"""
    INDIVIDUAL = "Individual"
    BUSINESS = "Business"
    ENTERPRISE = "Enterprise"


class ProductCategory(str, Enum):
    """Product category enumeration"""
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    HOME = "Home"
    SPORTS = "Sports"
    BEAUTY = "Beauty"


def _enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


# =============================================================================
# SOURCE TABLES
# =============================================================================

class Customer(Base):
    """
    Customer Table

    Referenced by sales. Region and type drive the region rollup and the
    top-customer listing.
    """
    __tablename__ = "customers"

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    region: Mapped[CustomerRegion] = mapped_column(
        SQLEnum(CustomerRegion, name="customer_region", values_callable=_enum_values),
        nullable=False,
    )
    customer_type: Mapped[CustomerType] = mapped_column(
        SQLEnum(CustomerType, name="customer_type", values_callable=_enum_values),
        nullable=False,
    )

    # Audit
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    sales: Mapped[List["Sale"]] = relationship(back_populates="customer")

    __table_args__ = (
        Index("ix_customers_region_type", "region", "customer_type"),
    )


class Product(Base):
    """
    Product Table

    Catalogue entry with category and list price.
    """
    __tablename__ = "products"

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[ProductCategory] = mapped_column(
        SQLEnum(ProductCategory, name="product_category", values_callable=_enum_values),
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Audit
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    sales: Mapped[List["Sale"]] = relationship(back_populates="product")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        Index("ix_products_category_price", "category", "price"),
    )


class Sale(Base):
    """
    Sale Table

    One sold line. `total_revenue` is stored as recorded and is the
    authoritative revenue figure; it is not required to equal
    price * quantity. `report_date` is the business date the sale counts
    toward, independent of `created_at`. Business dates are server-local
    time, matching the local-midnight bounds of a queried date range; the
    audit timestamps are UTC.
    """
    __tablename__ = "sales"

    sale_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.customer_id"), nullable=False
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.product_id"), nullable=False
    )

    # Measures
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_revenue: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    report_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)

    # Audit
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    customer: Mapped["Customer"] = relationship(back_populates="sales")
    product: Mapped["Product"] = relationship(back_populates="sales")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_sales_quantity_positive"),
        CheckConstraint("total_revenue >= 0", name="ck_sales_revenue_non_negative"),
        Index("ix_sales_report_date", "report_date"),
        Index("ix_sales_customer_date", "customer_id", "report_date"),
        Index("ix_sales_product_date", "product_id", "report_date"),
    )


# =============================================================================
# REPORT SNAPSHOTS
# =============================================================================

class AnalyticsReport(Base):
    """
    Analytics Report Table

    Point-in-time snapshot of the aggregates for a date range. The embedded
    collections are plain JSON copies, so later changes to sales, customers
    or products never show up in a stored report. Rows are insert-only.
    """
    __tablename__ = "analytics_reports"

    report_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    report_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Totals
    total_orders: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_revenue: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    avg_order_value: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # Embedded collections
    top_products: Mapped[List[Dict[str, Any]]] = mapped_column(JSONDocument, nullable=False, default=list)
    top_customers: Mapped[List[Dict[str, Any]]] = mapped_column(JSONDocument, nullable=False, default=list)
    region_stats: Mapped[List[Dict[str, Any]]] = mapped_column(JSONDocument, nullable=False, default=list)
    category_stats: Mapped[List[Dict[str, Any]]] = mapped_column(JSONDocument, nullable=False, default=list)

    # Audit
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_analytics_reports_range", "start_date", "end_date"),
        Index("ix_analytics_reports_report_date", "report_date"),
        Index("ix_analytics_reports_created", "created_at"),
    )
