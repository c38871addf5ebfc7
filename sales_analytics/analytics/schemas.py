"""
Analytics Schemas

Pydantic models for aggregate results, report snapshots and the response
envelope. Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sales_analytics.database.models import CustomerRegion, CustomerType, ProductCategory

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# ENVELOPE
# =============================================================================

class FieldError(CamelModel):
    """Problem with a single request field"""
    field: str
    message: str


class ApiResponse(CamelModel, Generic[T]):
    """Envelope shared by every response"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    errors: Optional[List[FieldError]] = None


# =============================================================================
# AGGREGATES
# =============================================================================

class DailyRevenue(CamelModel):
    """Revenue for one calendar day"""
    day: str
    total_revenue: float
    total_orders: int
    avg_order_value: float


class RevenueSummary(CamelModel):
    """Revenue over a whole range"""
    total_revenue: float = 0.0
    total_orders: int = 0
    avg_order_value: float = 0.0


class RevenueReport(CamelModel):
    """Daily revenue series with its summary"""
    daily_revenue: List[DailyRevenue]
    summary: RevenueSummary


class ProductRollup(CamelModel):
    """Sales of one product"""
    id: UUID = Field(alias="_id")
    name: str
    category: ProductCategory
    price: float
    total_sold: int
    total_revenue: float
    total_orders: int


class CustomerRollup(CamelModel):
    """Purchases of one customer"""
    id: UUID = Field(alias="_id")
    name: str
    region: CustomerRegion
    customer_type: CustomerType = Field(alias="type")
    total_spent: float
    total_orders: int
    avg_order_value: float


class RegionRollup(CamelModel):
    """Sales attributed to one customer region"""
    region: CustomerRegion
    total_revenue: float
    total_orders: int
    avg_order_value: float
    unique_customers: int


class CategoryRollup(CamelModel):
    """Sales of one product category"""
    category: ProductCategory
    total_revenue: float
    total_orders: int
    total_quantity: int
    avg_order_value: float
    unique_products: int


# =============================================================================
# REPORT SNAPSHOTS
# =============================================================================

class ReportProduct(CamelModel):
    product_id: UUID
    name: str
    total_sold: int
    revenue: float


class ReportCustomer(CamelModel):
    customer_id: UUID
    name: str
    total_orders: int
    total_spent: float


class ReportRegion(CamelModel):
    region: CustomerRegion
    total_orders: int
    total_revenue: float
    avg_order_value: float


class ReportCategory(CamelModel):
    category: ProductCategory
    total_orders: int
    total_revenue: float
    avg_order_value: float


class ReportSummary(CamelModel):
    """Scalar fields of a stored report, as returned by the listing"""
    id: UUID = Field(
        validation_alias=AliasChoices("report_id", "_id", "id"),
        serialization_alias="_id",
    )
    report_date: datetime
    start_date: date
    end_date: date
    total_orders: int
    total_revenue: float
    avg_order_value: float
    created_at: datetime
    updated_at: datetime


class ReportDetail(ReportSummary):
    """Stored report including its embedded collections"""
    top_products: List[ReportProduct]
    top_customers: List[ReportCustomer]
    region_stats: List[ReportRegion] = Field(
        validation_alias=AliasChoices("region_stats", "regionWiseStats"),
        serialization_alias="regionWiseStats",
    )
    category_stats: List[ReportCategory] = Field(
        validation_alias=AliasChoices("category_stats", "categoryWiseStats"),
        serialization_alias="categoryWiseStats",
    )


class Pagination(CamelModel):
    current: int
    pages: int
    total: int
    limit: int


class ReportPage(CamelModel):
    """One page of the report listing"""
    reports: List[ReportSummary]
    pagination: Pagination


class ReportRequest(CamelModel):
    """Body of a report generation request; validated by parse_date_range"""
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class HealthStatus(CamelModel):
    message: str
    timestamp: datetime
