"""
Analytics Module

Date-range parsing, sales aggregation queries and report snapshots.
"""
from .params import DateRange, parse_date_range, parse_positive_int
from .queries import (
    category_stats,
    region_stats,
    revenue_series,
    revenue_summary,
    top_customers,
    top_products,
)
from .reports import generate_report, get_report, list_reports

__all__ = [
    "DateRange",
    "parse_date_range",
    "parse_positive_int",
    "revenue_series",
    "revenue_summary",
    "top_products",
    "top_customers",
    "region_stats",
    "category_stats",
    "generate_report",
    "list_reports",
    "get_report",
]
