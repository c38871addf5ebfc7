"""
Synthetic Data Generator

Generates sample sales data for development and demos:
- Customers spread over regions and customer types
- Products across categories with list prices
- Daily sales for a trailing period

Every generator takes a seed, so the same seed yields the same frames.
"""

from datetime import date, datetime, time, timedelta
import random
from typing import Dict, List, Optional
import uuid

from faker import Faker
import numpy as np
import polars as pl
import structlog

from sales_analytics.database.models import CustomerRegion, CustomerType, ProductCategory

logger = structlog.get_logger(__name__)

DEFAULT_SEED = 42


# =============================================================================
# CONFIGURATION
# =============================================================================

REGIONS = [r.value for r in CustomerRegion]
CUSTOMER_TYPES = [t.value for t in CustomerType]

CATEGORY_ITEMS = {
    ProductCategory.ELECTRONICS.value: ["Phone", "Laptop", "Tablet", "Headphones", "Camera"],
    ProductCategory.CLOTHING.value: ["Shirt", "Pants", "Dress", "Shoes", "Jacket"],
    ProductCategory.BOOKS.value: ["Novel", "Cookbook", "Atlas", "Biography", "Comic"],
    ProductCategory.HOME.value: ["Lamp", "Chair", "Blanket", "Kettle", "Rug"],
    ProductCategory.SPORTS.value: ["Ball", "Racket", "Bike", "Yoga Mat", "Gloves"],
    ProductCategory.BEAUTY.value: ["Serum", "Lipstick", "Shampoo", "Perfume", "Brush"],
}

MIN_PRICE = 10.0
MAX_PRICE = 1000.0
MIN_DAILY_SALES = 5
MAX_DAILY_SALES = 20
MAX_QUANTITY = 10


def _uuid(rng: random.Random) -> str:
    """Random UUID drawn from a seeded generator"""
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


# =============================================================================
# GENERATORS
# =============================================================================

class CustomerGenerator:
    """Generate customers with a region and a customer type"""

    def __init__(self, seed: int = DEFAULT_SEED):
        self.rng = random.Random(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)

    def generate(self, n: int = 100) -> pl.DataFrame:
        """Generate n customers"""
        customers = []

        for _ in range(n):
            customers.append({
                "customer_id": _uuid(self.rng),
                "name": self.fake.company()[:100],
                "region": self.rng.choice(REGIONS),
                "customer_type": self.rng.choice(CUSTOMER_TYPES),
            })

        return pl.DataFrame(customers)


class ProductGenerator:
    """Generate a product catalogue"""

    def __init__(self, seed: int = DEFAULT_SEED):
        self.rng = random.Random(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)

    def generate(self, n: int = 50) -> pl.DataFrame:
        """Generate n products priced between MIN_PRICE and MAX_PRICE"""
        products = []

        for _ in range(n):
            category = self.rng.choice(list(CATEGORY_ITEMS))
            item = self.rng.choice(CATEGORY_ITEMS[category])

            products.append({
                "product_id": _uuid(self.rng),
                "name": f"{self.fake.word().title()} {item}",
                "category": category,
                "price": round(self.rng.uniform(MIN_PRICE, MAX_PRICE), 2),
            })

        return pl.DataFrame(products)


class SaleGenerator:
    """Generate daily sales referencing existing customers and products"""

    def __init__(
        self,
        customers_df: pl.DataFrame,
        products_df: pl.DataFrame,
        seed: int = DEFAULT_SEED,
    ):
        self.customer_ids = customers_df["customer_id"].to_list()
        self.products = products_df.select(["product_id", "price"]).to_dicts()
        self.rng = random.Random(seed)
        self.np_rng = np.random.default_rng(seed)

    def generate(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> pl.DataFrame:
        """
        Generate sales for every day from start_date up to, not including,
        end_date.

        Each day gets between MIN_DAILY_SALES and MAX_DAILY_SALES sales with
        quantities from 1 to MAX_QUANTITY. Revenue is price times quantity.
        """
        end_date = end_date or date.today()
        start_date = start_date or end_date - timedelta(days=730)

        n_days = max((end_date - start_date).days, 0)
        daily_counts = self.np_rng.integers(MIN_DAILY_SALES, MAX_DAILY_SALES + 1, size=n_days)

        sales: List[Dict] = []
        for offset, count in enumerate(daily_counts):
            day = datetime.combine(start_date + timedelta(days=offset), time.min)
            quantities = self.np_rng.integers(1, MAX_QUANTITY + 1, size=int(count))

            for quantity in quantities:
                product = self.rng.choice(self.products)
                sales.append({
                    "sale_id": _uuid(self.rng),
                    "customer_id": self.rng.choice(self.customer_ids),
                    "product_id": product["product_id"],
                    "quantity": int(quantity),
                    "total_revenue": round(product["price"] * int(quantity), 2),
                    "report_date": day,
                })

        return pl.DataFrame(
            sales,
            schema={
                "sale_id": pl.Utf8,
                "customer_id": pl.Utf8,
                "product_id": pl.Utf8,
                "quantity": pl.Int64,
                "total_revenue": pl.Float64,
                "report_date": pl.Datetime,
            },
        )


# =============================================================================
# MAIN GENERATOR
# =============================================================================

class DataGenerator:
    """Main data generator orchestrator"""

    def __init__(self, seed: int = DEFAULT_SEED):
        self.seed = seed

    def generate_all(
        self,
        n_customers: int = 100,
        n_products: int = 50,
        days: int = 730,
        end_date: Optional[date] = None,
    ) -> Dict[str, pl.DataFrame]:
        """Generate customers, products and sales frames keyed by table name"""
        end_date = end_date or date.today()

        customers_df = CustomerGenerator(self.seed).generate(n_customers)
        products_df = ProductGenerator(self.seed + 1).generate(n_products)
        sales_df = SaleGenerator(customers_df, products_df, self.seed + 2).generate(
            start_date=end_date - timedelta(days=days),
            end_date=end_date,
        )

        logger.info(
            "Sample data generated",
            customers=len(customers_df),
            products=len(products_df),
            sales=len(sales_df),
        )

        return {
            "customers": customers_df,
            "products": products_df,
            "sales": sales_df,
        }
