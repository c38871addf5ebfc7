"""
Unit Tests - Sample Data Generation
"""
from datetime import date

import polars as pl
import pytest

from sales_analytics.data.generators import (
    CustomerGenerator,
    DataGenerator,
    MAX_DAILY_SALES,
    MIN_DAILY_SALES,
    ProductGenerator,
    SaleGenerator,
)
from sales_analytics.quality.validators import (
    ValidationStatus,
    create_customers_validator,
    create_products_validator,
    create_sales_validator,
)

END = date(2024, 3, 1)


@pytest.fixture
def dataset():
    return DataGenerator(seed=7).generate_all(n_customers=20, n_products=10, days=30, end_date=END)


class TestGenerators:
    """Tests for the sample data generators"""

    def test_customer_count_and_columns(self):
        df = CustomerGenerator().generate(25)

        assert len(df) == 25
        assert set(df.columns) == {"customer_id", "name", "region", "customer_type"}

    def test_product_prices_in_range(self):
        df = ProductGenerator().generate(50)

        assert df["price"].min() >= 10
        assert df["price"].max() <= 1000

    def test_same_seed_same_data(self):
        first = CustomerGenerator(seed=3).generate(10)
        second = CustomerGenerator(seed=3).generate(10)

        assert first.equals(second)

    def test_daily_sale_counts(self, dataset):
        per_day = dataset["sales"].group_by("report_date").len()

        assert per_day.height == 30
        assert per_day["len"].min() >= MIN_DAILY_SALES
        assert per_day["len"].max() <= MAX_DAILY_SALES

    def test_sales_end_before_end_date(self, dataset):
        sales = dataset["sales"]

        assert sales["report_date"].max().date() < END
        assert sales["report_date"].min().date() == date(2024, 1, 31)

    def test_revenue_is_price_times_quantity(self, dataset):
        joined = dataset["sales"].join(dataset["products"], on="product_id")
        expected = (joined["price"] * joined["quantity"]).round(2)

        assert (joined["total_revenue"] - expected).abs().max() < 0.011
        assert joined["quantity"].min() >= 1
        assert joined["quantity"].max() <= 10

    def test_generated_data_passes_validation(self, dataset):
        customers, products, sales = dataset["customers"], dataset["products"], dataset["sales"]

        assert create_customers_validator().validate(customers).status == ValidationStatus.PASSED
        assert create_products_validator().validate(products).status == ValidationStatus.PASSED
        assert (
            create_sales_validator(customers, products).validate(sales).status
            == ValidationStatus.PASSED
        )

    def test_empty_period(self):
        customers = CustomerGenerator().generate(2)
        products = ProductGenerator().generate(2)

        sales = SaleGenerator(customers, products).generate(start_date=END, end_date=END)

        assert isinstance(sales, pl.DataFrame)
        assert sales.is_empty()
