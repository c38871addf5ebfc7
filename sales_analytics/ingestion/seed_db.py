"""
Database Seeding

Replaces the source tables with freshly generated sample data:
clear sales, products and customers, validate the generated frames, then
insert them in chunks.

Usage:
    python -m sales_analytics.ingestion.seed_db
"""

import asyncio
from typing import Any, Dict, List, Optional
import uuid

import polars as pl
from sqlalchemy import delete, insert
import structlog

from sales_analytics.config.logging import configure_logging
from sales_analytics.data.generators import DEFAULT_SEED, DataGenerator
from sales_analytics.database.connection import close_database, get_db, get_engine, init_database
from sales_analytics.database.models import Base, Customer, Product, Sale, utcnow
from sales_analytics.quality.validators import (
    DataValidator,
    ValidationStatus,
    create_customers_validator,
    create_products_validator,
    create_sales_validator,
)

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 1000


class DataQualityError(Exception):
    """Generated data failed validation and was not loaded"""

    def __init__(self, table: str, failures: List[str]):
        self.table = table
        self.failures = failures
        super().__init__(f"{table} failed validation: {'; '.join(failures)}")


def _check(table: str, df: pl.DataFrame, validator: DataValidator) -> None:
    result = validator.validate(df)
    if result.status == ValidationStatus.FAILED:
        raise DataQualityError(table, [c.message for c in result.failures])


def _records(df: pl.DataFrame, id_columns: List[str]) -> List[Dict[str, Any]]:
    """Frame rows as insert parameters, with UUID columns converted"""
    now = utcnow()
    records = []
    for row in df.to_dicts():
        for column in id_columns:
            row[column] = uuid.UUID(row[column])
        row["created_at"] = now
        row["updated_at"] = now
        records.append(row)
    return records


async def execute_batch_insert(model: Any, records: List[Dict[str, Any]]) -> None:
    """Insert records in chunks of CHUNK_SIZE within one transaction"""
    if not records:
        return

    async with get_db() as db:
        for i in range(0, len(records), CHUNK_SIZE):
            chunk = records[i:i + CHUNK_SIZE]
            await db.execute(insert(model), chunk)
            logger.debug(
                "Inserted chunk",
                table=model.__tablename__,
                inserted=min(i + CHUNK_SIZE, len(records)),
                total=len(records),
            )

    logger.info("Inserted records", table=model.__tablename__, count=len(records))


async def clear_source_tables() -> None:
    """Delete all sales, products and customers"""
    async with get_db() as db:
        for model in (Sale, Product, Customer):
            await db.execute(delete(model))
    logger.info("Cleared source tables")


async def seed_database(
    data: Optional[Dict[str, pl.DataFrame]] = None,
    seed: int = DEFAULT_SEED,
) -> Dict[str, int]:
    """
    Replace the source tables with validated sample data.

    Args:
        data: Frames keyed by "customers", "products" and "sales"; generated
            when omitted
        seed: Generator seed

    Returns:
        Row counts per table

    Raises:
        DataQualityError: A frame failed validation; nothing was changed
    """
    data = data or DataGenerator(seed).generate_all()
    customers_df, products_df, sales_df = data["customers"], data["products"], data["sales"]

    _check("customers", customers_df, create_customers_validator())
    _check("products", products_df, create_products_validator())
    _check("sales", sales_df, create_sales_validator(customers_df, products_df))

    await clear_source_tables()
    await execute_batch_insert(Customer, _records(customers_df, ["customer_id"]))
    await execute_batch_insert(Product, _records(products_df, ["product_id"]))
    await execute_batch_insert(Sale, _records(sales_df, ["sale_id", "customer_id", "product_id"]))

    counts = {
        "customers": len(customers_df),
        "products": len(products_df),
        "sales": len(sales_df),
    }
    logger.info("Database seeding completed", **counts)
    return counts


async def main() -> None:
    configure_logging()
    logger.info("Starting database seeding...")
    await init_database()

    try:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await seed_database()
    except Exception as e:
        logger.error("Seeding failed", error=str(e), error_type=type(e).__name__)
        raise
    finally:
        await close_database()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
