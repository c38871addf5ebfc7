"""
Data Ingestion Module
"""
from .seed_db import DataQualityError, seed_database

__all__ = [
    "DataQualityError",
    "seed_database",
]
