"""
Data Generation Module
"""
from .generators import CustomerGenerator, DataGenerator, ProductGenerator, SaleGenerator

__all__ = [
    "DataGenerator",
    "CustomerGenerator",
    "ProductGenerator",
    "SaleGenerator",
]
