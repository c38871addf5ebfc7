"""
Data Quality Module
"""
from .validators import DataValidator, ValidationResult, ValidationStatus

__all__ = [
    "DataValidator",
    "ValidationResult",
    "ValidationStatus",
]
