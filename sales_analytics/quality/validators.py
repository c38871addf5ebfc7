"""
Data Validation Module

Rule-based checks over polars frames, run before sample data is loaded.

Rules:
- Not-null and uniqueness
- Numeric range and positivity
- Allowed values for enumerated columns
- Maximum string length
- Referential integrity against another frame
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import polars as pl
import structlog

from sales_analytics.database.models import CustomerRegion, CustomerType, ProductCategory, utcnow

logger = structlog.get_logger(__name__)


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"  # blocks loading
    WARNING = "warning"


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_rows: int = 0
    total_rows: int = 0


@dataclass
class ValidationResult:
    """Complete validation suite result"""
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Percentage of passed checks"""
        if self.total_checks == 0:
            return 100.0
        return (self.passed_checks / self.total_checks) * 100

    @property
    def failures(self) -> List[ValidationCheck]:
        return [c for c in self.checks if not c.passed]


Check = Callable[[pl.DataFrame], ValidationCheck]


class DataValidator:
    """
    Chainable validator for a single frame.

    Example:
        validator = DataValidator().add_not_null_check("product_id").add_range_check("price", min_value=0)
        result = validator.validate(df)
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode  # warnings fail the run too
        self._checks: List[Check] = []

    def reset(self) -> None:
        self._checks = []

    def _add(
        self,
        name: str,
        column: str,
        severity: ValidationSeverity,
        run: Callable[[pl.DataFrame], ValidationCheck],
    ) -> "DataValidator":
        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return ValidationCheck(
                    name=name,
                    passed=False,
                    severity=severity,
                    message=f"Column '{column}' not found",
                    total_rows=len(df),
                )
            return run(df)

        self._checks.append(check)
        return self

    def add_not_null_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail when the column holds nulls"""
        name = f"not_null_{column}"

        def run(df: pl.DataFrame) -> ValidationCheck:
            null_count = df[column].null_count()
            return ValidationCheck(
                name=name,
                passed=null_count == 0,
                severity=severity,
                message=f"Column '{column}' has {null_count} null values",
                details={"null_count": null_count},
                failed_rows=null_count,
                total_rows=len(df),
            )

        return self._add(name, column, severity, run)

    def add_unique_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail when the column holds duplicates"""
        name = f"unique_{column}"

        def run(df: pl.DataFrame) -> ValidationCheck:
            duplicates = len(df) - df[column].n_unique()
            return ValidationCheck(
                name=name,
                passed=duplicates == 0,
                severity=severity,
                message=f"Column '{column}' has {duplicates} duplicate values",
                details={"duplicate_count": duplicates},
                failed_rows=duplicates,
                total_rows=len(df),
            )

        return self._add(name, column, severity, run)

    def add_range_check(
        self,
        column: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail when values fall outside [min_value, max_value]"""
        name = f"range_{column}"

        def run(df: pl.DataFrame) -> ValidationCheck:
            out_of_range = pl.lit(False)
            if min_value is not None:
                out_of_range = out_of_range | (pl.col(column) < min_value)
            if max_value is not None:
                out_of_range = out_of_range | (pl.col(column) > max_value)

            failed = df.filter(out_of_range).height
            return ValidationCheck(
                name=name,
                passed=failed == 0,
                severity=severity,
                message=f"Column '{column}' has {failed} values outside [{min_value}, {max_value}]",
                details={"min": min_value, "max": max_value, "out_of_range_count": failed},
                failed_rows=failed,
                total_rows=len(df),
            )

        return self._add(name, column, severity, run)

    def add_positive_check(
        self,
        column: str,
        allow_zero: bool = True,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail on negative values, and on zero unless allow_zero"""
        if allow_zero:
            return self.add_range_check(column, min_value=0, severity=severity)

        name = f"positive_{column}"

        def run(df: pl.DataFrame) -> ValidationCheck:
            failed = df.filter(pl.col(column) <= 0).height
            return ValidationCheck(
                name=name,
                passed=failed == 0,
                severity=severity,
                message=f"Column '{column}' has {failed} non-positive values",
                failed_rows=failed,
                total_rows=len(df),
            )

        return self._add(name, column, severity, run)

    def add_enum_check(
        self,
        column: str,
        allowed_values: List[Any],
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail on values outside allowed_values"""
        name = f"enum_{column}"

        def run(df: pl.DataFrame) -> ValidationCheck:
            invalid = df.filter(
                ~pl.col(column).is_in(allowed_values) & pl.col(column).is_not_null()
            ).height
            return ValidationCheck(
                name=name,
                passed=invalid == 0,
                severity=severity,
                message=f"Column '{column}' has {invalid} invalid values",
                details={"allowed_values": allowed_values, "invalid_count": invalid},
                failed_rows=invalid,
                total_rows=len(df),
            )

        return self._add(name, column, severity, run)

    def add_max_length_check(
        self,
        column: str,
        max_length: int,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail on strings longer than max_length"""
        name = f"max_length_{column}"

        def run(df: pl.DataFrame) -> ValidationCheck:
            too_long = df.filter(pl.col(column).str.len_chars() > max_length).height
            return ValidationCheck(
                name=name,
                passed=too_long == 0,
                severity=severity,
                message=f"Column '{column}' has {too_long} values longer than {max_length}",
                failed_rows=too_long,
                total_rows=len(df),
            )

        return self._add(name, column, severity, run)

    def add_referential_integrity_check(
        self,
        column: str,
        reference_df: pl.DataFrame,
        reference_column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail on values with no match in reference_df[reference_column]"""
        name = f"ref_integrity_{column}"

        def run(df: pl.DataFrame) -> ValidationCheck:
            orphans = df.filter(
                ~pl.col(column).is_in(reference_df[reference_column].unique().to_list())
                & pl.col(column).is_not_null()
            ).height
            return ValidationCheck(
                name=name,
                passed=orphans == 0,
                severity=severity,
                message=f"Column '{column}' has {orphans} orphan records",
                details={"orphan_count": orphans},
                failed_rows=orphans,
                total_rows=len(df),
            )

        return self._add(name, column, severity, run)

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """
        Run all checks on a frame.

        Args:
            df: DataFrame to validate

        Returns:
            ValidationResult with every check's outcome
        """
        started_at = utcnow()
        logger.info("Running validation checks", checks=len(self._checks), rows=len(df))

        results = [check(df) for check in self._checks]
        for result in results:
            if not result.passed:
                logger.warning(
                    "Validation check failed",
                    check=result.name,
                    message=result.message,
                    severity=result.severity.value,
                )

        passed_checks = sum(1 for r in results if r.passed)
        failed_checks = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.ERROR)
        warning_count = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.WARNING)

        if failed_checks > 0 or (warning_count > 0 and self.strict_mode):
            status = ValidationStatus.FAILED
        elif warning_count > 0:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.PASSED

        logger.info(
            "Validation complete",
            status=status.value,
            passed=passed_checks,
            failed=failed_checks,
            warnings=warning_count,
        )

        return ValidationResult(
            status=status,
            total_checks=len(results),
            passed_checks=passed_checks,
            failed_checks=failed_checks,
            warning_count=warning_count,
            checks=results,
            started_at=started_at,
            completed_at=utcnow(),
        )


# Pre-built validators for the source tables
def create_customers_validator() -> DataValidator:
    return (
        DataValidator()
        .add_not_null_check("customer_id")
        .add_unique_check("customer_id")
        .add_not_null_check("name")
        .add_max_length_check("name", 100)
        .add_enum_check("region", [r.value for r in CustomerRegion])
        .add_enum_check("customer_type", [t.value for t in CustomerType])
    )


def create_products_validator() -> DataValidator:
    return (
        DataValidator()
        .add_not_null_check("product_id")
        .add_unique_check("product_id")
        .add_not_null_check("name")
        .add_max_length_check("name", 100)
        .add_enum_check("category", [c.value for c in ProductCategory])
        .add_positive_check("price")
    )


def create_sales_validator(
    customers_df: pl.DataFrame,
    products_df: pl.DataFrame,
) -> DataValidator:
    """Sales rules, including references to the given customers and products"""
    return (
        DataValidator()
        .add_not_null_check("sale_id")
        .add_unique_check("sale_id")
        .add_not_null_check("report_date")
        .add_range_check("quantity", min_value=1)
        .add_positive_check("total_revenue")
        .add_referential_integrity_check("customer_id", customers_df, "customer_id")
        .add_referential_integrity_check("product_id", products_df, "product_id")
    )
