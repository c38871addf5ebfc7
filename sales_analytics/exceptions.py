"""
Analytics Errors

Every error the API reports to clients derives from AnalyticsError. Each
carries the HTTP status it maps to and, for validation failures, a list of
per-field problems.
"""

from typing import Dict, List, Optional

from fastapi import status


class AnalyticsError(Exception):
    """Base exception for errors surfaced through the response envelope"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        errors: Optional[List[Dict[str, str]]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(AnalyticsError):
    """Malformed or missing query/body fields"""

    def __init__(
        self,
        errors: List[Dict[str, str]],
        message: str = "Validation errors",
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            errors=errors,
        )


class InvalidDateFormat(ValidationError):
    """A date field is not a YYYY-MM-DD calendar date"""


class InvalidDateRange(AnalyticsError):
    """A well-formed date range that cannot be queried"""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST)


class RangeInverted(InvalidDateRange):
    def __init__(self):
        super().__init__("Start date cannot be after end date.")


class FutureEndDate(InvalidDateRange):
    def __init__(self):
        super().__init__("End date cannot be in the future.")


class ReportNotFound(AnalyticsError):
    """No stored report matches the requested identifier"""

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(
            message="Report not found",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class InternalError(AnalyticsError):
    """Storage or query failure; details stay in the server log"""

    def __init__(self):
        super().__init__(message="Internal server error")
