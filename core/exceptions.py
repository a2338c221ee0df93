"""
Custom application exceptions.

These exceptions represent failures the dashboard should surface to the
caller as a load error instead of silently showing wrong numbers.
"""
from typing import Optional


class StudioAnalyticsError(Exception):
    """Base exception for all application errors."""

    message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, **kwargs):
        self.message = message or self.message
        self.details = kwargs
        super().__init__(self.message)


# ============== Authentication ==============

class NotAuthenticatedError(StudioAnalyticsError):
    """No current user could be resolved for the call."""
    message = "Not authenticated"


# ============== Reports ==============

class ReportError(StudioAnalyticsError):
    """Base reporting error."""
    message = "Report could not be built"


class UnknownSectionError(ReportError):
    """Requested dashboard section does not exist."""
    message = "Unknown dashboard section"

    def __init__(self, section: str):
        self.section = section
        super().__init__(f"Unknown dashboard section: {section}", section=section)
