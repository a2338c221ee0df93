"""Dashboard analytics: pure aggregators plus the service that feeds them."""
from services.analytics.service import SECTIONS, AnalyticsService, CurrentUser, UserResolver
from services.analytics.store import AnalyticsStore, StoreFactory
from services.analytics.windows import TimeWindow

__all__ = [
    "SECTIONS",
    "AnalyticsService",
    "AnalyticsStore",
    "CurrentUser",
    "StoreFactory",
    "TimeWindow",
    "UserResolver",
]
