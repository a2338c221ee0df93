"""Database repositories package."""
from database.repositories.analytics import AnalyticsRepository, repository_scope

__all__ = [
    "AnalyticsRepository",
    "repository_scope",
]
