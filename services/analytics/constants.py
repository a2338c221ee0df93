"""Closed domains and query predicates shared by the reporting queries."""
from database.models import BookingStatus, PaymentStatus, ProfileRole, ServiceCategory

# Fixed category columns for pivots, in display order
CATEGORIES: tuple[ServiceCategory, ...] = (
    ServiceCategory.LASH,
    ServiceCategory.JEWELRY,
    ServiceCategory.CROCHET,
    ServiceCategory.CONSULTING,
)

CATEGORY_LABELS: dict[str, str] = {
    ServiceCategory.LASH.value: "Lash Services",
    ServiceCategory.JEWELRY.value: "Jewelry",
    ServiceCategory.CROCHET.value: "Crochet",
    ServiceCategory.CONSULTING.value: "Consulting",
}

# Statuses that count toward rate denominators
FINALIZED_STATUSES: frozenset[str] = frozenset({
    BookingStatus.COMPLETED.value,
    BookingStatus.NO_SHOW.value,
    BookingStatus.CANCELLED.value,
})
COMPLETED_STATUS = BookingStatus.COMPLETED.value
NO_SHOW_STATUS = BookingStatus.NO_SHOW.value
CANCELLED_STATUS = BookingStatus.CANCELLED.value

PAID_PAYMENT_STATUS = PaymentStatus.PAID.value
CLIENT_ROLE = ProfileRole.CLIENT.value
OWNER_ROLE = ProfileRole.ADMIN.value

# Trailing window sizes
RECENT_DAYS = 30
TREND_WEEKS = 8
GAP_MONTHS = 12

# Ranking limits
TOP_SERVICES_LIMIT = 6
REBOOK_LIMIT = 6
CLIENT_LTV_LIMIT = 10
AT_RISK_LIMIT = 10

# At-risk thresholds, in days since last completed visit
AT_RISK_MIN_DAYS = 30
URGENCY_HIGH_DAYS = 50
URGENCY_MEDIUM_DAYS = 40

# Peak-time histograms
PEAK_HOURS: tuple[tuple[int, str], ...] = (
    (9, "9am"), (10, "10am"), (11, "11am"), (12, "12pm"), (13, "1pm"),
    (14, "2pm"), (15, "3pm"), (16, "4pm"), (17, "5pm"), (18, "6pm"),
)
# Sunday first
WEEKDAY_LABELS: tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

NO_REASON_LABEL = "No reason given"
UNKNOWN_LABEL = "Unknown"

FINANCIAL_CONFIG_KEY = "financial_config"
REVENUE_GOAL_FIELD = "revenueGoalMonthly"
DEFAULT_REVENUE_GOAL = 12000
