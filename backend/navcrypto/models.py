"""Domain Enumerations and Constants

Mirrors the enumerated columns of the Supabase schema. Values are the exact
strings stored in the database.
"""

from enum import Enum
from typing import Dict


class Plan(str, Enum):
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class SignalAction(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


class SignalStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class ContentType(str, Enum):
    COURSE = "course"
    VIDEO = "video"
    ARTICLE = "article"
    TUTORIAL = "tutorial"


class ContentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"


class CourseStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class AgentType(str, Enum):
    CONTENT_CREATOR = "content_creator"
    SIGNAL_ANALYST = "signal_analyst"
    SOCIAL_MANAGER = "social_manager"
    COURSE_BUILDER = "course_builder"
    SUPPORT_AGENT = "support_agent"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class AgentStatus(str, Enum):
    """Derived from task rows; nothing is stored."""
    ACTIVE = "active"
    IDLE = "idle"


class SubscriberStatus(str, Enum):
    ACTIVE = "active"
    UNSUBSCRIBED = "unsubscribed"
    BOUNCED = "bounced"


class TicketStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class AnalyticsPeriod(str, Enum):
    DAYS_7 = "7d"
    DAYS_30 = "30d"
    DAYS_90 = "90d"
    YEAR = "1y"


PERIOD_DAYS: Dict[AnalyticsPeriod, int] = {
    AnalyticsPeriod.DAYS_7: 7,
    AnalyticsPeriod.DAYS_30: 30,
    AnalyticsPeriod.DAYS_90: 90,
    AnalyticsPeriod.YEAR: 365,
}

# Monthly price per plan in USD; drives the pricing page and MRR.
PLAN_MONTHLY_PRICE: Dict[Plan, int] = {
    Plan.FREE: 0,
    Plan.PRO: 29,
    Plan.ENTERPRISE: 99,
}

DEFAULT_PREFERENCES: Dict[str, bool] = {
    "email_notifications": True,
    "push_notifications": False,
    "marketing_emails": False,
}
