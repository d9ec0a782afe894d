"""
Shared Pydantic Models (Request/Response Schemas) for API Routes

This module contains all Pydantic models used across the API endpoints,
organized by domain. Row models mirror the Supabase tables; every column
that may be absent from a partial select is optional.
"""

from pydantic import AliasChoices, BaseModel, Field
from typing import Dict, Any, Optional, List, Literal

from ...models import (
    AgentType,
    AnalyticsPeriod,
    ContentType,
    Plan,
    Role,
    SignalAction,
    SignalStatus,
    SubscriberStatus,
    TicketStatus,
)


# ============================================================================
# Common/Shared Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Response schema for error cases."""
    status: str = "error"
    error: str
    details: Optional[str] = None


class MessageResponse(BaseModel):
    """Generic success acknowledgement."""
    status: str = "success"
    message: str
    redirect: Optional[str] = None


class DeleteResponse(BaseModel):
    status: str = "deleted"
    id: str
    message: str


# ============================================================================
# Auth Schemas
# ============================================================================

class SignupRequest(BaseModel):
    """
    Request schema for pre-verified account creation.

    Fields are optional here so that a missing value produces the
    "Email, password, and full name are required" message instead of a
    validation error list.
    """
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = Field(None, validation_alias=AliasChoices("full_name", "fullName"))


class SignupUser(BaseModel):
    id: str
    email: Optional[str] = None


class SignupResponse(BaseModel):
    success: bool = True
    message: str = "Account created successfully"
    user: SignupUser


class RegisterRequest(BaseModel):
    """Signup form: account creation followed by sign in."""
    full_name: Optional[str] = Field(None, validation_alias=AliasChoices("full_name", "fullName"))
    email: Optional[str] = None
    password: str = ""
    confirm_password: str = ""


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., description="Email to send the reset link to")


class ResetPasswordRequest(BaseModel):
    """
    Request schema for setting a new password.

    Attributes:
        access_token: Recovery token from the reset link. May instead be sent
            as a Bearer header or session cookie.
        password: New password (at least 8 characters)
        confirm_password: Must equal password
    """
    access_token: Optional[str] = None
    password: str = ""
    confirm_password: str = ""


class SessionUser(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str


class AuthResponse(BaseModel):
    """Response schema for sign in / register."""
    status: str = "success"
    user: SessionUser
    redirect: str


class RouteAccessResponse(BaseModel):
    path: str
    allowed: bool
    redirect: Optional[str] = None


# ============================================================================
# Row Schemas
# ============================================================================

class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    plan: Optional[str] = None
    role: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SignalResponse(BaseModel):
    """Response schema for a single signal."""
    id: str
    pair: str
    action: str
    entry_price: float
    take_profit: float
    stop_loss: float
    status: str
    profit_loss: Optional[float] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    ai_generated: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    closed_at: Optional[str] = None


class UserSignalResponse(SignalResponse):
    """Active signal with target distances relative to entry."""
    take_profit_pct: str
    stop_loss_pct: str


class ContentResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    type: str
    status: str
    content_body: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None
    views: int = 0
    author_id: Optional[str] = None
    author: Optional[Dict[str, Any]] = None
    ai_generated: bool = False
    published_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CourseResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    price: Optional[float] = None
    status: Optional[str] = None
    lessons_count: Optional[int] = None
    duration_minutes: Optional[int] = None
    difficulty: Optional[str] = None
    author_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CatalogCourseResponse(CourseResponse):
    enrolled: bool = False


class ProgressRowResponse(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    course_id: Optional[str] = None
    lesson_id: Optional[str] = None
    completed: bool = False
    completed_at: Optional[str] = None
    created_at: Optional[str] = None


class LessonProgressResponse(BaseModel):
    id: str
    course_id: str
    title: str
    description: Optional[str] = None
    video_url: Optional[str] = None
    content_body: Optional[str] = None
    order_index: int = 0
    duration_minutes: Optional[int] = None
    progress: Optional[ProgressRowResponse] = None


class AITaskResponse(BaseModel):
    id: str
    agent_type: str
    task_description: str
    status: str
    result: Optional[Any] = None
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None


class SubscriberResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    status: str
    source: Optional[str] = None
    subscribed_at: Optional[str] = None
    unsubscribed_at: Optional[str] = None
    created_at: Optional[str] = None


class TicketResponse(BaseModel):
    id: str
    name: str
    email: str
    subject: str
    message: str
    user_id: Optional[str] = None
    status: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ============================================================================
# Public Schemas
# ============================================================================

class PricingPlan(BaseModel):
    plan: str
    name: str
    price: int
    period: str
    description: str
    features: List[str]
    cta: str
    href: str
    highlighted: bool = False
    badge: Optional[str] = None


class PricingResponse(BaseModel):
    status: str = "success"
    plans: List[PricingPlan]


class FAQEntry(BaseModel):
    category: str
    question: str
    answer: str


class FAQResponse(BaseModel):
    status: str = "success"
    categories: List[str]
    faqs: List[FAQEntry]


class NewsletterSubscribeRequest(BaseModel):
    email: str = Field(..., description="Subscriber email")
    name: Optional[str] = Field(None, description="Optional display name")
    source: Optional[str] = Field(None, description="Where the signup came from (defaults to website)")


class SupportTicketRequest(BaseModel):
    name: str = ""
    email: str = ""
    subject: str = ""
    message: str = ""


class SupportTicketCreateResponse(BaseModel):
    status: str = "created"
    ticket_id: Optional[str] = None
    message: str = "We'll get back to you within 24 hours."


# ============================================================================
# Dashboard Schemas
# ============================================================================

class OverviewStats(BaseModel):
    active_signals: int
    courses_enrolled: int
    progress: int


class OverviewResponse(BaseModel):
    status: str = "success"
    full_name: str
    signals: List[SignalResponse]
    courses: List[CourseResponse]
    stats: OverviewStats


class UserSignalListResponse(BaseModel):
    status: str = "success"
    pairs: List[str]
    signals: List[UserSignalResponse]
    total: int


class CatalogResponse(BaseModel):
    status: str = "success"
    courses: List[CatalogCourseResponse]
    total: int


class EnrollResponse(BaseModel):
    status: str = "enrolled"
    course_id: str
    lessons: int
    message: str = "Successfully enrolled! Check your Progress page to start learning."


class CourseProgressEntry(BaseModel):
    course: CourseResponse
    lessons: List[LessonProgressResponse]
    completed_count: int
    total_lessons: int
    percentage: int


class OverallProgress(BaseModel):
    total_courses: int
    completed_lessons: int
    total_lessons: int
    overall_percentage: int


class ProgressResponse(BaseModel):
    status: str = "success"
    courses: List[CourseProgressEntry]
    stats: OverallProgress


class ToggleLessonRequest(BaseModel):
    course_id: str = Field(..., min_length=1)
    lesson_id: str = Field(..., min_length=1)


class ToggleLessonResponse(BaseModel):
    status: str = "success"
    progress: ProgressRowResponse


class NotificationPreferences(BaseModel):
    email_notifications: bool = True
    push_notifications: bool = False
    marketing_emails: bool = False


class SettingsResponse(BaseModel):
    status: str = "success"
    profile: ProfileResponse
    full_name: str
    preferences: NotificationPreferences
    plan_features: List[str]


class UpdateSettingsRequest(BaseModel):
    """All fields optional - only provided fields are saved."""
    full_name: Optional[str] = Field(None, max_length=255)
    preferences: Optional[NotificationPreferences] = None


class PreferencesResponse(BaseModel):
    status: str = "success"
    preferences: NotificationPreferences


# ============================================================================
# Admin Schemas
# ============================================================================

class SignalStats(BaseModel):
    total: int
    active: int
    draft: int
    closed: int
    win_rate: str
    avg_profit: str


class SignalListResponse(BaseModel):
    status: str = "success"
    signals: List[SignalResponse]
    total: int
    stats: SignalStats


class CreateSignalRequest(BaseModel):
    """
    Request schema for creating a signal.

    Attributes:
        status: "draft" to save for later, "active" to publish immediately
    """
    pair: str = Field(..., min_length=1, max_length=32, description="Trading pair, e.g. BTC/USDT")
    action: SignalAction
    entry_price: float = Field(..., gt=0)
    take_profit: float = Field(..., gt=0)
    stop_loss: float = Field(..., gt=0)
    notes: Optional[str] = None
    status: Literal["draft", "active"] = "draft"


class UpdateSignalRequest(BaseModel):
    """All fields optional - only provided fields will be updated."""
    pair: Optional[str] = Field(None, min_length=1, max_length=32)
    action: Optional[SignalAction] = None
    entry_price: Optional[float] = Field(None, gt=0)
    take_profit: Optional[float] = Field(None, gt=0)
    stop_loss: Optional[float] = Field(None, gt=0)
    notes: Optional[str] = None
    profit_loss: Optional[float] = None
    status: Optional[SignalStatus] = None


class SignalStatusRequest(BaseModel):
    status: Literal["active", "closed"]
    profit_loss: Optional[float] = Field(None, description="Realised P/L in percent when closing")


class SignalDetailResponse(BaseModel):
    status: str = "success"
    signal: SignalResponse


class ContentStats(BaseModel):
    total: int
    published: int
    total_views: int
    ai_generated: int


class ContentListResponse(BaseModel):
    status: str = "success"
    content: List[ContentResponse]
    total: int
    stats: ContentStats


class CreateContentRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    type: ContentType = ContentType.ARTICLE
    content_body: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None


class UpdateContentRequest(BaseModel):
    """All fields optional - only provided fields will be updated."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[ContentType] = None
    content_body: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None


class ContentDetailResponse(BaseModel):
    status: str = "success"
    content: ContentResponse


class AdminUserResponse(ProfileResponse):
    courses_completed: int = 0


class UserStats(BaseModel):
    total: int
    pro: int
    enterprise: int
    mrr: int


class UserListResponse(BaseModel):
    status: str = "success"
    users: List[AdminUserResponse]
    page: int
    per_page: int
    total: int
    total_pages: int
    stats: UserStats


class UpdateUserRequest(BaseModel):
    plan: Optional[Plan] = None
    role: Optional[Role] = None


class UserDetailResponse(BaseModel):
    status: str = "success"
    user: ProfileResponse


class AgentResponse(BaseModel):
    type: str
    name: str
    description: str
    capabilities: List[str]
    tasks: List[AITaskResponse]
    tasks_completed: int
    last_task: Optional[str] = None
    status: str


class AgentStats(BaseModel):
    active_agents: int
    idle_agents: int
    tasks_today: int
    total_tasks: int


class AgentsOverviewResponse(BaseModel):
    status: str = "success"
    agents: List[AgentResponse]
    recent_activity: List[AITaskResponse]
    stats: AgentStats


class AssignTaskRequest(BaseModel):
    agent_type: AgentType
    task_description: str = Field(..., description="What the agent should do")


class TaskDetailResponse(BaseModel):
    status: str = "created"
    task: AITaskResponse


class AgentToggleResponse(BaseModel):
    status: str = "success"
    agent_type: str
    action: str
    task_ids: List[str]


class SubscriberStats(BaseModel):
    total: int
    active: int
    unsubscribed: int
    bounced: int


class SubscriberListResponse(BaseModel):
    status: str = "success"
    subscribers: List[SubscriberResponse]
    page: int
    per_page: int
    total: int
    total_pages: int
    stats: SubscriberStats


class SubscriberStatusRequest(BaseModel):
    status: SubscriberStatus


class SubscriberDetailResponse(BaseModel):
    status: str = "success"
    subscriber: SubscriberResponse


class TicketStats(BaseModel):
    total: int
    open: int
    in_progress: int
    resolved: int
    closed: int


class TicketListResponse(BaseModel):
    status: str = "success"
    tickets: List[TicketResponse]
    total: int
    stats: TicketStats


class TicketStatusRequest(BaseModel):
    status: TicketStatus


class TicketDetailResponse(BaseModel):
    status: str = "success"
    ticket: TicketResponse


class TopSignal(BaseModel):
    pair: Optional[str] = None
    profit: float


class AnalyticsResponse(BaseModel):
    """Response schema for period analytics. Growth figures are percentages."""
    status: str = "success"
    period: AnalyticsPeriod
    total_users: int
    new_users: int
    user_growth: float
    total_signals: int
    active_signals: int
    signal_growth: float
    win_rate: float
    win_rate_change: float
    course_completions: int
    completion_growth: float
    top_signals: List[TopSignal]


# ============================================================================
# Health Schemas
# ============================================================================

class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded"]
    components: Dict[str, str]
    timestamp: str
