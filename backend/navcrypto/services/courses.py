"""Course Service

Course catalog, enrollment and per-user lesson progress.

Enrollment is represented only by user_progress rows: enrolling in a course
creates one (incomplete) row per lesson, so "enrolled course ids" are simply
the distinct course_id values of a user's progress rows.
"""

from typing import Any, Dict, List, Optional
import asyncio
import logging

from supabase import Client

from ..db.supabase_client import COURSE_LESSONS, COURSES, SIGNALS, USER_PROGRESS, first_row, utc_now
from ..errors import ConflictError, NotFoundError, ValidationFailedError
from ..models import CourseStatus, SignalStatus
from .metrics import percentage

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Trader"
OVERVIEW_SIGNAL_LIMIT = 3
OVERVIEW_COURSE_LIMIT = 3


def distinct_course_ids(progress_rows: List[Dict[str, Any]]) -> List[str]:
    """Distinct course ids in first-seen order."""
    seen: List[str] = []
    for row in progress_rows:
        course_id = row.get("course_id")
        if course_id and course_id not in seen:
            seen.append(course_id)
    return seen


def _user_progress(client: Client, user_id: str, columns: str = "*") -> List[Dict[str, Any]]:
    return client.table(USER_PROGRESS).select(columns).eq("user_id", user_id).execute().data or []


# ============================================================================
# Catalog & Enrollment
# ============================================================================

def list_catalog(client: Client, user_id: str, difficulty: Optional[str] = None) -> List[Dict[str, Any]]:
    """Published courses newest first, each flagged with `enrolled`."""
    courses = client.table(COURSES) \
        .select("*") \
        .eq("status", CourseStatus.PUBLISHED.value) \
        .order("created_at", desc=True) \
        .execute().data or []

    if difficulty and difficulty != "all":
        courses = [c for c in courses if c.get("difficulty") == difficulty]

    enrolled = set(distinct_course_ids(_user_progress(client, user_id, "course_id")))
    return [{**course, "enrolled": course["id"] in enrolled} for course in courses]


def enroll(client: Client, user_id: str, course_id: str) -> int:
    """Create one incomplete progress row per lesson of the course.

    Returns:
        Number of lessons enrolled in

    Raises:
        ConflictError: User already has progress rows for the course
        ValidationFailedError: Course has no lessons
    """
    existing = client.table(USER_PROGRESS) \
        .select("id") \
        .eq("user_id", user_id) \
        .eq("course_id", course_id) \
        .limit(1) \
        .execute()
    if existing.data:
        raise ConflictError("You are already enrolled in this course")

    lessons = client.table(COURSE_LESSONS) \
        .select("id") \
        .eq("course_id", course_id) \
        .order("order_index") \
        .execute().data or []
    if not lessons:
        raise ValidationFailedError("This course has no lessons yet")

    rows = [
        {"user_id": user_id, "course_id": course_id, "lesson_id": lesson["id"], "completed": False}
        for lesson in lessons
    ]
    client.table(USER_PROGRESS).insert(rows).execute()
    logger.info(f"User {user_id} enrolled in course {course_id} ({len(rows)} lessons)")
    return len(rows)


# ============================================================================
# Progress
# ============================================================================

def _sort_key(entry: Dict[str, Any]):
    # Finished courses sink to the bottom; the rest by percentage, highest first
    return (entry["percentage"] == 100, -entry["percentage"])


def build_course_progress(
    courses: List[Dict[str, Any]],
    lessons: List[Dict[str, Any]],
    progress_rows: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """Join lessons with the user's progress rows and rank the courses.

    `lessons` must already be ordered by order_index.
    """
    by_lesson = {(p.get("course_id"), p.get("lesson_id")): p for p in progress_rows}

    entries = []
    for course in courses:
        course_lessons = [
            {**lesson, "progress": by_lesson.get((course["id"], lesson["id"]))}
            for lesson in lessons
            if lesson.get("course_id") == course["id"]
        ]
        completed_count = sum(
            1 for lesson in course_lessons if lesson["progress"] and lesson["progress"].get("completed")
        )
        total = len(course_lessons)
        entries.append({
            "course": course,
            "lessons": course_lessons,
            "completed_count": completed_count,
            "total_lessons": total,
            "percentage": percentage(completed_count, total),
        })

    entries.sort(key=_sort_key)
    return entries


def overall_progress(progress_rows: List[Dict[str, Any]]) -> Dict[str, int]:
    completed = sum(1 for p in progress_rows if p.get("completed"))
    total = len(progress_rows)
    return {
        "total_courses": len(distinct_course_ids(progress_rows)),
        "completed_lessons": completed,
        "total_lessons": total,
        "overall_percentage": percentage(completed, total),
    }


def get_progress(client: Client, user_id: str) -> Dict[str, Any]:
    """Per-course progress plus overall stats for one user."""
    progress_rows = _user_progress(client, user_id)
    course_ids = distinct_course_ids(progress_rows)
    if not course_ids:
        return {"courses": [], "stats": overall_progress([])}

    courses = client.table(COURSES).select("*").in_("id", course_ids).execute().data or []
    lessons = client.table(COURSE_LESSONS) \
        .select("*") \
        .in_("course_id", course_ids) \
        .order("order_index") \
        .execute().data or []

    return {
        "courses": build_course_progress(courses, lessons, progress_rows),
        "stats": overall_progress(progress_rows),
    }


def toggle_lesson(client: Client, user_id: str, course_id: str, lesson_id: str) -> Dict[str, Any]:
    """Flip a lesson's completion; completed_at follows the flag."""
    current = first_row(
        client.table(USER_PROGRESS)
        .select("id, completed")
        .eq("user_id", user_id)
        .eq("course_id", course_id)
        .eq("lesson_id", lesson_id)
        .limit(1)
        .execute()
    )
    if current is None:
        raise NotFoundError("Lesson progress not found. Enroll in the course first.")

    completed = not current.get("completed")
    result = client.table(USER_PROGRESS) \
        .update({"completed": completed, "completed_at": utc_now() if completed else None}) \
        .eq("user_id", user_id) \
        .eq("course_id", course_id) \
        .eq("lesson_id", lesson_id) \
        .execute()
    return first_row(result) or {**current, "completed": completed}


# ============================================================================
# Dashboard Overview
# ============================================================================

async def dashboard_overview(client: Client, user_id: str, full_name: Optional[str]) -> Dict[str, Any]:
    """Latest signals, enrolled courses and lesson progress for the home page.

    The three independent reads run concurrently; the enrolled-course lookup
    depends on the progress rows and runs after them.
    """

    def latest_signals():
        return client.table(SIGNALS) \
            .select("*") \
            .eq("status", SignalStatus.ACTIVE.value) \
            .order("created_at", desc=True) \
            .limit(OVERVIEW_SIGNAL_LIMIT) \
            .execute()

    def enrolled_rows():
        return client.table(USER_PROGRESS).select("course_id").eq("user_id", user_id).execute()

    def completed_rows():
        return client.table(USER_PROGRESS) \
            .select("id") \
            .eq("user_id", user_id) \
            .eq("completed", True) \
            .execute()

    signals_result, progress_result, completed_result = await asyncio.gather(
        asyncio.to_thread(latest_signals),
        asyncio.to_thread(enrolled_rows),
        asyncio.to_thread(completed_rows),
    )

    signals = signals_result.data or []
    progress_rows = progress_result.data or []
    course_ids = distinct_course_ids(progress_rows)

    courses: List[Dict[str, Any]] = []
    if course_ids:
        courses = client.table(COURSES) \
            .select("*") \
            .in_("id", course_ids) \
            .eq("status", CourseStatus.PUBLISHED.value) \
            .limit(OVERVIEW_COURSE_LIMIT) \
            .execute().data or []

    completed = len(completed_result.data or [])
    return {
        "full_name": full_name or DEFAULT_DISPLAY_NAME,
        "signals": signals,
        "courses": courses,
        "stats": {
            "active_signals": len(signals),
            "courses_enrolled": len(course_ids),
            "progress": percentage(completed, len(progress_rows)),
        },
    }
