"""AI Task Tracking

`ai_tasks` rows are created by admins and labelled with an agent type.
Nothing here executes a task: an agent's status is read off its task rows
(active while any task is in_progress, idle otherwise) and pause/resume
only moves task statuses.
"""

from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from supabase import Client

from ..db.supabase_client import AI_TASKS, first_row
from ..errors import NotFoundError, ValidationFailedError
from ..models import AgentStatus, AgentType, TaskStatus

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5

AGENT_CATALOG: List[Dict[str, Any]] = [
    {
        "type": AgentType.CONTENT_CREATOR.value,
        "name": "Content Creator",
        "description": "Writes blog posts, articles, and educational content about crypto trading.",
        "capabilities": ["Blog posts", "Articles", "Newsletters", "Market summaries"],
    },
    {
        "type": AgentType.SIGNAL_ANALYST.value,
        "name": "Signal Analyst",
        "description": "Analyzes market data and suggests potential trading signals.",
        "capabilities": ["Technical analysis", "Pattern recognition", "Risk assessment", "Entry/exit points"],
    },
    {
        "type": AgentType.SOCIAL_MANAGER.value,
        "name": "Social Media Manager",
        "description": "Creates and schedules social media content across platforms.",
        "capabilities": ["Twitter/X posts", "Instagram content", "Community engagement", "Trend monitoring"],
    },
    {
        "type": AgentType.COURSE_BUILDER.value,
        "name": "Course Builder",
        "description": "Creates educational course content and learning materials.",
        "capabilities": ["Course outlines", "Lesson scripts", "Quiz questions", "Video scripts"],
    },
    {
        "type": AgentType.SUPPORT_AGENT.value,
        "name": "Support Agent",
        "description": "Handles user inquiries and provides automated support responses.",
        "capabilities": ["FAQ responses", "Ticket triage", "User onboarding", "Issue escalation"],
    },
]


def agent_config(agent_type: str) -> Optional[Dict[str, Any]]:
    for config in AGENT_CATALOG:
        if config["type"] == agent_type:
            return config
    return None


def list_tasks(client: Client, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Tasks newest first."""
    query = client.table(AI_TASKS).select("*").order("created_at", desc=True)
    if limit:
        query = query.limit(limit)
    return query.execute().data or []


def _created_on(task: Dict[str, Any], day: date) -> bool:
    created_at = task.get("created_at")
    if not created_at:
        return False
    try:
        created = datetime.fromisoformat(str(created_at).replace("Z", "+00:00"))
    except ValueError:
        return False
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc)
    return created.date() == day


def build_agents(tasks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Roll newest-first tasks up per catalog agent."""
    by_type = defaultdict(list)
    for task in tasks:
        by_type[task.get("agent_type")].append(task)

    agents = []
    for config in AGENT_CATALOG:
        agent_tasks = by_type.get(config["type"], [])
        in_progress = any(t.get("status") == TaskStatus.IN_PROGRESS.value for t in agent_tasks)
        agents.append({
            **config,
            "tasks": agent_tasks,
            "tasks_completed": sum(1 for t in agent_tasks if t.get("status") == TaskStatus.COMPLETED.value),
            "last_task": agent_tasks[0].get("task_description") if agent_tasks else None,
            "status": (AgentStatus.ACTIVE if in_progress else AgentStatus.IDLE).value,
        })
    return agents


def agents_overview(client: Client, today: Optional[date] = None) -> Dict[str, Any]:
    tasks = list_tasks(client)
    agents = build_agents(tasks)
    recent = tasks[:RECENT_ACTIVITY_LIMIT]
    today = today or datetime.now(timezone.utc).date()

    return {
        "agents": agents,
        "recent_activity": recent,
        "stats": {
            "active_agents": sum(1 for a in agents if a["status"] == AgentStatus.ACTIVE.value),
            "idle_agents": sum(1 for a in agents if a["status"] == AgentStatus.IDLE.value),
            # Counted over recent activity only, as displayed next to it
            "tasks_today": sum(1 for t in recent if _created_on(t, today)),
            "total_tasks": sum(len(a["tasks"]) for a in agents),
        },
    }


def assign_task(client: Client, agent_type: AgentType, description: str, created_by: str) -> Dict[str, Any]:
    description = (description or "").strip()
    if not description:
        raise ValidationFailedError("Please select an agent and enter a task description")

    task = first_row(client.table(AI_TASKS).insert({
        "agent_type": agent_type.value,
        "task_description": description,
        "status": TaskStatus.PENDING.value,
        "created_by": created_by,
    }).execute())
    logger.info(f"Task assigned to {agent_type.value} by {created_by}")
    return task


def toggle_agent(client: Client, agent_type: AgentType) -> Dict[str, Any]:
    """Pause an active agent or resume an idle one.

    Pausing puts every in_progress task back to pending. Resuming starts the
    newest pending task; an idle agent without pending tasks stays idle.

    Returns:
        {"agent_type", "action", "task_ids"} describing what changed
    """
    if agent_config(agent_type.value) is None:
        raise NotFoundError(f"Unknown agent {agent_type.value}")

    tasks = client.table(AI_TASKS) \
        .select("id, status") \
        .eq("agent_type", agent_type.value) \
        .order("created_at", desc=True) \
        .execute().data or []

    in_progress = [t["id"] for t in tasks if t.get("status") == TaskStatus.IN_PROGRESS.value]
    if in_progress:
        for task_id in in_progress:
            client.table(AI_TASKS).update({"status": TaskStatus.PENDING.value}).eq("id", task_id).execute()
        logger.info(f"Paused {agent_type.value}: {len(in_progress)} task(s) back to pending")
        return {"agent_type": agent_type.value, "action": "paused", "task_ids": in_progress}

    pending = next((t["id"] for t in tasks if t.get("status") == TaskStatus.PENDING.value), None)
    if pending is None:
        return {"agent_type": agent_type.value, "action": "none", "task_ids": []}

    client.table(AI_TASKS).update({"status": TaskStatus.IN_PROGRESS.value}).eq("id", pending).execute()
    logger.info(f"Resumed {agent_type.value}: task {pending} in progress")
    return {"agent_type": agent_type.value, "action": "resumed", "task_ids": [pending]}
