"""
Unit Tests for AI Task Tracking

Tests cover:
- Agent roll-up (status, completed count, last task)
- Overview stats
- Task assignment
- Pause / resume toggling
"""

from datetime import date

import pytest

from factories import ADMIN_ID, make_task
from navcrypto.errors import ValidationFailedError
from navcrypto.models import AgentType
from navcrypto.services import ai_tasks


class TestBuildAgents:

    def test_every_catalog_agent_is_listed(self):
        agents = ai_tasks.build_agents([])

        assert [a["type"] for a in agents] == [t.value for t in AgentType]
        assert all(a["status"] == "idle" and a["last_task"] is None for a in agents)

    def test_rollup(self):
        tasks = [
            make_task("signal_analyst", task_description="Newest", status="in_progress"),
            make_task("signal_analyst", task_description="Older", status="completed"),
            make_task("signal_analyst", status="completed"),
            make_task("support_agent", status="pending"),
        ]

        agents = {a["type"]: a for a in ai_tasks.build_agents(tasks)}

        analyst = agents["signal_analyst"]
        assert analyst["status"] == "active"
        assert analyst["tasks_completed"] == 2
        assert analyst["last_task"] == "Newest"
        assert agents["support_agent"]["status"] == "idle"
        assert agents["support_agent"]["tasks_completed"] == 0


class TestOverview:

    def test_stats(self, fake_db):
        fake_db.seed("ai_tasks", [
            make_task("content_creator", status="in_progress", created_at="2026-05-02T09:00:00+00:00"),
            make_task("course_builder", created_at="2026-05-02T08:00:00+00:00"),
            make_task("course_builder", created_at="2026-05-01T08:00:00+00:00"),
        ])

        overview = ai_tasks.agents_overview(fake_db, today=date(2026, 5, 2))

        assert overview["stats"] == {
            "active_agents": 1,
            "idle_agents": 4,
            "tasks_today": 2,
            "total_tasks": 3,
        }
        assert len(overview["recent_activity"]) == 3
        assert overview["recent_activity"][0]["agent_type"] == "content_creator"

    def test_recent_activity_is_capped(self, fake_db):
        fake_db.seed("ai_tasks", [make_task() for _ in range(8)])

        overview = ai_tasks.agents_overview(fake_db)

        assert len(overview["recent_activity"]) == ai_tasks.RECENT_ACTIVITY_LIMIT
        assert overview["stats"]["total_tasks"] == 8


class TestAssignTask:

    def test_creates_pending_task(self, fake_db):
        task = ai_tasks.assign_task(fake_db, AgentType.SOCIAL_MANAGER, "  Draft a thread  ", ADMIN_ID)

        assert task["status"] == "pending"
        assert task["agent_type"] == "social_manager"
        assert task["task_description"] == "Draft a thread"
        assert task["created_by"] == ADMIN_ID

    def test_blank_description(self, fake_db):
        with pytest.raises(ValidationFailedError):
            ai_tasks.assign_task(fake_db, AgentType.SOCIAL_MANAGER, "   ", ADMIN_ID)

        assert fake_db.rows("ai_tasks") == []


class TestToggleAgent:

    def test_pause_moves_in_progress_back_to_pending(self, fake_db):
        fake_db.seed("ai_tasks", [
            make_task(status="in_progress"),
            make_task(status="in_progress"),
            make_task(status="completed"),
        ])

        result = ai_tasks.toggle_agent(fake_db, AgentType.CONTENT_CREATOR)

        assert result["action"] == "paused"
        assert len(result["task_ids"]) == 2
        assert sorted(t["status"] for t in fake_db.rows("ai_tasks")) == ["completed", "pending", "pending"]

    def test_resume_starts_newest_pending(self, fake_db):
        old, new = fake_db.seed("ai_tasks", [
            make_task(created_at="2026-05-01T00:00:00+00:00"),
            make_task(created_at="2026-05-02T00:00:00+00:00"),
        ])

        result = ai_tasks.toggle_agent(fake_db, AgentType.CONTENT_CREATOR)

        assert result == {"agent_type": "content_creator", "action": "resumed", "task_ids": [new["id"]]}
        statuses = {t["id"]: t["status"] for t in fake_db.rows("ai_tasks")}
        assert statuses == {old["id"]: "pending", new["id"]: "in_progress"}

    def test_idle_without_pending_tasks(self, fake_db):
        fake_db.seed("ai_tasks", [make_task(status="completed")])

        result = ai_tasks.toggle_agent(fake_db, AgentType.CONTENT_CREATOR)

        assert result["action"] == "none"
        assert result["task_ids"] == []
