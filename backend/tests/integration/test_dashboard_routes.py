"""
Integration Tests for the Member Dashboard Routes

Tests cover:
- Authentication requirement
- Overview, signals (pair filter + targets), course catalog
- Enrollment, progress and lesson toggling
- Settings, preferences and account deletion
"""

import pytest

from factories import MEMBER_ID, make_course, make_lesson, make_signal

pytestmark = pytest.mark.integration


@pytest.fixture
def course(fake_db):
    [row] = fake_db.seed("courses", [make_course()])
    fake_db.seed("course_lessons", [make_lesson(row["id"], 1), make_lesson(row["id"], 2)])
    return row


@pytest.mark.parametrize("method,path", [
    ("get", "/api/dashboard/overview"),
    ("get", "/api/dashboard/signals"),
    ("get", "/api/dashboard/courses"),
    ("get", "/api/dashboard/progress"),
    ("get", "/api/dashboard/settings"),
    ("delete", "/api/dashboard/settings/account"),
])
def test_requires_session(client, method, path):
    response = getattr(client, method)(path)

    assert response.status_code == 401
    assert response.json()["status"] == "error"


class TestSignals:

    def test_overview(self, member_client, fake_db):
        fake_db.seed("signals", [make_signal(), make_signal(status="draft")])

        response = member_client.get("/api/dashboard/overview")

        assert response.status_code == 200
        body = response.json()
        assert body["full_name"] == "Sam Trader"
        assert body["stats"] == {"active_signals": 1, "courses_enrolled": 0, "progress": 0}

    def test_pair_filter_and_targets(self, member_client, fake_db):
        fake_db.seed("signals", [
            make_signal(pair="ETH/USDT", created_at="2026-01-02T00:00:00+00:00"),
            make_signal(pair="BTC/USDT", created_at="2026-01-01T00:00:00+00:00"),
        ])

        response = member_client.get("/api/dashboard/signals", params={"pair": "BTC/USDT"})

        body = response.json()
        assert body["pairs"] == ["all", "ETH/USDT", "BTC/USDT"]
        assert body["total"] == 1
        assert body["signals"][0]["take_profit_pct"] == "10.00"
        assert body["signals"][0]["stop_loss_pct"] == "-5.00"


class TestCourses:

    def test_catalog_and_enroll(self, member_client, fake_db, course):
        assert member_client.get("/api/dashboard/courses").json()["courses"][0]["enrolled"] is False

        response = member_client.post(f"/api/dashboard/courses/{course['id']}/enroll")

        assert response.status_code == 201
        assert response.json()["lessons"] == 2
        assert member_client.get("/api/dashboard/courses").json()["courses"][0]["enrolled"] is True

    def test_enroll_twice(self, member_client, course):
        member_client.post(f"/api/dashboard/courses/{course['id']}/enroll")

        response = member_client.post(f"/api/dashboard/courses/{course['id']}/enroll")

        assert response.status_code == 409

    def test_difficulty_must_be_known(self, member_client):
        response = member_client.get("/api/dashboard/courses", params={"difficulty": "expert"})

        assert response.status_code == 422

    def test_progress_and_toggle(self, member_client, fake_db, course):
        member_client.post(f"/api/dashboard/courses/{course['id']}/enroll")
        lesson_id = fake_db.rows("user_progress")[0]["lesson_id"]

        toggled = member_client.post("/api/dashboard/progress/toggle", json={
            "course_id": course["id"], "lesson_id": lesson_id,
        })
        progress = member_client.get("/api/dashboard/progress").json()

        assert toggled.status_code == 200
        assert toggled.json()["progress"]["completed"] is True
        assert progress["courses"][0]["percentage"] == 50
        assert progress["stats"] == {
            "total_courses": 1, "completed_lessons": 1, "total_lessons": 2, "overall_percentage": 50,
        }

    def test_toggle_without_enrollment(self, member_client, course):
        response = member_client.post("/api/dashboard/progress/toggle", json={
            "course_id": course["id"], "lesson_id": "nope",
        })

        assert response.status_code == 404


class TestSettings:

    def test_read_settings(self, member_client):
        body = member_client.get("/api/dashboard/settings").json()

        assert body["profile"]["email"] == "trader@example.com"
        assert body["preferences"] == {
            "email_notifications": True, "push_notifications": False, "marketing_emails": False,
        }
        assert body["plan_features"][0] == "Full community access & chat"

    def test_update_name(self, member_client):
        response = member_client.patch("/api/dashboard/settings", json={"full_name": "Samantha"})

        assert response.status_code == 200
        assert response.json()["full_name"] == "Samantha"

    def test_empty_update_rejected(self, member_client):
        response = member_client.patch("/api/dashboard/settings", json={})

        assert response.status_code == 400

    def test_save_preferences(self, member_client):
        response = member_client.put("/api/dashboard/settings/preferences", json={
            "email_notifications": False, "push_notifications": True, "marketing_emails": True,
        })

        assert response.json()["preferences"]["push_notifications"] is True

    def test_delete_account(self, member_client, fake_db):
        fake_db.seed("user_progress", [{"user_id": MEMBER_ID, "course_id": "c", "lesson_id": "l"}])

        response = member_client.delete("/api/dashboard/settings/account")

        assert response.status_code == 200
        assert fake_db.rows("user_progress") == []
        assert all(p["id"] != MEMBER_ID for p in fake_db.rows("profiles"))
        fake_db.auth.admin.sign_out.assert_called_once_with("member-token")

    def test_delete_account_failure(self, member_client, fake_db):
        fake_db.fail("profiles", "delete")

        response = member_client.delete("/api/dashboard/settings/account")

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to delete account. Please contact support."
