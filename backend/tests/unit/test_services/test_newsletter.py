"""
Unit Tests for the Newsletter Service

Tests cover:
- Subscribe (normalisation, duplicates, insert failures)
- Admin list: status filter, search, pagination, stats
- Status changes with unsubscribed_at
- CSV export quoting
"""

import pytest
from postgrest.exceptions import APIError

from factories import make_subscriber
from navcrypto.errors import ConflictError, NavCryptoError, NotFoundError, ValidationFailedError
from navcrypto.models import SubscriberStatus
from navcrypto.services import newsletter


# ============================================================================
# TEST: Subscribe
# ============================================================================

class TestSubscribe:

    def test_subscribe_normalises_email(self, fake_db):
        subscriber = newsletter.subscribe(fake_db, "  Reader@Example.COM ", name="  ", source="")

        assert subscriber["email"] == "reader@example.com"
        assert subscriber["name"] is None
        assert subscriber["source"] == "website"
        assert subscriber["status"] == "active"

    def test_duplicate_email(self, fake_db):
        newsletter.subscribe(fake_db, "reader@example.com")

        with pytest.raises(ConflictError, match="already subscribed"):
            newsletter.subscribe(fake_db, "READER@example.com")

        assert len(fake_db.rows("newsletter_subscribers")) == 1

    def test_other_database_error(self, fake_db):
        fake_db.fail("newsletter_subscribers", "insert", APIError({
            "code": "42501", "message": "permission denied", "details": None, "hint": None,
        }))

        with pytest.raises(NavCryptoError) as exc_info:
            newsletter.subscribe(fake_db, "reader@example.com")

        assert not isinstance(exc_info.value, ConflictError)
        assert exc_info.value.message == newsletter.SUBSCRIBE_FAILED

    def test_email_required(self, fake_db):
        with pytest.raises(ValidationFailedError):
            newsletter.subscribe(fake_db, "   ")


# ============================================================================
# TEST: Admin list
# ============================================================================

class TestListSubscribers:

    @pytest.fixture
    def subscribers(self, fake_db):
        return fake_db.seed("newsletter_subscribers", [
            make_subscriber("alice@example.com", name="Alice", created_at="2026-01-01T00:00:00+00:00"),
            make_subscriber("bob@example.com", status="unsubscribed", created_at="2026-01-02T00:00:00+00:00"),
            make_subscriber("carol@example.com", status="bounced", created_at="2026-01-03T00:00:00+00:00"),
        ])

    def test_all_newest_first_with_stats(self, fake_db, subscribers):
        result = newsletter.list_subscribers(fake_db)

        assert [s["email"] for s in result["subscribers"]] == [
            "carol@example.com", "bob@example.com", "alice@example.com",
        ]
        assert result["stats"] == {"total": 3, "active": 1, "unsubscribed": 1, "bounced": 1}

    def test_status_filter_and_search(self, fake_db, subscribers):
        assert [s["email"] for s in newsletter.list_subscribers(fake_db, status="bounced")["subscribers"]] == [
            "carol@example.com",
        ]
        assert [s["email"] for s in newsletter.list_subscribers(fake_db, search="ALICE")["subscribers"]] == [
            "alice@example.com",
        ]

    def test_pagination(self, fake_db):
        fake_db.seed("newsletter_subscribers", [make_subscriber(f"r{i}@example.com") for i in range(25)])

        second = newsletter.list_subscribers(fake_db, page=2)

        assert second["total"] == 25
        assert second["total_pages"] == 2
        assert len(second["subscribers"]) == 5


class TestStatusChanges:

    def test_unsubscribe_stamps_time(self, fake_db):
        [row] = fake_db.seed("newsletter_subscribers", [make_subscriber("a@example.com")])

        updated = newsletter.update_status(fake_db, row["id"], SubscriberStatus.UNSUBSCRIBED)
        assert updated["unsubscribed_at"] is not None

        restored = newsletter.update_status(fake_db, row["id"], SubscriberStatus.ACTIVE)
        assert restored["unsubscribed_at"] is None

    def test_unknown_subscriber(self, fake_db):
        with pytest.raises(NotFoundError):
            newsletter.update_status(fake_db, "missing", SubscriberStatus.BOUNCED)
        with pytest.raises(NotFoundError):
            newsletter.delete_subscriber(fake_db, "missing")


class TestCsv:

    def test_data_cells_are_quoted(self):
        body = newsletter.subscribers_csv([
            {"email": "a@example.com", "name": 'Ann "The Trader"', "status": "active",
             "source": "website", "subscribed_at": "2026-02-03T10:00:00+00:00"},
        ])

        header, row = body.strip().split("\n")
        assert header == "Email,Name,Status,Source,Subscribed At"
        assert row == '"a@example.com","Ann ""The Trader""","active","website","2026-02-03"'
