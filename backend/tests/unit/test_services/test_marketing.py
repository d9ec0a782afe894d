"""Unit tests for pricing, plan features and FAQ search."""

from navcrypto.services import marketing


def test_pricing_plans_follow_plan_prices():
    assert [(p["plan"], p["price"]) for p in marketing.PRICING_PLANS] == [
        ("free", 0), ("pro", 29), ("enterprise", 99),
    ]
    assert [p["plan"] for p in marketing.PRICING_PLANS if p["highlighted"]] == ["pro"]


def test_plan_features_fall_back_to_free():
    assert marketing.plan_features("enterprise")[0] == "Everything in Pro"
    assert marketing.plan_features(None) == marketing.PLAN_FEATURES["free"]
    assert marketing.plan_features("unknown") == marketing.PLAN_FEATURES["free"]


def test_faq_categories_start_with_all():
    categories = marketing.faq_categories()

    assert categories[0] == "All"
    assert len(categories) == len(set(categories))
    assert "Billing" in categories


def test_search_faq():
    assert all(e["category"] == "Signals" for e in marketing.search_faq(category="Signals"))
    assert [e["question"] for e in marketing.search_faq(search="REFUND")] == ["Do you offer refunds?"]
    assert marketing.search_faq(search="refund", category="Signals") == []
    assert len(marketing.search_faq(category="All")) == len(marketing.FAQ)
