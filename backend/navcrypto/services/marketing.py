"""Marketing Content

Static data behind the public pages: pricing plans, plan features shown on
the account settings page, and the FAQ with its search/category filter.
"""

from typing import Any, Dict, List, Optional

from ..models import PLAN_MONTHLY_PRICE, Plan

PRICING_PLANS: List[Dict[str, Any]] = [
    {
        "plan": Plan.FREE.value,
        "name": "Free",
        "price": PLAN_MONTHLY_PRICE[Plan.FREE],
        "period": "forever",
        "description": "Perfect for getting started with crypto trading",
        "features": [
            "Access to beginner courses",
            "View active trading signals",
            "Basic portfolio analytics",
            "Community access",
            "Email support",
            "Basic market data",
        ],
        "cta": "Get Started",
        "href": "/signup",
        "highlighted": False,
    },
    {
        "plan": Plan.PRO.value,
        "name": "Pro",
        "price": PLAN_MONTHLY_PRICE[Plan.PRO],
        "period": "per month",
        "description": "For serious traders who want the full experience",
        "features": [
            "All free features",
            "Access to all courses",
            "Priority signal alerts",
            "Advanced analytics & charts",
            "AI-powered insights",
            "1-on-1 support",
            "Copy trading access",
            "Real-time notifications",
            "Portfolio tracking",
            "Educational webinars",
        ],
        "cta": "Start Pro Trial",
        "href": "/signup?plan=pro",
        "highlighted": True,
        "badge": "Most Popular",
    },
    {
        "plan": Plan.ENTERPRISE.value,
        "name": "Enterprise",
        "price": PLAN_MONTHLY_PRICE[Plan.ENTERPRISE],
        "period": "per month",
        "description": "Custom solutions for teams and institutions",
        "features": [
            "All pro features",
            "Custom AI agents",
            "Dedicated account manager",
            "White-label options",
            "API access",
            "Custom integrations",
            "Priority support 24/7",
            "Custom training programs",
            "Advanced reporting",
            "Team collaboration tools",
            "Institutional-grade security",
        ],
        "cta": "Contact Sales",
        "href": "/support",
        "highlighted": False,
    },
]

# Features listed next to the current plan on the settings page
PLAN_FEATURES: Dict[str, List[str]] = {
    Plan.FREE.value: [
        "Access to beginner courses",
        "3 trading signals per week",
        "Basic market data",
        "Community read-only access",
    ],
    Plan.PRO.value: [
        "Full community access & chat",
        "Unlimited trading signals",
        "All courses & webinars",
        "Advanced analytics & charts",
        "AI-powered market insights",
        "Weekly live trading sessions",
    ],
    Plan.ENTERPRISE.value: [
        "Everything in Pro",
        "Proprietary indicator & plugin access",
        "1-on-1 coaching sessions",
        "Copy trading access",
        "Custom AI trading agents",
        "API access & dedicated manager",
    ],
}

FAQ_ALL = "All"

FAQ: List[Dict[str, str]] = [
    {
        "category": "Getting Started",
        "question": "How do I create an account?",
        "answer": "Click the 'Get Started' button in the navigation bar and fill out the registration "
                  "form with your email and password. You'll immediately get access to free "
                  "educational content and signals.",
    },
    {
        "category": "Getting Started",
        "question": "Is there a free plan?",
        "answer": "Yes! The free plan includes beginner courses, a selection of trading signals and "
                  "read-only community access. Upgrade to Pro ($29/mo) for unlimited signals and all "
                  "courses, or Enterprise ($99/mo) for custom AI agents, API access and a dedicated "
                  "account manager.",
    },
    {
        "category": "Getting Started",
        "question": "What payment methods do you accept?",
        "answer": "We accept all major credit cards (Visa, Mastercard, American Express), PayPal, and "
                  "select cryptocurrencies for subscription payments.",
    },
    {
        "category": "Signals",
        "question": "What are trading signals?",
        "answer": "Trading signals are expert recommendations for when to buy or sell specific "
                  "cryptocurrencies. Each signal includes entry price, take profit targets, stop loss "
                  "levels, and analysis from our professional traders.",
    },
    {
        "category": "Signals",
        "question": "How accurate are the signals?",
        "answer": "Win rate is tracked on every closed signal and shown on the platform. Cryptocurrency "
                  "trading involves risk, and past performance does not guarantee future results. "
                  "Always use proper risk management.",
    },
    {
        "category": "Signals",
        "question": "How do I receive signal notifications?",
        "answer": "Enable notifications in your dashboard settings. Signals appear on your dashboard "
                  "in real time as soon as they're published.",
    },
    {
        "category": "Signals",
        "question": "Can I automate trading based on signals?",
        "answer": "Pro and Enterprise plans include copy trading features that allow you to "
                  "automatically execute trades based on our signals. You maintain full control and "
                  "can enable or disable automation at any time.",
    },
    {
        "category": "Courses",
        "question": "Are courses suitable for beginners?",
        "answer": "Absolutely! Our beginner courses start with the fundamentals of blockchain and "
                  "cryptocurrency, requiring no prior knowledge. Advanced courses cover technical "
                  "analysis, DeFi, and trading strategies.",
    },
    {
        "category": "Courses",
        "question": "How is my course progress tracked?",
        "answer": "Every lesson you mark as complete is saved to your account. The Progress page shows "
                  "completion per course and across all your enrolled courses.",
    },
    {
        "category": "Billing",
        "question": "Can I cancel my subscription anytime?",
        "answer": "Yes, you can cancel your subscription at any time from your account settings. "
                  "You'll keep access until the end of your current billing period.",
    },
    {
        "category": "Billing",
        "question": "Do you offer refunds?",
        "answer": "We offer a 14-day money-back guarantee for new subscriptions. Contact support within "
                  "the first 14 days for a full refund.",
    },
    {
        "category": "Account",
        "question": "How do I reset my password?",
        "answer": "Click 'Forgot Password' on the login page, enter your email address, and we'll send "
                  "you a password reset link.",
    },
    {
        "category": "Account",
        "question": "Can I delete my account?",
        "answer": "Yes, you can delete your account from Account Settings. This permanently removes "
                  "your profile and course progress and cannot be undone.",
    },
]


def faq_categories() -> List[str]:
    categories = [FAQ_ALL]
    for entry in FAQ:
        if entry["category"] not in categories:
            categories.append(entry["category"])
    return categories


def search_faq(search: Optional[str] = None, category: Optional[str] = None) -> List[Dict[str, str]]:
    """FAQ entries matching a case-insensitive search term and a category."""
    term = (search or "").strip().lower()
    results = []
    for entry in FAQ:
        if category and category != FAQ_ALL and entry["category"] != category:
            continue
        if term and term not in entry["question"].lower() and term not in entry["answer"].lower():
            continue
        results.append(entry)
    return results


def plan_features(plan: Optional[str]) -> List[str]:
    return PLAN_FEATURES.get(plan or "", PLAN_FEATURES[Plan.FREE.value])
