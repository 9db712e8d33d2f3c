"""Configuration for the finance tracker.

Paths, the reporting month, rule thresholds and UI palettes live here.
Anything that differs between machines can be overridden from the
environment.
"""

import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data"))
SEED_PATH = Path(os.getenv("FINTRACK_SEED_PATH", DATA_DIR / "seed.json"))

# Month that plans and family stats report on, "YYYY-MM"
REPORT_MONTH = os.getenv("FINTRACK_MONTH", "2026-02")

CURRENCY = os.getenv("FINTRACK_CURRENCY", "₽")
LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "INFO").upper()

# Notification rules, percentages
LIMIT_WARNING_PCT = 80
LIMIT_EXCEEDED_PCT = 100
SAVINGS_GREAT_PCT = 30

TOP_CATEGORIES = 5

ICON_OPTIONS = [
    "ShoppingCart", "Car", "Home", "Heart", "Gamepad2", "UtensilsCrossed",
    "Plane", "Book", "Music", "Shirt", "Dumbbell", "Baby", "Briefcase",
    "Laptop", "TrendingUp", "Gift",
]
COLOR_OPTIONS = [
    "#10b981", "#3b82f6", "#f97316", "#ec4899", "#8b5cf6",
    "#06b6d4", "#ef4444", "#d97706", "#6366f1", "#14b8a6",
]
MEMBER_COLORS = ["#7c3aed", "#06b6d4", "#ec4899", "#10b981", "#f97316", "#3b82f6"]
AVATARS = {"parent": "👨", "child": "🧒"}

# Shown for transactions, limits and plans whose category is gone
PLACEHOLDER_NAME = "Unknown"
PLACEHOLDER_ICON = "HelpCircle"
PLACEHOLDER_COLOR = "#888888"


def seed_path() -> str:
    """Seed file location as a string."""
    return str(SEED_PATH)
