"""
Built-in content: the starter slide deck, fixed award categories and the
default layout rectangles used by the layout editor and the renderer.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from .models import Awardee, LayoutRect

BUILTIN_CATEGORIES = [
    "Act as Owner",
    "Focus and get things done fast",
    "Celebrate Success",
]

DEFAULT_PHOTO_URL = "https://images.unsplash.com/photo-1494790108377-be9c29b29330?w=400&h=400&fit=crop"

CANVAS_WIDTH = 1920
CANVAS_HEIGHT = 1080

DEFAULT_LAYOUT: Dict[str, Dict[str, float]] = {
    "photo": {"x": 100, "y": 200, "width": 400, "height": 400},
    "category": {"x": 550, "y": 60, "width": 200, "height": 80},
    "date": {"x": 780, "y": 70, "width": 200, "height": 30},
    "name": {"x": 550, "y": 160, "width": 800, "height": 80},
    "title": {"x": 550, "y": 260, "width": 800, "height": 50},
    "description": {"x": 550, "y": 340, "width": 1200, "height": 350},
}

DEFAULT_PHOTO_SCALE = 1.0
DEFAULT_DESCRIPTION_TEXT_SIZE = 13
DEFAULT_ACCENT_COLOR = "#3b82f6"
DEFAULT_ACCENT_COLOR_END = "#22d3ee"
DEFAULT_BACKGROUND_COLOR = "#1e293b"


def default_layout_rects() -> Dict[str, LayoutRect]:
    return {element: LayoutRect(**rect) for element, rect in DEFAULT_LAYOUT.items()}


def month_label(today: Optional[date] = None) -> str:
    """Format a date the way slides show it, e.g. ``February 2026``."""
    return (today or date.today()).strftime("%B %Y")


def new_awardee(awardee_id: int, today: Optional[date] = None) -> Awardee:
    """A blank slide with placeholder text."""
    return Awardee(
        id=awardee_id,
        name="New Awardee",
        title="Position Title",
        award="Award Title",
        description="Add achievement description here...",
        date=month_label(today),
        category=BUILTIN_CATEGORIES[0],
        photo=DEFAULT_PHOTO_URL,
    )


def default_awardees() -> List[Awardee]:
    """Starter deck used when the backend is empty or unreachable."""
    return [
        Awardee(
            id=1,
            name="Iyanuoluwa Olutunmbi",
            title="FP&A Manager",
            award="Iyanuoluwa Olutunmbi",
            description=(
                "Iyanu joined the organization only a few months ago, yet within a very short period he has "
                "successfully assumed the responsibilities of the FP&A Manager role with confidence and maturity."
            ),
            date="February 2026",
            category="Act as Owner",
            photo=DEFAULT_PHOTO_URL,
        ),
        Awardee(
            id=2,
            name="Michael Chen",
            title="Product Manager",
            award="Leadership Award",
            description=(
                "For exceptional leadership in driving cross-functional collaboration and delivering key "
                "projects ahead of schedule."
            ),
            date="February 2026",
            category="Leadership",
            photo="https://images.unsplash.com/photo-1738566061505-556830f8b8f5?w=1080&fit=max",
        ),
        Awardee(
            id=3,
            name="Emily Rodriguez",
            title="Customer Success Manager",
            award="Customer Champion",
            description="For consistently exceeding customer satisfaction targets and building lasting client relationships.",
            date="February 2026",
            category="Customer Excellence",
            photo="https://images.unsplash.com/photo-1600696444233-20accba67df3?w=1080&fit=max",
        ),
        Awardee(
            id=4,
            name="David Park",
            title="Data Analyst",
            award="Rising Star Award",
            description="For demonstrating exceptional growth, initiative, and impact in their first year with the company.",
            date="February 2026",
            category="Emerging Talent",
            photo="https://images.unsplash.com/photo-1620853724625-4715441de25d?w=1080&fit=max",
        ),
    ]
