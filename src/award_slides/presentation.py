"""
Read-only slide rendering and presentation navigation.

``render_slide`` projects one awardee into the values a view needs to draw
it. ``Presenter`` tracks the current slide, preview mode and keyboard
navigation. ``load_awardees`` is the application bootstrap: it pulls the deck
from the backend and falls back to the built-in deck.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .client import AwardsApiClient
from .defaults import (
    DEFAULT_ACCENT_COLOR_END,
    DEFAULT_DESCRIPTION_TEXT_SIZE,
    DEFAULT_PHOTO_SCALE,
    default_awardees,
    default_layout_rects,
)
from .errors import ApiError
from .models import ELEMENT_IDS, AccentColorType, Awardee, BadgeIcon, LayoutRect, LogoSize

logger = logging.getLogger(__name__)

# Category -> (gradient start, gradient end) used when a slide has no custom accent.
CATEGORY_GRADIENTS: Dict[str, tuple] = {
    "Technical Excellence": ("rgb(59 130 246)", "rgb(34 211 238)"),
    "Leadership": ("rgb(245 158 11)", "rgb(250 204 21)"),
    "Customer Excellence": ("rgb(16 185 129)", "rgb(20 184 166)"),
    "Emerging Talent": ("rgb(168 85 247)", "rgb(236 72 153)"),
}
FALLBACK_GRADIENT = ("rgb(100 116 139)", "rgb(148 163 184)")


@dataclass(frozen=True)
class AccentStyle:
    kind: str
    colors: tuple

    def css(self) -> str:
        if self.kind == AccentColorType.FLAT.value:
            return self.colors[0]
        return f"linear-gradient(to right, {', '.join(self.colors)})"


@dataclass
class RenderedSlide:
    awardee_id: int
    slide_number: int
    total_slides: int
    visible: Dict[str, bool]
    texts: Dict[str, str]
    photo: Optional[str]
    photo_scale: float
    description_text_size: int
    background_color: Optional[str]
    accent: AccentStyle
    badge: AccentStyle
    icon: str
    logo: Optional[str]
    logo_size: str
    layout: Dict[str, LayoutRect] = field(default_factory=dict)

    @property
    def counter(self) -> str:
        return f"{self.slide_number} / {self.total_slides}"


def category_gradient(category: str) -> tuple:
    return CATEGORY_GRADIENTS.get(category, FALLBACK_GRADIENT)


def accent_style(awardee: Awardee) -> AccentStyle:
    theme = awardee.slide_theme
    if theme is None or not theme.accent_color:
        return AccentStyle(AccentColorType.GRADIENT.value, category_gradient(awardee.category))
    if theme.accent_color_type == AccentColorType.FLAT:
        return AccentStyle(AccentColorType.FLAT.value, (theme.accent_color,))
    return AccentStyle(
        AccentColorType.GRADIENT.value,
        (theme.accent_color, theme.accent_color_end or DEFAULT_ACCENT_COLOR_END),
    )


def badge_style(awardee: Awardee) -> AccentStyle:
    if awardee.logo_badge_color:
        return AccentStyle(AccentColorType.FLAT.value, (awardee.logo_badge_color,))
    return AccentStyle(AccentColorType.GRADIENT.value, category_gradient(awardee.category))


def render_slide(awardee: Awardee, slide_number: int = 1, total_slides: int = 1) -> RenderedSlide:
    """Project an awardee into render values; unset options take their defaults."""
    layout = default_layout_rects()
    if awardee.layout is not None:
        layout.update(awardee.layout.rects())

    visible = {element: awardee.is_visible(element) for element in ELEMENT_IDS}
    texts = {
        element: getattr(awardee, element)
        for element in ("name", "title", "category", "description", "date")
        if visible[element]
    }
    return RenderedSlide(
        awardee_id=awardee.id,
        slide_number=slide_number,
        total_slides=total_slides,
        visible=visible,
        texts=texts,
        photo=awardee.photo if visible["photo"] else None,
        photo_scale=awardee.photo_scale or DEFAULT_PHOTO_SCALE,
        description_text_size=awardee.description_text_size or DEFAULT_DESCRIPTION_TEXT_SIZE,
        background_color=awardee.slide_theme.background_color if awardee.slide_theme else None,
        accent=accent_style(awardee),
        badge=badge_style(awardee),
        icon=(awardee.selected_icon or BadgeIcon.STAR).value,
        logo=awardee.organization_logo,
        logo_size=(awardee.organization_logo_size or LogoSize.MEDIUM).value,
        layout=layout,
    )


class Presenter:
    """Current slide and navigation for the edit view and fullscreen preview."""

    def __init__(self, awardees: Sequence[Awardee]) -> None:
        self.awardees: List[Awardee] = list(awardees)
        self.current = 0
        self.preview_mode = False
        self.editor_open = False

    def visible_awardees(self) -> List[Awardee]:
        """Hidden slides are skipped only in preview mode."""
        if self.preview_mode:
            return [a for a in self.awardees if not a.is_hidden]
        return list(self.awardees)

    def update(self, awardees: Sequence[Awardee]) -> None:
        """Live preview hook: take the editor's latest collection."""
        self.awardees = list(awardees)
        count = len(self.visible_awardees())
        if self.current >= count:
            self.current = max(0, count - 1)

    def current_awardee(self) -> Optional[Awardee]:
        slides = self.visible_awardees()
        return slides[self.current] if slides else None

    def render_current(self) -> Optional[RenderedSlide]:
        slides = self.visible_awardees()
        if not slides:
            return None
        return render_slide(slides[self.current], self.current + 1, len(slides))

    def next(self) -> None:
        count = len(self.visible_awardees())
        if count:
            self.current = (self.current + 1) % count

    def previous(self) -> None:
        count = len(self.visible_awardees())
        if count:
            self.current = (self.current - 1 + count) % count

    def go_to(self, index: int) -> None:
        """Jump from a slide indicator."""
        if not 0 <= index < len(self.visible_awardees()):
            raise IndexError(f"No slide at index {index}")
        self.current = index

    @property
    def can_go_previous(self) -> bool:
        return self.current > 0

    @property
    def can_go_next(self) -> bool:
        return self.current < len(self.visible_awardees()) - 1

    def enter_preview(self) -> None:
        self.preview_mode = True
        self.current = 0

    def exit_preview(self) -> None:
        self.preview_mode = False
        self.current = min(self.current, max(0, len(self.awardees) - 1))

    def open_editor(self) -> None:
        self.editor_open = True

    def close_editor(self) -> None:
        self.editor_open = False

    def handle_key(self, key: str) -> None:
        if self.editor_open:
            return
        if key == "ArrowLeft":
            self.previous()
        elif key == "ArrowRight":
            self.next()
        elif key == "Escape" and self.preview_mode:
            self.exit_preview()


def load_awardees(client: AwardsApiClient) -> List[Awardee]:
    """
    Load the deck at startup.

    Duplicate ids keep their first occurrence. An empty backend is seeded with
    the built-in deck; any API failure falls back to it without seeding.
    """
    try:
        awardees = client.list_awardees()
    except ApiError as exc:
        logger.error(f"Failed to load awardees: {exc}")
        return default_awardees()

    if not awardees:
        defaults = default_awardees()
        try:
            for awardee in defaults:
                client.save_awardee(awardee)
        except ApiError as exc:
            logger.error(f"Failed to initialize default data: {exc}")
        return defaults

    unique: List[Awardee] = []
    seen = set()
    for awardee in awardees:
        if awardee.id not in seen:
            seen.add(awardee.id)
            unique.append(awardee)
    return unique
