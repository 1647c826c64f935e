"""
Free-form layout editing of slide elements.

Each slide may carry a rectangle per element (photo, name, title, category,
description, date) in canvas pixels. ``LayoutEditor`` seeds default
rectangles, applies pointer gestures (move and resize) and optionally mirrors
slide 1's layout onto every slide.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set

from .defaults import CANVAS_HEIGHT, CANVAS_WIDTH, DEFAULT_LAYOUT, default_layout_rects
from .editor import EditorSession
from .models import ELEMENT_IDS, Layout, LayoutRect

logger = logging.getLogger(__name__)

MIN_ELEMENT_SIZE = 20.0
SNAP_THRESHOLD = 5.0
RESIZE_HANDLES = {"n", "s", "e", "w", "ne", "nw", "se", "sw"}


class PointerMode(str, Enum):
    IDLE = "idle"
    MOVING = "moving"
    RESIZING = "resizing"


@dataclass(frozen=True)
class PointerState:
    mode: PointerMode = PointerMode.IDLE
    element: Optional[str] = None
    handle: Optional[str] = None
    start_x: float = 0
    start_y: float = 0
    origin: Optional[LayoutRect] = None
    preview: Optional[LayoutRect] = None


@dataclass(frozen=True)
class Guide:
    """A vertical (``x`` set) or horizontal (``y`` set) alignment line."""

    x: Optional[float] = None
    y: Optional[float] = None


def moved_rect(origin: LayoutRect, dx: float, dy: float) -> LayoutRect:
    return LayoutRect(x=origin.x + dx, y=origin.y + dy, width=origin.width, height=origin.height)


def resized_rect(origin: LayoutRect, handle: str, dx: float, dy: float) -> LayoutRect:
    """
    Apply a resize drag from ``handle``.

    East/south handles grow the size; west/north handles also move the
    top-left anchor so the opposite edge stays put.
    """
    x, y, width, height = origin.x, origin.y, origin.width, origin.height
    right, bottom = x + width, y + height

    if "e" in handle:
        width = max(MIN_ELEMENT_SIZE, origin.width + dx)
    if "w" in handle:
        width = max(MIN_ELEMENT_SIZE, origin.width - dx)
        x = right - width
    if "s" in handle:
        height = max(MIN_ELEMENT_SIZE, origin.height + dy)
    if "n" in handle:
        height = max(MIN_ELEMENT_SIZE, origin.height - dy)
        y = bottom - height
    return LayoutRect(x=x, y=y, width=width, height=height)


def _vertical_lines(rect: LayoutRect) -> List[float]:
    return [rect.x, rect.x + rect.width / 2, rect.x + rect.width]


def _horizontal_lines(rect: LayoutRect) -> List[float]:
    return [rect.y, rect.y + rect.height / 2, rect.y + rect.height]


def alignment_guides(rect: LayoutRect, others: List[LayoutRect], threshold: float = SNAP_THRESHOLD) -> List[Guide]:
    """Guides where ``rect``'s edges or centre line up with another element or the canvas centre."""
    targets_x = {CANVAS_WIDTH / 2}
    targets_y = {CANVAS_HEIGHT / 2}
    for other in others:
        targets_x.update(_vertical_lines(other))
        targets_y.update(_horizontal_lines(other))

    guides: List[Guide] = []
    for target in sorted(targets_x):
        if any(abs(line - target) <= threshold for line in _vertical_lines(rect)):
            guides.append(Guide(x=target))
    for target in sorted(targets_y):
        if any(abs(line - target) <= threshold for line in _horizontal_lines(rect)):
            guides.append(Guide(y=target))
    return guides


class LayoutEditor:
    """Layout editing on top of an ``EditorSession``'s active slide."""

    def __init__(self, session: EditorSession) -> None:
        self.session = session
        self.edit_mode = False
        self.copy_to_all = False
        self.selected: Optional[str] = None
        self.pointer = PointerState()
        self._initialized: Set[int] = set()

    # -- mode ----------------------------------------------------------------

    def enter_edit_mode(self) -> None:
        self.edit_mode = True
        self._initialize(self.session.active_tab)

    def exit_edit_mode(self) -> None:
        self.edit_mode = False
        self.selected = None
        self.pointer = PointerState()

    def activate(self, index: int) -> None:
        """Switch the active tab, seeding its layout if editing."""
        self.session.select_tab(index)
        self.selected = None
        self.pointer = PointerState()
        if self.edit_mode:
            self._initialize(index)

    def forget_initialized(self) -> None:
        """Drop seeding history, e.g. after the collection was replaced from outside."""
        self._initialized.clear()

    def _initialize(self, index: int) -> None:
        # Seed once per slide so re-entering never overwrites user changes.
        if index in self._initialized or not self.session.awardees:
            return
        layout = self.session.awardees[index].layout
        if layout is None or layout.is_empty():
            self.session.edit(index, layout=DEFAULT_LAYOUT)
            logger.debug(f"Seeded default layout for slide {index}")
        self._initialized.add(index)

    # -- layout values -------------------------------------------------------

    def rects(self, index: Optional[int] = None) -> Dict[str, LayoutRect]:
        """Effective rectangles for a slide: stored ones over the defaults."""
        index = self.session.active_tab if index is None else index
        effective = default_layout_rects()
        layout = self.session.awardees[index].layout
        if layout is not None:
            effective.update(layout.rects())
        return effective

    @property
    def locked(self) -> bool:
        """Slides other than the first cannot be edited while copy-to-all is on."""
        return self.copy_to_all and self.session.active_tab != 0

    def update_element(self, element: str, rect: LayoutRect) -> bool:
        if element not in ELEMENT_IDS:
            raise KeyError(f"Unknown element: {element}")
        if self.locked:
            return False

        if self.copy_to_all:
            targets = range(len(self.session.awardees))
        else:
            targets = [self.session.active_tab]

        updated = list(self.session.awardees)
        for index in targets:
            awardee = updated[index]
            layout = (awardee.layout or Layout()).model_copy(update={element: rect}, deep=True)
            updated[index] = awardee.model_copy(update={"layout": layout})
        self.session.commit(updated)
        return True

    def set_copy_to_all(self, enabled: bool) -> None:
        """When switched on, copy slide 1's layout onto every slide."""
        self.copy_to_all = enabled
        if enabled and self.session.awardees:
            first = self.session.awardees[0].layout
            layout = first.model_dump() if first is not None else None
            self.session.edit_all(layout=layout)

    def reset_layout(self) -> bool:
        """
        Clear the active slide's layout; it renders with the defaults again.

        With copy-to-all on, a reset from slide 1 clears every slide and other
        slides are locked. Returns False when the reset was refused.
        """
        if self.locked:
            return False
        if self.copy_to_all:
            self.session.edit_all(layout=None)
        else:
            self.session.edit(self.session.active_tab, layout=None)
        return True

    # -- pointer gestures ----------------------------------------------------

    def press(self, element: str, x: float, y: float, handle: Optional[str] = None) -> bool:
        """
        Pointer down on an element (or one of its resize handles).

        Selects the element and starts a move, or a resize when ``handle`` is
        given. Returns False when the slide is locked or not in edit mode.
        """
        if not self.edit_mode or self.locked:
            return False
        if element not in ELEMENT_IDS:
            raise KeyError(f"Unknown element: {element}")
        if handle is not None and handle not in RESIZE_HANDLES:
            raise ValueError(f"Unknown resize handle: {handle}")

        origin = self.rects()[element]
        self.selected = element
        self.pointer = PointerState(
            mode=PointerMode.RESIZING if handle else PointerMode.MOVING,
            element=element,
            handle=handle,
            start_x=x,
            start_y=y,
            origin=origin,
            preview=origin,
        )
        return True

    def move(self, x: float, y: float) -> Optional[LayoutRect]:
        state = self.pointer
        if state.mode is PointerMode.IDLE:
            return None
        dx, dy = x - state.start_x, y - state.start_y
        if state.mode is PointerMode.MOVING:
            preview = moved_rect(state.origin, dx, dy)
        else:
            preview = resized_rect(state.origin, state.handle, dx, dy)
        self.pointer = PointerState(
            mode=state.mode,
            element=state.element,
            handle=state.handle,
            start_x=state.start_x,
            start_y=state.start_y,
            origin=state.origin,
            preview=preview,
        )
        return preview

    def release(self) -> Optional[LayoutRect]:
        """Pointer up: commit the previewed rectangle."""
        state = self.pointer
        self.pointer = PointerState()
        if state.mode is PointerMode.IDLE or state.preview is None:
            return None
        if state.preview != state.origin:
            self.update_element(state.element, state.preview)
        return state.preview

    def press_background(self) -> None:
        self.selected = None
        self.pointer = PointerState()

    def guides(self) -> List[Guide]:
        """Alignment guides for the element currently being dragged."""
        state = self.pointer
        if state.mode is PointerMode.IDLE or state.preview is None:
            return []
        others = [rect for element, rect in self.rects().items() if element != state.element]
        return alignment_guides(state.preview, others)
