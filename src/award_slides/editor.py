"""
Editor session: the working copy of the slide deck and the tab controller.

The session owns an in-memory copy of the awardee collection and the index
of the active tab. Content edits are applied immediately and pushed to every
preview listener; nothing reaches the backend until ``save`` is called.

Transient interaction state (dragging a tab, renaming, a pending delete, an
open context menu) is held in a single ``EditorState`` value so that only
one interaction can be in progress at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .client import AwardsApiClient
from .defaults import BUILTIN_CATEGORIES, new_awardee
from .errors import ApiError, InvalidTransition
from .models import ELEMENT_IDS, Awardee, LogoSize, SlideTheme, Visibility

logger = logging.getLogger(__name__)

PreviewListener = Callable[[List[Awardee]], None]

PROTECTED_FIELDS = {"id", "order"}


class EditorMode(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RENAMING = "renaming"
    CONFIRMING_DELETE = "confirming_delete"
    CONTEXT_MENU = "context_menu"


@dataclass(frozen=True)
class EditorState:
    """
    The one interaction in progress.

    ``index`` is the tab the interaction targets: the dragged tab, the tab
    being renamed, the tab pending deletion or the tab the menu was opened on.
    """

    mode: EditorMode = EditorMode.IDLE
    index: Optional[int] = None
    over_index: Optional[int] = None
    draft: str = ""
    x: float = 0
    y: float = 0


IDLE = EditorState()


@dataclass
class SavePlan:
    delete_ids: List[int]
    upserts: List[Awardee] = field(default_factory=list)


def next_awardee_id(awardees: Sequence[Awardee]) -> int:
    """``max(ids, 0) + 1``; ids freed by deletion are never handed out again while larger ids exist."""
    return max([a.id for a in awardees] + [0]) + 1


def move_item(items: Sequence[Any], source: int, destination: int) -> List[Any]:
    """Remove the item at ``source`` and reinsert it at ``destination``."""
    moved = list(items)
    item = moved.pop(source)
    moved.insert(destination, item)
    return moved


def follow_active_tab(active: int, source: int, destination: int) -> int:
    """Index of the active record after moving ``source`` to ``destination``."""
    if active == source:
        return destination
    if source < active <= destination:
        return active - 1
    if destination <= active < source:
        return active + 1
    return active


def plan_save(server: Sequence[Awardee], local: Sequence[Awardee]) -> SavePlan:
    """
    Reconcile the working copy with the server.

    Server records whose id is absent locally are deleted; every local record
    is upserted with ``order`` set to its position.
    """
    local_ids = {a.id for a in local}
    delete_ids = sorted({a.id for a in server} - local_ids)
    upserts = [a.model_copy(update={"order": position}, deep=True) for position, a in enumerate(local)]
    return SavePlan(delete_ids=delete_ids, upserts=upserts)


class EditorSession:
    """Working copy, active tab and interaction state of the editor panel."""

    def __init__(self, awardees: Sequence[Awardee], custom_categories: Optional[List[str]] = None) -> None:
        self.awardees: List[Awardee] = [a.model_copy(deep=True) for a in awardees]
        self.active_tab = 0
        self.state: EditorState = IDLE
        self.custom_categories: List[str] = list(custom_categories or [])
        self.is_saved = True
        self.saving = False
        self.uploading = False
        self.apply_logo_to_all = False
        self.apply_size_to_all = False
        self._listeners: List[PreviewListener] = []

    # -- plumbing ---------------------------------------------------------

    def subscribe(self, listener: PreviewListener) -> None:
        """Register a callback that receives the collection after every change."""
        self._listeners.append(listener)

    def commit(self, updated: List[Awardee]) -> None:
        self.awardees = updated
        self.is_saved = False
        snapshot = list(updated)
        for listener in self._listeners:
            listener(snapshot)

    def _require(self, *modes: EditorMode) -> None:
        if self.state.mode not in modes:
            allowed = ", ".join(mode.value for mode in modes)
            raise InvalidTransition(f"Cannot do this while {self.state.mode.value} (needs {allowed})")

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.awardees):
            raise IndexError(f"No slide at index {index}")

    @property
    def current(self) -> Optional[Awardee]:
        return self.awardees[self.active_tab] if self.awardees else None

    def select_tab(self, index: int) -> None:
        self._check_index(index)
        self.active_tab = index

    def reset(self, awardees: Sequence[Awardee]) -> None:
        """Replace the working copy with externally loaded records."""
        self.awardees = [a.model_copy(deep=True) for a in awardees]
        self.active_tab = min(self.active_tab, max(0, len(self.awardees) - 1))
        self.state = IDLE
        self.is_saved = True

    def edit(self, index: int, **changes: Any) -> Awardee:
        """Replace the record at ``index`` with a validated copy carrying ``changes``."""
        self._check_index(index)
        unknown = set(changes) - set(Awardee.model_fields)
        if unknown:
            raise KeyError(f"Unknown awardee field(s): {', '.join(sorted(unknown))}")
        data = self.awardees[index].model_dump()
        data.update(changes)
        updated = list(self.awardees)
        updated[index] = Awardee.model_validate(data)
        self.commit(updated)
        return updated[index]

    def edit_all(self, **changes: Any) -> None:
        """Apply the same ``changes`` to every record."""
        updated = []
        for awardee in self.awardees:
            data = awardee.model_dump()
            data.update(changes)
            updated.append(Awardee.model_validate(data))
        self.commit(updated)

    # -- ordering ----------------------------------------------------------

    def reorder(self, source: int, destination: int) -> None:
        self._require(EditorMode.IDLE)
        self._check_index(source)
        self._check_index(destination)
        if source == destination:
            return
        active = follow_active_tab(self.active_tab, source, destination)
        self.commit(move_item(self.awardees, source, destination))
        self.active_tab = active

    def start_drag(self, index: int) -> None:
        self._require(EditorMode.IDLE)
        self._check_index(index)
        self.state = EditorState(mode=EditorMode.DRAGGING, index=index)

    def drag_over(self, index: int) -> None:
        self._require(EditorMode.DRAGGING)
        self.state = replace(self.state, over_index=index)

    def drag_leave(self) -> None:
        self._require(EditorMode.DRAGGING)
        self.state = replace(self.state, over_index=None)

    def drop(self, index: int) -> None:
        self._require(EditorMode.DRAGGING)
        source = self.state.index
        self.state = IDLE
        self.reorder(source, index)

    def cancel_drag(self) -> None:
        if self.state.mode is EditorMode.DRAGGING:
            self.state = IDLE

    # -- add / duplicate / delete ------------------------------------------

    def add_awardee(self) -> Awardee:
        self._require(EditorMode.IDLE)
        awardee = new_awardee(next_awardee_id(self.awardees))
        self.commit(self.awardees + [awardee])
        self.active_tab = len(self.awardees) - 1
        return awardee

    def duplicate(self, index: int) -> Awardee:
        self._require(EditorMode.IDLE)
        self._check_index(index)
        source = self.awardees[index]
        copy = source.model_copy(
            update={
                "id": next_awardee_id(self.awardees),
                "tab_name": f"{source.tab_name} (Copy)" if source.tab_name else None,
            },
            deep=True,
        )
        updated = list(self.awardees)
        updated.insert(index + 1, copy)
        self.commit(updated)
        self.active_tab = index + 1
        return copy

    @property
    def can_delete(self) -> bool:
        return len(self.awardees) > 1

    def request_delete(self, index: int) -> bool:
        """Ask for confirmation before deleting; refused when one slide is left."""
        self._require(EditorMode.IDLE, EditorMode.CONTEXT_MENU)
        self._check_index(index)
        if not self.can_delete:
            self.state = IDLE
            return False
        self.state = EditorState(mode=EditorMode.CONFIRMING_DELETE, index=index)
        return True

    def confirm_delete(self) -> Awardee:
        self._require(EditorMode.CONFIRMING_DELETE)
        index = self.state.index
        self.state = IDLE
        removed = self.awardees[index]
        self.commit([a for i, a in enumerate(self.awardees) if i != index])
        if self.active_tab >= len(self.awardees):
            self.active_tab = max(0, len(self.awardees) - 1)
        return removed

    def cancel_delete(self) -> None:
        if self.state.mode is EditorMode.CONFIRMING_DELETE:
            self.state = IDLE

    # -- rename / hide -------------------------------------------------------

    def tab_label(self, index: int) -> str:
        return self.awardees[index].tab_name or f"Award {index + 1}"

    def start_rename(self, index: int) -> None:
        self._require(EditorMode.IDLE, EditorMode.CONTEXT_MENU)
        self._check_index(index)
        self.state = EditorState(mode=EditorMode.RENAMING, index=index, draft=self.tab_label(index))

    def set_rename_draft(self, text: str) -> None:
        self._require(EditorMode.RENAMING)
        self.state = replace(self.state, draft=text)

    def confirm_rename(self) -> None:
        self._require(EditorMode.RENAMING)
        index, draft = self.state.index, self.state.draft.strip()
        self.state = IDLE
        if draft:
            self.edit(index, tab_name=draft)

    def cancel_rename(self) -> None:
        if self.state.mode is EditorMode.RENAMING:
            self.state = IDLE

    def toggle_hidden(self, index: int) -> bool:
        self._check_index(index)
        hidden = not self.awardees[index].is_hidden
        self.edit(index, is_hidden=hidden)
        return hidden

    # -- context menu ------------------------------------------------------

    def open_context_menu(self, x: float, y: float, index: int) -> None:
        self._require(EditorMode.IDLE, EditorMode.CONTEXT_MENU)
        self._check_index(index)
        self.state = EditorState(mode=EditorMode.CONTEXT_MENU, index=index, x=x, y=y)

    def close_context_menu(self) -> None:
        if self.state.mode is EditorMode.CONTEXT_MENU:
            self.state = IDLE

    def handle_outside_click(self) -> None:
        self.close_context_menu()

    def menu_items(self) -> List[Dict[str, str]]:
        self._require(EditorMode.CONTEXT_MENU)
        hidden = self.awardees[self.state.index].is_hidden
        return [
            {"action": "rename", "label": "Rename Tab"},
            {"action": "duplicate", "label": "Duplicate"},
            {"action": "toggle_hidden", "label": "Show in Preview" if hidden else "Hide in Preview"},
            {"action": "delete", "label": "Delete"},
        ]

    def menu_action(self, action: str) -> None:
        """Close the menu, then run ``action`` against the tab it was opened on."""
        self._require(EditorMode.CONTEXT_MENU)
        index = self.state.index
        self.state = IDLE
        if action == "rename":
            self.start_rename(index)
        elif action == "duplicate":
            self.duplicate(index)
        elif action == "toggle_hidden":
            self.toggle_hidden(index)
        elif action == "delete":
            self.request_delete(index)
        else:
            raise ValueError(f"Unknown menu action: {action}")

    def handle_key(self, key: str) -> None:
        if key == "Escape":
            if self.state.mode is EditorMode.CONTEXT_MENU:
                self.close_context_menu()
            elif self.state.mode is EditorMode.RENAMING:
                self.cancel_rename()
            elif self.state.mode is EditorMode.CONFIRMING_DELETE:
                self.cancel_delete()
            elif self.state.mode is EditorMode.DRAGGING:
                self.cancel_drag()
        elif key == "Enter" and self.state.mode is EditorMode.RENAMING:
            self.confirm_rename()

    # -- field edits -------------------------------------------------------

    def update_field(self, index: int, name: str, value: Any) -> Awardee:
        if name in PROTECTED_FIELDS:
            raise KeyError(f"Field {name!r} cannot be edited")
        return self.edit(index, **{name: value})

    def update_theme(self, index: int, **fields: Any) -> Awardee:
        self._check_index(index)
        theme = self.awardees[index].slide_theme or SlideTheme()
        return self.edit(index, slide_theme={**theme.model_dump(), **fields})

    def clear_theme_field(self, index: int, name: str) -> Awardee:
        return self.update_theme(index, **{name: None})

    def set_visibility(self, index: int, element: str, visible: bool) -> Awardee:
        if element not in ELEMENT_IDS:
            raise KeyError(f"Unknown element: {element}")
        self._check_index(index)
        flags = self.awardees[index].visibility or Visibility()
        return self.edit(index, visibility={**flags.model_dump(), f"show_{element}": visible})

    def set_photo_scale(self, index: int, scale: float) -> Awardee:
        return self.edit(index, photo_scale=min(2.0, max(1.0, scale)))

    def set_description_text_size(self, index: int, size: int) -> Awardee:
        return self.edit(index, description_text_size=min(20, max(10, int(size))))

    def select_icon(self, index: int, icon: str) -> Awardee:
        return self.edit(index, selected_icon=icon)

    def set_badge_color(self, index: int, color: Optional[str]) -> Awardee:
        return self.edit(index, logo_badge_color=color)

    # -- organization logo -------------------------------------------------

    def set_apply_logo_to_all(self, enabled: bool) -> None:
        """When switched on, copy slide 1's logo onto every slide."""
        self.apply_logo_to_all = enabled
        if enabled and self.awardees:
            first = self.awardees[0]
            self.edit_all(
                organization_logo=first.organization_logo,
                organization_logo_path=first.organization_logo_path,
            )

    def set_apply_size_to_all(self, enabled: bool) -> None:
        """When switched on, copy the active slide's logo size onto every slide."""
        self.apply_size_to_all = enabled
        if enabled and self.awardees:
            size = self.current.organization_logo_size or LogoSize.MEDIUM
            self.edit_all(organization_logo_size=size)

    def set_logo_size(self, size: str) -> None:
        if self.apply_size_to_all:
            self.edit_all(organization_logo_size=size)
        else:
            self.edit(self.active_tab, organization_logo_size=size)

    # -- uploads -----------------------------------------------------------

    def upload_photo(self, client: AwardsApiClient, index: int, filename: str, data: bytes, content_type: str = "image/jpeg") -> Awardee:
        self._check_index(index)
        self.uploading = True
        try:
            result = client.upload_photo(filename, data, content_type)
        finally:
            self.uploading = False
        return self.edit(index, photo=result.photo_url or "", photo_path=result.photo_path)

    def upload_logo(self, client: AwardsApiClient, index: int, filename: str, data: bytes, content_type: str = "image/png") -> None:
        """Upload an organization logo; from slide 1 with apply-to-all on it lands on every slide."""
        self._check_index(index)
        self.uploading = True
        try:
            result = client.upload_photo(filename, data, content_type)
        finally:
            self.uploading = False
        changes = {"organization_logo": result.photo_url, "organization_logo_path": result.photo_path}
        if self.apply_logo_to_all and index == 0:
            self.edit_all(**changes)
        else:
            self.edit(index, **changes)

    # -- categories --------------------------------------------------------

    @property
    def all_categories(self) -> List[str]:
        return BUILTIN_CATEGORIES + self.custom_categories

    def load_categories(self, client: AwardsApiClient) -> List[str]:
        try:
            self.custom_categories = client.get_categories()
        except ApiError as exc:
            logger.error(f"Failed to load custom categories: {exc}")
        return self.custom_categories

    def add_category(self, name: str) -> bool:
        name = name.strip()
        if not name or name in self.all_categories:
            return False
        self.custom_categories.append(name)
        return True

    def delete_category(self, name: str, client: Optional[AwardsApiClient] = None) -> None:
        """Remove a custom category and persist the list right away."""
        self.custom_categories = [c for c in self.custom_categories if c != name]
        if client is None:
            return
        try:
            client.save_categories(self.custom_categories)
        except ApiError as exc:
            logger.error(f"Failed to delete category: {exc}")

    # -- persistence -------------------------------------------------------

    def save(self, client: AwardsApiClient) -> SavePlan:
        """
        Push the working copy to the backend.

        Raises:
            ApiError: if fetching, deleting or the batch upsert fails; the
                whole save counts as failed
        """
        self.saving = True
        try:
            plan = plan_save(client.list_awardees(), self.awardees)
            for awardee_id in plan.delete_ids:
                client.delete_awardee(awardee_id)
            client.save_batch(plan.upserts)
            try:
                client.save_categories(self.custom_categories)
            except ApiError as exc:
                logger.error(f"Failed to save custom categories: {exc}")
        except ApiError as exc:
            logger.error(f"Save error: {exc}")
            raise
        finally:
            self.saving = False

        self.is_saved = True
        for listener in self._listeners:
            listener(list(self.awardees))
        return plan
