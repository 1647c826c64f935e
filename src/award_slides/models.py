from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"

ELEMENT_IDS = ("photo", "name", "title", "category", "description", "date")


class CamelModel(BaseModel):
    """Models serialized with camelCase keys on the wire. NaN and infinities are rejected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class AccentColorType(str, Enum):
    FLAT = "flat"
    GRADIENT = "gradient"


class LogoSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"


class BadgeIcon(str, Enum):
    STAR = "star"
    TROPHY = "trophy"
    AWARD = "award"
    SPARKLES = "sparkles"


class SlideTheme(CamelModel):
    background_color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    accent_color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    accent_color_end: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    accent_color_type: Optional[AccentColorType] = None


class Visibility(CamelModel):
    show_photo: Optional[bool] = None
    show_name: Optional[bool] = None
    show_title: Optional[bool] = None
    show_category: Optional[bool] = None
    show_description: Optional[bool] = None
    show_date: Optional[bool] = None

    def is_visible(self, element: str) -> bool:
        """Unset flags count as visible."""
        return getattr(self, f"show_{element}") is not False


class LayoutRect(CamelModel):
    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class LayoutPoint(CamelModel):
    x: float
    y: float


class Layout(CamelModel):
    photo: Optional[LayoutRect] = None
    name: Optional[LayoutRect] = None
    title: Optional[LayoutRect] = None
    category: Optional[LayoutRect] = None
    description: Optional[LayoutRect] = None
    date: Optional[LayoutRect] = None
    logo: Optional[LayoutPoint] = None

    def rects(self) -> Dict[str, LayoutRect]:
        """Element id -> rectangle for every element that has one."""
        return {element: getattr(self, element) for element in ELEMENT_IDS if getattr(self, element) is not None}

    def is_empty(self) -> bool:
        return not self.rects() and self.logo is None


class Awardee(CamelModel):
    id: int
    name: str = ""
    title: str = ""
    award: str = ""
    description: str = ""
    date: str = ""
    category: str = ""
    photo: str = ""
    photo_path: Optional[str] = None
    organization_logo: Optional[str] = None
    organization_logo_path: Optional[str] = None
    organization_logo_size: Optional[LogoSize] = None
    selected_icon: Optional[BadgeIcon] = None
    logo_badge_color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    photo_scale: Optional[float] = Field(default=None, ge=1.0, le=2.0)
    description_text_size: Optional[int] = Field(default=None, ge=10, le=20)
    tab_name: Optional[str] = None
    is_hidden: bool = False
    slide_theme: Optional[SlideTheme] = None
    visibility: Optional[Visibility] = None
    layout: Optional[Layout] = None
    order: Optional[int] = None

    @field_validator("tab_name")
    @classmethod
    def _blank_tab_name_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    def is_visible(self, element: str) -> bool:
        return self.visibility is None or self.visibility.is_visible(element)

    def to_record(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys, unset optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AwardeeBatch(CamelModel):
    awardees: List[Awardee]


class AwardeeList(CamelModel):
    awardees: List[Awardee]


class AwardeeSaved(CamelModel):
    success: bool = True
    awardee: Awardee


class SuccessResponse(CamelModel):
    success: bool = True


class UploadResult(CamelModel):
    success: bool = True
    photo_path: str
    photo_url: Optional[str] = None


class CategoryList(CamelModel):
    categories: List[str] = Field(default_factory=list)


class CategoriesSaved(CategoryList):
    success: bool = True


class HealthStatus(BaseModel):
    status: str = "ok"
