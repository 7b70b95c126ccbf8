from __future__ import annotations

import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ICON_SIZE = 48
DEFAULT_BACKGROUND = "#3C78DC"
DEFAULT_FOREGROUND = "#FFFFFF"
NEW_STOP_COLOR = "#888888"

ICON_STYLES = ("flat", "gradient")

# 3 or 6 hex digits, optional leading '#'. Must not run into further word characters,
# so "#ABCD" is not a token and "#4F46E5," is.
HEX_TOKEN = r"#?(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})(?![0-9A-Za-z_])"
_HEX_TOKEN_RE = re.compile(HEX_TOKEN)


def is_hex_token(value: str) -> bool:
    return bool(_HEX_TOKEN_RE.fullmatch(value or ""))


class IconSpec(BaseModel):
    """Structured view of an icon description. Derived on every read, never stored."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(DEFAULT_ICON_SIZE, gt=0)
    height: int = Field(DEFAULT_ICON_SIZE, gt=0)
    style: Literal["flat", "gradient"] = "flat"
    background_colors: list[str] = Field(default_factory=lambda: [DEFAULT_BACKGROUND], min_length=1)
    foreground_color: str = DEFAULT_FOREGROUND
    label: str | None = None

    @property
    def fill_mode(self) -> str:
        """What the rasterizer actually paints; the declared style is informational."""
        return "gradient" if len(self.background_colors) > 1 else "flat"


class _IconEditBase(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class _ColorEdit(_IconEditBase):
    color: str

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        if not is_hex_token(value):
            raise ValueError("color must be a hex color with 3 or 6 digits, e.g. #3C78DC")
        return value


class SetBackgroundAt(_ColorEdit):
    op: Literal["set_background_at"] = "set_background_at"
    index: int = Field(..., ge=0)


class AddBackgroundStop(_ColorEdit):
    op: Literal["add_background_stop"] = "add_background_stop"
    color: str = NEW_STOP_COLOR


class RemoveBackgroundAt(_IconEditBase):
    op: Literal["remove_background_at"] = "remove_background_at"
    index: int = Field(..., ge=0)


class SetForeground(_ColorEdit):
    op: Literal["set_foreground"] = "set_foreground"


IconEdit = Annotated[
    Union[SetBackgroundAt, AddBackgroundStop, RemoveBackgroundAt, SetForeground],
    Field(discriminator="op"),
]
