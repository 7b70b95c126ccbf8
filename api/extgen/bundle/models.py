from __future__ import annotations

import json
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..util import final_segment

FileKind = Literal["text", "binary-description"]

MARKUP_EXTENSIONS = (".html", ".htm")
STYLESHEET_EXTENSIONS = (".css",)

# Explorer groups, in display order.
FILE_GROUPS = ("Config", "Scripts", "Views", "Styles", "Images", "Misc")


class BundleFormatError(ValueError):
    """Generator output could not be decoded into a Bundle."""


class SourceFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(..., min_length=1)
    kind: FileKind = Field("text", alias="type")
    content: str = ""
    language: str | None = None

    @field_validator("path")
    @classmethod
    def validate_path(cls, value: str) -> str:
        value = value.strip().replace("\\", "/")
        while value.startswith("./"):
            value = value[2:]
        value = value.lstrip("/")
        if not value or value.endswith("/"):
            raise ValueError("path must name a file")
        return value

    @property
    def name(self) -> str:
        return final_segment(self.path)

    @property
    def is_markup(self) -> bool:
        return self.kind == "text" and self.path.lower().endswith(MARKUP_EXTENSIONS)

    @property
    def is_stylesheet(self) -> bool:
        return self.kind == "text" and self.path.lower().endswith(STYLESHEET_EXTENSIONS)


class Bundle(BaseModel):
    """Generated extension project: source files plus the two long-form guides."""

    model_config = ConfigDict(populate_by_name=True)

    files: list[SourceFile]
    testing_guide: str = ""
    security_review: str = ""

    @model_validator(mode="after")
    def validate_unique_paths(self) -> "Bundle":
        seen: set[str] = set()
        for f in self.files:
            if f.path in seen:
                raise ValueError(f"duplicate file path '{f.path}'")
            seen.add(f.path)
        return self

    def get(self, path: str) -> SourceFile | None:
        for f in self.files:
            if f.path == path:
                return f
        return None

    def set_content(self, path: str, content: str) -> SourceFile:
        """Replace one file's content in place. Files are never added or removed here."""
        f = self.get(path)
        if f is None:
            raise KeyError(path)
        f.content = content
        return f


def _strip_code_fence(text: str) -> str:
    text = (text or "").strip()
    text = re.sub(r"^```(?:json)?\s*", "", text, flags=re.IGNORECASE)
    text = re.sub(r"\s*```$", "", text)
    return text.strip()


def load_bundle(text: str) -> Bundle:
    """
    Decode the generator's JSON reply into a Bundle.

    The model is asked for bare JSON but sometimes wraps it in a markdown fence.
    """
    raw = _strip_code_fence(text) or "{}"
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        raise BundleFormatError(f"Received malformed JSON from the generator: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("files"), list):
        raise BundleFormatError("Incomplete data received. Files array is missing.")

    try:
        return Bundle.model_validate(data)
    except ValidationError as e:
        raise BundleFormatError(f"Bundle failed validation: {e.error_count()} error(s): {e.errors()[0]['msg']}") from e


def file_group(path: str) -> str:
    p = (path or "").lower()
    if p.endswith(".json"):
        return "Config"
    if p.endswith((".js", ".ts", ".jsx")):
        return "Scripts"
    if p.endswith(MARKUP_EXTENSIONS):
        return "Views"
    if p.endswith(".css"):
        return "Styles"
    if p.endswith((".png", ".ico", ".jpg")):
        return "Images"
    return "Misc"


def group_files(files: list[SourceFile]) -> dict[str, list[SourceFile]]:
    groups: dict[str, list[SourceFile]] = {name: [] for name in FILE_GROUPS}
    for f in files:
        groups[file_group(f.path)].append(f)
    return {name: members for name, members in groups.items() if members}
