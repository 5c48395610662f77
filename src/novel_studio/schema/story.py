"""
Novel Studio data model

Core entities of a writing project: chapters, characters, plot points and
editor settings. Entities serialize to the camelCase JSON shape used by the
storage slot and the export file.
"""
import random
import string
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from novel_studio.errors import ValidationError


_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_RANDOM_LENGTH = 11


class CharacterRole(Enum):
    """Character roles offered by the editor UI (not enforced by the store)"""
    PROTAGONIST = "protagonist"
    ANTAGONIST = "antagonist"
    SUPPORTING = "supporting"
    MINOR = "minor"


class PlotPointType(Enum):
    """Story structure categories, declared in timeline order"""
    EXPOSITION = "exposition"
    RISING_ACTION = "rising-action"
    CLIMAX = "climax"
    FALLING_ACTION = "falling-action"
    RESOLUTION = "resolution"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


PLOT_TYPE_ORDER = [t.value for t in PlotPointType]


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_ID_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Millisecond timestamp in base 36 followed by a random base-36 tail."""
    stamp = _to_base36(int(time.time() * 1000))
    tail = "".join(random.choices(_ID_ALPHABET, k=_ID_RANDOM_LENGTH))
    return stamp + tail


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 with millisecond precision and a trailing Z, e.g. 2024-05-01T09:30:00.000Z"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored timestamp; returns None for anything unreadable."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def require_text(value: Optional[str], field_name: str) -> str:
    """Trim a required text field, raising ValidationError when it is blank."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"Please enter a {field_name}")
    return text


def _str_field(data: Mapping[str, Any], key: str, default: str = "") -> str:
    value = data.get(key, default)
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


@dataclass
class Chapter:
    """A chapter of the manuscript"""
    id: str
    number: Any                         # int when created here; imported data may carry anything
    title: str
    content: str = ""
    created_at: str = ""
    last_modified: str = ""

    @classmethod
    def new(cls, title: str, content: str = "", number: int = 1,
            now: Optional[datetime] = None) -> "Chapter":
        stamp = format_timestamp(now or utc_now())
        return cls(
            id=generate_id(),
            number=number,
            title=require_text(title, "chapter title"),
            content=content or "",
            created_at=stamp,
            last_modified=stamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "content": self.content,
            "createdAt": self.created_at,
            "lastModified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Chapter":
        created = _str_field(data, "createdAt")
        return cls(
            id=_str_field(data, "id") or generate_id(),
            number=data.get("number"),
            title=_str_field(data, "title"),
            content=_str_field(data, "content"),
            created_at=created,
            last_modified=_str_field(data, "lastModified", created),
        )


@dataclass
class Character:
    """A character profile"""
    id: str
    name: str
    role: str = CharacterRole.SUPPORTING.value
    bio: str = ""
    traits: str = ""
    notes: str = ""
    created_at: str = ""

    @classmethod
    def new(cls, name: str, role: str = CharacterRole.SUPPORTING.value, bio: str = "",
            traits: str = "", notes: str = "", now: Optional[datetime] = None) -> "Character":
        return cls(
            id=generate_id(),
            name=require_text(name, "character name"),
            role=role or "",
            bio=bio or "",
            traits=traits or "",
            notes=notes or "",
            created_at=format_timestamp(now or utc_now()),
        )

    @property
    def role_enum(self) -> Optional[CharacterRole]:
        try:
            return CharacterRole(self.role)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "bio": self.bio,
            "traits": self.traits,
            "notes": self.notes,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Character":
        return cls(
            id=_str_field(data, "id") or generate_id(),
            name=_str_field(data, "name"),
            role=_str_field(data, "role"),
            bio=_str_field(data, "bio"),
            traits=_str_field(data, "traits"),
            notes=_str_field(data, "notes"),
            created_at=_str_field(data, "createdAt"),
        )


@dataclass
class PlotPoint:
    """A beat on the plot timeline; `chapter` is a free-text reference"""
    id: str
    title: str
    type: str = PlotPointType.EXPOSITION.value
    chapter: str = ""
    description: str = ""
    created_at: str = ""

    @classmethod
    def new(cls, title: str, type: str = PlotPointType.EXPOSITION.value, chapter: str = "",
            description: str = "", now: Optional[datetime] = None) -> "PlotPoint":
        return cls(
            id=generate_id(),
            title=require_text(title, "plot point title"),
            type=type or "",
            chapter=(chapter or "").strip(),
            description=description or "",
            created_at=format_timestamp(now or utc_now()),
        )

    @property
    def type_label(self) -> str:
        try:
            return PlotPointType(self.type).label
        except ValueError:
            return self.type

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "chapter": self.chapter,
            "description": self.description,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlotPoint":
        return cls(
            id=_str_field(data, "id") or generate_id(),
            title=_str_field(data, "title"),
            type=_str_field(data, "type"),
            chapter=_str_field(data, "chapter"),
            description=_str_field(data, "description"),
            created_at=_str_field(data, "createdAt"),
        )


@dataclass
class Settings:
    """Editor appearance; values are kept as strings like the form fields they come from"""
    font_size: str = "16"
    font_family: str = "'Georgia', serif"
    line_height: str = "1.8"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fontSize": self.font_size,
            "fontFamily": self.font_family,
            "lineHeight": self.line_height,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        defaults = cls()
        return cls(
            font_size=_str_field(data, "fontSize", defaults.font_size),
            font_family=_str_field(data, "fontFamily", defaults.font_family),
            line_height=_str_field(data, "lineHeight", defaults.line_height),
        )


@dataclass
class ProjectStats:
    """Sidebar counters"""
    chapter_count: int = 0
    character_count: int = 0
    plot_point_count: int = 0
    total_words: int = 0


@dataclass
class EditorStats:
    """Counters for the text currently in the editor"""
    words: int = 0
    characters: int = 0
    reading_minutes: int = 0
