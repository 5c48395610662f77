"""
Document store

In-memory aggregate of chapters, characters, plot points, editor settings and
the current-chapter pointer. All create/update/delete rules live here; the
persistence layer and the front ends only call into it.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from novel_studio.errors import NotFoundError
from novel_studio.schema import (
    PLOT_TYPE_ORDER,
    Chapter,
    Character,
    PlotPoint,
    Settings,
    format_timestamp,
    parse_timestamp,
    utc_now,
)
from novel_studio.schema.story import require_text

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_UNSET: Any = object()


def chapter_sort_key(chapter: Chapter) -> Tuple[int, float]:
    """Numeric chapter numbers first, ascending; anything else after them."""
    number = chapter.number
    if isinstance(number, bool) or not isinstance(number, (int, float)):
        return (1, 0)
    return (0, number)


def plot_sort_key(point: PlotPoint) -> int:
    """Rank in the story-structure order; unknown types rank after every known one."""
    try:
        return PLOT_TYPE_ORDER.index(point.type)
    except ValueError:
        return len(PLOT_TYPE_ORDER)


class DocumentStore:
    """Owns the three collections, the settings record and the current-chapter pointer."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock: Clock = clock or utc_now
        self.chapters: Dict[str, Chapter] = {}
        self.characters: Dict[str, Character] = {}
        self.plot_points: Dict[str, PlotPoint] = {}
        self.settings = Settings()
        self.current_chapter_id: Optional[str] = None

    # ==================== Chapters ====================

    def create_chapter(self, title: str, content: str = "",
                       number: Optional[int] = None) -> Chapter:
        """Append a chapter; `number` defaults to the next position."""
        if number is None:
            number = len(self.chapters) + 1
        chapter = Chapter.new(title, content, number, now=self._clock())
        self.chapters[chapter.id] = chapter
        logger.info("Chapter created: %s (%s)", chapter.id, chapter.title)
        return chapter

    def update_chapter(self, chapter_id: str, title: Optional[str] = None,
                       content: Optional[str] = None, number: Optional[int] = None) -> Chapter:
        chapter = self.chapters.get(chapter_id)
        if chapter is None:
            raise NotFoundError("Chapter", chapter_id)

        # Imported chapters may carry a blank title; an update still needs a real one
        new_title = require_text(chapter.title if title is None else title, "chapter title")

        if title is not None:
            chapter.title = new_title
        if content is not None:
            chapter.content = content
        if number is not None:
            chapter.number = number
        self._touch(chapter)
        return chapter

    def save_chapter_form(self, chapter_id: Optional[str], title: str,
                          content: str = "", number: Optional[int] = None) -> Chapter:
        """
        Create or update a chapter from the chapter dialog, then re-sort the
        collection so iteration order follows chapter numbers.
        """
        if chapter_id is None:
            chapter = self.create_chapter(title, content, number)
        else:
            chapter = self.update_chapter(chapter_id, title=title, content=content, number=number)
        self._resort_chapters()
        return chapter

    def save_editor_chapter(self, title: str, content: str) -> Chapter:
        """
        Save the editor buffer: update the current chapter, or create one and
        make it current when nothing is open.
        """
        current = self.get_current_chapter()
        if current is not None:
            return self.update_chapter(current.id, title=title, content=content)

        chapter = self.create_chapter(title, content)
        self.current_chapter_id = chapter.id
        return chapter

    def rename_current_chapter(self, title: str) -> Optional[Chapter]:
        """Live title edit from the editor; blank titles are ignored."""
        current = self.get_current_chapter()
        if current is None or not (title or "").strip():
            return None
        return self.update_chapter(current.id, title=title)

    def delete_chapter(self, chapter_id: str) -> bool:
        """
        Remove a chapter. Unknown ids are ignored.

        :return: True when the deleted chapter was the current one; the
                 pointer is cleared and the caller should empty its editor.
        """
        if self.chapters.pop(chapter_id, None) is None:
            return False
        logger.info("Chapter deleted: %s", chapter_id)
        if self.current_chapter_id == chapter_id:
            self.current_chapter_id = None
            return True
        return False

    def get_chapter(self, chapter_id: str) -> Optional[Chapter]:
        return self.chapters.get(chapter_id)

    def list_chapters(self) -> List[Chapter]:
        return sorted(self.chapters.values(), key=chapter_sort_key)

    def _resort_chapters(self):
        self.chapters = {c.id: c for c in self.list_chapters()}

    def _touch(self, chapter: Chapter):
        """Refresh lastModified without ever moving it backwards."""
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        floor = [
            stamp for stamp in (parse_timestamp(chapter.last_modified), parse_timestamp(chapter.created_at))
            if stamp is not None
        ]
        if floor and now < max(floor):
            now = max(floor)
        chapter.last_modified = format_timestamp(now)

    # ==================== Current chapter ====================

    def set_current_chapter(self, chapter_id: Optional[str]):
        """Point the editor at a chapter. The id is not checked; reads resolve it."""
        self.current_chapter_id = chapter_id or None

    def get_current_chapter(self) -> Optional[Chapter]:
        if self.current_chapter_id is None:
            return None
        return self.chapters.get(self.current_chapter_id)

    # ==================== Characters ====================

    def create_character(self, name: str, role: str = "supporting", bio: str = "",
                         traits: str = "", notes: str = "") -> Character:
        character = Character.new(name, role, bio, traits, notes, now=self._clock())
        self.characters[character.id] = character
        logger.info("Character created: %s (%s)", character.id, character.name)
        return character

    def update_character(self, character_id: str, name: Optional[str] = None,
                         role: Optional[str] = None, bio: Optional[str] = None,
                         traits: Optional[str] = None, notes: Optional[str] = None) -> Character:
        character = self.characters.get(character_id)
        if character is None:
            raise NotFoundError("Character", character_id)

        new_name = require_text(character.name if name is None else name, "character name")
        if name is not None:
            character.name = new_name
        if role is not None:
            character.role = role
        if bio is not None:
            character.bio = bio
        if traits is not None:
            character.traits = traits
        if notes is not None:
            character.notes = notes
        return character

    def delete_character(self, character_id: str) -> bool:
        removed = self.characters.pop(character_id, None) is not None
        if removed:
            logger.info("Character deleted: %s", character_id)
        return removed

    def get_character(self, character_id: str) -> Optional[Character]:
        return self.characters.get(character_id)

    def list_characters(self) -> List[Character]:
        return list(self.characters.values())

    # ==================== Plot points ====================

    def create_plot_point(self, title: str, type: str = "exposition", chapter: str = "",
                          description: str = "") -> PlotPoint:
        point = PlotPoint.new(title, type, chapter, description, now=self._clock())
        self.plot_points[point.id] = point
        logger.info("Plot point created: %s (%s)", point.id, point.title)
        return point

    def update_plot_point(self, plot_id: str, title: Optional[str] = None,
                          type: Optional[str] = None, chapter: Optional[str] = None,
                          description: Optional[str] = None) -> PlotPoint:
        point = self.plot_points.get(plot_id)
        if point is None:
            raise NotFoundError("Plot point", plot_id)

        new_title = require_text(point.title if title is None else title, "plot point title")
        if title is not None:
            point.title = new_title
        if type is not None:
            point.type = type
        if chapter is not None:
            point.chapter = chapter.strip()
        if description is not None:
            point.description = description
        return point

    def delete_plot_point(self, plot_id: str) -> bool:
        removed = self.plot_points.pop(plot_id, None) is not None
        if removed:
            logger.info("Plot point deleted: %s", plot_id)
        return removed

    def get_plot_point(self, plot_id: str) -> Optional[PlotPoint]:
        return self.plot_points.get(plot_id)

    def list_plot_points(self) -> List[PlotPoint]:
        return sorted(self.plot_points.values(), key=plot_sort_key)

    # ==================== Settings ====================

    def update_settings(self, font_size: Optional[str] = None, font_family: Optional[str] = None,
                        line_height: Optional[str] = None) -> Settings:
        if font_size is not None:
            self.settings.font_size = str(font_size)
        if font_family is not None:
            self.settings.font_family = font_family
        if line_height is not None:
            self.settings.line_height = str(line_height)
        return self.settings

    # ==================== Bulk operations ====================

    def replace(self, chapters: Any = _UNSET, characters: Any = _UNSET,
                plot_points: Any = _UNSET, settings: Any = _UNSET):
        """Swap whole collections; arguments left out keep their current value."""
        if chapters is not _UNSET:
            self.chapters = _index(chapters)
        if characters is not _UNSET:
            self.characters = _index(characters)
        if plot_points is not _UNSET:
            self.plot_points = _index(plot_points)
        if settings is not _UNSET:
            self.settings = settings

    def reset(self):
        """Empty the collections and clear the pointer. Settings are kept."""
        self.chapters = {}
        self.characters = {}
        self.plot_points = {}
        self.current_chapter_id = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chapters": [c.to_dict() for c in self.chapters.values()],
            "characters": [c.to_dict() for c in self.characters.values()],
            "plotPoints": [p.to_dict() for p in self.plot_points.values()],
            "settings": self.settings.to_dict(),
            "currentChapterId": self.current_chapter_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], clock: Optional[Clock] = None) -> "DocumentStore":
        """Lenient rebuild from the storage-slot shape; nothing is validated."""
        store = cls(clock=clock)
        store.chapters = _index(Chapter.from_dict(d) for d in collection_entries(data.get("chapters"), "chapters"))
        store.characters = _index(Character.from_dict(d) for d in collection_entries(data.get("characters"), "characters"))
        store.plot_points = _index(PlotPoint.from_dict(d) for d in collection_entries(data.get("plotPoints"), "plotPoints"))
        settings = data.get("settings")
        store.settings = Settings.from_dict(settings) if isinstance(settings, Mapping) else Settings()
        current = data.get("currentChapterId")
        store.current_chapter_id = current if isinstance(current, str) and current else None
        return store

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocumentStore):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"DocumentStore(chapters={len(self.chapters)}, characters={len(self.characters)}, "
            f"plot_points={len(self.plot_points)}, current={self.current_chapter_id!r})"
        )


def _index(entities: Iterable[Any]) -> Dict[str, Any]:
    # Later duplicates overwrite earlier ones but keep the first position
    indexed: Dict[str, Any] = {}
    for entity in entities:
        if entity.id in indexed:
            logger.warning("Duplicate %s id %s; keeping the later entry", type(entity).__name__, entity.id)
        indexed[entity.id] = entity
    return indexed


def collection_entries(value: Any, key: str) -> List[Mapping[str, Any]]:
    """Keep the object entries of a collection value, logging what gets dropped."""
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("Ignoring %s: expected a list, got %s", key, type(value).__name__)
        return []
    entries = [item for item in value if isinstance(item, Mapping)]
    if len(entries) != len(value):
        logger.warning("Dropped %d malformed %s entries", len(value) - len(entries), key)
    return entries
