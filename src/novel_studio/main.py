"""
Novel Studio - unified entry

One NovelStudio object per process holds the document store and its
persistence adapter; front ends call its methods and never touch the store
directly.
"""
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

from novel_studio import stats, transfer
from novel_studio.assistant import WritingAssistant, build_content_source
from novel_studio.config import config
from novel_studio.document_store import Clock, DocumentStore
from novel_studio.schema import Chapter, Character, EditorStats, PlotPoint, ProjectStats, Settings
from novel_studio.storage import FileKeyValueStore, PersistenceAdapter

logger = logging.getLogger(__name__)


class NovelStudio:
    """Novel Studio unified entry"""

    def __init__(self, persistence: PersistenceAdapter, clock: Optional[Clock] = None,
                 assistant: Optional[WritingAssistant] = None, autosave: bool = True):
        self.persistence = persistence
        self.clock = clock
        self.autosave = autosave
        self._assistant = assistant
        self.store = DocumentStore(clock=clock)

    @classmethod
    def open(cls, data_dir: Optional[str] = None, **kwargs: Any) -> "NovelStudio":
        """Open the file-backed studio under `data_dir` and load what is saved there."""
        kv = FileKeyValueStore(data_dir or config.data_dir)
        studio = cls(PersistenceAdapter(kv), **kwargs)
        studio.load()
        return studio

    # ==================== Lifecycle ====================

    def load(self) -> DocumentStore:
        self.store = self.persistence.load(clock=self.clock)
        return self.store

    def save(self):
        self.persistence.save(self.store)

    def _changed(self):
        if self.autosave:
            self.save()

    # ==================== Chapters ====================

    def create_chapter(self, title: str, content: str = "", number: Optional[int] = None) -> Chapter:
        chapter = self.store.create_chapter(title, content, number)
        self._changed()
        return chapter

    def update_chapter(self, chapter_id: str, title: Optional[str] = None,
                       content: Optional[str] = None, number: Optional[int] = None) -> Chapter:
        chapter = self.store.update_chapter(chapter_id, title=title, content=content, number=number)
        self._changed()
        return chapter

    def save_chapter_form(self, chapter_id: Optional[str], title: str, content: str = "",
                          number: Optional[int] = None) -> Chapter:
        chapter = self.store.save_chapter_form(chapter_id, title, content, number)
        self._changed()
        return chapter

    def save_editor_chapter(self, title: str, content: str) -> Chapter:
        chapter = self.store.save_editor_chapter(title, content)
        self._changed()
        return chapter

    def rename_current_chapter(self, title: str) -> Optional[Chapter]:
        chapter = self.store.rename_current_chapter(title)
        if chapter is not None:
            self._changed()
        self.persistence.save_last_chapter_id(self.store.current_chapter_id)
        return chapter

    def delete_chapter(self, chapter_id: str) -> bool:
        """:return: True when the editor buffer must be reset"""
        existed = chapter_id in self.store.chapters
        reset_editor = self.store.delete_chapter(chapter_id)
        if existed:
            self._changed()
        return reset_editor

    def new_chapter_buffer(self):
        """Start a blank editor: nothing is current until the next save."""
        self.set_current_chapter(None)

    def get_current_chapter(self) -> Optional[Chapter]:
        return self.store.get_current_chapter()

    def set_current_chapter(self, chapter_id: Optional[str]):
        self.store.set_current_chapter(chapter_id)
        self.persistence.save_last_chapter_id(self.store.current_chapter_id)

    # ==================== Characters ====================

    def create_character(self, name: str, role: str = "supporting", bio: str = "",
                         traits: str = "", notes: str = "") -> Character:
        character = self.store.create_character(name, role, bio, traits, notes)
        self._changed()
        return character

    def update_character(self, character_id: str, **fields: Optional[str]) -> Character:
        character = self.store.update_character(character_id, **fields)
        self._changed()
        return character

    def delete_character(self, character_id: str) -> bool:
        removed = self.store.delete_character(character_id)
        if removed:
            self._changed()
        return removed

    # ==================== Plot points ====================

    def create_plot_point(self, title: str, type: str = "exposition", chapter: str = "",
                          description: str = "") -> PlotPoint:
        point = self.store.create_plot_point(title, type, chapter, description)
        self._changed()
        return point

    def update_plot_point(self, plot_id: str, **fields: Optional[str]) -> PlotPoint:
        point = self.store.update_plot_point(plot_id, **fields)
        self._changed()
        return point

    def delete_plot_point(self, plot_id: str) -> bool:
        removed = self.store.delete_plot_point(plot_id)
        if removed:
            self._changed()
        return removed

    # ==================== Settings & stats ====================

    def update_settings(self, font_size: Optional[str] = None, font_family: Optional[str] = None,
                        line_height: Optional[str] = None) -> Settings:
        settings = self.store.update_settings(font_size, font_family, line_height)
        self._changed()
        return settings

    def compute_stats(self) -> ProjectStats:
        return stats.compute_stats(self.store)

    def editor_stats(self, text: Optional[str] = None) -> EditorStats:
        """Stats for the given text, or for the current chapter when no text is passed."""
        if text is None:
            current = self.get_current_chapter()
            text = current.content if current else ""
        return stats.editor_stats(text)

    # ==================== Import / export ====================

    def export_snapshot(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        return transfer.export_snapshot(self.store, now)

    def write_export(self, directory: str = ".", now: Optional[datetime] = None) -> str:
        """Write the export document into `directory` and return its path."""
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, transfer.export_filename(now))
        with open(path, 'w', encoding='utf-8') as f:
            f.write(transfer.dump_snapshot(self.export_snapshot(now)))
        logger.info("Exported data to %s", path)
        return path

    def import_snapshot(self, raw: transfer.RawDocument) -> transfer.ImportPatch:
        patch = transfer.import_snapshot(self.store, raw)
        self._changed()
        return patch

    def import_file(self, path: str) -> transfer.ImportPatch:
        with open(path, 'rb') as f:
            raw = f.read()
        return self.import_snapshot(raw)

    def clear_all(self):
        """Wipe everything. Ask the user twice before calling this."""
        transfer.clear_all(self.store, self.persistence)

    # ==================== Writing assistant ====================

    @property
    def assistant(self) -> WritingAssistant:
        if self._assistant is None:
            self._assistant = WritingAssistant(build_content_source())
        return self._assistant

    async def generate_suggestion(self, kind: Any, prompt: str = "",
                                  content: Optional[str] = None) -> str:
        """Ask the assistant for help with `content` (defaults to the current chapter)."""
        if content is None:
            current = self.get_current_chapter()
            content = current.content if current else ""
        return await self.assistant.generate(kind, content, prompt)
