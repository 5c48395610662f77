"""
Persistence adapter

Serializes the whole document store into one slot and the last active chapter
id into a second, independent slot. Loading never fails: a missing or broken
slot yields a default store.
"""
import json
import logging
from typing import Any, Dict, Optional

from novel_studio.config import config
from novel_studio.document_store import Clock, DocumentStore
from novel_studio.errors import PersistenceError

logger = logging.getLogger(__name__)


class PersistenceAdapter:
    """Reads and writes a DocumentStore through a key-value store."""

    def __init__(self, kv: Any, data_slot: Optional[str] = None,
                 last_chapter_slot: Optional[str] = None):
        """
        :param kv: object with get(key) / set(key, value) / remove(key)
        :param data_slot: slot for the document blob
        :param last_chapter_slot: slot for the last active chapter id
        """
        self.kv = kv
        self.data_slot = data_slot or config.data_slot
        self.last_chapter_slot = last_chapter_slot or config.last_chapter_slot

    def save(self, store: DocumentStore):
        """Overwrite both slots with the current state."""
        payload = json.dumps(store.to_dict(), ensure_ascii=False)
        self.kv.set(self.data_slot, payload)
        self.kv.set(self.last_chapter_slot, store.current_chapter_id or "")
        logger.debug("Document saved to slot %s (%d bytes)", self.data_slot, len(payload))

    def save_last_chapter_id(self, chapter_id: Optional[str]):
        self.kv.set(self.last_chapter_slot, chapter_id or "")

    def load_last_chapter_id(self) -> Optional[str]:
        """
        :return: None when the slot is absent, "" when it holds no chapter
        """
        return self.kv.get(self.last_chapter_slot)

    def _read_blob(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self.kv.get(self.data_slot)
        except UnicodeDecodeError as exc:
            raise PersistenceError(f"Slot {self.data_slot} is not valid UTF-8: {exc}") from exc
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise PersistenceError(f"Slot {self.data_slot} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"Slot {self.data_slot} does not hold a JSON object")
        return data

    def load(self, clock: Optional[Clock] = None) -> DocumentStore:
        """
        Rebuild the store from storage.

        The last-chapter slot takes precedence over the pointer stored in the
        blob whenever it exists; an empty value there means no chapter is open.
        """
        try:
            data = self._read_blob()
        except (PersistenceError, OSError) as exc:
            logger.warning("Could not load saved data, starting empty: %s", exc, exc_info=True)
            data = None

        if data is None:
            store = DocumentStore(clock=clock)
        else:
            store = DocumentStore.from_dict(data, clock=clock)
            logger.info(
                "Loaded %d chapters, %d characters, %d plot points",
                len(store.chapters), len(store.characters), len(store.plot_points),
            )

        try:
            last_chapter_id = self.load_last_chapter_id()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read last chapter slot: %s", exc)
            last_chapter_id = None
        if last_chapter_id is not None:
            store.set_current_chapter(last_chapter_id.strip() or None)

        if store.current_chapter_id and store.get_current_chapter() is None:
            logger.info("Last chapter %s no longer exists", store.current_chapter_id)
            store.set_current_chapter(None)
        return store

    def clear(self):
        """Remove both slots."""
        self.kv.remove(self.data_slot)
        self.kv.remove(self.last_chapter_slot)
        logger.info("Removed slots %s and %s", self.data_slot, self.last_chapter_slot)
