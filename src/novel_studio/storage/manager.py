"""
Storage manager

Durable key-value slots holding strings, the local equivalent of the browser
storage the editor writes to.
"""
import logging
import os
import tempfile
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class MemoryKeyValueStore:
    """Slots kept in a dict; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    def remove(self, key: str) -> None:
        self._slots.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._slots)


class FileKeyValueStore:
    """Storage manager - one UTF-8 file per slot under a data directory"""

    def __init__(self, base_dir: str = "./novel_data"):
        """
        :param base_dir: directory holding the slot files
        """
        self.base_dir = base_dir
        self._ensure_dir(base_dir)

    def _ensure_dir(self, path: str):
        if not os.path.exists(path):
            os.makedirs(path)

    def _slot_path(self, key: str) -> str:
        # Slot names become file names; strip anything that is not filename-safe
        safe_name = "".join(c for c in key if c.isalnum() or c in ('_', '-', '.')).strip('.')
        if not safe_name:
            raise ValueError(f"Invalid slot name: {key!r}")
        return os.path.join(self.base_dir, safe_name)

    def get(self, key: str) -> Optional[str]:
        """
        Read a slot
        :param key: slot name
        :return: stored text, or None when the slot does not exist
        """
        path = self._slot_path(key)
        if not os.path.exists(path):
            return None

        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        """
        Overwrite a slot. The text goes to a temp file first and is moved into
        place, so a crash never leaves a half-written slot.
        """
        path = self._slot_path(key)
        self._ensure_dir(self.base_dir)
        fd, tmp_path = tempfile.mkstemp(dir=self.base_dir, prefix=".slot-", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(value)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug("Slot %s written to %s", key, path)

    def remove(self, key: str) -> None:
        path = self._slot_path(key)
        if os.path.exists(path):
            os.remove(path)
            logger.debug("Slot %s removed", key)

    def keys(self) -> List[str]:
        if not os.path.exists(self.base_dir):
            return []
        return sorted(
            f for f in os.listdir(self.base_dir)
            if os.path.isfile(os.path.join(self.base_dir, f)) and not f.startswith('.')
        )
