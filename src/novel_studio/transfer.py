"""
Import / export gateway

Export writes a portable JSON document without editor-session state. Import
replaces each top-level collection that the document carries and keeps the
others; only a payload that is not a JSON object is rejected.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from novel_studio.document_store import DocumentStore, collection_entries
from novel_studio.errors import DataImportError
from novel_studio.schema import Chapter, Character, PlotPoint, Settings, format_timestamp, utc_now

logger = logging.getLogger(__name__)

EXPORT_FILENAME_TEMPLATE = "novel-writer-backup-{date}.json"

RawDocument = Union[str, bytes, bytearray, Mapping[str, Any]]


@dataclass
class ImportPatch:
    """Top-level replace-or-keep patch; None means "leave as is"."""
    chapters: Optional[List[Chapter]] = None
    characters: Optional[List[Character]] = None
    plot_points: Optional[List[PlotPoint]] = None
    settings: Optional[Settings] = None

    def is_empty(self) -> bool:
        return (
            self.chapters is None
            and self.characters is None
            and self.plot_points is None
            and self.settings is None
        )

    def touched_keys(self) -> List[str]:
        keys = []
        if self.chapters is not None:
            keys.append("chapters")
        if self.characters is not None:
            keys.append("characters")
        if self.plot_points is not None:
            keys.append("plotPoints")
        if self.settings is not None:
            keys.append("settings")
        return keys


def export_snapshot(store: DocumentStore, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Portable document: collections, settings and an export timestamp."""
    data = store.to_dict()
    return {
        "chapters": data["chapters"],
        "characters": data["characters"],
        "plotPoints": data["plotPoints"],
        "settings": data["settings"],
        "exportedAt": format_timestamp(now or utc_now()),
    }


def export_filename(now: Optional[datetime] = None) -> str:
    """Backup file name carrying the export date, e.g. novel-writer-backup-2024-05-01.json"""
    moment = now or utc_now()
    return EXPORT_FILENAME_TEMPLATE.format(date=format_timestamp(moment).split("T")[0])


def dump_snapshot(snapshot: Mapping[str, Any]) -> str:
    return json.dumps(snapshot, ensure_ascii=False, indent=2)


def parse_import(raw: RawDocument) -> ImportPatch:
    """
    Turn untrusted input into a patch.

    :raises DataImportError: the input is not JSON, or not a JSON object
    """
    if isinstance(raw, Mapping):
        data = raw
    else:
        try:
            if isinstance(raw, (bytes, bytearray)):
                raw = raw.decode("utf-8-sig")
            data = json.loads(raw)
        except (UnicodeDecodeError, ValueError, TypeError) as exc:
            raise DataImportError(
                "Error importing data. Please check the file format."
            ) from exc

    if not isinstance(data, Mapping):
        raise DataImportError("Error importing data. Expected a JSON object at the top level.")

    patch = ImportPatch()
    if _carries(data, "chapters"):
        patch.chapters = [Chapter.from_dict(d) for d in collection_entries(data["chapters"], "chapters")]
    if _carries(data, "characters"):
        patch.characters = [Character.from_dict(d) for d in collection_entries(data["characters"], "characters")]
    if _carries(data, "plotPoints"):
        patch.plot_points = [PlotPoint.from_dict(d) for d in collection_entries(data["plotPoints"], "plotPoints")]
    if _carries(data, "settings"):
        settings = data["settings"]
        if isinstance(settings, Mapping):
            patch.settings = Settings.from_dict(settings)
        else:
            logger.warning("Imported settings are not an object; using defaults")
            patch.settings = Settings()
    return patch


def _carries(data: Mapping[str, Any], key: str) -> bool:
    """A key counts when it holds a list or object, or any other truthy value."""
    value = data.get(key)
    return isinstance(value, (list, Mapping)) or bool(value)


def apply_import(store: DocumentStore, patch: ImportPatch):
    """Apply a patch key by key. The current-chapter pointer is left alone."""
    kwargs: Dict[str, Any] = {}
    if patch.chapters is not None:
        kwargs["chapters"] = patch.chapters
    if patch.characters is not None:
        kwargs["characters"] = patch.characters
    if patch.plot_points is not None:
        kwargs["plot_points"] = patch.plot_points
    if patch.settings is not None:
        kwargs["settings"] = patch.settings
    store.replace(**kwargs)
    logger.info("Imported keys: %s", ", ".join(patch.touched_keys()) or "(none)")


def import_snapshot(store: DocumentStore, raw: RawDocument) -> ImportPatch:
    """Parse then apply; a parse failure leaves the store untouched."""
    patch = parse_import(raw)
    apply_import(store, patch)
    return patch


def clear_all(store: DocumentStore, persistence: Any):
    """
    Empty every collection, drop the pointer and remove both storage slots.
    Callers must confirm with the user first; nothing is asked here.
    """
    store.reset()
    persistence.clear()
    logger.info("All data cleared")
