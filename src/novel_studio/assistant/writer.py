"""Writing assistant: cosmetic latency in front of a pluggable content source."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Tuple

from novel_studio.config import config
from novel_studio.errors import ContentSourceError, ValidationError

from .sources import CannedContentSource, ChatModelContentSource, ContentSource, PromptKind

logger = logging.getLogger(__name__)


class WritingAssistant:
    """Produces suggestions and remembers the latest one for copy/insert."""

    def __init__(self, source: Optional[ContentSource] = None, delay: Optional[float] = None):
        self.source = source or CannedContentSource()
        self.delay = config.assistant_delay if delay is None else delay
        self.current_suggestion = ""

    async def generate(self, kind: Any, content: str = "", prompt: str = "") -> str:
        """Wait out the simulated latency, then ask the source for text off the event loop."""
        if self.delay > 0:
            await asyncio.sleep(self.delay)

        parsed = PromptKind.parse(kind)
        try:
            suggestion = await asyncio.to_thread(self.source.produce, parsed, content or "", prompt or "")
        except ContentSourceError as exc:
            logger.error("Content source failed for %s: %s", kind, exc)
            suggestion = f"Error: {exc}"

        self.current_suggestion = suggestion
        return suggestion

    def insert_suggestion(self, text: str, start: int, end: Optional[int] = None) -> Tuple[str, int]:
        """
        Splice the current suggestion into editor text, replacing [start:end].

        :return: (new text, cursor position just after the inserted suggestion)
        """
        if not self.current_suggestion:
            raise ValidationError("No suggestion to insert")
        text = text or ""
        start = max(0, min(start, len(text)))
        end = start if end is None else max(start, min(end, len(text)))
        new_text = text[:start] + self.current_suggestion + text[end:]
        return new_text, start + len(self.current_suggestion)


def build_content_source(backend: Optional[str] = None, client: Any = None) -> ContentSource:
    """Pick a content source by backend name ("canned" or "chat")."""
    backend = (backend or config.assistant_backend or "canned").strip().lower()
    if backend == "canned":
        return CannedContentSource()
    if backend == "chat":
        if client is None:
            from novel_studio.models import get_client
            client = get_client(config.model_name)
        return ChatModelContentSource(client)
    raise ValueError(f"Unknown assistant backend: {backend}")
