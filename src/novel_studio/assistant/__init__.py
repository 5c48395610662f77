"""Assistant module - writing suggestions behind a pluggable content source."""
from .sources import CannedContentSource, ChatModelContentSource, ContentSource, PromptKind
from .writer import WritingAssistant, build_content_source

__all__ = [
    "CannedContentSource",
    "ChatModelContentSource",
    "ContentSource",
    "PromptKind",
    "WritingAssistant",
    "build_content_source",
]
