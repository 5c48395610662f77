"""Content sources for the writing assistant."""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, List, Optional

from novel_studio.errors import ContentSourceError

from . import templates

logger = logging.getLogger(__name__)

MIN_CONTEXT_CHARS = 50
MIN_REWRITE_CHARS = 10
CHAT_CONTEXT_CHARS = 3000


class PromptKind(Enum):
    """Kinds of help the assistant panel offers"""
    CONTINUE = "continue"
    DIALOGUE = "dialogue"
    DESCRIPTION = "description"
    PLOT_HOLE = "plot-hole"
    REWRITE = "rewrite"
    BRAINSTORM = "brainstorm"
    OUTLINE = "outline"
    CONFLICT = "conflict"
    ENDING = "ending"

    @classmethod
    def parse(cls, value: Any) -> Optional["PromptKind"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return None


class ContentSource:
    """Given a prompt kind, the editor text and an optional user prompt, produce suggested text."""

    def produce(self, kind: Optional[PromptKind], content: str, prompt: str) -> str:
        raise NotImplementedError


class CannedContentSource(ContentSource):
    """Offline source that picks from fixed templates at random."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def _pick(self, options: List[str]) -> str:
        return self.rng.choice(options)

    def produce(self, kind: Optional[PromptKind], content: str, prompt: str) -> str:
        content = content or ""
        prompt = (prompt or "").strip()

        if kind is PromptKind.CONTINUE:
            selected = self._pick(templates.CONTINUATIONS)
            if len(content) < MIN_CONTEXT_CHARS:
                return f"{templates.SHORT_CONTENT_PREFACE} {selected}"
            if prompt:
                return f'{selected}\n\nBased on your input: "{prompt}"\n\n{templates.CONTINUE_PROMPT_TAIL}'
            return selected

        if kind is PromptKind.DIALOGUE:
            return self._framed(templates.DIALOGUES, prompt, "Scene: {prompt}\n\n")

        if kind is PromptKind.DESCRIPTION:
            return self._framed(templates.DESCRIPTIONS, prompt, "Description of {prompt}:\n\n")

        if kind is PromptKind.PLOT_HOLE:
            return self._framed(templates.PLOT_SOLUTIONS, prompt, "Addressing: {prompt}\n\n")

        if kind is PromptKind.REWRITE:
            if len(content) < MIN_REWRITE_CHARS:
                return templates.REWRITE_NEEDS_CONTENT
            return self._framed(templates.REWRITES, prompt, 'Based on your suggestion: "{prompt}"\n\n')

        if kind is PromptKind.BRAINSTORM:
            return self._pick(templates.BRAINSTORMS)

        if kind is PromptKind.OUTLINE:
            return self._pick(templates.OUTLINES).format(topic=prompt or "Untitled Chapter")

        if kind is PromptKind.CONFLICT:
            return self._framed(templates.CONFLICTS, prompt, "Conflict for: {prompt}\n\n")

        if kind is PromptKind.ENDING:
            return self._framed(templates.ENDINGS, prompt, "Ending for: {prompt}\n\n")

        return templates.UNKNOWN_KIND

    def _framed(self, options: List[str], prompt: str, prefix: str) -> str:
        selected = self._pick(options)
        if prompt:
            return prefix.format(prompt=prompt) + selected
        return selected


_KIND_INSTRUCTIONS = {
    PromptKind.CONTINUE: "Continue the story from where the draft stops, matching its voice.",
    PromptKind.DIALOGUE: "Write a short dialogue exchange for the scene.",
    PromptKind.DESCRIPTION: "Write a vivid descriptive paragraph.",
    PromptKind.PLOT_HOLE: "Suggest a way to resolve the plot problem.",
    PromptKind.REWRITE: "Rewrite the end of the draft to improve it.",
    PromptKind.BRAINSTORM: "Brainstorm a short bulleted list of story ideas.",
    PromptKind.OUTLINE: "Propose a chapter outline.",
    PromptKind.CONFLICT: "Suggest ways to add conflict and tension.",
    PromptKind.ENDING: "Suggest possible endings for the chapter or scene.",
}


class ChatModelContentSource(ContentSource):
    """Source backed by a chat model client (see novel_studio.models)."""

    def __init__(self, client: Any, context_chars: int = CHAT_CONTEXT_CHARS):
        self.client = client
        self.context_chars = context_chars

    def build_prompt(self, kind: PromptKind, content: str, prompt: str) -> str:
        lines = [_KIND_INSTRUCTIONS[kind]]
        if prompt:
            lines.append(f"Writer's request: {prompt}")
        excerpt = (content or "")[-self.context_chars:]
        if excerpt.strip():
            lines.append("Current draft (tail):\n" + excerpt)
        return "\n\n".join(lines)

    def produce(self, kind: Optional[PromptKind], content: str, prompt: str) -> str:
        if kind is None:
            return templates.UNKNOWN_KIND
        text = self.client.chat(self.build_prompt(kind, content, (prompt or "").strip()))
        if not isinstance(text, str):
            raise ContentSourceError("Chat model returned no text")
        return text
