"""Shared chat model base wrapping an OpenAI-compatible endpoint."""

import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful fiction-writing assistant."


class BaseChatModel:
    """Chat completion client built on the OpenAI SDK."""

    def __init__(self, api_key: Optional[str], model_name: str, base_url: Optional[str],
                 missing_key_error: str):
        self.api_key = api_key
        self.model_name = model_name
        if not self.api_key:
            raise ValueError(missing_key_error)

        self.client = OpenAI(api_key=self.api_key, base_url=base_url)

    def _prepare_messages(
        self,
        prompt: str,
        history: Optional[List[Dict[str, Any]]] = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = [{"role": "system", "content": system_prompt}]
        if history:
            messages.extend(history)
        messages.append({"role": "user", "content": prompt})
        return messages

    def chat(
        self,
        prompt: str,
        history: Optional[List[Dict[str, Any]]] = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        **kwargs: Any,
    ) -> str:
        """Blocking chat call; failures come back as an "Error: ..." string."""
        try:
            messages = self._prepare_messages(prompt, history, system_prompt)
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                stream=False,
                **kwargs,
            )
            return response.choices[0].message.content or ""
        except Exception as exc:
            logger.error("Chat request to %s failed: %s", self.model_name, exc)
            return f"Error: {exc}"
