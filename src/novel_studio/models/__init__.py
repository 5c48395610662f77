"""Models module - chat model adapters for the writing assistant."""

from typing import Optional

from novel_studio.config import config

from .base import BaseChatModel
from .providers import DeepSeekModel, KimiModel, OpenAIModel, Provider, ProviderModel


def _normalize_model_name(model_name: Optional[str]) -> str:
    """Normalize a model name; blank falls back to the global config."""
    return (model_name or config.model_name or "deepseek").strip()


def get_client(model_name: Optional[str] = None) -> BaseChatModel:
    """Resolve a chat model client by provider or model name."""
    resolved_name = _normalize_model_name(model_name)
    lowered = resolved_name.lower()

    if lowered == "deepseek":
        return DeepSeekModel()
    if "deepseek" in lowered:
        return DeepSeekModel(model_name=resolved_name)
    if "moonshot" in lowered or "kimi" in lowered:
        return KimiModel(model_name=resolved_name)
    if lowered == "openai":
        return OpenAIModel()
    if lowered.startswith("gpt") or lowered.startswith("o1") or lowered.startswith("o3"):
        return OpenAIModel(model_name=resolved_name)
    raise ValueError(f"Unsupported model: {resolved_name}")


__all__ = [
    "BaseChatModel",
    "DeepSeekModel",
    "KimiModel",
    "OpenAIModel",
    "Provider",
    "ProviderModel",
    "get_client",
]
