"""
Provider adapters

Each provider is an OpenAI-compatible endpoint described by the environment
variable holding its key, its default model and its base URL.
"""
import os
from dataclasses import dataclass
from typing import Optional

from .base import BaseChatModel


@dataclass(frozen=True)
class Provider:
    key_env: str
    default_model: str
    base_url: Optional[str] = None
    base_url_env: Optional[str] = None

    def resolve_base_url(self) -> Optional[str]:
        if self.base_url_env and os.getenv(self.base_url_env):
            return os.getenv(self.base_url_env)
        return self.base_url


DEEPSEEK = Provider("DEEPSEEK_API_KEY", "deepseek-chat", "https://api.deepseek.com")
MOONSHOT = Provider("MOONSHOT_API_KEY", "kimi-k2.5", "https://api.moonshot.cn/v1")
OPENAI = Provider("OPENAI_API_KEY", "gpt-4o-mini", base_url_env="OPENAI_BASE_URL")


class ProviderModel(BaseChatModel):
    provider: Provider

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        super().__init__(
            api_key=api_key or os.getenv(self.provider.key_env),
            model_name=model_name or self.provider.default_model,
            base_url=self.provider.resolve_base_url(),
            missing_key_error=f"{self.provider.key_env} not found.",
        )


class DeepSeekModel(ProviderModel):
    provider = DEEPSEEK


class KimiModel(ProviderModel):
    provider = MOONSHOT


class OpenAIModel(ProviderModel):
    provider = OPENAI
