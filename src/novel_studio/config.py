"""
Configuration management
"""
import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean environment variable, falling back to the default on bad values."""
    value = os.getenv(name)
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to the default on bad values."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value.strip())
    except ValueError:
        return default


@dataclass
class Config:
    """Global configuration"""

    # Storage
    data_dir: str = "./novel_data"
    data_slot: str = "novelWriterData"
    last_chapter_slot: str = "lastChapterId"

    # Stats
    words_per_minute: int = 200

    # Writing assistant
    assistant_backend: str = "canned"  # canned/chat
    assistant_delay: float = 1.5
    model_name: str = "deepseek"

    # Logging
    log_dir: str = "logs"
    log_level: str = "INFO"
    log_to_file: bool = True

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables"""
        return cls(
            data_dir=os.getenv("NOVEL_DATA_DIR", cls.data_dir),
            data_slot=os.getenv("NOVEL_DATA_SLOT", cls.data_slot),
            last_chapter_slot=os.getenv("NOVEL_LAST_CHAPTER_SLOT", cls.last_chapter_slot),
            words_per_minute=max(1, _env_int("NOVEL_WORDS_PER_MINUTE", cls.words_per_minute)),
            assistant_backend=os.getenv("NOVEL_ASSISTANT_BACKEND", cls.assistant_backend).strip().lower(),
            assistant_delay=max(0.0, _env_float("NOVEL_ASSISTANT_DELAY", cls.assistant_delay)),
            model_name=os.getenv("NOVEL_MODEL", cls.model_name),
            log_dir=os.getenv("NOVEL_LOG_DIR", cls.log_dir),
            log_level=os.getenv("NOVEL_LOG_LEVEL", cls.log_level).strip().upper(),
            log_to_file=_env_bool("NOVEL_LOG_TO_FILE", cls.log_to_file),
        )


# Global configuration instance
config = Config.from_env()
