"""
Configuration management for LYRA.

Loads settings from YAML config file and provides typed access.
"""
from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import List, Optional
import yaml

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()


def _project_root() -> Path:
    """Return project root (parent of lyra package)."""
    return Path(__file__).resolve().parent.parent.parent


DEFAULT_CONFIG_PATH = _project_root() / "config" / "default.yaml"

DEFAULT_RATIONALE = [
    "Matches your comfort and usage profile.",
    "Suitable for your guest count and trip length.",
    "Aligned with your stability and propulsion preferences.",
]


@dataclass
class LyraConfig:
    """Configuration for the LYRA questionnaire."""

    # Interview / stopping
    max_questions: int = 15             # Hard question budget
    min_lead: int = 2                   # Score gap needed for an early stop
    max_alive: int = 3                  # Early stop only once the field is this small
    default_language: str = "en"

    # Result payload
    max_tips: int = 7
    max_links: int = 5
    display_tips: int = 5               # Tips shown in the rendered chat message
    rationale: List[str] = field(default_factory=lambda: list(DEFAULT_RATIONALE))

    # Commentary (one-line remark after each answer)
    commentary_enabled: bool = True
    commentary_model: str = "gpt-4o-mini"
    commentary_temperature: float = 0.5
    commentary_timeout_seconds: float = 3.0   # Per-call budget; on timeout the remark is skipped

    # Analytics webhook (empty = disabled)
    webhook_url: str = ""
    webhook_timeout_seconds: float = 3.0

    # Data paths
    catalog_dir: str = "data/lyra"

    # Logging level name; None keeps LYRA_LOG_LEVEL / LOG_LEVEL
    log_level: Optional[str] = None

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "LyraConfig":
        """Load configuration from YAML file."""
        path = config_path or DEFAULT_CONFIG_PATH
        if not path.exists():
            return cls._apply_env(cls())

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        interview_config = data.get('interview', {})
        result_config = data.get('result', {})
        commentary_config = data.get('commentary', {})
        analytics_config = data.get('analytics', {})
        data_config = data.get('data', {})
        logging_config = data.get('logging', {})

        config = cls(
            max_questions=interview_config.get('max_questions', 15),
            min_lead=interview_config.get('min_lead', 2),
            max_alive=interview_config.get('max_alive', 3),
            default_language=interview_config.get('default_language', 'en'),
            max_tips=result_config.get('max_tips', 7),
            max_links=result_config.get('max_links', 5),
            display_tips=result_config.get('display_tips', 5),
            rationale=list(result_config.get('rationale') or DEFAULT_RATIONALE),
            commentary_enabled=commentary_config.get('enabled', True),
            commentary_model=commentary_config.get('model', 'gpt-4o-mini'),
            commentary_temperature=commentary_config.get('temperature', 0.5),
            commentary_timeout_seconds=commentary_config.get('timeout_seconds', 3.0),
            webhook_url=analytics_config.get('webhook_url') or "",
            webhook_timeout_seconds=analytics_config.get('timeout_seconds', 3.0),
            catalog_dir=data_config.get('catalog_dir', 'data/lyra'),
            log_level=logging_config.get('level'),
        )
        return cls._apply_env(config)

    @staticmethod
    def _apply_env(config: "LyraConfig") -> "LyraConfig":
        """Environment variables win over the YAML file."""
        if os.getenv("LYRA_WEBHOOK_URL"):
            config.webhook_url = os.environ["LYRA_WEBHOOK_URL"]
        if os.getenv("LYRA_DATA_DIR"):
            config.catalog_dir = os.environ["LYRA_DATA_DIR"]
        if os.getenv("LYRA_LOG_LEVEL"):
            config.log_level = os.environ["LYRA_LOG_LEVEL"]
        return config

    def catalog_path(self) -> Path:
        """Resolve catalog_dir against the project root when relative."""
        path = Path(self.catalog_dir)
        if not path.is_absolute():
            path = _project_root() / path
        return path


# Global config instance
_config: Optional[LyraConfig] = None


def get_config() -> LyraConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = LyraConfig.from_yaml()
    return _config


def set_config(config: LyraConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
