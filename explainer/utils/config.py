"""
Configuration loader for the explainer.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml


class Config:
    """Configuration manager for content generation and playback."""

    _instance: Optional["Config"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not self._config:
            self._load_config()

    def _get_project_root(self) -> Path:
        """Get the project root directory."""
        # Navigate up from explainer/utils to project root
        current = Path(__file__).resolve()
        return current.parent.parent.parent

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        config_path = self._get_project_root() / "config" / "settings.yaml"

        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
        else:
            # Use defaults if config doesn't exist
            self._config = self._get_defaults()

    def _get_defaults(self) -> Dict[str, Any]:
        """Return default configuration."""
        return {
            "generation": {
                "flashcard_count": 5,
                "min_sentence_length": 20,
            },
            "playback": {
                "animation_duration": 5,
                "reveal_interval": 0.06,
                "settle_delay": 0.5,
                "completion_message": "Explanation complete! Click Start to replay.",
                "idle_message": "Click Start to begin the animated explanation",
            },
            "voice": {
                "enabled": True,
                "rate": 0.9,
                "pitch": 1.0,
            },
            "paths": {
                "output": "output",
            },
        }

    def get(self, *keys: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Example:
            config.get("playback", "settle_delay") -> 0.5
        """
        value = self._config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
            if value is None:
                return default
        return value

    def get_path(self, key: str) -> Path:
        """Get a path configuration as absolute Path."""
        relative_path = self.get("paths", key, default=key)
        return self._get_project_root() / relative_path

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        return self._get_project_root()

    @property
    def flashcard_count(self) -> int:
        """Get the default number of flashcards."""
        return self.get("generation", "flashcard_count", default=5)

    @property
    def min_sentence_length(self) -> int:
        """Get the length a sentence must exceed to qualify."""
        return self.get("generation", "min_sentence_length", default=20)

    @property
    def animation_duration(self) -> float:
        """Get the per-point duration used when narration is silent."""
        return self.get("playback", "animation_duration", default=5)

    @property
    def reveal_interval(self) -> float:
        """Get the delay between revealed words."""
        return self.get("playback", "reveal_interval", default=0.06)

    @property
    def settle_delay(self) -> float:
        """Get the pause between key points."""
        return self.get("playback", "settle_delay", default=0.5)

    @property
    def completion_message(self) -> str:
        return self.get(
            "playback", "completion_message",
            default="Explanation complete! Click Start to replay.",
        )

    @property
    def idle_message(self) -> str:
        return self.get(
            "playback", "idle_message",
            default="Click Start to begin the animated explanation",
        )

    @property
    def voice_enabled(self) -> bool:
        """Check if narration should use speech."""
        return self.get("voice", "enabled", default=True)

    @property
    def voice_rate(self) -> float:
        """Get the speech rate multiplier."""
        return self.get("voice", "rate", default=0.9)

    @property
    def voice_pitch(self) -> float:
        """Get the speech pitch multiplier."""
        return self.get("voice", "pitch", default=1.0)


# Singleton instance
config = Config()
