"""
Engine Configuration

Loads engine settings from YAML. Every setting has a default, so a config
file is optional; see config/engine.yaml for a commented example.

    settings:
      review_threshold: 80
      high_confidence_threshold: 90
      prefer_day_first: false
      collision_policy: last_wins      # or highest_confidence
      all_documents: false

    summary_aliases:
      GRAND_TOTAL: amount

    line_item_aliases:
      UNIT_COST: unitPrice
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from loguru import logger

from .parser.field_mapper import CollisionPolicy, ExpenseFieldMapper


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""


@dataclass
class EngineSettings:
    """Settings for the field mapper and the triage helper."""

    # Triage thresholds (0-100)
    review_threshold: float = 80.0
    high_confidence_threshold: float = 90.0

    # Parsing
    prefer_day_first: bool = False
    collision_policy: CollisionPolicy = CollisionPolicy.LAST_WINS
    all_documents: bool = False

    # Alias additions: raw type name -> canonical field name
    summary_aliases: dict[str, str] = field(default_factory=dict)
    line_item_aliases: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'review_threshold': self.review_threshold,
            'high_confidence_threshold': self.high_confidence_threshold,
            'prefer_day_first': self.prefer_day_first,
            'collision_policy': self.collision_policy.value,
            'all_documents': self.all_documents,
            'summary_aliases': dict(self.summary_aliases),
            'line_item_aliases': dict(self.line_item_aliases),
        }


class ConfigLoader:
    """
    Loads EngineSettings from a YAML file or a dict.

    Usage:
        loader = ConfigLoader(Path("config/engine.yaml"))
        mapper = loader.build_mapper()
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path
        self.config: dict = {}
        self.settings = EngineSettings()

        if config_path:
            self.load(config_path)

    def load(self, config_path: Path) -> EngineSettings:
        """
        Load settings from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or holds invalid values
        """
        logger.info(f"Loading configuration from: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config: {e}")
            raise ConfigError(f"Cannot read config {config_path}: {e}") from e

        self.config_path = config_path
        return self.load_dict(config)

    def load_dict(self, config: Any) -> EngineSettings:
        """Load settings from an already-parsed config mapping."""
        if not isinstance(config, dict):
            raise ConfigError("Config root must be a mapping")

        self.config = config
        settings = config.get('settings') or {}
        if not isinstance(settings, dict):
            raise ConfigError("'settings' must be a mapping")

        defaults = EngineSettings()

        try:
            self.settings = EngineSettings(
                review_threshold=float(
                    settings.get('review_threshold', defaults.review_threshold)
                ),
                high_confidence_threshold=float(
                    settings.get('high_confidence_threshold', defaults.high_confidence_threshold)
                ),
                prefer_day_first=self._flag(settings, 'prefer_day_first', defaults.prefer_day_first),
                collision_policy=CollisionPolicy(
                    settings.get('collision_policy', defaults.collision_policy.value)
                ),
                all_documents=self._flag(settings, 'all_documents', defaults.all_documents),
                summary_aliases=self._alias_section(config, 'summary_aliases'),
                line_item_aliases=self._alias_section(config, 'line_item_aliases'),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid setting: {e}") from e

        if self.settings.high_confidence_threshold < self.settings.review_threshold:
            raise ConfigError("high_confidence_threshold must not be below review_threshold")

        logger.info(
            f"Loaded settings (threshold {self.settings.review_threshold:g}, "
            f"{len(self.settings.summary_aliases)} extra summary alias(es))"
        )
        return self.settings

    @staticmethod
    def _flag(settings: dict, key: str, default: bool) -> bool:
        value = settings.get(key, default)
        if not isinstance(value, bool):
            raise ConfigError(f"'{key}' must be true or false, got {value!r}")
        return value

    @staticmethod
    def _alias_section(config: dict, key: str) -> dict[str, str]:
        section = config.get(key) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"'{key}' must be a mapping")
        return {str(k): str(v) for k, v in section.items()}

    def build_mapper(self) -> ExpenseFieldMapper:
        """
        Build a field mapper from the loaded settings.

        Raises:
            ConfigError: If an alias points at an unknown canonical field
        """
        try:
            return ExpenseFieldMapper(
                collision_policy=self.settings.collision_policy,
                prefer_day_first=self.settings.prefer_day_first,
                extra_summary_aliases=self.settings.summary_aliases,
                extra_line_item_aliases=self.settings.line_item_aliases,
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e
