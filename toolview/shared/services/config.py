"""View configuration: YAML settings stored in ~/.toolview/config.yaml.

Example:
    grouping:
      enabled: true
      min_group_size: 2
    display:
      show_elapsed: true
      show_stats: true
      error_preview_chars: 60

Missing or corrupt files fall back to defaults; invalid values are
repaired by ``validate()`` rather than rejected.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".toolview" / "config.yaml"


@dataclass
class GroupingConfig:
    enabled: bool = True
    min_group_size: int = 2

    def validate(self) -> None:
        if not isinstance(self.enabled, bool):
            self.enabled = True
        if (
            isinstance(self.min_group_size, bool)
            or not isinstance(self.min_group_size, int)
            or self.min_group_size < 2
        ):
            self.min_group_size = 2


@dataclass
class DisplayConfig:
    show_elapsed: bool = True
    show_stats: bool = True
    error_preview_chars: int = 60

    def validate(self) -> None:
        if not isinstance(self.show_elapsed, bool):
            self.show_elapsed = True
        if not isinstance(self.show_stats, bool):
            self.show_stats = True
        if (
            isinstance(self.error_preview_chars, bool)
            or not isinstance(self.error_preview_chars, int)
            or self.error_preview_chars < 10
        ):
            self.error_preview_chars = 60


def _section(cls, data):
    if not isinstance(data, dict):
        return cls()
    section = cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
    section.validate()
    return section


@dataclass
class ViewConfig:
    grouping: GroupingConfig = field(default_factory=GroupingConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def validate(self) -> None:
        self.grouping.validate()
        self.display.validate()

    @classmethod
    def from_dict(cls, data: dict | None) -> ViewConfig:
        data = data if isinstance(data, dict) else {}
        return cls(
            grouping=_section(GroupingConfig, data.get("grouping")),
            display=_section(DisplayConfig, data.get("display")),
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: Path | None = None) -> None:
        """Persist the config as YAML."""
        target = path or CONFIG_PATH
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(yaml.safe_dump(self.to_dict(), sort_keys=False))
        except OSError:
            logger.warning("Failed to save view config to %s", target)

    @classmethod
    def load(cls, path: Path | None = None) -> ViewConfig:
        """Load the config, returning defaults if missing/corrupt."""
        target = path or CONFIG_PATH
        try:
            if target.exists():
                config = cls.from_dict(yaml.safe_load(target.read_text()))
                logger.debug("Loaded view config from %s", target)
                return config
            logger.debug("View config not found at %s; using defaults", target)
        except (OSError, yaml.YAMLError):
            logger.warning("Failed to load view config from %s; using defaults", target)
        return cls()
