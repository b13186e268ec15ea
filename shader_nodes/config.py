"""
Compiler settings.

Settings are a flat dataclass persisted as JSON. Unknown keys in a file are
ignored so older and newer editors can share one settings file.
"""

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class CompilerSettings:
    """
    Example:
        settings = CompilerSettings.load("shader_nodes.json")
        session = MaterialSession(settings=settings)
    """
    debounce_ms: int = 100          # quiescence before a structural rebuild
    preview_size: int = 64          # thumbnail width/height in pixels
    preview_max_depth: int = 10     # recursion guard of the preview interpreter
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompilerSettings":
        known = {f.name for f in fields(cls)}
        ignored = sorted(set(data) - known)
        if ignored:
            logger.debug(f"Ignoring unknown settings: {', '.join(ignored)}")
        settings = cls(**{k: v for k, v in data.items() if k in known})
        settings.validate()
        return settings

    @classmethod
    def load(cls, path: Union[str, Path]) -> "CompilerSettings":
        """
        Load settings from a JSON file.

        Raises:
            ConfigError: If the file is missing, not JSON, or holds bad values
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Settings file not found: {path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must hold a JSON object")
        return cls.from_dict(data)

    def save(self, path: Union[str, Path]) -> None:
        """Save settings to a JSON file."""
        with open(Path(path), "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self):
        for name in ('debounce_ms', 'preview_size', 'preview_max_depth'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"'{name}' must be a non-negative integer, got {value!r}")
        if self.preview_size == 0:
            raise ConfigError("'preview_size' must be at least 1")
        if not isinstance(self.log_level, str):
            raise ConfigError(f"'log_level' must be a level name, got {self.log_level!r}")
