"""
JSON configuration files.

A config file selects the level and neighborhood and overrides any level
parameters, e.g.::

    {
      "level": 5,
      "connectivity": 4,
      "params": {"rules": {"loud_threshold": 0.6, "ripple_speed": 3}}
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

from pulsegrid.core.levels import Level, parse_level
from pulsegrid.core.params import GridParams

_KEYS = {"level", "connectivity", "params"}


@dataclass
class GridConfig:
    """Engine settings loaded from a config file."""

    level: Level = Level.DIRECT
    connectivity: int = 4
    params: GridParams = field(default_factory=GridParams)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridConfig":
        """
        Build from a parsed config dict.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        if not isinstance(data, dict):
            raise ValueError("Config must be a JSON object")
        unknown = set(data) - _KEYS
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")

        connectivity = data.get("connectivity", 4)
        if connectivity not in (4, 8):
            raise ValueError(f"connectivity must be 4 or 8, got {connectivity!r}")

        try:
            params = GridParams.from_dict(data.get("params", {}))
        except TypeError as e:
            raise ValueError(f"Invalid params: {e}") from e

        return cls(
            level=parse_level(data.get("level", 0)),
            connectivity=connectivity,
            params=params,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": int(self.level),
            "connectivity": self.connectivity,
            "params": self.params.to_dict(),
        }


def load_config(path: Union[str, Path]) -> GridConfig:
    """Read a JSON config file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return GridConfig.from_dict(data)


def save_config(config: GridConfig, path: Union[str, Path]) -> Path:
    """Write a config file with every parameter spelled out."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    return path
