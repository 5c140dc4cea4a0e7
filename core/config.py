"""
Configuration for the File Explorer.

Settings live in a YAML file, optionally nested under an ``explorer:`` key.
A missing or unreadable file yields the defaults.
"""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Dict, Any

import yaml


def _flag(data: Dict[str, Any], key: str, default: bool) -> bool:
    """A YAML boolean, or the default for anything else (e.g. the string "false")."""
    value = data.get(key, default)
    return value if isinstance(value, bool) else default


@dataclass
class ExplorerConfig:
    """User-tunable settings."""
    color: bool = True
    show_pseudo_entries: bool = True
    audit_log: Optional[str] = None

    @classmethod
    def load(cls, config_path: str = "config.yaml") -> "ExplorerConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            ExplorerConfig with file values over the defaults
        """
        path = Path(config_path)
        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return cls()

        if not isinstance(raw, dict):
            return cls()
        return cls.from_dict(raw.get("explorer", raw))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExplorerConfig":
        defaults = cls()
        if not isinstance(data, dict):
            return defaults

        audit_log = data.get("audit_log", defaults.audit_log)
        return cls(
            color=_flag(data, "color", defaults.color),
            show_pseudo_entries=_flag(data, "show_pseudo_entries", defaults.show_pseudo_entries),
            audit_log=str(audit_log) if audit_log else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
