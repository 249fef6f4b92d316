"""Key/value configuration files (``KEY=value`` per line, ``#`` comments)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Config:
    """Configuration values read from a file."""

    values: dict[str, str] = field(default_factory=dict)
    path: str | None = None

    def get_string(self, key: str) -> str:
        """Return the value stored under ``key``."""
        try:
            return self.values[key]
        except KeyError:
            raise KeyError(f"missing configuration key {key!r}") from None


def parse_config(text: str) -> Config:
    """Parse configuration text; later keys override earlier ones."""
    values = {}
    for number, line in enumerate(text.splitlines(), start=1):
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise ValueError(f"line {number}: expected KEY=value, got {line!r}")
        values[key] = value
    return Config(values)


def load_config(path: str | Path) -> Config:
    """Read and parse the configuration file at ``path``."""
    config = parse_config(Path(path).read_text(encoding="utf-8"))
    config.path = str(path)
    return config