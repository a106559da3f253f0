"""Command-line defaults loaded from ``.unhtml.toml``.

Config format::

    encoding = "utf-8"
    errors = "replace"
    chunk_size = 8192

The file is looked up in the current working directory unless a path is
given.  Command-line options take precedence over it.
"""

from __future__ import annotations

import sys
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

from .tokenizer import DEFAULT_CHUNK_SIZE

CONFIG_FILENAME = ".unhtml.toml"


@dataclass(frozen=True)
class ConverterConfig:
    """Input handling options for the ``unhtml`` command."""

    encoding: str = "utf-8"
    errors: str = "strict"
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def merged(self, **overrides: object) -> ConverterConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_FIELD_TYPES = {f.name: type(getattr(ConverterConfig(), f.name)) for f in fields(ConverterConfig)}


def load_config(config_path: str | Path | None = None) -> ConverterConfig:
    """Load converter options from a TOML file.

    Args:
        config_path: Explicit path to the config file, or None to look for
            ``.unhtml.toml`` in the current working directory.

    Returns:
        The configured options (defaults if no config file exists).

    Raises:
        ValueError: If the file is not valid TOML or a value has the wrong type.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        return ConverterConfig()

    with open(config_path, "rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config file {config_path}: {e}") from e

    values: dict[str, object] = {}
    for key, value in raw.items():
        expected = _FIELD_TYPES.get(key)
        if expected is None:
            print(f"Warning: unknown key {key!r} in {config_path}", file=sys.stderr)
            continue
        # bool is an int subclass; reject it for numeric options
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ValueError(
                f"{key} in {config_path} must be {expected.__name__} "
                f"(got {type(value).__name__})"
            )
        values[key] = value

    if values.get("chunk_size", DEFAULT_CHUNK_SIZE) < 1:
        raise ValueError(f"chunk_size in {config_path} must be positive")

    return ConverterConfig(**values)
