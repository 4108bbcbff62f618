"""YAML loading shared by the file-backed credential and host connection stores."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML, YAMLError

from ctstep.logging import get_logger

logger = get_logger(__name__)


class StoreLoadError(Exception):
    """Raised when a store file is missing or malformed."""

    pass


def load_store_section(path: Path, section: str) -> list[dict[str, Any]]:
    """Load one top-level list section from a YAML store file.

    A missing section is treated as an empty store. Each entry must be a
    mapping.

    Args:
        path: YAML file to read.
        section: Top-level key holding the list of entries.

    Returns:
        The entries of the section as plain dicts, in file order.

    Raises:
        StoreLoadError: If the file cannot be read or parsed, or the section
            is not a list of mappings.
    """
    yaml = YAML(typ="safe")
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.load(f)
    except OSError as e:
        raise StoreLoadError(f"Cannot read store file {path}: {e}") from e
    except YAMLError as e:
        raise StoreLoadError(f"Invalid YAML in store file {path}: {e}") from e

    if data is None:
        logger.debug("Store file %s is empty", path)
        return []
    if not isinstance(data, dict):
        raise StoreLoadError(f"Store file {path} must contain a mapping at the top level")

    entries = data.get(section)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise StoreLoadError(f"'{section}' in {path} must be a list")

    result: list[dict[str, Any]] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise StoreLoadError(f"Entry {index} of '{section}' in {path} must be a mapping")
        result.append(dict(entry))
    return result


def require_str(entry: dict[str, Any], key: str, where: str) -> str:
    """Return a required string value from a store entry.

    Raises:
        StoreLoadError: If the key is absent or not a string.
    """
    value = entry.get(key)
    if not isinstance(value, str):
        raise StoreLoadError(f"{where}: '{key}' is required and must be a string")
    return value


def optional_str(entry: dict[str, Any], key: str, default: str = "") -> str:
    """Return an optional string value, coercing scalars to str."""
    value = entry.get(key)
    if value is None:
        return default
    return str(value)


__all__ = ["StoreLoadError", "load_store_section", "optional_str", "require_str"]
