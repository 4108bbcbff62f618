"""Global host connection registry, the source of selectable server URLs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ctstep.logging import get_logger
from ctstep.store_files import load_store_section, optional_str

logger = get_logger(__name__)


@dataclass(frozen=True)
class HostConnection:
    """A configured host connection. Read-only for the step."""

    description: str = ""
    host: str = ""
    ces_url: str = ""
    connection_id: str = ""


class HostConnectionRegistry(ABC):
    """Abstract interface for the host's global connection configuration."""

    @abstractmethod
    def list_connections(self) -> list[HostConnection]:
        """Return the configured connections in registry order."""
        pass


class StaticHostConnectionRegistry(HostConnectionRegistry):
    """Registry backed by a fixed, ordered list of connections."""

    def __init__(self, connections: Iterable[HostConnection] = ()) -> None:
        self._connections = tuple(connections)

    def list_connections(self) -> list[HostConnection]:
        return list(self._connections)


def load_host_connections(path: Path) -> StaticHostConnectionRegistry:
    """Load a registry from the ``host_connections`` section of a YAML file.

    Entries may omit any field; an entry without ``ces_url`` is kept in the
    registry but never offered as a server URL.

    Raises:
        StoreLoadError: If the file is malformed.
    """
    connections = [
        HostConnection(
            description=optional_str(entry, "description"),
            host=optional_str(entry, "host"),
            ces_url=optional_str(entry, "ces_url"),
            connection_id=optional_str(entry, "connection_id"),
        )
        for entry in load_store_section(path, "host_connections")
    ]
    logger.debug("Loaded %d host connections from %s", len(connections), path)
    return StaticHostConnectionRegistry(connections)


__all__ = [
    "HostConnection",
    "HostConnectionRegistry",
    "StaticHostConnectionRegistry",
    "load_host_connections",
]
