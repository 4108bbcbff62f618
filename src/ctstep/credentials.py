"""Credential store interface and project-scoped credential resolution.

The step never owns secrets: it looks credentials up by opaque id in a store
supplied by the host, scoped to the project the step runs in. A credential
without a scope is global and visible to every project.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ctstep.logging import get_logger
from ctstep.store_files import StoreLoadError, load_store_section, optional_str, require_str
from ctstep.types import CredentialKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class UsernamePasswordCredential:
    """A stored credential as the host's credential store exposes it."""

    id: str
    username: str
    password: str = field(default="", repr=False)
    description: str = ""
    scope: str | None = None  # None = global
    kind: CredentialKind = CredentialKind.USERNAME_PASSWORD

    def visible_to(self, project: str) -> bool:
        """Whether this credential may be used from the given project."""
        return self.scope is None or self.scope == project


@dataclass(frozen=True)
class LoginInfo:
    """Resolved login handed to the runner."""

    username: str
    password: str = field(repr=False)


class CredentialStore(ABC):
    """Abstract interface for the host's credential store.

    This allows the step to work with different credential backends
    (in-memory, file-backed, host-provided adapters).
    """

    @abstractmethod
    def lookup(self, project: str, credentials_id: str) -> UsernamePasswordCredential | None:
        """Find a credential visible to a project by id.

        Args:
            project: Project scope of the invoking step.
            credentials_id: Opaque credential id.

        Returns:
            The credential, or None if no visible credential has that id.
            When several visible credentials share the id, a
            username/password one is preferred.
        """
        pass

    @abstractmethod
    def list_credentials(self, project: str) -> list[UsernamePasswordCredential]:
        """List all credentials visible to a project, in store order."""
        pass


class InMemoryCredentialStore(CredentialStore):
    """Credential store backed by an ordered list."""

    def __init__(self, credentials: Iterable[UsernamePasswordCredential] = ()) -> None:
        self._credentials: list[UsernamePasswordCredential] = list(credentials)

    def lookup(self, project: str, credentials_id: str) -> UsernamePasswordCredential | None:
        # Username/password entries win over other kinds sharing the id
        matches = [
            c for c in self._credentials if c.id == credentials_id and c.visible_to(project)
        ]
        for credential in matches:
            if credential.kind == CredentialKind.USERNAME_PASSWORD:
                return credential
        return matches[0] if matches else None

    def list_credentials(self, project: str) -> list[UsernamePasswordCredential]:
        return [c for c in self._credentials if c.visible_to(project)]

    def __len__(self) -> int:
        return len(self._credentials)


def load_credential_store(path: Path) -> InMemoryCredentialStore:
    """Load a credential store from the ``credentials`` section of a YAML file.

    Args:
        path: YAML file to read.

    Returns:
        InMemoryCredentialStore holding the file's credentials in file order.

    Raises:
        StoreLoadError: If the file is malformed, an entry lacks an id or
            username, uses an unknown kind, or an id is duplicated.
    """
    credentials: list[UsernamePasswordCredential] = []
    seen: set[tuple[str, str | None]] = set()

    for index, entry in enumerate(load_store_section(path, "credentials")):
        where = f"{path}: credential {index}"
        credentials_id = require_str(entry, "id", where)
        kind = optional_str(entry, "kind", CredentialKind.USERNAME_PASSWORD)
        if not CredentialKind.is_valid(kind):
            raise StoreLoadError(
                f"{where}: unknown kind '{kind}'. Valid kinds: "
                f"{', '.join(sorted(CredentialKind.values()))}"
            )
        scope = entry.get("scope")
        key = (credentials_id, None if scope is None else str(scope))
        if key in seen:
            raise StoreLoadError(f"{where}: duplicate credential id '{credentials_id}'")
        seen.add(key)

        credentials.append(
            UsernamePasswordCredential(
                id=credentials_id,
                username=require_str(entry, "username", where),
                password=optional_str(entry, "password"),
                description=optional_str(entry, "description"),
                scope=key[1],
                kind=CredentialKind(kind),
            )
        )

    logger.debug("Loaded %d credentials from %s", len(credentials), path)
    return InMemoryCredentialStore(credentials)


class CredentialResolver:
    """Resolves credential ids to logins, scoped to the invoking project.

    Only username/password credentials resolve; other kinds are treated as
    absent. Resolution is a single read-only lookup against the store.
    """

    def __init__(self, store: CredentialStore) -> None:
        self._store = store

    def resolve(self, project: str, credentials_id: str) -> LoginInfo | None:
        """Resolve a credential id to a login.

        Args:
            project: Project scope of the invoking step.
            credentials_id: Opaque credential id.

        Returns:
            LoginInfo, or None if the id is empty, unknown, not visible to
            the project, or not a username/password credential.
        """
        if not credentials_id:
            return None

        credential = self._store.lookup(project, credentials_id)
        if credential is None:
            logger.debug("Credential %s not found for project %s", credentials_id, project)
            return None
        if credential.kind != CredentialKind.USERNAME_PASSWORD:
            logger.debug(
                "Credential %s has kind %s, expected %s",
                credentials_id,
                credential.kind,
                CredentialKind.USERNAME_PASSWORD,
            )
            return None
        return LoginInfo(username=credential.username, password=credential.password)


__all__ = [
    "CredentialResolver",
    "CredentialStore",
    "InMemoryCredentialStore",
    "LoginInfo",
    "UsernamePasswordCredential",
    "load_credential_store",
]
