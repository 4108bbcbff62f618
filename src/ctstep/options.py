"""Selectable option lists for the configuration form.

Presentation only: these lists fill the credential and server URL drop-downs
and are never consulted on the execution path.
"""

from __future__ import annotations

from typing import NamedTuple

from ctstep.credentials import CredentialStore
from ctstep.host_connections import HostConnectionRegistry
from ctstep.types import CredentialKind


class Option(NamedTuple):
    """One entry of a drop-down list."""

    label: str
    value: str
    selected: bool = False


EMPTY_OPTION = Option("", "", False)


class OptionListBuilder:
    """Builds option lists from the host's credential store and registry.

    Credential selection matches ids exactly (case-sensitive); server URL
    selection ignores case.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        host_registry: HostConnectionRegistry | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            credential_store: Store listing the selectable credentials.
            host_registry: Global connection registry; when None only the
                empty server URL option is offered.
        """
        self._credential_store = credential_store
        self._host_registry = host_registry

    def build_credential_options(
        self, project: str, current_selection: str | None = None
    ) -> list[Option]:
        """List username/password credentials visible to a project.

        Args:
            project: Project scope of the form.
            current_selection: Currently configured credentials id.

        Returns:
            The empty option followed by one option per credential in store
            order, labelled ``username`` or ``username (description)``.
        """
        options = [EMPTY_OPTION]
        for credential in self._credential_store.list_credentials(project):
            if credential.kind != CredentialKind.USERNAME_PASSWORD:
                continue
            description = credential.description.strip()
            label = f"{credential.username} ({description})" if description else credential.username
            selected = current_selection is not None and current_selection == credential.id
            options.append(Option(label, credential.id, selected))
        return options

    def build_server_url_options(self, current_selection: str | None = None) -> list[Option]:
        """List the CES server URLs of the configured host connections.

        Args:
            current_selection: Currently configured server URL.

        Returns:
            The empty option followed by one option per connection with a
            non-blank URL, in registry order.
        """
        options = [EMPTY_OPTION]
        if self._host_registry is None:
            return options

        wanted = current_selection.lower() if current_selection is not None else None
        for connection in self._host_registry.list_connections():
            url = connection.ces_url
            if not url or not url.strip():
                continue
            options.append(Option(url, url, wanted is not None and wanted == url.lower()))
        return options


__all__ = ["EMPTY_OPTION", "Option", "OptionListBuilder"]
