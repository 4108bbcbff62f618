"""Shared pytest fixtures for the continuous test step tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from io import StringIO
from pathlib import Path

import pytest

from ctstep.context import BuildRun, ExecutionContext
from ctstep.credentials import InMemoryCredentialStore, UsernamePasswordCredential
from ctstep.host_connections import HostConnection, StaticHostConnectionRegistry
from ctstep.listener import TaskListener
from ctstep.parameters import ParameterBundle
from ctstep.types import CredentialKind
from tests.mocks import FakeLauncher

PROJECT = "payments"


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    """Store with one global, one project-scoped, one foreign and one token credential."""
    return InMemoryCredentialStore(
        [
            UsernamePasswordCredential(
                id="cred1", username="tester", password="s3cret", description="CI user"
            ),
            UsernamePasswordCredential(
                id="cred2", username="builder", password="pw", scope=PROJECT
            ),
            UsernamePasswordCredential(
                id="other", username="outsider", password="pw", scope="inventory"
            ),
            UsernamePasswordCredential(
                id="token", username="bot", password="tok", kind=CredentialKind.SECRET_TEXT
            ),
        ]
    )


@pytest.fixture
def host_registry() -> StaticHostConnectionRegistry:
    return StaticHostConnectionRegistry(
        [
            HostConnection(description="prod", host="mf1:16196", ces_url="http://ces:2020"),
            HostConnection(description="no ces", host="mf2:16196", ces_url=""),
            HostConnection(description="blank", host="mf3:16196", ces_url="   "),
            HostConnection(description="test", host="mf4:16196", ces_url="http://ces-test:2020"),
        ]
    )


@pytest.fixture
def bundle() -> ParameterBundle:
    """A bundle that passes validation against the credential_store fixture."""
    return ParameterBundle(
        environment_id="ENV1",
        folder_path="tests",
        server_url="http://ces",
        credentials_id="cred1",
    )


@pytest.fixture
def log_stream() -> StringIO:
    return StringIO()


@pytest.fixture
def listener(log_stream: StringIO) -> TaskListener:
    return TaskListener(log_stream)


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def context(tmp_path: Path, launcher: FakeLauncher, listener: TaskListener) -> ExecutionContext:
    return ExecutionContext(
        run=BuildRun(project=PROJECT, number=7, env={"BUILD_TAG": "payments-7"}),
        workspace=tmp_path,
        launcher=launcher,
        listener=listener,
    )


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo root and package logger changes made by setup_logging."""
    root = logging.getLogger()
    package = logging.getLogger("ctstep")
    handlers = root.handlers[:]
    levels = (root.level, package.level)
    yield
    root.handlers[:] = handlers
    root.setLevel(levels[0])
    package.setLevel(levels[1])
