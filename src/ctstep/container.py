"""Dependency Injection container for the continuous test step.

The credential store, host connection registry and test runner are host
collaborators. The container wires them from configuration in production and
lets tests override any of them:

    # Production setup
    container = create_container(config)
    step = create_step(container, bundle)

    # Test setup with doubles
    container = create_test_container()
    container.credential_store.override(providers.Object(InMemoryCredentialStore([...])))
    container.runner.override(providers.Object(RecordingRunner()))
"""

from __future__ import annotations

from dependency_injector import containers, providers

from ctstep.config import StepConfig
from ctstep.credentials import (
    CredentialResolver,
    CredentialStore,
    InMemoryCredentialStore,
    load_credential_store,
)
from ctstep.host_connections import (
    HostConnectionRegistry,
    StaticHostConnectionRegistry,
    load_host_connections,
)
from ctstep.options import OptionListBuilder
from ctstep.parameters import ParameterBundle
from ctstep.runner import CommandTestRunner, TestRunner
from ctstep.step import ContinuousTestStep, StepServices


class StepContainer(containers.DeclarativeContainer):
    """Root container for the step's host collaborators.

    StepContainer
    ├── config (StepConfig)
    ├── credential_store (CredentialStore)
    ├── host_registry (HostConnectionRegistry)
    └── runner (TestRunner)
    """

    config: providers.Dependency[StepConfig] = providers.Dependency()
    credential_store: providers.Dependency[CredentialStore] = providers.Dependency()
    host_registry: providers.Dependency[HostConnectionRegistry] = providers.Dependency()
    runner: providers.Dependency[TestRunner] = providers.Dependency()


def create_credential_store(config: StepConfig) -> CredentialStore:
    """Create the credential store named by the configuration.

    Raises:
        StoreLoadError: If the configured file is malformed.
    """
    if config.credentials_file is None:
        return InMemoryCredentialStore()
    return load_credential_store(config.credentials_file)


def create_host_registry(config: StepConfig) -> HostConnectionRegistry:
    """Create the host connection registry named by the configuration.

    Raises:
        StoreLoadError: If the configured file is malformed.
    """
    if config.host_connections_file is None:
        return StaticHostConnectionRegistry()
    return load_host_connections(config.host_connections_file)


def create_runner(config: StepConfig, credential_store: CredentialStore) -> TestRunner:
    """Create the command-line test runner."""
    return CommandTestRunner(
        command=config.runner_command,
        resolver=CredentialResolver(credential_store),
        timeout=config.effective_runner_timeout,
    )


def create_container(config: StepConfig) -> StepContainer:
    """Create a container wired from configuration.

    Stores are loaded lazily, on first use.
    """
    container = StepContainer()
    container.config.override(providers.Object(config))
    container.credential_store.override(providers.Singleton(create_credential_store, config))
    container.host_registry.override(providers.Singleton(create_host_registry, config))
    container.runner.override(
        providers.Singleton(create_runner, config, container.credential_store)
    )
    return container


def create_test_container(config: StepConfig | None = None) -> StepContainer:
    """Create a container for tests.

    Only ``config`` is set. The credential store, registry and runner are
    Dependency() providers that raise dependency_injector.errors.Error when
    accessed without being overridden first.
    """
    container = StepContainer()
    container.config.override(providers.Object(config or StepConfig()))
    return container


def create_step(container: StepContainer, bundle: ParameterBundle) -> ContinuousTestStep:
    """Create a step for a bundle with the container's collaborators."""
    services = StepServices(
        credential_store=container.credential_store(),
        runner=container.runner(),
        host_registry=container.host_registry(),
    )
    return ContinuousTestStep(bundle, services)


def create_option_builder(container: StepContainer) -> OptionListBuilder:
    """Create an option list builder with the container's stores."""
    return OptionListBuilder(container.credential_store(), container.host_registry())


__all__ = [
    "StepContainer",
    "create_container",
    "create_credential_store",
    "create_host_registry",
    "create_option_builder",
    "create_runner",
    "create_step",
    "create_test_container",
]
