"""
Core abstractions for the stack deployer.

Modules:
    models: StackOperation, StackEvent, StackResource and related types
    protocols: Interface definitions (StackClient, ArtifactUploader, MetadataStore)
    context: DeployerConfig and DeploymentContext
    config_loader: Configuration loading utilities
    factory: DeploymentContext construction
    exceptions: Custom exception types for stack operations

Usage:
    from stack_deployer.core import StackOperation, OperationKind

    op = StackOperation(kind=OperationKind.CREATE, stack_name="app", template_location=url)
"""

from .models import (
    OperationKind,
    OutputMap,
    ResourceKind,
    StackEvent,
    StackIdentifiers,
    StackOperation,
    StackResource,
)
from .protocols import ArtifactUploader, MetadataStore, StackClient
from .context import DeployerConfig, DeploymentContext
from .exceptions import (
    ConfigurationError,
    DeploymentError,
    OperationError,
    PollFetchError,
    PreconditionFailedError,
    RemoteRequestError,
    StackAlreadyExistsError,
    WaitFailedError,
)

__all__ = [
    # Models
    "OperationKind",
    "OutputMap",
    "ResourceKind",
    "StackEvent",
    "StackIdentifiers",
    "StackOperation",
    "StackResource",
    # Protocols
    "ArtifactUploader",
    "MetadataStore",
    "StackClient",
    # Context
    "DeployerConfig",
    "DeploymentContext",
    # Exceptions
    "ConfigurationError",
    "DeploymentError",
    "OperationError",
    "PollFetchError",
    "PreconditionFailedError",
    "RemoteRequestError",
    "StackAlreadyExistsError",
    "WaitFailedError",
]
