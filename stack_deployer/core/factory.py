"""
Context Factory - Creates deployment contexts.

This module builds DeploymentContext objects: it loads the configuration,
applies the logging mode, initializes the AWS provider and opens the
project metadata store.

It serves as the entry point for callers to establish a session.
"""

from pathlib import Path

from stack_deployer.logger import configure_logger
from stack_deployer.metadata import ProjectMetadataStore
from stack_deployer.providers.aws.provider import AWSProvider

from .config_loader import load_credentials, load_deployer_config
from .context import DeploymentContext


def create_context(project_path: str | Path) -> DeploymentContext:
    """
    Create a DeploymentContext for a project directory.

    Args:
        project_path: Directory holding the project's config and metadata files

    Returns:
        DeploymentContext with config loaded and provider initialized

    Raises:
        ConfigurationError: If the project configuration is invalid
    """
    project_path = Path(project_path)

    config = load_deployer_config(project_path)
    configure_logger(config.mode)

    provider = AWSProvider(
        waiter_delay=config.waiter_delay_seconds,
        max_operation_seconds=config.max_operation_seconds,
    )
    provider.initialize_clients(load_credentials(project_path))

    metadata = ProjectMetadataStore(
        project_path / config.metadata_file,
        provider_name=config.provider_name,
    )

    return DeploymentContext(
        project_path=project_path,
        config=config,
        provider=provider,
        metadata=metadata,
    )
