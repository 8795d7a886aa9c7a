"""
Deployment context and configuration classes.

Functions receive a DeploymentContext containing all needed configuration
and collaborators instead of importing global state.

Lifecycle:
    1. Created at the start of a deployment (see core.factory)
    2. Config is loaded from project files
    3. The AWS provider is initialized with credentials
    4. Passed to the deployer entry points
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, TYPE_CHECKING

import stack_deployer.constants as CONSTANTS

if TYPE_CHECKING:
    from stack_deployer.metadata import ProjectMetadataStore
    from stack_deployer.providers.aws.provider import AWSProvider


@dataclass
class DeployerConfig:
    """
    Parsed deployer configuration from config_deployer.json.

    Attributes:
        mode: "DEBUG" enables debug logging
        poll_interval_seconds: Delay between event poll ticks
        max_operation_seconds: Upper bound for waiting on (and polling) one operation
        waiter_delay_seconds: Delay between terminal-status waiter checks
        capabilities: CloudFormation capabilities acknowledged on create/update
        metadata_file: Project metadata file, relative to the project path
        provider_name: Key of the provider section in the project metadata
    """

    mode: str = "INFO"
    poll_interval_seconds: float = CONSTANTS.DEFAULT_POLL_INTERVAL_SECONDS
    max_operation_seconds: float = CONSTANTS.DEFAULT_MAX_OPERATION_SECONDS
    waiter_delay_seconds: int = CONSTANTS.DEFAULT_WAITER_DELAY_SECONDS
    capabilities: List[str] = field(default_factory=lambda: list(CONSTANTS.DEFAULT_CAPABILITIES))
    metadata_file: str = CONSTANTS.DEFAULT_METADATA_FILE
    provider_name: str = CONSTANTS.DEFAULT_PROVIDER_NAME

    @property
    def debug(self) -> bool:
        return self.mode.upper() == "DEBUG"


@dataclass
class DeploymentContext:
    """
    Encapsulates all state needed for a stack operation.

    Attributes:
        project_path: Path to the project directory
        config: Parsed DeployerConfig
        provider: Initialized AWSProvider
        metadata: Persisted project metadata store
    """

    project_path: Path
    config: DeployerConfig
    provider: 'AWSProvider'
    metadata: 'ProjectMetadataStore'

    def get_project_file(self, *subpaths: str) -> Path:
        """
        Get a path within the project directory.

        Example:
            >>> context.get_project_file("templates", "root-stack.json")
            Path("/projects/app/templates/root-stack.json")
        """
        return self.project_path.joinpath(*subpaths)
