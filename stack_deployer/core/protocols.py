"""
Protocol definitions for the collaborators of the stack deployer.

The orchestration code only talks to these interfaces; the boto3 and
JSON-file implementations live in ``providers.aws`` and ``metadata``.
Tests substitute MagicMock objects or small fakes.

Why Protocols instead of ABC?
    - No explicit inheritance required (duck typing)
    - Runtime checking with @runtime_checkable decorator
"""

from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable
from datetime import datetime

from .models import StackEvent, StackIdentifiers, StackResource


@runtime_checkable
class StackClient(Protocol):
    """
    Remote stack control plane.

    Implementations raise ``botocore.exceptions.ClientError`` for failed
    requests and ``botocore.exceptions.WaiterError`` when a terminal-status
    wait fails.
    """

    def stack_exists(self, stack_name: str) -> bool:
        ...

    def create_stack(
        self,
        stack_name: str,
        template_url: str,
        parameters: Mapping[str, str],
        capabilities: Sequence[str]
    ) -> str:
        """Issue the create request and return the new stack id."""
        ...

    def update_stack(
        self,
        stack_name: str,
        template_url: str,
        parameters: Mapping[str, str],
        capabilities: Sequence[str]
    ) -> str:
        ...

    def delete_stack(self, stack_name: str) -> None:
        ...

    def describe_stack(self, stack_name: str) -> dict:
        ...

    def describe_stack_events(self, stack_name: str, since: Optional[datetime] = None) -> List[StackEvent]:
        ...

    def describe_stack_resources(self, stack_name: str) -> List[StackResource]:
        ...

    def describe_stack_outputs(self, stack_name: str) -> Dict[str, str]:
        ...

    def wait_for_terminal_status(self, stack_name: str, expected_status: str) -> None:
        """Block until ``expected_status`` is reached, raising on failure."""
        ...


@runtime_checkable
class ArtifactUploader(Protocol):
    """Uploads a local artifact and returns the URL it is reachable at."""

    def upload(self, local_path: str) -> str:
        ...


@runtime_checkable
class MetadataStore(Protocol):
    """Persisted project metadata."""

    def read_stack_identifiers(self) -> StackIdentifiers:
        ...

    def write_stack_identifiers(self, identifiers: StackIdentifiers) -> None:
        ...

    def resource_keys(self) -> List[Tuple[str, str]]:
        """Return every known ``(category, resource_name)`` pair."""
        ...

    def write_resource_outputs(self, category: str, resource_name: str, outputs: Mapping[str, str]) -> None:
        ...
