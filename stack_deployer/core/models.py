"""
Data model for stack operations and their progress events.

StackEvent and StackResource are built from CloudFormation API payloads and
are never mutated afterwards. Whether a resource is a nested stack is decided
once, when the payload is parsed, and carried as a ResourceKind tag.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional

# arn:<partition>:cloudformation:<region>:<account>:stack/<name>/<uuid>
STACK_ARN_PATTERN = re.compile(
    r"^arn:aws[a-z-]*:cloudformation:[a-z0-9-]+:\d{12}:stack/[A-Za-z][A-Za-z0-9-]*/[A-Za-z0-9-]+$"
)

# category -> resource name -> output key -> output value
OutputMap = Dict[str, Dict[str, Dict[str, str]]]


class OperationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ResourceKind(str, Enum):
    PLAIN = "plain"
    NESTED_STACK = "nested_stack"


def is_stack_arn(identifier: Optional[str]) -> bool:
    """Return True if ``identifier`` is a well-formed CloudFormation stack ARN."""
    if not identifier or not isinstance(identifier, str):
        return False
    return STACK_ARN_PATTERN.match(identifier) is not None


def classify_resource(physical_resource_id: Optional[str], owner_stack_id: Optional[str] = None) -> ResourceKind:
    """
    Classify a physical resource id as a nested stack or a plain resource.

    A stack's own lifecycle events carry the stack ARN as physical id; those
    are not nested stacks of themselves.
    """
    if not is_stack_arn(physical_resource_id):
        return ResourceKind.PLAIN
    if owner_stack_id and physical_resource_id == owner_stack_id:
        return ResourceKind.PLAIN
    return ResourceKind.NESTED_STACK


@dataclass(frozen=True)
class StackOperation:
    """
    One create/update/delete request, immutable once issued.

    Attributes:
        kind: Operation to perform
        stack_name: Target stack (update/delete read it from project metadata)
        remote_parameters: Extra CloudFormation parameters
        template_location: Template URL for create, local template path for update
    """
    kind: OperationKind
    stack_name: str = ""
    remote_parameters: Mapping[str, str] = field(default_factory=dict)
    template_location: str = ""


@dataclass(frozen=True)
class StackEvent:
    event_id: str
    stack_id: str
    logical_resource_id: str
    physical_resource_id: str
    resource_type: str
    resource_status: str
    timestamp: datetime
    status_reason: Optional[str] = None
    resource_kind: ResourceKind = ResourceKind.PLAIN

    @property
    def is_nested_stack(self) -> bool:
        return self.resource_kind is ResourceKind.NESTED_STACK

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "StackEvent":
        """Build an event from one entry of ``DescribeStackEvents.StackEvents``."""
        stack_id = payload.get("StackId", "")
        physical_id = payload.get("PhysicalResourceId") or ""
        return cls(
            event_id=payload["EventId"],
            stack_id=stack_id,
            logical_resource_id=payload.get("LogicalResourceId", ""),
            physical_resource_id=physical_id,
            resource_type=payload.get("ResourceType", ""),
            resource_status=payload.get("ResourceStatus", ""),
            timestamp=payload["Timestamp"],
            status_reason=payload.get("ResourceStatusReason"),
            resource_kind=classify_resource(physical_id, stack_id),
        )


@dataclass(frozen=True)
class StackResource:
    logical_resource_id: str
    physical_resource_id: str
    resource_type: str = ""
    resource_kind: ResourceKind = ResourceKind.PLAIN

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "StackResource":
        """Build a resource from one entry of ``DescribeStackResources.StackResources``."""
        physical_id = payload.get("PhysicalResourceId") or ""
        return cls(
            logical_resource_id=payload.get("LogicalResourceId", ""),
            physical_resource_id=physical_id,
            resource_type=payload.get("ResourceType", ""),
            resource_kind=classify_resource(physical_id, payload.get("StackId")),
        )


@dataclass(frozen=True)
class StackIdentifiers:
    """Stack identifiers persisted in the project metadata."""
    stack_name: str = ""
    deployment_bucket: str = ""
    stack_id: str = ""
