"""
Custom exceptions for the stack deployer.

This module defines the exceptions raised while driving a CloudFormation
stack through create, update and delete.

Exception Hierarchy:
    DeploymentError (base)
    ├── ConfigurationError - Invalid or missing configuration/metadata
    ├── PreconditionFailedError - Persisted stack identifiers missing
    ├── StackAlreadyExistsError - Create against an existing stack
    ├── OperationError - A remote phase of the operation failed
    │   ├── RemoteRequestError - create/update/delete/describe/upload call failed
    │   └── WaitFailedError - Terminal-status waiter reported failure
    └── PollFetchError - Background event fetch failed (never fatal)
"""

from typing import Optional


class DeploymentError(Exception):
    """
    Base exception for all deployment-related errors.

    Attributes:
        message: Human-readable error description
        stack_name: Optional stack the error relates to
    """

    def __init__(self, message: str, stack_name: Optional[str] = None):
        self.message = message
        self.stack_name = stack_name

        if stack_name:
            full_message = f"{message} [stack={stack_name}]"
        else:
            full_message = message

        super().__init__(full_message)


class ConfigurationError(DeploymentError):
    """
    Raised when configuration is invalid or missing required fields.

    Example:
        >>> load_deployer_config(Path("/broken"))
        ConfigurationError: Invalid JSON in configuration file: ... (file: ...)
    """

    def __init__(self, message: str, config_file: Optional[str] = None):
        self.config_file = config_file
        if config_file:
            message = f"{message} (file: {config_file})"
        super().__init__(message)


class PreconditionFailedError(DeploymentError):
    """
    Raised before any remote call when the project metadata does not hold
    the identifiers an update or delete needs.
    """


class StackAlreadyExistsError(DeploymentError):
    """Raised when a create targets a stack name that already exists remotely."""

    def __init__(self, stack_name: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__("Stack already exists", stack_name=stack_name)


class OperationError(DeploymentError):
    """
    A remote phase of a stack operation failed.

    Attributes:
        phase: Phase that failed (e.g. "create", "wait", "upload")
        cause: The underlying SDK exception
    """

    def __init__(
        self,
        phase: str,
        cause: Optional[Exception] = None,
        stack_name: Optional[str] = None
    ):
        self.phase = phase
        self.cause = cause

        message = f"Stack operation failed during '{phase}'"
        if cause:
            message += f": {cause}"

        super().__init__(message, stack_name=stack_name)


class RemoteRequestError(OperationError):
    """The create/update/delete/describe/upload request itself errored."""


class WaitFailedError(OperationError):
    """The terminal-status waiter reported a failure, rollback or timeout."""


class PollFetchError(DeploymentError):
    """
    Fetching events during a poll tick failed.

    The poller logs this and retries on the next tick; it never aborts
    the operation.
    """

    def __init__(self, stack_name: str, cause: Optional[Exception] = None):
        self.cause = cause
        message = "Failed to fetch stack events"
        if cause:
            message += f": {cause}"
        super().__init__(message, stack_name=stack_name)
