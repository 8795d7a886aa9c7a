"""
Stack Operation Controller - create, update and delete of the project stack.

Architecture:
    - Checks preconditions before any mutating remote call
    - Issues the request and blocks on the terminal-status waiter
    - Runs an EventPoller around the wait for create/update
    - Propagates outputs into project metadata once the wait succeeds

Usage:
    controller = StackOperationController(stack_client, metadata, uploader_factory)
    outputs = controller.execute(StackOperation(
        kind=OperationKind.CREATE,
        stack_name="app",
        template_location="https://s3.amazonaws.com/bucket/root-stack.json",
    ))
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from botocore.exceptions import BotoCoreError, ClientError, WaiterError

import stack_deployer.constants as CONSTANTS
from stack_deployer.core.context import DeployerConfig
from stack_deployer.core.exceptions import (
    PreconditionFailedError,
    RemoteRequestError,
    StackAlreadyExistsError,
    WaitFailedError,
)
from stack_deployer.core.models import (
    OperationKind,
    OutputMap,
    StackIdentifiers,
    StackOperation,
)
from stack_deployer.core.protocols import ArtifactUploader, MetadataStore, StackClient
from stack_deployer.logger import logger

from .event_poller import EventPoller, PollerHandle
from .event_store import EventRenderer
from .output_propagator import OutputPropagator

# Upper bound for joining the poller thread after the stop signal
POLLER_JOIN_TIMEOUT_SECONDS = 60


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StackOperationController:
    """
    Runs one StackOperation to its terminal state.

    Args:
        stack_client: Remote stack control plane
        metadata: Persisted project metadata
        uploader_factory: Builds the artifact uploader for a deployment bucket
        config: Polling/timeout/capability settings
        renderer: Event printer handed to the poller
        clock: Returns the current UTC time (injectable for tests)
    """

    def __init__(
        self,
        stack_client: StackClient,
        metadata: MetadataStore,
        uploader_factory: Optional[Callable[[str], ArtifactUploader]] = None,
        config: Optional[DeployerConfig] = None,
        renderer: Optional[EventRenderer] = None,
        clock: Callable[[], datetime] = _utc_now
    ):
        self.stack_client = stack_client
        self.metadata = metadata
        self.uploader_factory = uploader_factory
        self.config = config or DeployerConfig()
        self.renderer = renderer or EventRenderer()
        self.clock = clock
        self.propagator = OutputPropagator(stack_client, metadata)

    def execute(self, op: StackOperation) -> OutputMap:
        """
        Execute ``op`` and return the propagated outputs.

        Delete returns an empty mapping.

        Raises:
            PreconditionFailedError: Persisted identifiers missing, or the persisted stack is gone remotely
            StackAlreadyExistsError: Create against an existing stack
            RemoteRequestError: A remote request failed
            WaitFailedError: The operation ended in a failure/rollback state or timed out
        """
        handlers = {
            OperationKind.CREATE: self._create,
            OperationKind.UPDATE: self._update,
            OperationKind.DELETE: self._delete,
        }
        return handlers[OperationKind(op.kind)](op)

    # ==========================================
    # Create
    # ==========================================

    def _create(self, op: StackOperation) -> OutputMap:
        stack_name = op.stack_name
        if not stack_name:
            raise PreconditionFailedError("A stack name is required to create a stack")

        if self._stack_exists(stack_name):
            raise StackAlreadyExistsError(stack_name)

        start_time = self.clock()
        try:
            stack_id = self.stack_client.create_stack(
                stack_name,
                op.template_location,
                op.remote_parameters,
                self.config.capabilities,
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "AlreadyExistsException":
                raise StackAlreadyExistsError(stack_name, original_error=e)
            logger.error(f"Error creating CloudFormation stack {stack_name}")
            raise RemoteRequestError("create", e, stack_name=stack_name)
        except BotoCoreError as e:
            logger.error(f"Error creating CloudFormation stack {stack_name}")
            raise RemoteRequestError("create", e, stack_name=stack_name)

        self._poll_until_terminal(stack_name, start_time, CONSTANTS.CREATE_COMPLETE)

        self.metadata.write_stack_identifiers(StackIdentifiers(stack_name=stack_name, stack_id=stack_id))
        logger.info(f"✓ Stack {stack_name} created")
        return self.propagator.propagate(stack_name)

    # ==========================================
    # Update
    # ==========================================

    def _update(self, op: StackOperation) -> OutputMap:
        identifiers = self.metadata.read_stack_identifiers()
        if not identifiers.stack_name:
            raise PreconditionFailedError(
                "Project stack is not yet created. Create the stack before updating it."
            )
        if not identifiers.deployment_bucket:
            raise PreconditionFailedError(
                "Project deployment bucket is not yet created. Create the stack before updating it.",
                stack_name=identifiers.stack_name
            )
        if op.stack_name and op.stack_name != identifiers.stack_name:
            raise PreconditionFailedError(
                f"Requested stack '{op.stack_name}' does not match the project stack",
                stack_name=identifiers.stack_name
            )
        if self.uploader_factory is None:
            raise PreconditionFailedError(
                "No artifact uploader configured for stack updates",
                stack_name=identifiers.stack_name
            )

        stack_name = identifiers.stack_name
        bucket = identifiers.deployment_bucket

        if not self._stack_exists(stack_name):
            raise PreconditionFailedError("Project stack doesn't exist", stack_name=stack_name)

        try:
            template_url = self.uploader_factory(bucket).upload(op.template_location)
        except (ClientError, BotoCoreError, OSError) as e:
            logger.error(f"Error uploading template {op.template_location} to {bucket}")
            raise RemoteRequestError("upload", e, stack_name=stack_name)

        parameters = dict(op.remote_parameters)
        parameters[CONSTANTS.DEPLOYMENT_BUCKET_PARAMETER] = bucket

        start_time = self.clock()
        try:
            self.stack_client.update_stack(stack_name, template_url, parameters, self.config.capabilities)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error updating CloudFormation stack {stack_name}")
            raise RemoteRequestError("update", e, stack_name=stack_name)

        self._poll_until_terminal(stack_name, start_time, CONSTANTS.UPDATE_COMPLETE)

        logger.info(f"✓ Stack {stack_name} updated")
        return self.propagator.propagate(stack_name)

    # ==========================================
    # Delete
    # ==========================================

    def _delete(self, op: StackOperation) -> OutputMap:
        identifiers = self.metadata.read_stack_identifiers()
        if not identifiers.stack_name:
            raise PreconditionFailedError("Project stack does not exist")
        stack_name = identifiers.stack_name

        if not self._stack_exists(stack_name):
            raise PreconditionFailedError("Project stack doesn't exist", stack_name=stack_name)

        try:
            self.stack_client.delete_stack(stack_name)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error deleting stack {stack_name}")
            raise RemoteRequestError("delete", e, stack_name=stack_name)

        self._wait(stack_name, CONSTANTS.DELETE_COMPLETE)

        logger.info(f"✓ Stack {stack_name} deleted")
        return {}

    # ==========================================
    # Helpers
    # ==========================================

    def _stack_exists(self, stack_name: str) -> bool:
        try:
            return self.stack_client.stack_exists(stack_name)
        except (ClientError, BotoCoreError) as e:
            raise RemoteRequestError("describe", e, stack_name=stack_name)

    def _wait(self, stack_name: str, expected_status: str) -> None:
        try:
            self.stack_client.wait_for_terminal_status(stack_name, expected_status)
        except (WaiterError, ClientError, BotoCoreError) as e:
            logger.error(f"Stack {stack_name} did not reach {expected_status}")
            raise WaitFailedError("wait", e, stack_name=stack_name)

    def _start_poller(self, stack_name: str, start_time: datetime) -> PollerHandle:
        poller = EventPoller(
            self.stack_client,
            stack_name,
            start_time,
            renderer=self.renderer,
            interval=self.config.poll_interval_seconds,
            max_duration=self.config.max_operation_seconds,
        )
        return poller.start()

    def _poll_until_terminal(self, stack_name: str, start_time: datetime, expected_status: str) -> None:
        handle = self._start_poller(stack_name, start_time)
        try:
            self._wait(stack_name, expected_status)
        finally:
            handle.stop()
            handle.join(POLLER_JOIN_TIMEOUT_SECONDS)
