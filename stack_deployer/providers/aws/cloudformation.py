"""
CloudFormation stack control plane.

Thin adapter over the boto3 CloudFormation client. API payloads are turned
into StackEvent/StackResource models here so the orchestration code never
handles raw response dictionaries.

Errors are not translated: failed requests propagate as botocore
``ClientError`` and failed waits as ``WaiterError``. The controller decides
what they mean for the operation.
"""

import math
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from botocore.exceptions import ClientError

import stack_deployer.constants as CONSTANTS
from stack_deployer.core.models import StackEvent, StackResource
from stack_deployer.logger import logger


def _to_parameters(parameters: Mapping[str, str]) -> list:
    return [
        {"ParameterKey": key, "ParameterValue": value}
        for key, value in parameters.items()
    ]


def _is_stack_missing(error: ClientError) -> bool:
    err = error.response.get("Error", {})
    return err.get("Code") == "ValidationError" and "does not exist" in err.get("Message", "")


class CloudFormationStackClient:
    """
    CloudFormation implementation of the StackClient protocol.

    Attributes:
        cfn: boto3 CloudFormation client
        waiter_delay: Seconds between waiter polls
        max_operation_seconds: Upper bound for any terminal-status wait
    """

    def __init__(
        self,
        cfn_client,
        waiter_delay: int = CONSTANTS.DEFAULT_WAITER_DELAY_SECONDS,
        max_operation_seconds: int = CONSTANTS.DEFAULT_MAX_OPERATION_SECONDS
    ):
        self.cfn = cfn_client
        self.waiter_delay = waiter_delay
        self.max_operation_seconds = max_operation_seconds

    @property
    def waiter_max_attempts(self) -> int:
        return max(1, math.ceil(self.max_operation_seconds / self.waiter_delay))

    def stack_exists(self, stack_name: str) -> bool:
        try:
            self.cfn.describe_stacks(StackName=stack_name)
            return True
        except ClientError as e:
            if _is_stack_missing(e):
                return False
            raise

    def create_stack(
        self,
        stack_name: str,
        template_url: str,
        parameters: Mapping[str, str],
        capabilities: Sequence[str]
    ) -> str:
        response = self.cfn.create_stack(
            StackName=stack_name,
            TemplateURL=template_url,
            Parameters=_to_parameters(parameters),
            Capabilities=list(capabilities),
        )
        logger.info(f"Requested creation of CloudFormation stack: {stack_name}")
        return response["StackId"]

    def update_stack(
        self,
        stack_name: str,
        template_url: str,
        parameters: Mapping[str, str],
        capabilities: Sequence[str]
    ) -> str:
        response = self.cfn.update_stack(
            StackName=stack_name,
            TemplateURL=template_url,
            Parameters=_to_parameters(parameters),
            Capabilities=list(capabilities),
        )
        logger.info(f"Requested update of CloudFormation stack: {stack_name}")
        return response["StackId"]

    def delete_stack(self, stack_name: str) -> None:
        self.cfn.delete_stack(StackName=stack_name)
        logger.info(f"Requested deletion of CloudFormation stack: {stack_name}")

    def describe_stack(self, stack_name: str) -> dict:
        return self.cfn.describe_stacks(StackName=stack_name)["Stacks"][0]

    def describe_stack_events(self, stack_name: str, since: Optional[datetime] = None) -> List[StackEvent]:
        """
        Return the events of a stack, newest first.

        CloudFormation pages events newest first, so paging stops at the first
        event not newer than ``since``.
        """
        events = []
        paginator = self.cfn.get_paginator("describe_stack_events")
        for page in paginator.paginate(StackName=stack_name):
            for payload in page.get("StackEvents", []):
                if since is not None and payload["Timestamp"] <= since:
                    return events
                events.append(StackEvent.from_api(payload))
        return events

    def describe_stack_resources(self, stack_name: str) -> List[StackResource]:
        response = self.cfn.describe_stack_resources(StackName=stack_name)
        return [StackResource.from_api(r) for r in response.get("StackResources", [])]

    def describe_stack_outputs(self, stack_name: str) -> Dict[str, str]:
        stack = self.describe_stack(stack_name)
        return {
            output["OutputKey"]: output["OutputValue"]
            for output in stack.get("Outputs", [])
        }

    def wait_for_terminal_status(self, stack_name: str, expected_status: str) -> None:
        """
        Block until the stack reaches ``expected_status``.

        Raises:
            ValueError: If there is no waiter for ``expected_status``
            botocore.exceptions.WaiterError: On failure/rollback status or timeout
        """
        if expected_status not in CONSTANTS.TERMINAL_STATUS_WAITERS:
            raise ValueError(f"No waiter for terminal status '{expected_status}'")

        waiter = self.cfn.get_waiter(CONSTANTS.TERMINAL_STATUS_WAITERS[expected_status])
        logger.debug(
            f"Waiting for {stack_name} to reach {expected_status} "
            f"(delay={self.waiter_delay}s, max_attempts={self.waiter_max_attempts})"
        )
        waiter.wait(
            StackName=stack_name,
            WaiterConfig={"Delay": self.waiter_delay, "MaxAttempts": self.waiter_max_attempts},
        )
