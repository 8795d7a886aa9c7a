"""
Nested stack discovery.

An event whose resource is itself a stack (tagged ResourceKind.NESTED_STACK
when the event was parsed) leads to that stack's own events. Those are
fetched here and filtered by the owning operation's start time.
"""

from datetime import datetime
from typing import List

from botocore.exceptions import BotoCoreError, ClientError

from stack_deployer.core.exceptions import PollFetchError
from stack_deployer.core.models import StackEvent, is_stack_arn
from stack_deployer.core.protocols import StackClient
from stack_deployer.logger import logger


class NestedStackDiscoverer:
    """
    Fetches the event history of nested stacks for one operation.

    Args:
        stack_client: Remote stack control plane
        start_time: Start of the owning operation; older events are dropped
    """

    def __init__(self, stack_client: StackClient, start_time: datetime):
        self.stack_client = stack_client
        self.start_time = start_time

    def fetch_nested_events(self, physical_stack_id: str) -> List[StackEvent]:
        """
        Return the recent events of the nested stack ``physical_stack_id``.

        Malformed identifiers and fetch failures yield an empty list so that
        one bad nested stack never fails the whole poll tick.
        """
        if not is_stack_arn(physical_stack_id):
            logger.debug(f"Skipping malformed nested stack identifier: {physical_stack_id!r}")
            return []

        try:
            events = self.stack_client.describe_stack_events(physical_stack_id, since=self.start_time)
        except (ClientError, BotoCoreError) as e:
            logger.warning(str(PollFetchError(physical_stack_id, e)))
            return []

        return [event for event in events if event.timestamp > self.start_time]
