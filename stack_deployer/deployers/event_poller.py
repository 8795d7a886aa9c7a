"""
Background polling of stack events.

While a stack operation is in flight, EventPoller runs on its own thread
and prints every new event of the root stack and of the nested stacks
referenced by those events.

The poller owns its EventStore and talks to the controller only through
the PollerHandle returned by start(): the controller stops the handle once
the remote operation has terminated and joins the thread.

Usage:
    poller = EventPoller(stack_client, "app", start_time)
    handle = poller.start()
    try:
        stack_client.wait_for_terminal_status("app", "CREATE_COMPLETE")
    finally:
        handle.stop()
        handle.join()

Events that arrive after the final tick are not shown. The controller's
result, not the rendered output, is authoritative.
"""

import threading
import time
from datetime import datetime
from typing import Dict, List, Optional, Set

from botocore.exceptions import BotoCoreError, ClientError

import stack_deployer.constants as CONSTANTS
from stack_deployer.core.exceptions import PollFetchError
from stack_deployer.core.models import StackEvent
from stack_deployer.core.protocols import StackClient
from stack_deployer.logger import logger, print_stack_trace

from .event_store import EventRenderer, EventStore
from .nested_stacks import NestedStackDiscoverer


class PollerHandle:
    """
    Lifecycle handle of a running poller thread.

    stop() is the single stop signal; it is observed at the next tick
    boundary. A tick already in flight completes but schedules no further
    tick.
    """

    def __init__(self, thread: threading.Thread, stop_event: threading.Event):
        self._thread = thread
        self._stop_event = stop_event

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def stop(self) -> None:
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the poller thread to finish.

        Returns:
            True if the thread has terminated.
        """
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning(f"Event poller {self._thread.name} still running after {timeout}s")
            return False
        return True


class EventPoller:
    """
    Polls the events of one stack operation.

    Args:
        stack_client: Remote stack control plane
        stack_name: Root stack being operated on
        start_time: Operation start; only newer events are shown
        renderer: Event printer (stdout by default)
        interval: Seconds between ticks
        max_duration: Seconds after which the poller stops on its own
    """

    def __init__(
        self,
        stack_client: StackClient,
        stack_name: str,
        start_time: datetime,
        renderer: Optional[EventRenderer] = None,
        interval: float = CONSTANTS.DEFAULT_POLL_INTERVAL_SECONDS,
        max_duration: Optional[float] = CONSTANTS.DEFAULT_MAX_OPERATION_SECONDS
    ):
        self.stack_client = stack_client
        self.stack_name = stack_name
        self.start_time = start_time
        self.renderer = renderer or EventRenderer()
        self.interval = interval
        self.max_duration = max_duration

        self.store = EventStore(start_time)
        self.discoverer = NestedStackDiscoverer(stack_client, start_time)
        self._handle: Optional[PollerHandle] = None

    # ==========================================
    # Tick
    # ==========================================

    def tick(self) -> List[StackEvent]:
        """
        Run one poll cycle.

        Returns:
            The batch rendered during this tick (possibly empty).

        Renderer errors propagate; the events of that batch stay unrecorded.
        """
        try:
            events = self.stack_client.describe_stack_events(self.stack_name, since=self.start_time)
        except (ClientError, BotoCoreError) as e:
            logger.warning(str(PollFetchError(self.stack_name, e)))
            return []

        recent = self.store.filter_recent(events)

        if self.store.is_empty:
            batch = recent
        else:
            new_events = self.store.unseen(recent)
            if not new_events:
                return []
            batch = self._merge_nested_events(new_events)

        pending = self.store.pending(batch)
        if not pending:
            return []
        # Recorded only once rendered, so a failed render is retried next tick
        self.renderer.render(pending)
        return self.store.record(pending)

    def _merge_nested_events(self, new_events: List[StackEvent]) -> List[StackEvent]:
        """
        Fold the events of nested stacks referenced by ``new_events`` into the batch.

        Each nested stack is fetched at most once per tick. Folded events are
        scanned as well, so stacks nested deeper are followed in the same tick.
        """
        merged: Dict[str, StackEvent] = {event.event_id: event for event in new_events}
        pending = list(new_events)
        discovered: Set[str] = set()

        while pending:
            event = pending.pop(0)
            if not event.is_nested_stack or event.physical_resource_id in discovered:
                continue
            discovered.add(event.physical_resource_id)

            for nested_event in self.discoverer.fetch_nested_events(event.physical_resource_id):
                if nested_event.event_id in merged or nested_event.event_id in self.store:
                    continue
                merged[nested_event.event_id] = nested_event
                pending.append(nested_event)

        if discovered:
            logger.debug(f"Followed {len(discovered)} nested stack(s) of {self.stack_name}")
        return list(merged.values())

    # ==========================================
    # Lifecycle
    # ==========================================

    def start(self) -> PollerHandle:
        """
        Start polling on a background thread; the first tick runs immediately.

        Raises:
            RuntimeError: If this poller was already started
        """
        if self._handle is not None:
            raise RuntimeError(f"Event poller for {self.stack_name} already started")

        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(stop_event,),
            name=f"event-poller-{self.stack_name}",
            daemon=True,
        )
        self._handle = PollerHandle(thread, stop_event)
        thread.start()
        logger.debug(f"Started event poller for {self.stack_name} (interval={self.interval}s)")
        return self._handle

    def _run(self, stop_event: threading.Event) -> None:
        deadline = None
        if self.max_duration is not None:
            deadline = time.monotonic() + self.max_duration

        while not stop_event.is_set():
            try:
                self.tick()
            except Exception as e:
                # A failed tick never ends the loop
                logger.error(f"Unexpected error while polling events of {self.stack_name}: {e}")
                print_stack_trace()

            if stop_event.wait(self.interval):
                break
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning(
                    f"Stopped polling events of {self.stack_name} after {self.max_duration}s"
                )
                break

        logger.debug(f"Event poller for {self.stack_name} finished ({len(self.store)} events shown)")
