"""
Event bookkeeping and rendering for one stack operation.

EventStore remembers every event already shown for the root stack and its
nested stacks; EventRenderer prints event rows as a rich table.
"""

import sys
from datetime import datetime
from typing import Dict, Iterable, List, Optional, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

import stack_deployer.constants as CONSTANTS
from stack_deployer.core.models import StackEvent


def sort_by_timestamp(events: Iterable[StackEvent]) -> List[StackEvent]:
    return sorted(events, key=lambda event: event.timestamp)


class EventStore:
    """
    Deduplicated set of events shown during one operation.

    Only events newer than ``start_time`` are ever accepted, so history
    from earlier operations on the same stack is never shown. Events are
    keyed by ``event_id``; an id is accepted at most once.
    """

    def __init__(self, start_time: datetime):
        self.start_time = start_time
        self._shown: Dict[str, StackEvent] = {}

    def __len__(self) -> int:
        return len(self._shown)

    def __contains__(self, event_id: str) -> bool:
        return event_id in self._shown

    @property
    def is_empty(self) -> bool:
        return not self._shown

    @property
    def shown_events(self) -> List[StackEvent]:
        return sort_by_timestamp(self._shown.values())

    def is_recent(self, event: StackEvent) -> bool:
        return event.timestamp > self.start_time

    def filter_recent(self, events: Iterable[StackEvent]) -> List[StackEvent]:
        return [event for event in events if self.is_recent(event)]

    def unseen(self, events: Iterable[StackEvent]) -> List[StackEvent]:
        """Return events not shown yet, deduplicated by ``event_id``, order preserved."""
        fresh: Dict[str, StackEvent] = {}
        for event in events:
            if event.event_id in self._shown or event.event_id in fresh:
                continue
            fresh[event.event_id] = event
        return list(fresh.values())

    def pending(self, events: Iterable[StackEvent]) -> List[StackEvent]:
        """Return the recent, unseen events sorted by timestamp, without recording them."""
        return sort_by_timestamp(event for event in self.unseen(events) if self.is_recent(event))

    def record(self, events: Iterable[StackEvent]) -> List[StackEvent]:
        """
        Add events to the store.

        Returns:
            The events actually added (recent and unseen), sorted by timestamp.
        """
        added = self.pending(events)
        for event in added:
            self._shown[event.event_id] = event
        return added


class EventRenderer:
    """
    Prints event batches as a borderless table without a header row.

    Column order: status, logical id, resource type, timestamp, reason.
    Column widths are fitted to each batch.

    Args:
        stream: Output stream (stdout when omitted)
        width: Console width; detected from the terminal when omitted
    """

    def __init__(self, stream: Optional[TextIO] = None, width: Optional[int] = None):
        self._stream = stream
        self.width = width

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @staticmethod
    def _cell(event: StackEvent, column: str) -> Text:
        value = getattr(event, column)
        if value is None:
            return Text("")
        if isinstance(value, datetime):
            return Text(value.isoformat())
        # No markup parsing; status reasons may contain brackets
        return Text(str(value))

    def build_table(self, events: Iterable[StackEvent]) -> Table:
        grid = Table(show_header=False, box=None, pad_edge=False)
        for _ in CONSTANTS.EVENT_COLUMNS:
            grid.add_column(no_wrap=True)

        for event in sort_by_timestamp(events):
            grid.add_row(*[self._cell(event, column) for column in CONSTANTS.EVENT_COLUMNS])
        return grid

    def render(self, events: Iterable[StackEvent]) -> None:
        events = list(events)
        if not events:
            return
        console = Console(file=self.stream, width=self.width, highlight=False)
        console.print()
        console.print(self.build_table(events))
        self.stream.flush()
