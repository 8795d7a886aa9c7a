"""
Stack operation orchestration.

Modules:
    event_store: EventStore (shown events) and EventRenderer (console rows)
    nested_stacks: NestedStackDiscoverer
    event_poller: EventPoller and its PollerHandle
    output_propagator: OutputPropagator
    stack_controller: StackOperationController
"""

from .event_poller import EventPoller, PollerHandle
from .event_store import EventRenderer, EventStore
from .nested_stacks import NestedStackDiscoverer
from .output_propagator import OutputPropagator
from .stack_controller import StackOperationController

__all__ = [
    "EventPoller",
    "EventRenderer",
    "EventStore",
    "NestedStackDiscoverer",
    "OutputPropagator",
    "PollerHandle",
    "StackOperationController",
]
