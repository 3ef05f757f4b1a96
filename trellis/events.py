"""
Event Sink

Ordered outbox of string events raised by components, drained by the
host. One sink is shared by every component of a tree.

Usage:
    sink = EventSink()
    sink.push("save")
    sink.next()    # "save"
    sink.next()    # None
"""

from __future__ import annotations
import logging
from collections import deque
from typing import Deque, Iterator, List, Optional, TYPE_CHECKING

from trellis.errors import ScriptError
from trellis.template.value import EventHook, HookKind

if TYPE_CHECKING:
    from trellis.scripting.model import ScriptTable
    from trellis.scripting.runtime import ScriptRuntime

logger = logging.getLogger(__name__)


class EventSink:
    """
    FIFO of raised events.

    Script hooks need a runtime to run their statement; a sink created
    without one only accepts direct hooks. When `model` is set it is bound
    before a statement runs, so hooks see their own tree's model.
    """

    def __init__(self, runtime: Optional[ScriptRuntime] = None, model: Optional[ScriptTable] = None):
        self._events: Deque[str] = deque()
        self.runtime = runtime
        self.model = model

    def push(self, event: str):
        self._events.append(event)

    def next(self) -> Optional[str]:
        """Take the next raised event, or None if there is none."""
        if not self._events:
            return None
        return self._events.popleft()

    def drain(self) -> List[str]:
        events = list(self._events)
        self._events.clear()
        return events

    def raise_hook(self, hook: EventHook):
        """Raise the event described by a hook."""
        if hook.kind == HookKind.DIRECT:
            logger.debug(f"Event raised: {hook.value}")
            self.push(hook.value)
            return

        if self.runtime is None:
            raise ScriptError("No script runtime to run event hook", hook.value)
        logger.debug(f"Running event script: {hook.value}")
        if self.model is not None:
            self.runtime.set_model(self.model)
        self.runtime.run_statement(hook.value, self.push)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[str]:
        """Drain events in raise order."""
        while self._events:
            yield self._events.popleft()
