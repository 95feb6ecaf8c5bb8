# IN THIS FILE: TICK-DRIVEN DEFERRED CALLBACKS

from typing import Callable, List


class ScheduledCall:
    """Handle for a callback waiting on the tick counter. Cancel to make it inert."""

    def __init__(self, due_tick: int, callback: Callable[[], None]):
        self.due_tick = due_tick
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        return f"ScheduledCall(due_tick={self.due_tick}, cancelled={self.cancelled})"


class TickScheduler:
    """
    Runs callbacks after a number of ticks have elapsed.

    Nothing here blocks: call_later() only records the callback, and it fires
    from inside a later tick(). A delay of 0 fires on the very next tick, never
    synchronously, so callers can always finish what they were doing first.
    """

    def __init__(self):
        self.tick_count = 0
        self._pending: List[ScheduledCall] = []

    def call_later(self, ticks: int, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(self.tick_count + max(0, ticks), callback)
        self._pending.append(call)
        return call

    def tick(self) -> None:
        self.tick_count += 1

        # Partition before firing so callbacks may schedule more work
        due = [c for c in self._pending if c.due_tick <= self.tick_count]
        self._pending = [c for c in self._pending if c.due_tick > self.tick_count and not c.cancelled]

        for call in due:
            if not call.cancelled:
                call.callback()

    def cancel_all(self) -> None:
        for call in self._pending:
            call.cancel()
        self._pending = []

    @property
    def pending(self) -> int:
        return sum(1 for c in self._pending if not c.cancelled)
