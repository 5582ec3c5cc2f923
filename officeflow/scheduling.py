"""
Cooperative single-threaded task scheduler.

Timers and pollers of a screen are ScheduledTask objects owned by one
Scheduler. Nothing runs in the background: due tasks execute on the calling
thread from run_pending(), advance() (virtual clock) or run_until()
(real clock). Tasks can be cancelled, paused and resumed.
"""
import heapq
import itertools
import logging
import time
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Clock:
    """Source of monotonic time in seconds."""

    def now(self) -> float:
        raise NotImplementedError

    def sleep(self, seconds: float) -> None:
        raise NotImplementedError


class MonotonicClock(Clock):
    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class VirtualClock(Clock):
    """Clock that only moves when told to. Used to drive timers in tests."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def now(self) -> float:
        return self._now

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            self._now += seconds

    def set(self, value: float) -> None:
        if value < self._now:
            raise ValueError("Virtual clock cannot move backwards")
        self._now = value


class ScheduledTask:
    """A one-shot timer or a repeating interval."""

    def __init__(
        self,
        scheduler: "Scheduler",
        callback: Callable[..., Any],
        args: Tuple[Any, ...],
        first_due: float,
        interval: Optional[float] = None,
        name: Optional[str] = None,
    ):
        self._scheduler = scheduler
        self.callback = callback
        self.args = args
        self.interval = interval
        self.name = name or getattr(callback, "__name__", "task")
        self.due = first_due
        self.run_count = 0
        self.cancelled = False
        self.paused = False
        self._anchor = first_due
        self._anchor_runs = 0
        self._remaining: Optional[float] = None
        self._entry: Optional[int] = None

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    @property
    def active(self) -> bool:
        """Still scheduled to run (paused tasks count as active)."""
        if self.cancelled:
            return False
        return self.repeating or self.run_count == 0

    def cancel(self) -> None:
        if not self.cancelled:
            self.cancelled = True
            self._scheduler._discard(self)

    def pause(self) -> None:
        """Stop firing until resume(); remembers how long was left."""
        if self.cancelled or self.paused:
            return
        self.paused = True
        self._remaining = max(0.0, self.due - self._scheduler.clock.now())

    def resume(self) -> None:
        if self.cancelled or not self.paused:
            return
        self.paused = False
        self._anchor = self._scheduler.clock.now() + (self._remaining or 0.0)
        self._remaining = None
        self.due = self._anchor
        self._anchor_runs = self.run_count
        self._scheduler._push(self)

    def _next_due(self) -> float:
        # Computed from the anchor so float error does not accumulate
        return self._anchor + (self.run_count - self._anchor_runs) * self.interval

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "paused" if self.paused else f"due={self.due:.3f}"
        return f"<ScheduledTask {self.name} {state}>"


class Scheduler:
    """Owns timers and runs the ones that are due."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or MonotonicClock()
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._tasks: List[ScheduledTask] = []
        self._counter = itertools.count()

    def _push(self, task: ScheduledTask) -> None:
        task._entry = next(self._counter)
        heapq.heappush(self._queue, (task.due, task._entry, task))

    def _discard(self, task: ScheduledTask) -> None:
        if task in self._tasks:
            self._tasks.remove(task)

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any, name: Optional[str] = None) -> ScheduledTask:
        """Run callback once after delay seconds."""
        task = ScheduledTask(self, callback, args, self.clock.now() + max(0.0, delay), name=name)
        self._tasks.append(task)
        self._push(task)
        return task

    def call_soon(self, callback: Callable[..., Any], *args: Any, name: Optional[str] = None) -> ScheduledTask:
        """Run callback on the next pass of the loop."""
        return self.call_later(0.0, callback, *args, name=name)

    def call_every(
        self,
        interval: float,
        callback: Callable[..., Any],
        *args: Any,
        name: Optional[str] = None,
        immediate: bool = False,
    ) -> ScheduledTask:
        """
        Run callback every interval seconds.

        The first run is one interval from now, or on the next pass of the
        loop when immediate is set.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        task = ScheduledTask(
            self, callback, args, self.clock.now() + (0.0 if immediate else interval),
            interval=interval, name=name,
        )
        self._tasks.append(task)
        self._push(task)
        return task

    @property
    def tasks(self) -> List[ScheduledTask]:
        """Tasks that may still fire."""
        return [t for t in self._tasks if t.active]

    @property
    def pending_count(self) -> int:
        return len(self.tasks)

    def next_due(self) -> Optional[float]:
        self._drop_stale()
        return self._queue[0][0] if self._queue else None

    def _drop_stale(self) -> None:
        while self._queue:
            _, entry, task = self._queue[0]
            if task.cancelled or task.paused or entry != task._entry or not task.active:
                heapq.heappop(self._queue)
                continue
            break

    def _run_task(self, task: ScheduledTask) -> None:
        task.run_count += 1
        if task.repeating:
            task.due = task._next_due()
            self._push(task)
        else:
            self._discard(task)
        try:
            task.callback(*task.args)
        except Exception as e:
            # A failing timer must not take the loop down with it
            logger.error(f"Scheduled task {task.name} failed: {e}", exc_info=True)

    def run_pending(self) -> int:
        """
        Run every task that is due now, including tasks they schedule for now.

        Returns:
            Number of callbacks executed
        """
        executed = 0
        while True:
            self._drop_stale()
            if not self._queue or self._queue[0][0] > self.clock.now():
                return executed
            _, _, task = heapq.heappop(self._queue)
            self._run_task(task)
            executed += 1

    def advance(self, seconds: float) -> int:
        """
        Move a VirtualClock forward, firing timers in due order.

        Returns:
            Number of callbacks executed
        """
        if not isinstance(self.clock, VirtualClock):
            raise TypeError("advance() requires a VirtualClock")
        target = self.clock.now() + seconds
        executed = self.run_pending()
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            self.clock.set(max(due, self.clock.now()))
            executed += self.run_pending()
        self.clock.set(target)
        return executed + self.run_pending()

    def run_until(self, predicate: Callable[[], bool], timeout: Optional[float] = None) -> bool:
        """
        Drive the loop until predicate() is true.

        Returns:
            True if the predicate was satisfied, False on timeout or when
            nothing is left to run
        """
        deadline = None if timeout is None else self.clock.now() + timeout
        while not predicate():
            self.run_pending()
            if predicate():
                return True
            due = self.next_due()
            if due is None:
                return False
            now = self.clock.now()
            if deadline is not None and now >= deadline:
                return False
            wake = due if deadline is None else min(due, deadline)
            self.clock.sleep(wake - now)
        return True

    def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._queue.clear()
