"""
waba/engine/concurrency.py
==========================
Thread-safe helpers shared by enumerator workers: cooperative
cancellation and the branch-and-bound incumbent.

Both are the only mutable state crossing thread boundaries; everything
else a worker touches is either immutable (framework, algebras) or owned
by its branch.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from waba.core.exceptions import SolveCancelled
from waba.core.types import Cost, OptimizeDirection

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative cancellation checked by the enumerator at every node.

    Trips on an explicit ``cancel()``, on a wall-clock deadline, or after
    a maximum number of visited nodes — whichever comes first.

    Usage:
        token = CancellationToken(deadline_s=5.0)
        solve(fw, "godel", "max", "preferred", token=token)
    """

    def __init__(self, deadline_s: Optional[float] = None, max_nodes: Optional[int] = None):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._deadline = None if deadline_s is None else time.monotonic() + deadline_s
        self._max_nodes = max_nodes
        self._nodes = 0
        self.reason = ""

    def cancel(self, reason: str = "cancelled by caller") -> None:
        if not self._event.is_set():
            self.reason = reason
            logger.info(f"Solve cancellation requested: {reason}")
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def nodes(self) -> int:
        return self._nodes

    def tick(self) -> None:
        """Count one node; raise SolveCancelled if the token has tripped."""
        with self._lock:
            self._nodes += 1
            nodes = self._nodes
        if self._max_nodes is not None and nodes > self._max_nodes:
            self.cancel(f"node limit of {self._max_nodes} reached")
        elif self._deadline is not None and time.monotonic() > self._deadline:
            self.cancel("deadline reached")
        if self._event.is_set():
            raise SolveCancelled(self.reason)


class SharedBound:
    """Best cost found so far under a MINIMIZE / MAXIMIZE objective.

    Reads are lock-free (a stale incumbent only weakens pruning); updates
    take the lock so the incumbent never regresses.
    """

    def __init__(self, optimize: OptimizeDirection):
        self.optimize = OptimizeDirection(optimize)
        self._lock = threading.Lock()
        self._best: Optional[Cost] = None

    @property
    def best(self) -> Optional[Cost]:
        return self._best

    def better(self, a: Cost, b: Cost) -> bool:
        if self.optimize is OptimizeDirection.MAXIMIZE:
            return a > b
        return a < b

    def offer(self, cost: Cost) -> bool:
        """Record ``cost``; False if it is strictly worse than the incumbent."""
        with self._lock:
            if self._best is None or self.better(cost, self._best):
                self._best = cost
                return True
            return not self.better(self._best, cost)

    def prunes(self, lowest: Cost, highest: Cost) -> bool:
        """True if every cost in [lowest, highest] is strictly worse than the incumbent."""
        best = self._best
        if best is None or self.optimize is OptimizeDirection.NONE:
            return False
        if self.optimize is OptimizeDirection.MAXIMIZE:
            return highest < best
        return lowest > best
