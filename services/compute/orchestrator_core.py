# -*- coding: utf-8 -*-
"""Pure compute orchestrator core (no UI dependencies)."""
from __future__ import annotations

from typing import Any, Optional, Tuple


class ComputeOrchestratorCore:
    """Single-flight request tracker.

    One computation runs at a time. Requests arriving meanwhile are coalesced:
    only the most recent one is kept and started once the running one finishes.
    Queuing a request makes the running result stale, so only the latest
    request is ever delivered.
    """

    def __init__(self) -> None:
        self._current_id = 0
        self._running_id: Optional[int] = None
        self._pending: Any = None
        self._has_pending = False

    @property
    def current_id(self) -> int:
        return self._current_id

    def is_running(self) -> bool:
        return self._running_id is not None

    def request(self, payload: Any) -> Optional[int]:
        """Return a new compute id to start now, or None if queued behind a running one."""
        if self._running_id is not None:
            self._current_id += 1
            self._pending = payload
            self._has_pending = True
            return None
        self._current_id += 1
        self._running_id = self._current_id
        return self._current_id

    def finish(self, compute_id: int) -> bool:
        """Mark ``compute_id`` as done. Returns True if its result should be delivered."""
        if self._running_id == compute_id:
            self._running_id = None
        return not is_stale_result(self._current_id, compute_id)

    def take_pending(self) -> Tuple[bool, Any]:
        if not self._has_pending:
            return False, None
        payload = self._pending
        self._pending = None
        self._has_pending = False
        return True, payload

    def invalidate(self) -> None:
        """Drop queued work and make the running result stale."""
        self._current_id += 1
        self._pending = None
        self._has_pending = False


def is_stale_result(current_id: int, result_id: int) -> bool:
    """Return True if a compute result should be discarded."""
    try:
        return int(result_id) != int(current_id)
    except (TypeError, ValueError):
        return True
