# -*- coding: utf-8 -*-
"""Qt-backed compute orchestrator (QThreadPool/QRunnable, single-flight)."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from PyQt5.QtCore import QObject, QThreadPool, pyqtSignal

from core.config import BalancingConfig
from services.compute.distribution_worker import DistributionComputeWorker
from services.compute.orchestrator_core import ComputeOrchestratorCore

log = logging.getLogger(__name__)


class QtDistributionOrchestrator(QObject):
    started = pyqtSignal(int)
    computed = pyqtSignal(int, dict)
    failed = pyqtSignal(int, str)

    def __init__(self, *, config: Optional[BalancingConfig] = None, pool: Optional[QThreadPool] = None) -> None:
        super().__init__()
        self._config = config
        self._core = ComputeOrchestratorCore()
        self._pool = pool or QThreadPool.globalInstance()

    def request(self, groups: Iterable) -> Optional[int]:
        """Start a compute for ``groups``; returns its id, or None if it was queued."""
        groups = list(groups)
        compute_id = self._core.request(groups)
        if compute_id is None:
            log.debug("Compute busy; queued latest request")
            return None
        worker = DistributionComputeWorker(groups, compute_id, self._config)
        worker.signals.finished.connect(self._on_compute_finished)
        worker.signals.error.connect(self._on_compute_error)
        log.debug("Distribution compute start id=%s (%s groups)", compute_id, len(groups))
        self._pool.start(worker)
        self.started.emit(compute_id)
        return compute_id

    def invalidate(self) -> None:
        self._core.invalidate()

    def wait(self, msecs: int = -1) -> bool:
        return self._pool.waitForDone(msecs)

    def _on_compute_finished(self, compute_id: int, results: dict) -> None:
        if self._core.finish(compute_id):
            self.computed.emit(compute_id, results)
        else:
            log.debug("Discarding stale distribution result id=%s current=%s", compute_id, self._core.current_id)
        self._drain()

    def _on_compute_error(self, compute_id: int, exc: object) -> None:
        detail = exc
        tb = ""
        if isinstance(exc, tuple) and len(exc) == 2:
            detail, tb = exc
        log.error("Distribution compute error id=%s: %r\n%s", compute_id, detail, tb)
        if self._core.finish(compute_id):
            self.failed.emit(compute_id, str(detail))
        self._drain()

    def _drain(self) -> None:
        has_pending, groups = self._core.take_pending()
        if has_pending:
            self.request(groups)
