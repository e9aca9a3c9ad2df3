# -*- coding: utf-8 -*-
"""Background worker running one whole distribution compute (Qt)."""
from __future__ import annotations

import traceback
from typing import List, Optional, Sequence

from PyQt5.QtCore import QObject, QRunnable, pyqtSignal

from core.config import BalancingConfig
from core.models.distribution import MeterGroup
from services.distribution_service import DistributionService


class _WorkerSignals(QObject):
    finished = pyqtSignal(int, dict)
    error = pyqtSignal(int, object)


class DistributionComputeWorker(QRunnable):
    """Runs the engine off the UI thread. The computation is not interruptible."""

    def __init__(self, groups: Sequence[MeterGroup], compute_id: int, config: Optional[BalancingConfig] = None) -> None:
        super().__init__()
        self._groups: List[MeterGroup] = list(groups)
        self._compute_id = int(compute_id)
        self._config = config
        self.signals = _WorkerSignals()

    def run(self) -> None:
        try:
            results = DistributionService(self._config).compute(self._groups)
            self.signals.finished.emit(self._compute_id, results)
        except Exception as exc:
            tb = traceback.format_exc()
            self.signals.error.emit(self._compute_id, (exc, tb))
