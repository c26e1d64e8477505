"""LogProgressAdapter: reports analysis progress via logging with stage timings."""

import logging
import threading
import time
from typing import Optional

from ports.progress import ProgressPort

logger = logging.getLogger(__name__)

FINAL_STAGES = {"done", "failed"}


class LogProgressAdapter(ProgressPort):
    """Logs each stage with seconds elapsed since the job's first report.

    Safe to share between concurrent analyses; jobs are tracked by ID and
    forgotten once they reach a final stage.
    """

    def __init__(self, level: int = logging.INFO):
        self._level = level
        self._started: dict[str, float] = {}
        self._lock = threading.Lock()

    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        now = time.monotonic()
        with self._lock:
            started = self._started.setdefault(job_id, now)
            if stage in FINAL_STAGES:
                self._started.pop(job_id, None)

        msg = f"[{job_id}] {stage} (+{now - started:.2f}s)"
        if progress > 0:
            msg += f" {progress:.0%}"
        if detail:
            msg += f": {detail}"
        logger.log(self._level, msg)

    def active_jobs(self) -> list[str]:
        with self._lock:
            return list(self._started)
