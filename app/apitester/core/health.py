"""Process health state and the probes that expose it.

The service keeps two independent flags: ``ready`` decides whether the
orchestrator should route traffic here, ``live`` decides whether the
container must be restarted. Both start false and are flipped on once the
application lifespan finishes starting up. From then on they change only
through the traffic controller or the memory-leak trigger.
"""

import threading
from dataclasses import dataclass
from typing import Any

from fastapi import status

from app.apitester.core.logging_config import get_logger

logger = get_logger(__name__)

STARTUP_BODY = (
    "<b>[App Initialization]</b><br>"
    "DB Connected : OK<br>"
    "Spring Initialization : OK<br>"
    "Jar is Running : OK"
)
READINESS_BODY = (
    "<b>[User Initialization]</b><br>"
    "Init Data : OK<br>"
    "Linkage System Check : OK<br>"
    "DB Data Validation : OK"
)


class HealthState:
    """Thread-safe holder for the ``ready`` and ``live`` flags.

    Writes are unconditional and silent. The lock only guarantees that a
    reader never sees a partially applied write; no ordering between racing
    readers and writers is implied.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ready = False
        self._live = False

    @property
    def ready(self) -> bool:
        with self._lock:
            return self._ready

    @property
    def live(self) -> bool:
        with self._lock:
            return self._live

    def set_ready(self, value: bool) -> None:
        with self._lock:
            self._ready = value

    def set_live(self, value: bool) -> None:
        with self._lock:
            self._live = value

    def mark_started(self) -> None:
        """Flip both flags on once startup has completed."""
        with self._lock:
            self._ready = True
            self._live = True


@dataclass(frozen=True)
class ProbeResult:
    """HTTP status code and body produced by a probe."""

    status_code: int
    body: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status_code == status.HTTP_200_OK


_FAILED = ProbeResult(status.HTTP_500_INTERNAL_SERVER_ERROR)


class ProbeReporter:
    """Translate a :class:`HealthState` into probe responses.

    ``check_*`` are the plain orchestrator probes answering ``ok``.
    ``report_*`` are the logged variants that render an HTML status page,
    writing one log line per call before answering.
    """

    def __init__(self, state: HealthState, log: Any = None) -> None:
        self.state = state
        self.log = log or logger

    def check_ready(self) -> ProbeResult:
        if self.state.ready:
            return ProbeResult(status.HTTP_200_OK, "ok")
        return _FAILED

    def check_live(self) -> ProbeResult:
        if self.state.live:
            return ProbeResult(status.HTTP_200_OK, "ok")
        return _FAILED

    def report_readiness(self) -> ProbeResult:
        return self._report("readiness", self.state.ready, READINESS_BODY)

    def report_startup(self) -> ProbeResult:
        return self._report("startup", self.state.live, STARTUP_BODY)

    def _report(self, probe_type: str, succeeded: bool, body: str) -> ProbeResult:
        self.log.info(
            f"[Kubernetes] {probe_type}Probe is {'Succeed' if succeeded else 'Failed'}",
            probe_type=probe_type,
            succeeded=succeeded,
        )
        if succeeded:
            return ProbeResult(status.HTTP_200_OK, body)
        return _FAILED


class TrafficController:
    """Operator controls that simulate drain, re-attach and a fatal fault.

    There is deliberately no counterpart to :meth:`inject_fault`; a process
    marked not-live stays that way until the orchestrator restarts it.
    """

    def __init__(self, state: HealthState, log: Any = None) -> None:
        self.state = state
        self.log = log or logger

    def traffic_off(self) -> None:
        self.state.set_ready(False)
        self.log.info("[System] Traffic is forcibly stopped")

    def traffic_on(self) -> None:
        self.state.set_ready(True)
        self.log.info("[System] Traffic is reconnected")

    def inject_fault(self) -> None:
        self.state.set_live(False)
        self.log.warning("[System] An error occurred on the server")
