"""Synthetic resource exhaustion generators.

Two generators are exposed, both fire-and-forget:

    - :class:`MemoryAccumulator` retains a 1 MiB block every 10 ms on a
      daemon thread until the process is OOM-killed.
    - :class:`CpuBurster` starts N worker processes that each spin at an 80%
      duty cycle for a bounded number of minutes.

Neither generator deduplicates. Triggering again while a previous run is
still active starts another run alongside it, which multiplies the load.
Neither exposes a stop control in production; the optional ``stop`` events
only exist so tests can end a run early.
"""

import multiprocessing
import re
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from app.apitester.core.health import HealthState
from app.apitester.core.logging_config import get_logger

logger = get_logger(__name__)

# =============================================================================
# MEMORY ACCUMULATOR
# =============================================================================

BLOCK_SIZE = 1024 * 1024
ACCUMULATE_INTERVAL = 0.01


def allocate_block(size: int = BLOCK_SIZE) -> bytes:
    """Allocate ``size`` bytes with every page written, so RSS grows at once."""
    return b"\x01" * size


class MemoryAccumulator:
    """Grow a process-wide list of retained blocks without bound.

    Attributes:
        state: Health state whose ``ready`` flag drops when a leak starts.
        blocks: Retained allocations. Append-only, never released.
    """

    def __init__(
        self,
        state: HealthState,
        block_size: int = BLOCK_SIZE,
        interval: float = ACCUMULATE_INTERVAL,
        allocate: Callable[[int], Any] = allocate_block,
    ) -> None:
        self.state = state
        self.block_size = block_size
        self.interval = interval
        self.allocate = allocate
        self.blocks: list[Any] = []

    @property
    def retained_bytes(self) -> int:
        return len(self.blocks) * self.block_size

    def trigger(self, stop: Optional[threading.Event] = None) -> threading.Thread:
        """Mark the instance not-ready and start one more accumulation thread.

        Args:
            stop: Event ending the loop when set. Production callers leave it
                unset so the thread runs until the process dies.

        Returns:
            The started daemon thread.
        """
        # Drain first: the orchestrator should stop routing before memory runs out.
        self.state.set_ready(False)

        worker = threading.Thread(
            target=self._accumulate,
            args=(stop or threading.Event(),),
            name="memory-leak",
            daemon=True,
        )
        worker.start()
        return worker

    def _accumulate(self, stop: threading.Event) -> None:
        logger.warning("memoryLeak is starting", block_size=self.block_size)
        while not stop.is_set():
            self.blocks.append(self.allocate(self.block_size))
            time.sleep(self.interval)


# =============================================================================
# CPU BURSTER
# =============================================================================

DEFAULT_MINUTES = 2
DEFAULT_WORKERS = 10
DUTY_CYCLE = 0.8
CYCLE_PERIOD = 0.1
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def _int_or_default(raw: Optional[str], default: int) -> int:
    """Parse a plain ASCII decimal integer; missing, junk or zero gives ``default``.

    Negative values are kept, so a batch built from them does no work.
    """
    if raw is None or not INTEGER_PATTERN.fullmatch(raw):
        return default
    return int(raw) or default


@dataclass(frozen=True)
class LoadJob:
    """Parameters of one ``/cpu-load`` invocation.

    Attributes:
        duration_minutes: How long every worker keeps burning.
        worker_count: Number of workers to start.
        duty_cycle: Busy fraction of each 100 ms cycle.
    """

    duration_minutes: int = DEFAULT_MINUTES
    worker_count: int = DEFAULT_WORKERS
    duty_cycle: float = DUTY_CYCLE

    @classmethod
    def from_query(cls, minutes: Optional[str], threads: Optional[str]) -> "LoadJob":
        """Build a job from raw query values.

        Missing, non-numeric or zero values fall back to the defaults.
        Negative values are echoed as given and start no work. There is no
        upper bound.
        """
        return cls(
            duration_minutes=_int_or_default(minutes, DEFAULT_MINUTES),
            worker_count=_int_or_default(threads, DEFAULT_WORKERS),
        )

    @property
    def duration_seconds(self) -> float:
        return self.duration_minutes * 60.0


def burn(
    worker_id: int,
    duration_seconds: float,
    duty_cycle: float = DUTY_CYCLE,
    period: float = CYCLE_PERIOD,
    stop: Optional[Any] = None,
) -> int:
    """Alternate busy spinning and sleeping until the duration has elapsed.

    Each cycle spins on the clock for ``duty_cycle * period`` seconds without
    yielding, then sleeps for the rest of the period. Elapsed time is measured
    from this worker's own start, so workers of one batch finish with a small
    skew.

    Args:
        worker_id: Index of the worker inside its batch, for logging.
        duration_seconds: Total burn time.
        duty_cycle: Busy fraction of each period.
        period: Length of one busy+idle cycle in seconds.
        stop: Optional event ending the loop early.

    Returns:
        Number of completed cycles.
    """
    busy = period * duty_cycle
    idle = period - busy
    cycles = 0

    logger.info("cpuLoad worker starting", worker=worker_id, duration_seconds=duration_seconds)
    start = time.monotonic()
    while time.monotonic() - start < duration_seconds:
        if stop is not None and stop.is_set():
            break
        spin_until = time.monotonic() + busy
        while time.monotonic() < spin_until:
            pass
        time.sleep(idle)
        cycles += 1

    logger.info("cpuLoad worker finished", worker=worker_id, cycles=cycles)
    return cycles


def spawn_process(target: Callable[..., Any], args: tuple) -> Any:
    """Create an unstarted daemon worker process.

    Workers run as processes rather than threads so each can hold a core
    without contending for the interpreter lock.
    """
    context = multiprocessing.get_context("spawn")
    return context.Process(target=target, args=args, daemon=True)


class CpuBurster:
    """Launch batches of independent CPU burning workers.

    Args:
        spawn: Factory returning an unstarted worker with a ``start()``
            method. Defaults to :func:`spawn_process`.
    """

    def __init__(self, spawn: Callable[[Callable[..., Any], tuple], Any] = spawn_process) -> None:
        self.spawn = spawn

    def launch(self, job: LoadJob) -> list[Any]:
        """Start ``job.worker_count`` workers and return without waiting."""
        # Reap workers of earlier batches that have already exited.
        multiprocessing.active_children()

        logger.info(
            "cpuLoad batch starting",
            minutes=job.duration_minutes,
            workers=job.worker_count,
            duty_cycle=job.duty_cycle,
        )
        workers = []
        for worker_id in range(job.worker_count):
            worker = self.spawn(burn, (worker_id, job.duration_seconds, job.duty_cycle))
            worker.start()
            workers.append(worker)
        return workers
