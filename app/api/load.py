"""Resource exhaustion endpoints.

Both routes start their generator and answer immediately; the load keeps
running after the response is sent.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from app.api.deps import get_cpu_burster, get_memory_accumulator
from app.apitester.core.stress import CpuBurster, LoadJob, MemoryAccumulator

router = APIRouter(tags=["load"])


@router.get("/memory-leak", response_class=PlainTextResponse)
def memory_leak(
    accumulator: MemoryAccumulator = Depends(get_memory_accumulator),
) -> str:
    """Drop readiness and leak 1 MiB every 10 ms until the process is killed."""
    accumulator.trigger()
    return "Memory leak started..."


@router.get("/cpu-load", response_class=PlainTextResponse)
def cpu_load(
    minutes: Optional[str] = Query(None, alias="min"),
    threads: Optional[str] = Query(None, alias="thread"),
    burster: CpuBurster = Depends(get_cpu_burster),
) -> str:
    """Burn CPU on ``thread`` workers for ``min`` minutes.

    Values are taken as raw strings so that junk input falls back to the
    defaults instead of failing validation.
    """
    job = LoadJob.from_query(minutes, threads)
    burster.launch(job)
    return f"CPU Load started ({job.duration_minutes} min, {job.worker_count} threads)"
