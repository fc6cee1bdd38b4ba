"""Probe and traffic control endpoints.

``/ready`` and ``/liveness`` are meant for the orchestrator's probes.
``/startup`` and ``/readiness`` render a status page and log every call.
The remaining routes let an operator drain the instance, re-attach it, or
mark it permanently not-live.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse

from app.api.deps import get_probe_reporter, get_traffic_controller
from app.apitester.core.health import ProbeReporter, ProbeResult, TrafficController

router = APIRouter(tags=["probes"])


def _plain(result: ProbeResult) -> PlainTextResponse:
    return PlainTextResponse(result.body, status_code=result.status_code)


def _html(result: ProbeResult) -> HTMLResponse:
    return HTMLResponse(result.body, status_code=result.status_code)


@router.get("/ready", response_class=PlainTextResponse)
def ready(reporter: ProbeReporter = Depends(get_probe_reporter)) -> PlainTextResponse:
    """Answer ``ok`` while the instance accepts traffic, 500 otherwise."""
    return _plain(reporter.check_ready())


@router.get("/liveness", response_class=PlainTextResponse)
def liveness(reporter: ProbeReporter = Depends(get_probe_reporter)) -> PlainTextResponse:
    """Answer ``ok`` while the instance is live, 500 otherwise."""
    return _plain(reporter.check_live())


@router.get("/startup", response_class=HTMLResponse)
def startup(reporter: ProbeReporter = Depends(get_probe_reporter)) -> HTMLResponse:
    return _html(reporter.report_startup())


@router.get("/readiness", response_class=HTMLResponse)
def readiness(reporter: ProbeReporter = Depends(get_probe_reporter)) -> HTMLResponse:
    return _html(reporter.report_readiness())


@router.get("/traffic-off", response_class=PlainTextResponse)
def traffic_off(
    controller: TrafficController = Depends(get_traffic_controller),
) -> str:
    controller.traffic_off()
    return "ok"


@router.get("/traffic-on", response_class=PlainTextResponse)
def traffic_on(
    controller: TrafficController = Depends(get_traffic_controller),
) -> str:
    controller.traffic_on()
    return "ok"


@router.get("/server-error", response_class=PlainTextResponse)
def server_error(
    controller: TrafficController = Depends(get_traffic_controller),
) -> str:
    """Mark the instance not-live. Nothing but a restart undoes this."""
    controller.inject_fault()
    return "ok"
