"""FastAPI dependency providers.

Resolve the process-wide collaborators held on ``app.state`` so route
handlers never reach for module globals. Tests swap any of them through
``app.dependency_overrides``.
"""

from fastapi import Depends, Request

from app.apitester.core.health import HealthState, ProbeReporter, TrafficController
from app.apitester.core.stress import CpuBurster, MemoryAccumulator
from app.config import DatasourceConfig, Settings, default_datasource, get_settings


def get_health_state(request: Request) -> HealthState:
    return request.app.state.health


def get_probe_reporter(state: HealthState = Depends(get_health_state)) -> ProbeReporter:
    return ProbeReporter(state)


def get_traffic_controller(
    state: HealthState = Depends(get_health_state),
) -> TrafficController:
    return TrafficController(state)


def get_memory_accumulator(request: Request) -> MemoryAccumulator:
    return request.app.state.memory


def get_cpu_burster(request: Request) -> CpuBurster:
    return request.app.state.cpu


def get_datasource(
    request: Request, settings: Settings = Depends(get_settings)
) -> DatasourceConfig:
    """Return the datasource resolved at startup, or the defaults before that."""
    datasource = getattr(request.app.state, "datasource", None)
    return datasource or default_datasource(settings)
