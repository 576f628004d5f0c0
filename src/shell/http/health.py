"""
Health endpoints for the edge service.

- /health: every check, aggregated; 503 only when something is unhealthy
- /health/ready: 200 only when every check is healthy
- /health/live: the process answers

A Content Store outage is DEGRADED, not UNHEALTHY: the edge keeps serving
the SPA shell and minimal preview records without it.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from src.rules.models import Rules


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class CheckResult:
    """Outcome of one check."""

    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0.0
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self, *, verbose: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
        }
        if verbose:
            data["latency_ms"] = round(self.latency_ms, 2)
            if self.details:
                data["details"] = self.details
        return data


class HealthCheck(Protocol):
    name: str

    def check(self) -> CheckResult: ...


class StartupTracker:
    """Process-wide startup marker, set by the ASGI lifespan."""

    _start_time: float | None = None

    @classmethod
    def mark_started(cls) -> None:
        cls._start_time = time.monotonic()

    @classmethod
    def get_uptime_seconds(cls) -> float:
        if cls._start_time is None:
            return 0.0
        return time.monotonic() - cls._start_time

    @classmethod
    def is_started(cls) -> bool:
        return cls._start_time is not None


class HealthCheckRegistry:
    def __init__(self) -> None:
        self._checks: list[HealthCheck] = []

    def register(self, check: HealthCheck) -> None:
        self._checks.append(check)

    def run_all(self) -> list[CheckResult]:
        return [check.check() for check in self._checks]


def run_probe(
    name: str,
    probe: Callable[[], Any],
    *,
    ok_message: str,
    failure_status: HealthStatus,
) -> tuple[CheckResult, Any]:
    """Time one probe call; an exception becomes a failed result."""
    start = time.perf_counter()
    try:
        value = probe()
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        return CheckResult(name, failure_status, f"{type(e).__name__}: {e}", elapsed), None
    elapsed = (time.perf_counter() - start) * 1000
    return CheckResult(name, HealthStatus.HEALTHY, ok_message, elapsed), value


# --- Checks ---


class StartupCheck:
    """Healthy once the lifespan has loaded and validated the rules."""

    name = "startup"

    def check(self) -> CheckResult:
        if not StartupTracker.is_started():
            return CheckResult(self.name, HealthStatus.UNHEALTHY, "Startup not complete")
        return CheckResult(
            self.name,
            HealthStatus.HEALTHY,
            "Startup complete",
            details={"uptime_seconds": StartupTracker.get_uptime_seconds()},
        )


class RulesCheck:
    """The rules the edge classifies and renders with are loadable."""

    name = "rules"

    def __init__(self, rules_provider: Callable[[], Rules]) -> None:
        self._rules_provider = rules_provider

    def check(self) -> CheckResult:
        result, rules = run_probe(
            self.name,
            self._rules_provider,
            ok_message="Rules loaded",
            failure_status=HealthStatus.UNHEALTHY,
        )
        if rules is not None:
            result.details = {
                "rules_version": rules.project.rules_version,
                "system_domains": len(rules.domains.system),
                "crawler_tokens": len(rules.crawlers.tokens()),
            }
        return result


class ContentStoreCheck:
    """One cheap read against the configured Content Store."""

    name = "content_store"

    def __init__(self, probe: Callable[[], Any]) -> None:
        self._probe = probe

    def check(self) -> CheckResult:
        result, _ = run_probe(
            self.name,
            self._probe,
            ok_message="Content store reachable",
            failure_status=HealthStatus.DEGRADED,
        )
        return result


def overall_status(results: list[CheckResult]) -> HealthStatus:
    statuses = {r.status for r in results}
    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


# --- Router ---


def create_health_router(version: str, registry: HealthCheckRegistry) -> APIRouter:
    """Build the /health router over a registry of checks."""
    router = APIRouter(tags=["health"])

    @router.get(
        "/health",
        response_model=None,
        responses={
            200: {"description": "Healthy or degraded"},
            503: {"description": "A check is unhealthy"},
        },
    )
    def health_check() -> JSONResponse:
        results = registry.run_all()
        overall = overall_status(results)
        status_code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if overall == HealthStatus.UNHEALTHY
            else status.HTTP_200_OK
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "status": overall.value,
                "version": version,
                "uptime_seconds": StartupTracker.get_uptime_seconds(),
                "checks": [r.to_dict() for r in results],
            },
        )

    @router.get(
        "/health/ready",
        response_model=None,
        responses={
            200: {"description": "Ready for traffic"},
            503: {"description": "Not ready"},
        },
    )
    def readiness_check() -> JSONResponse:
        results = registry.run_all()
        ready = overall_status(results) == HealthStatus.HEALTHY
        return JSONResponse(
            status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ready": ready, "checks": [r.to_dict(verbose=False) for r in results]},
        )

    @router.get("/health/live", response_model=None)
    def liveness_check() -> JSONResponse:
        return JSONResponse(
            content={"alive": True, "uptime_seconds": StartupTracker.get_uptime_seconds()}
        )

    return router
