"""agencyhub - automation and notification engine for the agency project hub."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from agencyhub.core.clock import SystemClock
from agencyhub.core.config import Settings, constants, settings
from agencyhub.core.logging import configure_logfire, instrument_fastapi
from agencyhub.core.scheduler import DueDateScheduler
from agencyhub.core.scheduler_tracker import job_tracker
from agencyhub.interface.automation_router import router as automation_router
from agencyhub.services.automation_service import AutomationService
from agencyhub.services.task_registry import TaskRegistry


logger = logging.getLogger(__name__)


def build_automation_service(*, registry: TaskRegistry, config: Settings | None = None) -> AutomationService:
    """Composition root for the automation engine."""
    config = config or settings
    return AutomationService(
        clock=SystemClock(config.automation_timezone),
        active_tasks=registry.active_tasks,
        seed_default_rules=config.automation_seed_default_rules,
    )


def validate_startup_configuration(config: Settings | None = None) -> None:
    """Fail fast on configuration the engine cannot run with.

    Production deployments must ship traces, and the automation timezone must
    be a known IANA name because every due-date comparison depends on it.

    Raises:
        ValueError: If a required setting is missing or invalid
    """
    config = config or settings
    logger.info("startup_validation_begin")

    if config.environment == "production":
        config.require_credential("logfire_token", "Logfire")

    try:
        ZoneInfo(config.automation_timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown AUTOMATION_TIMEZONE '{config.automation_timezone}'") from e

    logger.info("startup_validation_complete", extra={"status": "ok"})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so validation logs are captured
    configure_logfire()

    try:
        validate_startup_configuration()
    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\nStartup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    registry = TaskRegistry()
    service = build_automation_service(registry=registry)
    app.state.task_registry = registry
    app.state.automation_service = service
    logger.info("Automation service initialized with %d rules", len(service.list_rules()))

    scheduler = DueDateScheduler(service=service)
    scheduler.start()
    yield
    # Shutdown
    scheduler.stop()


app = FastAPI(
    title="agencyhub",
    description="Rule-based task automations and notifications",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(automation_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=constants.HTTP_OK)


@app.get("/health/scheduler")
async def scheduler_health_check() -> JSONResponse:
    """Scheduler health check endpoint with the due-date job status."""
    job_status = await job_tracker.get_job_status(constants.DUE_DATE_CHECK_JOB_ID)
    dlq = job_tracker.get_dead_letter_queue()

    overall_status = "degraded" if job_status["consecutive_failures"] > 0 else "healthy"
    if len(dlq) > 0:
        overall_status = "critical"

    return JSONResponse(
        content={
            "status": overall_status,
            "jobs": {constants.DUE_DATE_CHECK_JOB_ID: job_status},
            "dead_letter_queue_size": len(dlq),
            "dead_letter_queue": dlq,
        },
        status_code=constants.HTTP_OK if overall_status == "healthy" else constants.HTTP_SERVICE_UNAVAILABLE,
    )
