"""Activity ingestion routes for out-of-process message buses."""

from datetime import timedelta

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ...app import IApplication
from ...logging_config import get_logger
from ...models import ActivityEvent, ActivityPhase

logger = get_logger(__name__)


class ActivityRequest(BaseModel):
    """Request model for a reported activity."""

    source: str = Field(..., min_length=1)
    operation_name: str = Field(..., min_length=1)
    phase: ActivityPhase
    tags: list[tuple[str, str]] = Field(default_factory=list)
    duration_seconds: float = Field(0.0, ge=0)
    exception: str | None = None


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_activities_router(app: IApplication) -> APIRouter:
    """Create activities router."""
    router = APIRouter(prefix="/api", tags=["activities"])

    @router.post("/activities", response_model=StatusResponse)
    async def report_activity(request: ActivityRequest) -> dict:
        """Write a reported activity to its diagnostic source."""
        try:
            event = ActivityEvent(
                operation_name=request.operation_name,
                phase=request.phase,
                tags=tuple(request.tags),
                duration=timedelta(seconds=request.duration_seconds),
                exception=request.exception,
            )
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))

        source = app.hub.find_source(request.source)
        if source is None:
            raise HTTPException(
                status_code=404, detail=f"Unknown diagnostic source: {request.source}"
            )
        source.write_activity(event)
        logger.debug("Activity %s %s reported", event.operation_name, event.phase.value)
        return {"status": "ok"}

    return router
