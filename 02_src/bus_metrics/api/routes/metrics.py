"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Response

from ...app import IApplication


def create_metrics_router(app: IApplication) -> APIRouter:
    """Create metrics router."""
    router = APIRouter(tags=["metrics"])

    @router.get("/metrics")
    async def get_metrics() -> Response:
        """Expose all registered metrics in the Prometheus text format."""
        body, content_type = app.registry.exposition()
        return Response(content=body, media_type=content_type)

    return router
