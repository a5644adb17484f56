"""Observability API routes."""

from pydantic import BaseModel
from fastapi import APIRouter

from ...app import IApplication
from ...masstransit import EXCEPTION_RULES, RESERVED_OPERATIONS, STOP_RULES
from ...models import MetricRule


class RuleResponse(BaseModel):
    """Response model for a metric rule."""

    operation_name: str
    metric_name: str
    metric_kind: str
    label_names: list[str]
    tag_keys: list[str]
    value_source: str


class RulesResponse(BaseModel):
    """Response model for the rule tables."""

    source_name: str
    stop: list[RuleResponse]
    exception: list[RuleResponse]
    reserved: list[str]


class HealthResponse(BaseModel):
    """Response model for health."""

    status: str


def _rule_to_dict(rule: MetricRule) -> dict:
    return {
        "operation_name": rule.operation_name,
        "metric_name": rule.metric_name,
        "metric_kind": rule.metric_kind.value,
        "label_names": list(rule.metric.label_names),
        "tag_keys": list(rule.tag_keys),
        "value_source": rule.value_source.value,
    }


def create_observability_router(app: IApplication) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/rules", response_model=RulesResponse)
    async def get_rules() -> dict:
        """List which operations update which metrics."""
        return {
            "source_name": app.settings.source_name,
            "stop": [_rule_to_dict(r) for r in STOP_RULES.values()],
            "exception": [_rule_to_dict(r) for r in EXCEPTION_RULES.values()],
            "reserved": sorted(RESERVED_OPERATIONS),
        }

    @router.get("/health", response_model=HealthResponse)
    async def health() -> dict:
        """Liveness probe."""
        return {"status": "ok"}

    return router
