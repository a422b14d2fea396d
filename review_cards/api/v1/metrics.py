from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from review_cards.config import Settings
from review_cards.services.metrics import MetricsLogger
from .deps import get_settings

router = APIRouter(tags=["metrics"])


class UILatency(BaseModel):
    name: str = Field(..., description="Metric name, e.g., 'review_render' or 'copy_and_redirect'")
    duration_ms: float = Field(..., ge=0)
    extra: dict | None = None


@router.post("/api/v1/metrics/ui")
def log_ui_latency(payload: UILatency, request: Request, settings: Settings = Depends(get_settings)):
    MetricsLogger(settings).log_request(
        payload.name, payload.duration_ms, request, origin="frontend", extra=payload.extra
    )
    return {"ok": True}
