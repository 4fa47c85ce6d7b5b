#!/usr/bin/env python3
"""
Metrics endpoints - record interactions and read per-item metrics.
"""

from fastapi import APIRouter, Depends

from personalization.app_context import AppContext
from ..dependencies import get_context
from ..exceptions import MetricsNotFoundException
from ..models.requests import InteractionRequest
from ..models.responses import MetricsResponse

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.post("/events", response_model=MetricsResponse)
def record_event(event: InteractionRequest, context: AppContext = Depends(get_context)):
    """Fold one interaction into the item's metrics. Negative values are a 400."""
    metrics = context.record_interaction(event.item_id, event.type, event.value, event.timestamp)
    return MetricsResponse(success=True, metrics=metrics.to_dict())


@router.get("/{item_id}", response_model=MetricsResponse)
def get_metrics(item_id: str, context: AppContext = Depends(get_context)):
    metrics = context.aggregator.get(item_id)
    if metrics is None:
        raise MetricsNotFoundException(f"No metrics recorded for '{item_id}'")
    return MetricsResponse(success=True, metrics=metrics.to_dict())
