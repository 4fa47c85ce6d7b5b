#!/usr/bin/env python3
"""
Cache endpoints - read, write and inspect cache namespaces.
"""

from fastapi import APIRouter, Depends

from personalization.app_context import AppContext
from personalization.cache.models import MISS
from ..dependencies import get_context
from ..exceptions import CacheKeyNotFoundException
from ..models.requests import CacheValueUpdate
from ..models.responses import CacheOverviewResponse, CacheStatsResponse, CacheValueResponse

router = APIRouter(prefix="/api/cache", tags=["cache"])


@router.get("", response_model=CacheOverviewResponse)
def get_overview(context: AppContext = Depends(get_context)):
    """Stats for every namespace created so far, plus totals."""
    registry = context.registry
    return CacheOverviewResponse(
        success=True,
        total_hit_rate=registry.total_hit_rate(),
        total_estimated_bytes=registry.total_estimated_bytes(),
        namespaces={name: stats.to_dict() for name, stats in registry.all_stats().items()},
    )


@router.get("/{namespace}/stats", response_model=CacheStatsResponse)
def get_namespace_stats(namespace: str, context: AppContext = Depends(get_context)):
    return CacheStatsResponse(
        success=True,
        namespace=namespace,
        stats=context.get_stats(namespace).to_dict(),
    )


@router.get("/{namespace}/{key}", response_model=CacheValueResponse)
def get_value(namespace: str, key: str, context: AppContext = Depends(get_context)):
    """
    Return the cached value. Absent and expired keys are a 404.
    """
    value = context.cache_get(namespace, key)
    if value is MISS:
        raise CacheKeyNotFoundException(f"No cached value for '{key}' in '{namespace}'")
    return CacheValueResponse(success=True, namespace=namespace, key=key, value=value)


@router.put("/{namespace}/{key}", response_model=CacheValueResponse)
def put_value(
    namespace: str,
    key: str,
    update: CacheValueUpdate,
    context: AppContext = Depends(get_context)
):
    context.cache_set(namespace, key, update.value)
    return CacheValueResponse(success=True, namespace=namespace, key=key, value=update.value)
