#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from fastapi import Request

from personalization.app_context import AppContext


def get_context(request: Request) -> AppContext:
    """
    FastAPI dependency returning the AppContext wired in create_app().

    Usage:
        @router.get("/endpoint")
        def my_endpoint(context: AppContext = Depends(get_context)):
            ...
    """
    return request.app.state.context
