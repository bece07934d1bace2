"""Application wiring and scheduled job entry points."""

from .context import AppContext, build_app_context, get_app_context

__all__ = ["AppContext", "build_app_context", "get_app_context"]
