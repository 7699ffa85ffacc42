# src/chorus_timeline/services/__init__.py
"""Index-maintenance services for the timeline engine."""

from .dispatcher import PostStore, PostsState, apply_event

__all__ = [
    "PostStore",
    "PostsState",
    "apply_event",
]
