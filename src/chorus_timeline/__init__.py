"""Chorus Timeline: client-side post indexes maintained from server events."""

from chorus_timeline.schemas import Post, PostEvent, PostState, parse_event
from chorus_timeline.services import PostStore, PostsState, apply_event

__all__ = [
    "Post",
    "PostEvent",
    "PostState",
    "PostStore",
    "PostsState",
    "apply_event",
    "parse_event",
]
