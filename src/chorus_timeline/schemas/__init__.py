# src/chorus_timeline/schemas/__init__.py
"""
Pydantic schemas for posts and inbound events.

These schemas define the payload shapes the engine accepts and stores.
"""

from .events import (
    BulkPostsEvent,
    ChannelDeleted,
    NewPostReceived,
    PostEvent,
    PostHardRemoved,
    PostReceived,
    PostSoftDeleted,
    PostsReceived,
    PostsReceivedForChannel,
    PostsReceivedForThread,
    PostsReceivedSince,
    RedirectLocationFailed,
    RedirectLocationSucceeded,
    SinglePostEvent,
    parse_event,
)
from .post import Post, PostEmbed, PostMetadata, PostState, Reaction

__all__ = [
    "Post", "PostEmbed", "PostMetadata", "PostState", "Reaction",
    "PostEvent", "SinglePostEvent", "BulkPostsEvent",
    "PostReceived", "NewPostReceived",
    "PostsReceived", "PostsReceivedForChannel", "PostsReceivedSince", "PostsReceivedForThread",
    "PostSoftDeleted", "PostHardRemoved",
    "ChannelDeleted",
    "RedirectLocationSucceeded", "RedirectLocationFailed",
    "parse_event",
]
