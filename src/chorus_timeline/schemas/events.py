# src/chorus_timeline/schemas/events.py
"""Inbound event schemas.

Every event the engine understands is one member of the ``PostEvent`` tagged
union, discriminated by its ``type`` field. Payload shapes are owned by the
upstream producer; ``parse_event`` only validates them at the boundary.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Annotated, Any, Final, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from chorus_timeline.core.errors import EventPayloadError, UnknownEventError
from chorus_timeline.schemas.post import Post


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class SinglePostEvent(_Event):
    """Event carrying exactly one post."""

    post: Post


class PostReceived(SinglePostEvent):
    """A single post confirmed by the server (possibly replacing a pending draft)."""

    type: Literal["post-received"] = "post-received"


class NewPostReceived(SinglePostEvent):
    """A brand-new post, either an optimistic draft or a fresh server post."""

    type: Literal["post-received-new"] = "post-received-new"


class BulkPostsEvent(_Event):
    """Event carrying many posts keyed by id, plus the server's id order."""

    order: tuple[str, ...] = Field(default=(), description="Ids, newest first")
    posts: dict[str, Post] = Field(default_factory=dict)

    def iter_posts(self) -> Iterator[Post]:
        """Yield each post once: ids named in ``order`` first, then the rest."""
        seen: set[str] = set()
        for post_id in self.order:
            post = self.posts.get(post_id)
            if post is not None and post.id not in seen:
                seen.add(post.id)
                yield post
        for post in self.posts.values():
            if post.id not in seen:
                seen.add(post.id)
                yield post


class PostsReceived(BulkPostsEvent):
    """Posts received outside of any channel or thread listing."""

    type: Literal["posts-received-bulk"] = "posts-received-bulk"


class PostsReceivedForChannel(BulkPostsEvent):
    """A page of a channel's posts."""

    type: Literal["posts-received-for-channel"] = "posts-received-for-channel"
    channel_id: str


class PostsReceivedSince(BulkPostsEvent):
    """Posts created or edited in a channel since a point in time."""

    type: Literal["posts-received-since"] = "posts-received-since"
    channel_id: str


class PostsReceivedForThread(BulkPostsEvent):
    """The posts of one thread, root included."""

    type: Literal["posts-received-for-thread"] = "posts-received-for-thread"
    root_id: str


class PostSoftDeleted(SinglePostEvent):
    """A post was deleted and should remain as a tombstone."""

    type: Literal["post-soft-deleted"] = "post-soft-deleted"


class PostHardRemoved(SinglePostEvent):
    """A post (and, for roots, its thread) should be erased entirely."""

    type: Literal["post-hard-removed"] = "post-hard-removed"


class ChannelDeleted(_Event):
    """A channel was archived or deleted."""

    type: Literal["channel-deleted"] = "channel-deleted"
    channel_id: str
    include_archived: bool | None = Field(
        None,
        description="Whether archived channels stay visible; None defers to settings",
    )

    def view_archived(self, default: bool) -> bool:
        """Return the archived-view flag, falling back to ``default``."""
        if self.include_archived is None:
            return default
        return self.include_archived


class RedirectLocationSucceeded(_Event):
    """A shortened url was resolved to its target."""

    type: Literal["redirect-location-succeeded"] = "redirect-location-succeeded"
    url: str
    location: str


class RedirectLocationFailed(_Event):
    """A shortened url could not be resolved."""

    type: Literal["redirect-location-failed"] = "redirect-location-failed"
    url: str


PostEvent = Annotated[
    Union[
        PostReceived,
        NewPostReceived,
        PostsReceived,
        PostsReceivedForChannel,
        PostsReceivedSince,
        PostsReceivedForThread,
        PostSoftDeleted,
        PostHardRemoved,
        ChannelDeleted,
        RedirectLocationSucceeded,
        RedirectLocationFailed,
    ],
    Field(discriminator="type"),
]

EVENT_TYPES: Final[frozenset[str]] = frozenset(
    {
        "post-received",
        "post-received-new",
        "posts-received-bulk",
        "posts-received-for-channel",
        "posts-received-since",
        "posts-received-for-thread",
        "post-soft-deleted",
        "post-hard-removed",
        "channel-deleted",
        "redirect-location-succeeded",
        "redirect-location-failed",
    }
)

_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(PostEvent)


def parse_event(payload: Mapping[str, Any]) -> PostEvent:
    """Validate a raw event payload and return the matching event model.

    Args:
        payload: Mapping with a ``type`` tag and the event's fields

    Returns:
        The validated event

    Raises:
        UnknownEventError: If ``type`` names no known event
        EventPayloadError: If the payload does not match its event schema
    """
    event_type = payload.get("type")
    if not isinstance(event_type, str) or event_type not in EVENT_TYPES:
        raise UnknownEventError(event_type)
    try:
        return _EVENT_ADAPTER.validate_python(dict(payload))
    except ValidationError as exc:
        raise EventPayloadError(f"Invalid {event_type} payload: {exc}") from exc
