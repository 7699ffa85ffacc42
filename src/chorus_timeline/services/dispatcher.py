# src/chorus_timeline/services/dispatcher.py
"""Route inbound events through every index in a fixed order.

``apply_event`` is a pure function of (previous state, event). Each component
decides on its own whether the event concerns it and returns its previous
structure when it does not; the dispatcher only composes their outputs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from chorus_timeline.core.settings import Settings, settings
from chorus_timeline.schemas.events import PostEvent, parse_event
from chorus_timeline.schemas.post import Post, Reaction
from chorus_timeline.services import caches, channel_index, pending, post_table, thread_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostsState:
    """Immutable snapshot of every post structure.

    Consumers compare fields with ``is`` to find out what an event changed.
    """

    posts: Mapping[str, Post] = field(default_factory=dict)
    posts_in_channel: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    posts_in_thread: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    pending_post_ids: tuple[str, ...] = ()
    reactions: Mapping[str, Mapping[str, Reaction]] = field(default_factory=dict)
    open_graph: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    expanded_urls: Mapping[str, str] = field(default_factory=dict)


def apply_event(
    state: PostsState,
    event: PostEvent,
    config: Settings | None = None,
) -> PostsState:
    """Apply one event to every structure of ``state``.

    Args:
        state: Snapshot before the event
        event: Validated inbound event
        config: Settings; defaults to the module-level settings

    Returns:
        ``state`` itself when no structure changed, otherwise a new snapshot
        sharing every unchanged structure with ``state``
    """
    config = config or settings
    prev_posts = state.posts

    next_posts = post_table.reduce_posts(prev_posts, event, config=config)
    candidates: dict[str, Any] = {
        "posts": next_posts,
        "posts_in_channel": channel_index.reduce_posts_in_channel(
            state.posts_in_channel,
            event,
            prev_posts=prev_posts,
            next_posts=next_posts,
            config=config,
        ),
        "posts_in_thread": thread_index.reduce_posts_in_thread(
            state.posts_in_thread, event, prev_posts=prev_posts, config=config
        ),
        "pending_post_ids": pending.reduce_pending_post_ids(state.pending_post_ids, event),
        "reactions": caches.reduce_reactions(state.reactions, event),
        "open_graph": caches.reduce_open_graph(state.open_graph, event, config=config),
        "expanded_urls": caches.reduce_expanded_urls(state.expanded_urls, event),
    }

    changes = {
        name: value for name, value in candidates.items() if value is not getattr(state, name)
    }
    if not changes:
        logger.debug("Event %s changed nothing", event.type)
        return state

    logger.debug("Event %s changed %s", event.type, ", ".join(sorted(changes)))
    return replace(state, **changes)


class PostStore:
    """Holds the current snapshot and applies events one at a time."""

    def __init__(self, state: PostsState | None = None, config: Settings | None = None) -> None:
        """Initialize the store.

        Args:
            state: Initial snapshot. Defaults to an empty one.
            config: Settings passed to every dispatch.
        """
        self._state = state or PostsState()
        self._config = config or settings

    @property
    def state(self) -> PostsState:
        """Return the current snapshot."""
        return self._state

    def dispatch(self, event: PostEvent) -> bool:
        """Apply an event and return True if the snapshot changed."""
        previous = self._state
        self._state = apply_event(previous, event, self._config)
        return self._state is not previous

    def dispatch_many(self, events: Iterable[PostEvent]) -> int:
        """Apply events in order and return how many of them changed the snapshot."""
        return sum(1 for event in events if self.dispatch(event))

    def dispatch_payload(self, payload: Mapping[str, Any]) -> bool:
        """Validate a raw payload and apply it.

        Raises:
            EventPayloadError: If the payload is not a valid event
        """
        return self.dispatch(parse_event(payload))
