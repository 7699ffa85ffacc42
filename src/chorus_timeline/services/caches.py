# src/chorus_timeline/services/caches.py
"""Caches derived from post metadata and redirect lookups.

- Reactions: post id -> {``user_id-emoji_name``: reaction}, replaced per post.
- OpenGraph: embed url -> preview payload, additive.
- Expanded URLs: short url -> resolved url, additive.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from chorus_timeline.core.settings import Settings, settings
from chorus_timeline.schemas.events import (
    BulkPostsEvent,
    PostEvent,
    PostHardRemoved,
    PostSoftDeleted,
    RedirectLocationFailed,
    RedirectLocationSucceeded,
    SinglePostEvent,
)
from chorus_timeline.schemas.post import Post, Reaction
from chorus_timeline.services.metadata import OPENGRAPH_EMBED_TYPE
from chorus_timeline.utils.cow import with_item

logger = logging.getLogger(__name__)

ReactionIndex = Mapping[str, Mapping[str, Reaction]]
EmbedCache = Mapping[str, Mapping[str, Any]]
RedirectCache = Mapping[str, str]


def _received_posts(event: PostEvent) -> Iterable[Post]:
    if isinstance(event, (PostSoftDeleted, PostHardRemoved)):
        return ()
    if isinstance(event, SinglePostEvent):
        return (event.post,)
    if isinstance(event, BulkPostsEvent):
        return event.iter_posts()
    return ()


def reactions_on_posts(index: ReactionIndex, posts: Iterable[Post]) -> ReactionIndex:
    """Replace the reactions of every post that arrived with metadata."""
    updates: dict[str, Mapping[str, Reaction]] = {}
    for post in posts:
        if post.metadata is None:
            continue
        reactions = {reaction.key: reaction for reaction in post.metadata.reactions or ()}
        if post.id in updates or index.get(post.id) != reactions:
            updates[post.id] = reactions
    if not updates:
        return index
    return {**index, **updates}


def open_graph_on_posts(
    cache: EmbedCache,
    posts: Iterable[Post],
    embed_type: str = OPENGRAPH_EMBED_TYPE,
) -> EmbedCache:
    """Cache the preview payload of every OpenGraph embed, keyed by url.

    Embeds without a url or payload carry nothing to cache.
    """
    updates: dict[str, Mapping[str, Any]] = {}
    for post in posts:
        if post.metadata is None or not post.metadata.embeds:
            continue
        for embed in post.metadata.embeds:
            if embed.type != embed_type or not embed.url or embed.data is None:
                continue
            if embed.url in updates or cache.get(embed.url) != embed.data:
                updates[embed.url] = embed.data
    if not updates:
        return cache
    return {**cache, **updates}


def expanded_urls_on_redirect(cache: RedirectCache, url: str, location: str) -> RedirectCache:
    """Record where a url redirects to."""
    if cache.get(url) == location:
        return cache
    return with_item(cache, url, location)


def reduce_reactions(index: ReactionIndex, event: PostEvent) -> ReactionIndex:
    """Apply one event to the reaction index."""
    return reactions_on_posts(index, _received_posts(event))


def reduce_open_graph(
    cache: EmbedCache,
    event: PostEvent,
    *,
    config: Settings | None = None,
) -> EmbedCache:
    """Apply one event to the OpenGraph cache."""
    config = config or settings
    return open_graph_on_posts(cache, _received_posts(event), config.opengraph_embed_type)


def reduce_expanded_urls(cache: RedirectCache, event: PostEvent) -> RedirectCache:
    """Apply one event to the redirect cache.

    A failed lookup maps the url to itself so it is not expanded again.
    """
    if isinstance(event, RedirectLocationSucceeded):
        return expanded_urls_on_redirect(cache, event.url, event.location)
    if isinstance(event, RedirectLocationFailed):
        logger.debug("Redirect lookup failed for %s", event.url)
        return expanded_urls_on_redirect(cache, event.url, event.url)
    return cache
