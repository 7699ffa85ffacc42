# src/chorus_timeline/services/post_table.py
"""Canonical post-by-id table.

The table is a read-only mapping from post id to ``Post``. Every function
returns the input mapping itself when it has nothing to change; otherwise it
returns a new mapping in which untouched posts keep their identity.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from chorus_timeline.core.settings import Settings, settings
from chorus_timeline.schemas.events import (
    BulkPostsEvent,
    ChannelDeleted,
    PostEvent,
    PostHardRemoved,
    PostSoftDeleted,
    SinglePostEvent,
)
from chorus_timeline.schemas.post import Post
from chorus_timeline.services.metadata import mark_deleted, normalize_deleted, strip_metadata
from chorus_timeline.utils.cow import with_item, without_keys

logger = logging.getLogger(__name__)

PostTable = Mapping[str, Post]


def _prepare(post: Post, config: Settings) -> Post:
    post = normalize_deleted(post)
    if config.strip_post_metadata:
        post = strip_metadata(post, config.opengraph_embed_type)
    return post


def upsert_many(
    posts: PostTable,
    new_posts: Iterable[Post],
    *,
    config: Settings | None = None,
) -> PostTable:
    """Insert or update posts, rejecting stale versions.

    An incoming post replaces the stored one only when its ``update_at`` is not
    older and it differs from the stored post. A confirmed post whose
    ``pending_post_id`` names a draft stored under a different id removes that
    draft.

    Args:
        posts: Current table
        new_posts: Posts to apply, in application order
        config: Settings controlling metadata stripping

    Returns:
        The original table when nothing changed, otherwise a new table
    """
    config = config or settings
    updated: dict[str, Post] | None = None

    for post in new_posts:
        current = posts if updated is None else updated
        stored = current.get(post.id)
        if stored is not None and post.update_at < stored.update_at:
            logger.debug(
                "Ignoring stale post %s (update_at %d < %d)",
                post.id,
                post.update_at,
                stored.update_at,
            )
            continue

        prepared = _prepare(post, config)
        draft_id = post.pending_post_id
        superseded = bool(draft_id) and draft_id != post.id and draft_id in current
        if stored is not None and prepared == stored and not superseded:
            continue

        if updated is None:
            updated = dict(posts)
        updated[post.id] = prepared

        if superseded:
            logger.debug("Post %s supersedes pending draft %s", post.id, draft_id)
            del updated[draft_id]

    return posts if updated is None else updated


def upsert_one(posts: PostTable, post: Post, *, config: Settings | None = None) -> PostTable:
    """Insert or update a single post. See ``upsert_many``."""
    return upsert_many(posts, (post,), config=config)


def soft_delete(posts: PostTable, post: Post) -> PostTable:
    """Tombstone a stored post in place.

    Comments of a deleted root are left in the table; listings prune them.
    """
    stored = posts.get(post.id)
    if stored is None:
        logger.debug("Ignoring delete of unloaded post %s", post.id)
        return posts
    tombstone = mark_deleted(stored, post.delete_at)
    if tombstone == stored:
        return posts
    return with_item(posts, post.id, tombstone)


def hard_remove(posts: PostTable, post: Post) -> PostTable:
    """Erase a post; erasing a root also erases its loaded comments."""
    stored = posts.get(post.id)
    if stored is None:
        logger.debug("Ignoring removal of unloaded post %s", post.id)
        return posts

    doomed = {post.id}
    if not stored.is_comment:
        doomed.update(post_id for post_id, other in posts.items() if other.root_id == post.id)
    return without_keys(posts, doomed)


def remove_channel(posts: PostTable, channel_id: str, view_archived: bool) -> PostTable:
    """Erase every post of a deleted channel unless archived channels stay visible."""
    if view_archived:
        return posts
    doomed = {post_id for post_id, post in posts.items() if post.channel_id == channel_id}
    return without_keys(posts, doomed)


def reduce_posts(
    posts: PostTable,
    event: PostEvent,
    *,
    config: Settings | None = None,
) -> PostTable:
    """Apply one event to the post table."""
    config = config or settings

    if isinstance(event, PostSoftDeleted):
        return soft_delete(posts, event.post)
    if isinstance(event, PostHardRemoved):
        return hard_remove(posts, event.post)
    if isinstance(event, SinglePostEvent):
        return upsert_one(posts, event.post, config=config)
    if isinstance(event, BulkPostsEvent):
        return upsert_many(posts, event.iter_posts(), config=config)
    if isinstance(event, ChannelDeleted):
        return remove_channel(
            posts, event.channel_id, event.view_archived(config.view_archived_channels)
        )
    return posts
