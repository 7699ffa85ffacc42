# src/chorus_timeline/services/channel_index.py
"""Per-channel post ordering.

Maps a channel id to a tuple of post ids, newest ``create_at`` first. Only ids
are stored; anything else about a post is looked up in a post table passed in
by the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from chorus_timeline.core.settings import Settings, settings
from chorus_timeline.schemas.events import (
    BulkPostsEvent,
    ChannelDeleted,
    NewPostReceived,
    PostEvent,
    PostHardRemoved,
    PostReceived,
    PostSoftDeleted,
    PostsReceivedForChannel,
    PostsReceivedSince,
)
from chorus_timeline.schemas.post import Post
from chorus_timeline.utils.cow import replace_item, with_item, without_items, without_keys

logger = logging.getLogger(__name__)

ChannelIndex = Mapping[str, tuple[str, ...]]
PostLookup = Mapping[str, Post]


def _root_of(lookup: PostLookup, post_id: str) -> str | None:
    post = lookup.get(post_id)
    return post.root_id if post is not None else None


def _create_at(lookup: PostLookup, post_id: str) -> int:
    post = lookup.get(post_id)
    if post is None:
        logger.debug("No create_at known for post %s; ordering it last", post_id)
        return 0
    return post.create_at


def on_new_post(index: ChannelIndex, channel_id: str | None, post_id: str) -> ChannelIndex:
    """Prepend a new post to its channel, creating the channel entry if needed."""
    if not channel_id:
        return index
    current = index.get(channel_id, ())
    if post_id in current:
        return index
    return with_item(index, channel_id, (post_id, *current))


def on_single_post(
    index: ChannelIndex,
    channel_id: str | None,
    post_id: str,
    pending_post_id: str | None,
) -> ChannelIndex:
    """Swap a pending draft's id for its confirmed id, keeping its position.

    Posts that were never pending in this channel are left to bulk receipt.
    """
    if not channel_id or not pending_post_id:
        return index
    current = index.get(channel_id)
    if current is None:
        return index
    replaced = replace_item(current, pending_post_id, post_id)
    if replaced is current:
        return index
    return with_item(index, channel_id, replaced)


def on_drafts_confirmed(index: ChannelIndex, posts: Iterable[Post]) -> ChannelIndex:
    """Swap listed draft ids for the ids of the received posts confirming them."""
    for post in posts:
        index = on_single_post(index, post.channel_id, post.id, post.pending_post_id)
    return index


def on_bulk_posts(
    index: ChannelIndex,
    channel_id: str,
    incoming_ids: Iterable[str],
    lookup: PostLookup,
) -> ChannelIndex:
    """Merge received ids into a channel, ordered by descending ``create_at``.

    Args:
        index: Current channel index
        channel_id: Channel the posts were requested for
        incoming_ids: Ids of the received posts
        lookup: Post table covering both stored and received posts

    Returns:
        The original index when no new ids arrived for a known channel,
        otherwise a new index
    """
    current = index.get(channel_id)
    known = set(current or ())
    new_ids = [post_id for post_id in dict.fromkeys(incoming_ids) if post_id not in known]

    if not new_ids:
        if current is None:
            return with_item(index, channel_id, ())
        return index

    merged = sorted(
        (*(current or ()), *new_ids),
        key=lambda post_id: _create_at(lookup, post_id),
        reverse=True,
    )
    return with_item(index, channel_id, tuple(merged))


def on_post_deleted(index: ChannelIndex, prev_posts: PostLookup, post: Post) -> ChannelIndex:
    """Drop a deleted root's loaded comments from its channel listing.

    The root itself stays listed as a tombstone. Deleting a comment is a no-op.
    """
    if post.is_comment or not post.channel_id:
        return index
    current = index.get(post.channel_id)
    if not current:
        return index

    comment_ids = {post_id for post_id in current if _root_of(prev_posts, post_id) == post.id}
    remaining = without_items(current, comment_ids)
    if remaining is current:
        return index
    return with_item(index, post.channel_id, remaining)


def on_post_removed(index: ChannelIndex, prev_posts: PostLookup, post: Post) -> ChannelIndex:
    """Drop a removed post, and a removed root's comments, from its channel."""
    if not post.channel_id:
        return index
    current = index.get(post.channel_id)
    if not current:
        return index

    doomed = {post.id}
    if not post.is_comment:
        doomed.update(post_id for post_id in current if _root_of(prev_posts, post_id) == post.id)
    remaining = without_items(current, doomed)
    if remaining is current:
        return index
    return with_item(index, post.channel_id, remaining)


def on_channel_deleted(
    index: ChannelIndex, channel_id: str, view_archived: bool
) -> ChannelIndex:
    """Forget a deleted channel's listing unless archived channels stay visible."""
    if view_archived:
        return index
    return without_keys(index, {channel_id})


def reduce_posts_in_channel(
    index: ChannelIndex,
    event: PostEvent,
    *,
    prev_posts: PostLookup,
    next_posts: PostLookup,
    config: Settings | None = None,
) -> ChannelIndex:
    """Apply one event to the channel index.

    ``prev_posts`` is the post table before the event and resolves thread
    membership for cascades; ``next_posts`` is the table after the event and
    supplies ``create_at`` for merges.
    """
    config = config or settings

    if isinstance(event, NewPostReceived):
        return on_new_post(index, event.post.channel_id, event.post.id)
    if isinstance(event, PostReceived):
        post = event.post
        return on_single_post(index, post.channel_id, post.id, post.pending_post_id)
    if isinstance(event, (PostsReceivedForChannel, PostsReceivedSince)):
        received = list(event.iter_posts())
        index = on_drafts_confirmed(index, received)
        return on_bulk_posts(index, event.channel_id, [post.id for post in received], next_posts)
    if isinstance(event, BulkPostsEvent):
        return on_drafts_confirmed(index, event.iter_posts())
    if isinstance(event, PostSoftDeleted):
        return on_post_deleted(index, prev_posts, prev_posts.get(event.post.id, event.post))
    if isinstance(event, PostHardRemoved):
        return on_post_removed(index, prev_posts, prev_posts.get(event.post.id, event.post))
    if isinstance(event, ChannelDeleted):
        return on_channel_deleted(
            index, event.channel_id, event.view_archived(config.view_archived_channels)
        )
    return index
