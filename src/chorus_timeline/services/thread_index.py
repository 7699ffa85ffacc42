# src/chorus_timeline/services/thread_index.py
"""Per-thread comment ordering.

Maps a root post id to the tuple of its comment ids in arrival order. Root
ids never appear inside a thread's own list.
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
    PostsReceivedForThread,
    PostsReceivedSince,
)
from chorus_timeline.schemas.post import Post
from chorus_timeline.utils.cow import replace_item, with_item, without_items, without_keys

logger = logging.getLogger(__name__)

ThreadIndex = Mapping[str, tuple[str, ...]]
PostLookup = Mapping[str, Post]


def on_new_post(index: ThreadIndex, post_id: str, root_id: str | None) -> ThreadIndex:
    """Append a new comment to its thread. Root posts are ignored."""
    if not root_id:
        return index
    current = index.get(root_id, ())
    if post_id in current:
        return index
    return with_item(index, root_id, (*current, post_id))


def on_single_post(
    index: ThreadIndex,
    post_id: str,
    root_id: str | None,
    pending_post_id: str | None,
) -> ThreadIndex:
    """Confirm a pending comment in place, or append a comment seen for the first time."""
    if not root_id:
        return index
    current = index.get(root_id, ())
    if pending_post_id and pending_post_id in current:
        return with_item(index, root_id, replace_item(current, pending_post_id, post_id))
    if post_id in current:
        return index
    return with_item(index, root_id, (*current, post_id))


def on_drafts_confirmed(index: ThreadIndex, posts: Iterable[Post]) -> ThreadIndex:
    """Swap listed draft ids for the ids of the received comments confirming them."""
    for post in posts:
        if not post.root_id or not post.pending_post_id:
            continue
        current = index.get(post.root_id)
        if current is None:
            continue
        replaced = replace_item(current, post.pending_post_id, post.id)
        if replaced is not current:
            index = with_item(index, post.root_id, replaced)
    return index


def _append_comments(
    index: ThreadIndex, posts: Iterable[Post], root_id: str | None = None
) -> ThreadIndex:
    additions: dict[str, list[str]] = {}
    for post in posts:
        if not post.is_comment or post.root_id == post.id:
            continue
        if root_id is not None and post.root_id != root_id:
            continue
        pending = additions.setdefault(post.root_id, [])
        if post.id in pending or post.id in index.get(post.root_id, ()):
            continue
        pending.append(post.id)

    additions = {key: ids for key, ids in additions.items() if ids}
    if not additions:
        return index

    updated = dict(index)
    for key, ids in additions.items():
        updated[key] = (*index.get(key, ()), *ids)
    return updated


def on_bulk_posts(index: ThreadIndex, posts: Iterable[Post]) -> ThreadIndex:
    """Append every received comment to its own thread, without sorting."""
    return _append_comments(index, posts)


def on_posts_in_thread(index: ThreadIndex, root_id: str, posts: Iterable[Post]) -> ThreadIndex:
    """Append the comments of one thread, skipping the root post itself."""
    return _append_comments(index, posts, root_id)


def on_post_deleted(index: ThreadIndex, post_id: str) -> ThreadIndex:
    """Forget the thread of a deleted root. Deleting a comment is a no-op."""
    return without_keys(index, {post_id})


def on_post_removed(index: ThreadIndex, post_id: str, root_id: str | None) -> ThreadIndex:
    """Forget a removed root's thread, or drop a removed comment from its thread."""
    if not root_id:
        return without_keys(index, {post_id})
    current = index.get(root_id)
    if current is None:
        return index
    remaining = without_items(current, {post_id})
    if remaining is current:
        return index
    return with_item(index, root_id, remaining)


def on_channel_deleted(
    index: ThreadIndex,
    channel_id: str,
    prev_posts: PostLookup,
    view_archived: bool,
) -> ThreadIndex:
    """Forget every thread rooted in a deleted channel unless archives stay visible."""
    if view_archived:
        return index
    doomed = set()
    for root_id in index:
        root = prev_posts.get(root_id)
        if root is not None and root.channel_id == channel_id:
            doomed.add(root_id)
    return without_keys(index, doomed)


def reduce_posts_in_thread(
    index: ThreadIndex,
    event: PostEvent,
    *,
    prev_posts: PostLookup,
    config: Settings | None = None,
) -> ThreadIndex:
    """Apply one event to the thread index."""
    config = config or settings

    if isinstance(event, NewPostReceived):
        return on_new_post(index, event.post.id, event.post.root_id)
    if isinstance(event, PostReceived):
        post = event.post
        return on_single_post(index, post.id, post.root_id, post.pending_post_id)
    if isinstance(event, (PostsReceivedForChannel, PostsReceivedSince)):
        received = list(event.iter_posts())
        return on_bulk_posts(on_drafts_confirmed(index, received), received)
    if isinstance(event, PostsReceivedForThread):
        received = list(event.iter_posts())
        return on_posts_in_thread(on_drafts_confirmed(index, received), event.root_id, received)
    if isinstance(event, BulkPostsEvent):
        return on_drafts_confirmed(index, event.iter_posts())
    if isinstance(event, PostSoftDeleted):
        return on_post_deleted(index, event.post.id)
    if isinstance(event, PostHardRemoved):
        post = prev_posts.get(event.post.id, event.post)
        return on_post_removed(index, post.id, post.root_id)
    if isinstance(event, ChannelDeleted):
        return on_channel_deleted(
            index,
            event.channel_id,
            prev_posts,
            event.view_archived(config.view_archived_channels),
        )
    return index
