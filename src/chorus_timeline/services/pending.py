# src/chorus_timeline/services/pending.py
"""Queue of optimistic sends awaiting server confirmation."""

from __future__ import annotations

from chorus_timeline.schemas.events import (
    NewPostReceived,
    PostEvent,
    PostHardRemoved,
    PostReceived,
)
from chorus_timeline.utils.cow import without_items

PendingQueue = tuple[str, ...]


def on_new_post(queue: PendingQueue, pending_post_id: str | None) -> PendingQueue:
    """Queue a draft's correlation id; regular posts carry none and are ignored."""
    if not pending_post_id or pending_post_id in queue:
        return queue
    return (*queue, pending_post_id)


def on_confirmed(queue: PendingQueue, pending_post_id: str | None) -> PendingQueue:
    """Dequeue a draft once the server has confirmed it."""
    if not pending_post_id:
        return queue
    return without_items(queue, {pending_post_id})


def on_removed(queue: PendingQueue, post_id: str) -> PendingQueue:
    """Dequeue a draft that was removed before confirmation."""
    return without_items(queue, {post_id})


def reduce_pending_post_ids(queue: PendingQueue, event: PostEvent) -> PendingQueue:
    """Apply one event to the pending queue."""
    if isinstance(event, NewPostReceived):
        return on_new_post(queue, event.post.pending_post_id)
    if isinstance(event, PostReceived):
        return on_confirmed(queue, event.post.pending_post_id)
    if isinstance(event, PostHardRemoved):
        return on_removed(queue, event.post.id)
    return queue
