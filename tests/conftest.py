# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from chorus_timeline.core.settings import Settings
from chorus_timeline.schemas.post import Post
from chorus_timeline.services.dispatcher import PostsState

_TEST_SETTINGS_INSTANCE = Settings(
    VIEW_ARCHIVED_CHANNELS=False,
    STRIP_POST_METADATA=True,
)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance with the default engine behaviour."""
    return _TEST_SETTINGS_INSTANCE


@pytest.fixture()
def make_post() -> Callable[..., Post]:
    """Build posts from keyword fields, validating nested metadata."""

    def _make_post(post_id: str, **fields: Any) -> Post:
        return Post.model_validate({"id": post_id, **fields})

    return _make_post


@pytest.fixture()
def loaded_state(make_post: Callable[..., Post]) -> PostsState:
    """A channel with one thread and one standalone post loaded everywhere."""
    root = make_post("root1", channel_id="channel1", create_at=1000, file_ids=["file"], has_reactions=True)
    comment1 = make_post("comment1", channel_id="channel1", root_id="root1", create_at=2000)
    comment2 = make_post("comment2", channel_id="channel1", root_id="root1", create_at=3000)
    other = make_post("post2", channel_id="channel2", create_at=1500)
    return PostsState(
        posts={post.id: post for post in (root, comment1, comment2, other)},
        posts_in_channel={
            "channel1": ("comment2", "comment1", "root1"),
            "channel2": ("post2",),
        },
        posts_in_thread={"root1": ("comment1", "comment2")},
        pending_post_ids=("draft1",),
    )
