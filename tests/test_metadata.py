# tests/test_metadata.py
"""Tests for metadata stripping and tombstone helpers."""

from __future__ import annotations

from chorus_timeline.schemas.post import Post, PostEmbed, PostState
from chorus_timeline.services.metadata import mark_deleted, normalize_deleted, strip_metadata


class TestStripMetadata:
    """Reducing metadata before storage."""

    def test_without_metadata(self) -> None:
        post = Post(id="post")

        assert strip_metadata(post) is post

    def test_with_empty_metadata(self, make_post) -> None:
        post = make_post("post", metadata={})

        assert strip_metadata(post) is post

    def test_removes_emojis(self, make_post) -> None:
        post = make_post("post", metadata={"emojis": [{"name": "emoji"}]})

        result = strip_metadata(post)

        assert result is not post
        assert result.metadata is not None
        assert result.metadata.emojis is None

    def test_removes_files(self, make_post) -> None:
        post = make_post("post", metadata={"files": [{"id": "file", "post_id": "post"}]})

        result = strip_metadata(post)

        assert result is not post
        assert result.metadata.files is None

    def test_removes_reactions(self, make_post) -> None:
        post = make_post(
            "post",
            metadata={
                "reactions": [
                    {"user_id": "abcd", "emoji_name": "+1"},
                    {"user_id": "efgh", "emoji_name": "+1"},
                ]
            },
        )

        result = strip_metadata(post)

        assert result is not post
        assert result.metadata.reactions is None

    def test_reduces_opengraph_embeds(self, make_post) -> None:
        post = make_post(
            "post",
            metadata={
                "embeds": [
                    {
                        "type": "opengraph",
                        "url": "https://example.com",
                        "data": {
                            "url": "https://example.com",
                            "images": [{"url": "https://example.com/logo.png", "width": 100}],
                        },
                    }
                ]
            },
        )

        result = strip_metadata(post)

        assert result is not post
        assert result.metadata.embeds == (PostEmbed(type="opengraph", url="https://example.com"),)
        assert result.metadata.embeds[0].data is None

    def test_leaves_other_embeds_alone(self, make_post) -> None:
        post = make_post(
            "post",
            metadata={
                "embeds": [
                    {"type": "image", "url": "https://example.com/image"},
                    {"type": "message_attachment"},
                ]
            },
            props={"attachments": [{"text": "This is an attachment"}]},
        )

        assert strip_metadata(post) is post

    def test_keeps_unknown_metadata_keys(self, make_post) -> None:
        post = make_post(
            "post",
            metadata={"emojis": [{"name": "emoji"}], "images": {"https://example.com/a.png": {}}},
        )

        result = strip_metadata(post)

        assert result.metadata.model_extra == {"images": {"https://example.com/a.png": {}}}

    def test_custom_embed_type(self, make_post) -> None:
        post = make_post(
            "post",
            metadata={"embeds": [{"type": "preview", "url": "https://a.b", "data": {"t": 1}}]},
        )

        assert strip_metadata(post) is post
        assert strip_metadata(post, "preview").metadata.embeds[0].data is None


class TestTombstones:
    """Marking posts as deleted."""

    def test_mark_deleted_clears_attachments(self) -> None:
        post = Post(id="post", file_ids=("file",), has_reactions=True, delete_at=10)

        result = mark_deleted(post)

        assert result.file_ids == ()
        assert result.has_reactions is False
        assert result.state is PostState.DELETED
        assert result.delete_at == 10

    def test_mark_deleted_takes_new_delete_at(self) -> None:
        result = mark_deleted(Post(id="post"), 99)

        assert result.delete_at == 99

    def test_normalize_live_post_is_noop(self) -> None:
        post = Post(id="post", file_ids=("file",))

        assert normalize_deleted(post) is post

    def test_normalize_deleted_post(self) -> None:
        post = Post(id="post", delete_at=5, file_ids=("file",))

        result = normalize_deleted(post)

        assert result.state is PostState.DELETED
        assert result.file_ids == ()
        assert normalize_deleted(result) is result
