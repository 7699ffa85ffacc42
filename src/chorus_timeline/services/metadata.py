"""Helpers that shape a received post before it is stored."""

from __future__ import annotations

from chorus_timeline.schemas.post import Post, PostEmbed, PostState

OPENGRAPH_EMBED_TYPE = "opengraph"


def mark_deleted(post: Post, delete_at: int | None = None) -> Post:
    """Return a tombstone copy of ``post``.

    Attachments and the reaction flag are cleared; ``delete_at`` is kept from
    the post unless a nonzero value is supplied.
    """
    return post.model_copy(
        update={
            "file_ids": (),
            "has_reactions": False,
            "state": PostState.DELETED,
            "delete_at": delete_at or post.delete_at,
        }
    )


def normalize_deleted(post: Post) -> Post:
    """Turn a received post with a nonzero ``delete_at`` into a tombstone."""
    if not post.delete_at:
        return post
    if post.state is PostState.DELETED and not post.file_ids and not post.has_reactions:
        return post
    return mark_deleted(post)


def _strip_embeds(
    embeds: tuple[PostEmbed, ...], embed_type: str
) -> tuple[PostEmbed, ...]:
    if not any(_is_heavy(embed, embed_type) for embed in embeds):
        return embeds
    return tuple(
        PostEmbed(type=embed.type, url=embed.url) if _is_heavy(embed, embed_type) else embed
        for embed in embeds
    )


def _is_heavy(embed: PostEmbed, embed_type: str) -> bool:
    return embed.type == embed_type and (embed.data is not None or bool(embed.model_extra))


def strip_metadata(post: Post, embed_type: str = OPENGRAPH_EMBED_TYPE) -> Post:
    """Drop the parts of ``post.metadata`` that live in derived caches.

    OpenGraph embeds keep only ``type`` and ``url``; emojis, files and
    reactions are removed. The post itself is returned when nothing needs to
    be stripped.

    Args:
        post: Post as received from the server
        embed_type: Embed type whose payload is cached separately

    Returns:
        The post, or a copy with reduced metadata
    """
    metadata = post.metadata
    if metadata is None:
        return post

    embeds = metadata.embeds
    stripped_embeds = _strip_embeds(embeds, embed_type) if embeds else embeds
    if (
        stripped_embeds is embeds
        and metadata.emojis is None
        and metadata.files is None
        and metadata.reactions is None
    ):
        return post

    reduced = metadata.model_copy(
        update={"embeds": stripped_embeds, "emojis": None, "files": None, "reactions": None}
    )
    return post.model_copy(update={"metadata": reduced})
