# src/chorus_timeline/schemas/post.py
"""Post-related Pydantic schemas."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PostState(str, Enum):
    """Lifecycle tag stored on every post."""

    NORMAL = "NORMAL"
    DELETED = "DELETED"


class Reaction(BaseModel):
    """A single emoji reaction left by a user on a post."""

    user_id: str
    emoji_name: str
    post_id: str | None = None
    create_at: int = 0

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def key(self) -> str:
        """Composite key used by the reaction index."""
        return f"{self.user_id}-{self.emoji_name}"


class PostEmbed(BaseModel):
    """Embedded content attached to a post (link previews, images, attachments)."""

    type: str
    url: str | None = None
    data: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class PostMetadata(BaseModel):
    """Transient payload delivered alongside a post.

    Only ``embeds`` survives storage, and only in reduced form; the other
    sub-payloads feed derived caches and are dropped.
    """

    embeds: tuple[PostEmbed, ...] | None = None
    emojis: tuple[dict[str, Any], ...] | None = None
    files: tuple[dict[str, Any], ...] | None = None
    reactions: tuple[Reaction, ...] | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class Post(BaseModel):
    """Canonical post record as delivered by the server.

    Unknown fields (``message``, ``props``, ...) are carried through verbatim.
    """

    id: str = Field(..., min_length=1, description="Post identifier")
    channel_id: str | None = Field(None, description="Owning channel; absent for drafts")
    root_id: str | None = Field(None, description="Thread root for comments")
    pending_post_id: str | None = Field(None, description="Client correlation id")
    user_id: str | None = None
    create_at: int = Field(0, description="Creation timestamp, sole ordering key")
    update_at: int = Field(0, description="Last modification timestamp")
    delete_at: int = Field(0, description="0 while live, deletion time otherwise")
    file_ids: tuple[str, ...] = ()
    has_reactions: bool = False
    state: PostState = PostState.NORMAL
    metadata: PostMetadata | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def is_comment(self) -> bool:
        """True when the post belongs to another post's thread."""
        return bool(self.root_id)

    @property
    def is_deleted(self) -> bool:
        return self.delete_at != 0 or self.state is PostState.DELETED
