"""Copy-on-write helpers over read-only mappings and tuples.

Every helper returns its input object unchanged when the operation would not
alter it, so callers can rely on ``is`` to detect no-op updates.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import TypeVar

K = TypeVar("K")
V = TypeVar("V")


def with_item(mapping: Mapping[K, V], key: K, value: V) -> Mapping[K, V]:
    """Return a new mapping with ``key`` set to ``value``.

    The input is returned when it already holds that exact object under ``key``.
    """
    if key in mapping and mapping[key] is value:
        return mapping
    updated = dict(mapping)
    updated[key] = value
    return updated


def without_keys(mapping: Mapping[K, V], keys: Collection[K]) -> Mapping[K, V]:
    """Return ``mapping`` minus ``keys``, or ``mapping`` itself if none are present."""
    if not any(key in mapping for key in keys):
        return mapping
    return {key: value for key, value in mapping.items() if key not in keys}


def without_items(items: tuple[V, ...], doomed: Collection[V]) -> tuple[V, ...]:
    """Return ``items`` minus ``doomed``, or ``items`` itself if none are present."""
    if not any(item in doomed for item in items):
        return items
    return tuple(item for item in items if item not in doomed)


def replace_item(items: tuple[V, ...], old: V, new: V) -> tuple[V, ...]:
    """Replace ``old`` with ``new`` in place, keeping its position.

    When ``new`` is already present the ``old`` entry is dropped instead, so
    the result never holds duplicates.
    """
    if old == new or old not in items:
        return items
    if new in items:
        return tuple(item for item in items if item != old)
    return tuple(new if item == old else item for item in items)
