"""Shallow diffing of site content aggregates.

Each top-level wire field (``id``, ``createdAt``, ``pages``, ...) is
compared through its JSON serialisation, so nested values count as
changed only when their serialised form differs.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .models import SiteContent


@dataclass(frozen=True)
class ContentDiff:
    """A changed top-level field.

    Attributes:
        field: Wire name of the field.
        before: Value in the first aggregate.
        after: Value in the second aggregate.
    """

    field: str
    before: Any
    after: Any


def _serialise(value: Any) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def diff_site_content(before: SiteContent, after: SiteContent) -> list[ContentDiff]:
    """Compare two aggregates field by field.

    Args:
        before: Original aggregate.
        after: Updated aggregate.

    Returns:
        One ContentDiff per changed field, in field order. Empty when equal.
    """
    old = before.to_dict()
    new = after.to_dict()
    diffs: list[ContentDiff] = []
    for key, value in old.items():
        other = new.get(key)
        if _serialise(value) != _serialise(other):
            diffs.append(ContentDiff(field=key, before=value, after=other))
    return diffs
