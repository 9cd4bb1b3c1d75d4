"""In-order subsequence matching used to narrow the visible lists."""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


def fuzzy_match(query: str, label: str) -> bool:
    """True if every character of *query* appears in *label*, in order.

    Case-insensitive. The empty query matches everything.
    """
    if not query:
        return True
    chars = iter(label.casefold())
    return all(ch in chars for ch in query.casefold())


def fuzzy_filter(
    query: str,
    items: Sequence[T],
    key: Callable[[T], str] = str,
) -> list[T]:
    """Stable filter: the matching items of *items*, in their original order.

    Returns a new list and never mutates *items*.
    """
    return [item for item in items if fuzzy_match(query, key(item))]
