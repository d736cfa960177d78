"""Page resolution: match a request path against the configured page tree.

Resolution is a read-only pre-order scan. Ancestry is returned as part of
the result and never written onto the shared page nodes, so concurrent
requests cannot observe each other's matches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from website.schemas.site import PageNode


@dataclass(frozen=True)
class Found:
    """A matched page and its ancestors, ordered root to immediate parent."""

    page: PageNode
    ancestors: tuple[PageNode, ...] = ()


@dataclass(frozen=True)
class NotFound:
    """No page in the tree matches the request path."""


NOT_FOUND = NotFound()

ResolvedRoute = Found | NotFound


def walk_tree(
    tree: Sequence[PageNode],
    ancestors: tuple[PageNode, ...] = (),
) -> Iterator[tuple[PageNode, tuple[PageNode, ...]]]:
    """Yield ``(node, ancestors)`` for every node, pre-order, in configuration order."""
    for node in tree:
        yield node, ancestors
        if node.children:
            yield from walk_tree(node.children, (*ancestors, node))


def resolve(tree: Sequence[PageNode], request_path: str) -> ResolvedRoute:
    """Return the first page whose path equals ``request_path`` exactly.

    Matching is byte-for-byte and case-sensitive; ``/about`` and
    ``/about/`` are different paths.
    """
    for node, ancestors in walk_tree(tree):
        if node.path == request_path:
            return Found(page=node, ancestors=ancestors)
    return NOT_FOUND
