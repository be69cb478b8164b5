"""Free-text search over node ids, labels and properties."""

from collections.abc import Iterable
from typing import TypeVar

from forcegraph.models import GraphNode, id_key

N = TypeVar("N", bound=GraphNode)


def normalize_search_term(term: str | None) -> str:
    """Trim and lowercase a raw search term."""
    return (term or "").strip().lower()


def node_matches_search_term(node: GraphNode, normalized_search: str) -> bool:
    """Check whether a node matches an already normalized search term.

    Matches are case-insensitive substrings of the stringified id, the label,
    or any ``"key value"`` property pair. An empty term means "no active
    search" and never matches.
    """
    if not normalized_search:
        return False

    if normalized_search in id_key(node.id).lower():
        return True

    if node.label and normalized_search in node.label.lower():
        return True

    for key, value in node.properties.items():
        if normalized_search in f"{key} {value}".lower():
            return True

    return False


def find_search_matches(nodes: Iterable[N], term: str | None) -> list[N]:
    """Nodes matching a raw search term, in input order."""
    normalized = normalize_search_term(term)
    if not normalized:
        return []
    return [node for node in nodes if node_matches_search_term(node, normalized)]
