"""
Relationship Store

Append-only edge collection shared by all collection workers.

Dedupe key: (source_id, target_id, type). Reference lookups, derived-type
lookups and structural walks often find the same fact more than once
(class C implements I is reported by both C's interface list and I's
implementations); the first occurrence, with its location, is kept.
"""

from collections.abc import Iterator

from ..domain.models import Relationship, RelationshipType


class RelationshipStore:
    def __init__(self):
        self._edges: dict[tuple[str, str, RelationshipType], Relationship] = {}

    def add(self, relationship: Relationship) -> bool:
        """
        Append a relationship.

        Returns:
            True if it was new, False if an equal-key edge already existed
        """
        stored = self._edges.setdefault(relationship.key, relationship)
        return stored is relationship

    def __iter__(self) -> Iterator[Relationship]:
        return iter(list(self._edges.values()))

    def __len__(self) -> int:
        return len(self._edges)
