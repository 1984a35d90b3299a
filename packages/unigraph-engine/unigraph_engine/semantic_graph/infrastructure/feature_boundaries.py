"""
Feature Boundary Detector

Step 1 (seeding): group nodes by a feature token derived from the directory
path of their declaration.

    "src/Shop/Orders/Checkout/OrderService.cs"
        → meaningful segments [src, Shop, Orders, Checkout]
        → namespace "Shop.Orders.Checkout" (last ≤3 segments)
        → token "Checkout"   (3rd segment; 2nd for two, 1st for one)

    no location / no meaningful segment → "Unknown"

Step 2 (refinement): for every unordered pair of groups compute

    coupling = cross_edges / (|g1| * |g2|)

counting edges in both directions. The first pair above the threshold is
merged into "{a}_{b}" and the scan restarts; it stops when no pair
qualifies. Groups are scanned in sorted name order, so the greedy result is
reproducible for a given input.
"""

from collections import Counter
from collections.abc import Iterable
from pathlib import PurePosixPath

from unigraph_shared.common.observability import get_logger
from unigraph_shared.config import BoundaryConfig

from ..domain.models import UNKNOWN_FEATURE, Relationship, SourceLocation, SymbolNode

logger = get_logger(__name__)


class FeatureBoundaryDetector:
    def __init__(self, config: BoundaryConfig | None = None):
        self.config = config or BoundaryConfig()
        self._build_segments = frozenset(self.config.build_output_segments)
        self._source_suffixes = tuple(self.config.source_file_suffixes)

    # ============================================================
    # Seeding
    # ============================================================

    def namespace_from_location(self, location: SourceLocation | None) -> str:
        """Namespace-like path ("A.B.C") of the declaring directory."""
        if location is None or not location.file:
            return UNKNOWN_FEATURE

        parts = PurePosixPath(location.file.replace("\\", "/")).parts[:-1]  # drop file name
        relevant = [
            part
            for part in parts
            if part not in ("", "/")
            and not part.endswith(":")  # drive letter
            and part.lower() not in self._build_segments
            and not part.lower().endswith(self._source_suffixes)
        ]
        if not relevant:
            return UNKNOWN_FEATURE
        return ".".join(relevant[-3:])

    @staticmethod
    def feature_from_namespace(namespace: str) -> str:
        parts = [p for p in namespace.split(".") if p]
        if not parts:
            return UNKNOWN_FEATURE
        if len(parts) >= 3:
            return parts[2]
        if len(parts) == 2:
            return parts[1]
        return parts[0]

    def seed_groups(self, nodes: Iterable[SymbolNode]) -> dict[str, set[str]]:
        groups: dict[str, set[str]] = {}
        for node in nodes:
            token = self.feature_from_namespace(self.namespace_from_location(node.location))
            groups.setdefault(token, set()).add(node.id)
        return groups

    # ============================================================
    # Refinement
    # ============================================================

    @staticmethod
    def calculate_coupling(group_a: set[str], group_b: set[str], relationships: Iterable[Relationship]) -> float:
        """Cross-group edge density; 0.0 when either group is empty."""
        possible = len(group_a) * len(group_b)
        if possible == 0:
            return 0.0
        cross = sum(
            1
            for r in relationships
            if (r.source_id in group_a and r.target_id in group_b)
            or (r.source_id in group_b and r.target_id in group_a)
        )
        return cross / possible

    def refine(self, groups: dict[str, set[str]], relationships: list[Relationship]) -> dict[str, set[str]]:
        """Greedily merge highly coupled groups until no pair exceeds the threshold."""
        groups = {name: set(members) for name, members in groups.items()}
        threshold = self.config.merge_threshold

        while True:
            pair = self._first_mergeable_pair(groups, relationships, threshold)
            if pair is None:
                return groups

            first, second = pair
            merged_name = f"{first}{self.config.merge_separator}{second}"
            merged = groups.pop(first) | groups.pop(second)
            groups.setdefault(merged_name, set()).update(merged)
            logger.debug("feature_groups_merged", first=first, second=second, merged=merged_name)

    def _first_mergeable_pair(
        self,
        groups: dict[str, set[str]],
        relationships: list[Relationship],
        threshold: float,
    ) -> tuple[str, str] | None:
        membership = {node_id: name for name, members in groups.items() for node_id in members}

        # One pass over the edges counts every cross-group pair
        cross_counts: Counter[frozenset[str]] = Counter()
        for r in relationships:
            source_group = membership.get(r.source_id)
            target_group = membership.get(r.target_id)
            if source_group is None or target_group is None or source_group == target_group:
                continue
            cross_counts[frozenset((source_group, target_group))] += 1

        names = sorted(groups)
        for i, first in enumerate(names):
            for second in names[i + 1 :]:
                possible = len(groups[first]) * len(groups[second])
                if possible == 0:
                    continue
                coupling = cross_counts[frozenset((first, second))] / possible
                if coupling > threshold:
                    return first, second
        return None

    # ============================================================
    # Entry point
    # ============================================================

    def detect_boundaries(
        self,
        nodes: Iterable[SymbolNode],
        relationships: Iterable[Relationship],
    ) -> dict[str, set[str]]:
        """
        Detect feature boundaries.

        Returns:
            Feature name → node ids
        """
        seeded = self.seed_groups(nodes)
        boundaries = self.refine(seeded, list(relationships))
        logger.info("feature_boundaries_detected", seeded=len(seeded), final=len(boundaries))
        return boundaries
