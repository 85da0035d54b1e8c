"""
Relationship detection pipeline stage.

Runs every detector over the batch and collects the edges in a fixed
order: topic similarity, then contributor overlap, then dependencies.
"""

import logging
from collections import defaultdict
from itertools import combinations
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

from orgscan.core.config import PipelineConfig, RelationshipConfig
from orgscan.core.pipeline import PipelineStage, PipelineState
from orgscan.records.edges import RelationshipEdge, RelationshipKind
from orgscan.records.repository import RepositoryRecord
from orgscan.relationships.detectors import PAIRWISE_DETECTORS, detect_dependencies
from orgscan.relationships.graph import RelationshipGraph

logger = logging.getLogger(__name__)


def candidate_pairs(
    records: Sequence[RepositoryRecord],
    keys: Callable[[RepositoryRecord], Iterable[str]],
) -> List[Tuple[int, int]]:
    """
    Index pairs ``(i, j)``, ``i < j``, of records sharing at least one key.

    Pairs with no shared key cannot produce an overlap edge, so skipping
    them leaves the detected edges unchanged. Pairs come back in the same
    order as a full nested scan.
    """
    index: Dict[str, List[int]] = defaultdict(list)
    for position, record in enumerate(records):
        for key in keys(record):
            index[key].append(position)

    pairs = set()
    for positions in index.values():
        pairs.update(combinations(positions, 2))
    return sorted(pairs)


class RelationshipDetector:
    """
    Computes relationship edges between the records of one batch.

    Pairwise detectors visit unordered pairs in batch order; the
    dependency detector visits each record once.
    """

    def __init__(self, config: RelationshipConfig = None):
        self.config = config or RelationshipConfig()
        self._thresholds = {
            RelationshipKind.TOPIC_SIMILARITY: self.config.topic_similarity_threshold,
            RelationshipKind.CONTRIBUTOR_OVERLAP: self.config.contributor_overlap_threshold,
        }

    def compute_relationships(
        self, records: Sequence[RepositoryRecord]
    ) -> List[RelationshipEdge]:
        """
        Run every detector over the batch.

        Args:
            records: Validated record batch.

        Returns:
            Topic-similarity edges, then contributor-overlap edges, then
            dependency edges.
        """
        edges: List[RelationshipEdge] = []
        for kind in RelationshipKind:
            edges.extend(self.detect(kind, records))
        return edges

    def detect(
        self, kind: RelationshipKind, records: Sequence[RepositoryRecord]
    ) -> List[RelationshipEdge]:
        """Run the detector selected by kind."""
        if kind is RelationshipKind.DEPENDENCY:
            return self.find_dependencies(records)
        return self._find_pairwise(kind, records)

    def find_dependencies(
        self, records: Sequence[RepositoryRecord]
    ) -> List[RelationshipEdge]:
        """Find intra-organization dependency edges."""
        names = {record.name for record in records}
        edges = []
        for record in records:
            edges.extend(detect_dependencies(
                record, names, classification=self.config.dependency_classification
            ))
        return edges

    def _find_pairwise(
        self, kind: RelationshipKind, records: Sequence[RepositoryRecord]
    ) -> List[RelationshipEdge]:
        detector, keys = PAIRWISE_DETECTORS[kind]
        threshold = self._thresholds[kind]

        if self.config.use_candidate_index:
            pairs = candidate_pairs(records, keys)
        else:
            pairs = combinations(range(len(records)), 2)

        edges = []
        compared = 0
        for i, j in pairs:
            compared += 1
            edge = detector(records[i], records[j], threshold)
            if edge is not None:
                edges.append(edge)

        logger.debug(f"{kind.value}: compared {compared} pairs, kept {len(edges)} edges")
        return edges


class RelationshipStage(PipelineStage):
    """
    Pipeline stage for computing repository relationships.

    Produces the flat edge list and the relationship graph built from it.
    """

    def __init__(self, config: PipelineConfig):
        super().__init__(config)
        self.detector = RelationshipDetector(config.relationships)

    @property
    def name(self) -> str:
        return "relationships"

    @property
    def dependencies(self) -> List[str]:
        return ["validation"]

    def execute(self, state: PipelineState) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        records = state.records
        edges = self.detector.compute_relationships(records)

        graph = RelationshipGraph.from_edges(
            (record.name for record in records), edges, name=state.organization
        )

        output = {
            "edges": edges,
            "graph": graph,
        }

        metrics = {"edge_count": len(edges)}
        for kind in RelationshipKind:
            metrics[f"{kind.value}_edges"] = len(graph.edges_by_kind(kind))

        return output, metrics
