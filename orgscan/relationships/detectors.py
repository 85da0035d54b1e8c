"""
Relationship detector strategies.

Each detector is a pure function over immutable records. The pairwise
detectors compare two records through exact set overlap; the dependency
detector matches one record's declared dependencies against the names
of the batch.
"""

import logging
from typing import Collection, Iterable, List, Optional, Set

from orgscan.records.edges import RelationshipEdge, RelationshipKind
from orgscan.records.repository import RepositoryRecord

logger = logging.getLogger(__name__)

TOPIC_SIMILARITY_THRESHOLD = 0.3
CONTRIBUTOR_OVERLAP_THRESHOLD = 0.2
RUNTIME_CLASSIFICATION = "runtime"


def overlap_strength(first: Set[str], second: Set[str]) -> float:
    """
    Size of the intersection relative to the larger set.

    Returns 0.0 when either set is empty.
    """
    if not first or not second:
        return 0.0
    return len(first & second) / max(len(first), len(second))


def _overlap_edge(
    kind: RelationshipKind,
    first: RepositoryRecord,
    second: RepositoryRecord,
    first_keys: Set[str],
    second_keys: Set[str],
    threshold: float,
    details_key: str,
) -> Optional[RelationshipEdge]:
    shared = first_keys & second_keys
    if not shared:
        return None

    strength = overlap_strength(first_keys, second_keys)
    if strength <= threshold:
        return None

    return RelationshipEdge(
        kind=kind,
        source_name=first.name,
        target_name=second.name,
        strength=strength,
        details={details_key: sorted(shared)},
    )


def detect_topic_similarity(
    first: RepositoryRecord,
    second: RepositoryRecord,
    threshold: float = TOPIC_SIMILARITY_THRESHOLD,
) -> Optional[RelationshipEdge]:
    """
    Compare the topic sets of two records.

    The earlier record of the pair becomes the edge source. An edge is
    produced only when the strength is strictly above the threshold.
    """
    return _overlap_edge(
        RelationshipKind.TOPIC_SIMILARITY,
        first,
        second,
        first.topic_set(),
        second.topic_set(),
        threshold,
        "shared_topics",
    )


def detect_contributor_overlap(
    first: RepositoryRecord,
    second: RepositoryRecord,
    threshold: float = CONTRIBUTOR_OVERLAP_THRESHOLD,
) -> Optional[RelationshipEdge]:
    """
    Compare the contributor logins of two records.

    Logins match exactly and case-sensitively. A record without
    contributors never overlaps with anything.
    """
    return _overlap_edge(
        RelationshipKind.CONTRIBUTOR_OVERLAP,
        first,
        second,
        set(first.contributor_logins()),
        set(second.contributor_logins()),
        threshold,
        "shared_contributors",
    )


def normalize_dependency_name(name: str) -> str:
    """
    Strip a scope or namespace prefix from a dependency name.

    ``@org/widgets`` and ``github.com/org/widgets`` both become
    ``widgets``; a bare name is returned unchanged.
    """
    name = name.strip()
    if "/" in name:
        name = name.rsplit("/", 1)[1]
    return name


def match_dependency(
    declared: str,
    repository_names: Collection[str],
    exclude: Optional[str] = None,
) -> Optional[str]:
    """
    Resolve a declared dependency to a repository of the batch.

    The raw name is tried before the normalized one.

    Args:
        declared: Dependency name as declared in the manifest.
        repository_names: Names of the batch.
        exclude: Name that must not match (the declaring record).

    Returns:
        The matched repository name, or None.
    """
    for candidate in (declared, normalize_dependency_name(declared)):
        if candidate and candidate != exclude and candidate in repository_names:
            return candidate
    return None


def detect_dependencies(
    record: RepositoryRecord,
    repository_names: Collection[str],
    classification: str = RUNTIME_CLASSIFICATION,
) -> List[RelationshipEdge]:
    """
    Find the batch repositories a record depends on.

    One directed edge is produced per matching declared dependency,
    from the declaring record to the matched record.
    """
    edges = []
    for declared, version in (record.declared_dependencies or {}).items():
        target = match_dependency(declared, repository_names, exclude=record.name)
        if target is None:
            continue

        logger.debug(f"{record.name} depends on {target} ({declared} {version})")
        edges.append(RelationshipEdge(
            kind=RelationshipKind.DEPENDENCY,
            source_name=record.name,
            target_name=target,
            strength=1.0,
            details={
                "version": version,
                "classification": classification,
                "declared_as": declared,
            },
        ))
    return edges


def topic_keys(record: RepositoryRecord) -> Iterable[str]:
    return record.unique_topics()


def contributor_keys(record: RepositoryRecord) -> Iterable[str]:
    return record.contributor_logins()


PAIRWISE_DETECTORS = {
    RelationshipKind.TOPIC_SIMILARITY: (detect_topic_similarity, topic_keys),
    RelationshipKind.CONTRIBUTOR_OVERLAP: (detect_contributor_overlap, contributor_keys),
}
