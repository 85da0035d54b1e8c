"""
Grouping of repositories by shared topic and shared contributor.

Both builders work from the original batch, bucket repository names in
batch order, and keep only buckets holding at least two repositories.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

from orgscan.core.pipeline import PipelineStage, PipelineState
from orgscan.records.repository import RepositoryRecord

logger = logging.getLogger(__name__)

MIN_GROUP_SIZE = 2


@dataclass
class ContributorOverlap:
    """A contributor together with the repositories they appear in."""

    contributor: str
    repositories: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "contributor": self.contributor,
            "repositories": list(self.repositories),
        }


def _bucket_names(
    records: Sequence[RepositoryRecord],
    keys: Callable[[RepositoryRecord], Iterable[str]],
) -> Dict[str, List[str]]:
    buckets: Dict[str, List[str]] = {}
    for record in records:
        for key in keys(record):
            buckets.setdefault(key, []).append(record.name)
    return {
        key: names for key, names in buckets.items()
        if len(names) >= MIN_GROUP_SIZE
    }


def build_topic_clusters(records: Sequence[RepositoryRecord]) -> Dict[str, List[str]]:
    """
    Group repository names by topic.

    Topics are deduplicated per record, so a repository appears at most
    once in each cluster.

    Returns:
        Mapping of topic to member names in batch order.
    """
    return _bucket_names(records, RepositoryRecord.unique_topics)


def build_contributor_index(
    records: Sequence[RepositoryRecord],
) -> List[ContributorOverlap]:
    """
    Index contributors by the repositories they appear in.

    Contribution counts are ignored; a contributor present in a single
    repository is left out.
    """
    buckets = _bucket_names(records, RepositoryRecord.contributor_logins)
    return [
        ContributorOverlap(contributor=login, repositories=names)
        for login, names in buckets.items()
    ]


class GroupingStage(PipelineStage):
    """Pipeline stage building topic clusters and the contributor index."""

    @property
    def name(self) -> str:
        return "grouping"

    @property
    def dependencies(self) -> List[str]:
        return ["validation"]

    def execute(self, state: PipelineState) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        topic_clusters = build_topic_clusters(state.records)
        contributor_overlap = build_contributor_index(state.records)

        output = {
            "topic_clusters": topic_clusters,
            "contributor_overlap": contributor_overlap,
        }

        metrics = {
            "topic_clusters": len(topic_clusters),
            "shared_contributors": len(contributor_overlap),
        }

        return output, metrics
