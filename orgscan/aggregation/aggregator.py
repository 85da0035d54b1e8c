"""
Organization-level aggregates over a record batch.

Language byte totals, topic occurrence counts, visibility counts and
metric sums. Sorted mappings keep first-encountered order among ties.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from orgscan.core.config import PipelineConfig
from orgscan.core.pipeline import PipelineStage, PipelineState
from orgscan.records.repository import RepositoryRecord

logger = logging.getLogger(__name__)

DEFAULT_TOP_LANGUAGES = 20


def _sorted_by_count(counts: Dict[str, int], limit: Optional[int] = None) -> Dict[str, int]:
    """Sort a count mapping descending; ties keep insertion order."""
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ordered = ordered[:limit]
    return dict(ordered)


def aggregate_languages(
    records: Sequence[RepositoryRecord],
    top_n: int = DEFAULT_TOP_LANGUAGES,
) -> Dict[str, int]:
    """
    Sum byte counts per language across the batch.

    Args:
        records: The record batch.
        top_n: Number of languages to keep.

    Returns:
        Mapping of language to total bytes, largest first.
    """
    totals: Dict[str, int] = {}
    for record in records:
        for language, size in record.languages.items():
            totals[language] = totals.get(language, 0) + size
    return _sorted_by_count(totals, limit=top_n)


def aggregate_topics(records: Sequence[RepositoryRecord]) -> Dict[str, int]:
    """
    Count how many records list each topic.

    A topic listed twice by the same record counts once.

    Returns:
        Mapping of topic to record count, most common first.
    """
    counts: Dict[str, int] = {}
    for record in records:
        for topic in record.unique_topics():
            counts[topic] = counts.get(topic, 0) + 1
    return _sorted_by_count(counts)


def count_visibility(records: Sequence[RepositoryRecord]) -> Tuple[int, int]:
    """Return (public, private) repository counts."""
    private = sum(1 for record in records if record.is_private)
    return len(records) - private, private


def _metric_total(values: Iterable[Optional[int]]) -> int:
    return sum(value or 0 for value in values)


def total_stars(records: Sequence[RepositoryRecord]) -> int:
    """Sum of stars; a missing count is zero."""
    return _metric_total(record.stars for record in records)


def total_forks(records: Sequence[RepositoryRecord]) -> int:
    """Sum of forks; a missing count is zero."""
    return _metric_total(record.forks for record in records)


class AggregationStage(PipelineStage):
    """
    Pipeline stage computing organization-level aggregates.

    Produces language and topic mappings, visibility counts and
    star/fork totals for the validated batch.
    """

    def __init__(self, config: PipelineConfig):
        super().__init__(config)
        self.aggregation_config = config.aggregation

    @property
    def name(self) -> str:
        return "aggregation"

    @property
    def dependencies(self) -> List[str]:
        return ["validation"]

    def execute(self, state: PipelineState) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        records = state.records

        languages = aggregate_languages(
            records, top_n=self.aggregation_config.top_languages
        )
        topics = aggregate_topics(records)
        public, private = count_visibility(records)

        output = {
            "languages": languages,
            "topics": topics,
            "public_repositories": public,
            "private_repositories": private,
            "total_stars": total_stars(records),
            "total_forks": total_forks(records),
        }

        metrics = {
            "language_count": len(languages),
            "topic_count": len(topics),
        }

        return output, metrics
