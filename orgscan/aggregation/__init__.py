"""
Aggregation module for organization-wide language and topic statistics.
"""

from orgscan.aggregation.aggregator import (
    AggregationStage,
    aggregate_languages,
    aggregate_topics,
    count_visibility,
    total_stars,
    total_forks,
)

__all__ = [
    "AggregationStage",
    "aggregate_languages",
    "aggregate_topics",
    "count_visibility",
    "total_stars",
    "total_forks",
]
