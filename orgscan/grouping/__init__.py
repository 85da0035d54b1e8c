"""
Topic clusters and contributor overlap across an organization.
"""

from orgscan.grouping.clusters import (
    ContributorOverlap,
    GroupingStage,
    build_topic_clusters,
    build_contributor_index,
)

__all__ = [
    "ContributorOverlap",
    "GroupingStage",
    "build_topic_clusters",
    "build_contributor_index",
]
