"""
Relationship detection between the repositories of an organization.

Provides the detector strategies, their orchestration, and a graph
representation of the detected relationships.
"""

from orgscan.relationships.detectors import (
    detect_topic_similarity,
    detect_contributor_overlap,
    detect_dependencies,
    normalize_dependency_name,
)
from orgscan.relationships.graph import RelationshipGraph
from orgscan.relationships.detector import RelationshipDetector, RelationshipStage

__all__ = [
    "detect_topic_similarity",
    "detect_contributor_overlap",
    "detect_dependencies",
    "normalize_dependency_name",
    "RelationshipGraph",
    "RelationshipDetector",
    "RelationshipStage",
]
