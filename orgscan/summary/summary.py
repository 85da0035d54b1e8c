"""
Organization summary data structures.

The summary is a pure value: every field serializes without circular
references, and edges name repositories instead of holding them.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from orgscan.grouping.clusters import ContributorOverlap
from orgscan.records.repository import RepositoryRecord


@dataclass(frozen=True)
class DependencyLink:
    """Simplified view of a dependency edge."""

    source: str
    target: str
    kind: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"source": self.source, "target": self.target, "kind": self.kind}


@dataclass
class RelationshipsSection:
    """Organization-wide relationship structures."""

    dependencies: List[DependencyLink] = field(default_factory=list)
    topic_clusters: Dict[str, List[str]] = field(default_factory=dict)
    contributor_overlap: List[ContributorOverlap] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "dependencies": [link.to_dict() for link in self.dependencies],
            "topic_clusters": {
                topic: list(names) for topic, names in self.topic_clusters.items()
            },
            "contributor_overlap": [
                entry.to_dict() for entry in self.contributor_overlap
            ],
        }


@dataclass
class OrganizationSummary:
    """
    Complete organization-level summary.

    Holds the aggregates, the annotated repository records and the
    relationship structures derived from one record batch.
    """

    organization: str
    scan_date: Optional[str] = None
    total_repositories: int = 0
    public_repositories: int = 0
    private_repositories: int = 0
    languages: Dict[str, int] = field(default_factory=dict)
    topics: Dict[str, int] = field(default_factory=dict)
    total_stars: int = 0
    total_forks: int = 0
    repositories: List[RepositoryRecord] = field(default_factory=list)
    relationships: RelationshipsSection = field(default_factory=RelationshipsSection)
    relationship_statistics: Dict[str, Any] = field(default_factory=dict)

    def get_repository(self, name: str) -> Optional[RepositoryRecord]:
        """Get an annotated record by name."""
        for record in self.repositories:
            if record.name == name:
                return record
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to dictionary."""
        return {
            "organization": self.organization,
            "scan_date": self.scan_date,
            "total_repositories": self.total_repositories,
            "public_repositories": self.public_repositories,
            "private_repositories": self.private_repositories,
            "languages": dict(self.languages),
            "topics": dict(self.topics),
            "total_stars": self.total_stars,
            "total_forks": self.total_forks,
            "repositories": [record.to_dict() for record in self.repositories],
            "relationships": self.relationships.to_dict(),
            "relationship_statistics": self.relationship_statistics,
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize the summary to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
