"""
Relationship edge data structures.

Edges reference repositories by name only, never by object, so a
record carrying its edges stays an acyclic value.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class RelationshipKind(Enum):
    """Kinds of relationship a detector can infer."""

    TOPIC_SIMILARITY = "topic-similarity"
    CONTRIBUTOR_OVERLAP = "contributor-overlap"
    DEPENDENCY = "dependency"

    @property
    def is_directed(self) -> bool:
        """Only dependency edges carry a meaningful direction."""
        return self is RelationshipKind.DEPENDENCY


@dataclass(frozen=True)
class RelationshipEdge:
    """
    Scored link between two repositories of the same batch.

    ``details`` holds kind-specific evidence (shared topics, shared
    logins, dependency version) and is informational only.
    """

    kind: RelationshipKind
    source_name: str
    target_name: str
    strength: float
    details: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not self.source_name or not self.target_name:
            raise ValueError("Relationship endpoints must be non-empty names")
        if self.source_name == self.target_name:
            raise ValueError(f"Self-referential relationship: {self.source_name}")
        if not 0.0 < self.strength <= 1.0:
            raise ValueError(f"Relationship strength out of range: {self.strength}")

    def involves(self, name: str) -> bool:
        """Whether the named repository is either endpoint."""
        return name == self.source_name or name == self.target_name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "source": self.source_name,
            "target": self.target_name,
            "strength": self.strength,
            "details": self.details,
        }
