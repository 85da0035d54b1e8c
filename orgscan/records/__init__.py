"""
Repository record model.

Provides the normalized input records, the relationship edges computed
over them, and the batch contract checks.
"""

from orgscan.records.edges import RelationshipEdge, RelationshipKind
from orgscan.records.repository import Contributor, RepositoryRecord
from orgscan.records.validation import (
    ValidationStage,
    validate_batch,
    find_duplicate_names,
)
from orgscan.records.loader import load_records, parse_records

__all__ = [
    "RelationshipEdge",
    "RelationshipKind",
    "Contributor",
    "RepositoryRecord",
    "ValidationStage",
    "validate_batch",
    "find_duplicate_names",
    "load_records",
    "parse_records",
]
