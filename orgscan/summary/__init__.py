"""
Organization summary assembly.

Provides the summary value and the assembler that produces it from a
record batch.
"""

from orgscan.summary.summary import (
    DependencyLink,
    OrganizationSummary,
    RelationshipsSection,
)
from orgscan.summary.assembler import (
    AssemblyStage,
    SummaryAssembler,
    attach_relationships,
    dependency_links,
    summarize_organization,
)

__all__ = [
    "DependencyLink",
    "OrganizationSummary",
    "RelationshipsSection",
    "AssemblyStage",
    "SummaryAssembler",
    "attach_relationships",
    "dependency_links",
    "summarize_organization",
]
