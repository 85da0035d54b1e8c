"""
Summary assembly for an organization batch.

Wires the validation, aggregation, relationship and grouping stages
into one pipeline and merges their outputs into an OrganizationSummary.
This is the only place stage outputs are combined.
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from orgscan.aggregation.aggregator import AggregationStage
from orgscan.core.config import Config, PipelineConfig
from orgscan.core.pipeline import Pipeline, PipelineStage, PipelineState
from orgscan.grouping.clusters import GroupingStage
from orgscan.records.edges import RelationshipEdge, RelationshipKind
from orgscan.records.repository import RepositoryRecord
from orgscan.records.validation import ValidationStage
from orgscan.relationships.detector import RelationshipStage
from orgscan.summary.summary import (
    DependencyLink,
    OrganizationSummary,
    RelationshipsSection,
)

logger = logging.getLogger(__name__)


def attach_relationships(
    records: Sequence[RepositoryRecord],
    edges: Sequence[RelationshipEdge],
) -> List[RepositoryRecord]:
    """
    Produce annotated copies of the records.

    Each copy carries, in edge-list order, every edge naming it as
    source or target. The input records are left untouched.
    """
    by_name: Dict[str, List[RelationshipEdge]] = {
        record.name: [] for record in records
    }
    for edge in edges:
        for endpoint in (edge.source_name, edge.target_name):
            if endpoint in by_name:
                by_name[endpoint].append(edge)

    return [
        dataclasses.replace(record, relationships=tuple(by_name[record.name]))
        for record in records
    ]


def dependency_links(edges: Sequence[RelationshipEdge]) -> List[DependencyLink]:
    """Project dependency edges onto their simplified view."""
    return [
        DependencyLink(
            source=edge.source_name,
            target=edge.target_name,
            kind=edge.kind.value,
        )
        for edge in edges
        if edge.kind is RelationshipKind.DEPENDENCY
    ]


class AssemblyStage(PipelineStage):
    """Pipeline stage merging all stage outputs into the final summary."""

    @property
    def name(self) -> str:
        return "assembly"

    @property
    def dependencies(self) -> List[str]:
        return ["aggregation", "relationships", "grouping"]

    def execute(self, state: PipelineState) -> Tuple[OrganizationSummary, Dict[str, Any]]:
        aggregates = state.data["aggregation"]
        relationships = state.data["relationships"]
        grouping = state.data["grouping"]

        edges = relationships["edges"]
        annotated = attach_relationships(state.records, edges)

        summary = OrganizationSummary(
            organization=state.organization,
            scan_date=state.scan_date,
            total_repositories=len(state.records),
            public_repositories=aggregates["public_repositories"],
            private_repositories=aggregates["private_repositories"],
            languages=aggregates["languages"],
            topics=aggregates["topics"],
            total_stars=aggregates["total_stars"],
            total_forks=aggregates["total_forks"],
            repositories=annotated,
            relationships=RelationshipsSection(
                dependencies=dependency_links(edges),
                topic_clusters=grouping["topic_clusters"],
                contributor_overlap=grouping["contributor_overlap"],
            ),
            relationship_statistics=relationships["graph"].get_statistics(),
        )

        metrics = {
            "annotated_repositories": sum(1 for r in annotated if r.relationships),
            "dependency_links": len(summary.relationships.dependencies),
        }

        return summary, metrics


class SummaryAssembler:
    """
    Main entry point for summarizing an organization.

    Runs the engine pipeline once per batch. A malformed batch is
    rejected before any computation with an InputContractViolation.
    """

    def __init__(self, config: PipelineConfig = None):
        self.config = config or Config.get()
        self.pipeline = self._create_pipeline()

    def _create_pipeline(self) -> Pipeline:
        """Create and configure the engine pipeline."""
        pipeline = Pipeline(self.config)

        pipeline.register_stage(ValidationStage(self.config))
        pipeline.register_stage(AggregationStage(self.config))
        pipeline.register_stage(RelationshipStage(self.config))
        pipeline.register_stage(GroupingStage(self.config))
        pipeline.register_stage(AssemblyStage(self.config))

        pipeline.set_execution_order([
            "validation",
            "aggregation",
            "relationships",
            "grouping",
            "assembly",
        ])

        return pipeline

    def assemble(
        self,
        records: Sequence[RepositoryRecord],
        organization: str,
        scan_date: Optional[str] = None,
    ) -> OrganizationSummary:
        """
        Build the organization summary for one batch.

        Args:
            records: Closed batch of repository records.
            organization: Organization identifier.
            scan_date: Optional timestamp copied into the summary as is.

        Returns:
            The assembled OrganizationSummary.

        Raises:
            InputContractViolation: If the batch is malformed.
        """
        logger.info(f"Analyzing {len(records)} repositories for {organization}")
        state = self.pipeline.run(records, organization, scan_date=scan_date)
        return state.data["assembly"]


def summarize_organization(
    records: Sequence[RepositoryRecord],
    organization: str,
    config: PipelineConfig = None,
    scan_date: Optional[str] = None,
) -> OrganizationSummary:
    """
    Convenience function to summarize one organization batch.

    Args:
        records: Closed batch of repository records.
        organization: Organization identifier.
        config: Optional configuration.
        scan_date: Optional timestamp copied into the summary.

    Returns:
        OrganizationSummary.
    """
    assembler = SummaryAssembler(config)
    return assembler.assemble(records, organization, scan_date=scan_date)
