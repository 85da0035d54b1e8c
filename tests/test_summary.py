"""
Integration tests for summary assembly.
"""

import json
import unittest

from orgscan.core.config import PipelineConfig
from orgscan.core.exceptions import DuplicateRepositoryError, InputContractViolation
from orgscan.records.edges import RelationshipEdge, RelationshipKind
from orgscan.records.repository import Contributor, RepositoryRecord
from orgscan.summary.assembler import (
    SummaryAssembler,
    attach_relationships,
    dependency_links,
    summarize_organization,
)
from orgscan.summary.summary import DependencyLink, OrganizationSummary

SCAN_DATE = "2025-03-01T12:00:00+00:00"


def _record(name, topics=(), logins=(), **kwargs):
    return RepositoryRecord(
        name=name,
        topics=tuple(topics),
        contributors=tuple(Contributor(login) for login in logins),
        **kwargs,
    )


def _sample_batch():
    return [
        _record("R1", topics=["api", "typescript", "test"],
                languages={"TypeScript": 3000, "Shell": 100}, stars=10, forks=2),
        _record("R2", topics=["api", "javascript"],
                languages={"JavaScript": 2000}, stars=5, forks=None, is_private=True),
        _record("R3", topics=["python", "api"],
                languages={"Python": 3000}, stars=None, forks=1),
    ]


class TestSummaryAssembler(unittest.TestCase):
    """Tests for the end-to-end summary engine."""

    def setUp(self):
        self.assembler = SummaryAssembler(PipelineConfig())

    def test_sample_batch(self):
        """Test the summary of a three-repository batch."""
        summary = self.assembler.assemble(_sample_batch(), "acme", scan_date=SCAN_DATE)

        self.assertIsInstance(summary, OrganizationSummary)
        self.assertEqual(summary.organization, "acme")
        self.assertEqual(summary.scan_date, SCAN_DATE)
        self.assertEqual(summary.total_repositories, 3)
        self.assertEqual(summary.public_repositories, 2)
        self.assertEqual(summary.private_repositories, 1)
        self.assertEqual(summary.total_stars, 15)
        self.assertEqual(summary.total_forks, 3)
        self.assertEqual(summary.topics["api"], 3)
        self.assertEqual(
            list(summary.languages),
            ["TypeScript", "Python", "JavaScript", "Shell"],
        )
        self.assertEqual(summary.relationships.topic_clusters, {"api": ["R1", "R2", "R3"]})
        self.assertEqual(summary.relationships.dependencies, [])
        self.assertEqual(summary.relationships.contributor_overlap, [])

    def test_edges_attached_to_both_endpoints(self):
        """Test that each record carries every edge naming it."""
        summary = self.assembler.assemble(_sample_batch(), "acme")

        r1 = summary.get_repository("R1")
        r3 = summary.get_repository("R3")

        self.assertEqual(
            [(e.source_name, e.target_name) for e in r1.relationships],
            [("R1", "R2"), ("R1", "R3")],
        )
        self.assertEqual(
            [(e.source_name, e.target_name) for e in r3.relationships],
            [("R1", "R3"), ("R2", "R3")],
        )
        self.assertAlmostEqual(r3.relationships[1].strength, 0.5)
        self.assertIsNone(summary.get_repository("missing"))

    def test_input_records_untouched(self):
        """Test that assembly leaves the caller's records unchanged."""
        records = _sample_batch()

        summary = self.assembler.assemble(records, "acme")

        self.assertTrue(all(record.relationships == () for record in records))
        self.assertIsNot(summary.repositories[0], records[0])
        self.assertEqual(summary.repositories[0].name, records[0].name)

    def test_dependency_projection(self):
        """Test the simplified dependency list."""
        records = [
            RepositoryRecord(name="R1", declared_dependencies={"org-widgets": "^1.0.0"}),
            RepositoryRecord(name="org-widgets"),
        ]

        summary = self.assembler.assemble(records, "acme")
        reversed_summary = self.assembler.assemble(list(reversed(records)), "acme")

        expected = [DependencyLink("R1", "org-widgets", "dependency")]
        self.assertEqual(summary.relationships.dependencies, expected)
        self.assertEqual(reversed_summary.relationships.dependencies, expected)

        widgets = summary.get_repository("org-widgets")
        self.assertEqual(len(widgets.relationships), 1)
        self.assertEqual(widgets.relationships[0].details["version"], "^1.0.0")

    def test_contributor_overlap(self):
        """Test the contributor index and overlap edges."""
        records = [
            _record("R1", logins=["alice", "carol"]),
            _record("R2", logins=["bob"]),
            _record("R3", logins=["alice", "carol", "bob"]),
        ]

        summary = self.assembler.assemble(records, "acme")

        index = [entry.to_dict() for entry in summary.relationships.contributor_overlap]
        self.assertEqual(index[0], {"contributor": "alice", "repositories": ["R1", "R3"]})
        self.assertEqual(len(index), 3)

        overlap = [
            e for e in summary.get_repository("R3").relationships
            if e.kind is RelationshipKind.CONTRIBUTOR_OVERLAP
        ]
        self.assertEqual(len(overlap), 2)

    def test_duplicate_names_rejected(self):
        """Test that a batch with duplicate names is rejected."""
        records = [_record("api"), _record("web"), _record("api")]

        with self.assertRaises(DuplicateRepositoryError) as ctx:
            self.assembler.assemble(records, "acme")

        self.assertEqual(ctx.exception.details["name"], "api")

    def test_negative_byte_count_rejected(self):
        """Test that malformed language data is rejected."""
        records = [_record("api", languages={"Python": -10})]

        with self.assertRaises(InputContractViolation):
            self.assembler.assemble(records, "acme")

    def test_malformed_byte_count_rejected(self):
        """Test that a string byte count is a contract violation."""
        records = [_record("api", languages={"Python": "12"})]

        with self.assertRaises(InputContractViolation) as ctx:
            self.assembler.assemble(records, "acme")

        self.assertEqual(ctx.exception.stage, "Validation")

    def test_empty_batch(self):
        """Test the summary of an empty batch."""
        summary = self.assembler.assemble([], "acme")

        self.assertEqual(summary.total_repositories, 0)
        self.assertEqual(summary.languages, {})
        self.assertEqual(summary.topics, {})
        self.assertEqual(summary.repositories, [])
        self.assertEqual(summary.relationship_statistics["edge_count"], 0)

    def test_deterministic_output(self):
        """Test that identical batches give identical summaries."""
        first = self.assembler.assemble(_sample_batch(), "acme", scan_date=SCAN_DATE)
        second = SummaryAssembler(PipelineConfig()).assemble(
            _sample_batch(), "acme", scan_date=SCAN_DATE
        )

        self.assertEqual(first.to_json(), second.to_json())

    def test_summary_is_json_serializable(self):
        """Test that the summary converts to plain JSON."""
        summary = self.assembler.assemble(_sample_batch(), "acme", scan_date=SCAN_DATE)

        data = json.loads(summary.to_json())

        self.assertEqual(data["organization"], "acme")
        self.assertEqual(data["scan_date"], SCAN_DATE)
        self.assertEqual(len(data["repositories"]), 3)
        self.assertEqual(data["repositories"][0]["relationships"][0]["kind"], "topic-similarity")
        self.assertEqual(data["relationships"]["topic_clusters"]["api"], ["R1", "R2", "R3"])
        self.assertEqual(data["relationship_statistics"]["edges_by_kind"]["topic-similarity"], 3)

    def test_language_limit_config(self):
        """Test that the language ranking honors configuration."""
        config = PipelineConfig()
        config.aggregation.top_languages = 2

        summary = summarize_organization(_sample_batch(), "acme", config=config)

        self.assertEqual(list(summary.languages), ["TypeScript", "Python"])


class TestAssemblyHelpers(unittest.TestCase):
    """Tests for edge attachment and dependency projection."""

    def test_attach_relationships(self):
        """Test that edges are attached in edge-list order."""
        records = [_record("a"), _record("b"), _record("c")]
        edges = [
            RelationshipEdge(RelationshipKind.TOPIC_SIMILARITY, "a", "b", 0.5),
            RelationshipEdge(RelationshipKind.DEPENDENCY, "c", "a", 1.0),
        ]

        annotated = attach_relationships(records, edges)

        self.assertEqual(annotated[0].relationships, tuple(edges))
        self.assertEqual(annotated[1].relationships, (edges[0],))
        self.assertEqual(annotated[2].relationships, (edges[1],))
        self.assertEqual(records[0].relationships, ())

    def test_dependency_links(self):
        """Test that only dependency edges are projected."""
        edges = [
            RelationshipEdge(RelationshipKind.TOPIC_SIMILARITY, "a", "b", 0.5),
            RelationshipEdge(RelationshipKind.DEPENDENCY, "c", "a", 1.0),
        ]

        links = dependency_links(edges)

        self.assertEqual([link.to_dict() for link in links], [
            {"source": "c", "target": "a", "kind": "dependency"},
        ])


if __name__ == "__main__":
    unittest.main()
