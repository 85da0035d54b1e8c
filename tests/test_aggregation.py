"""
Unit tests for aggregation and grouping components.
"""

import unittest

from orgscan.aggregation.aggregator import (
    aggregate_languages,
    aggregate_topics,
    count_visibility,
    total_forks,
    total_stars,
)
from orgscan.grouping.clusters import (
    ContributorOverlap,
    build_contributor_index,
    build_topic_clusters,
)
from orgscan.records.repository import Contributor, RepositoryRecord


def _record(name, topics=(), logins=(), **kwargs):
    return RepositoryRecord(
        name=name,
        topics=tuple(topics),
        contributors=tuple(Contributor(login) for login in logins),
        **kwargs,
    )


def _sample_batch():
    return [
        _record("R1", topics=["api", "typescript", "test"]),
        _record("R2", topics=["api", "javascript"]),
        _record("R3", topics=["python", "api"]),
    ]


class TestLanguageAggregation(unittest.TestCase):
    """Tests for language aggregation."""

    def test_sums_bytes(self):
        """Test that byte counts are summed per language."""
        records = [
            _record("a", languages={"Python": 100, "Shell": 5}),
            _record("b", languages={"Python": 50}),
        ]

        self.assertEqual(aggregate_languages(records), {"Python": 150, "Shell": 5})

    def test_sorted_with_stable_ties(self):
        """Test descending order with first-encountered tie break."""
        records = [
            _record("a", languages={"A": 10, "B": 30}),
            _record("b", languages={"C": 30, "A": 5}),
        ]

        self.assertEqual(list(aggregate_languages(records)), ["B", "C", "A"])

    def test_truncated_to_top_n(self):
        """Test that only the largest languages are kept."""
        languages = {f"L{i}": i + 1 for i in range(25)}
        records = [_record("a", languages=languages)]

        result = aggregate_languages(records)

        self.assertEqual(len(result), 20)
        self.assertEqual(next(iter(result)), "L24")
        self.assertNotIn("L0", result)
        self.assertEqual(len(aggregate_languages(records, top_n=3)), 3)

    def test_empty_languages(self):
        """Test that records without languages contribute nothing."""
        self.assertEqual(aggregate_languages([_record("a"), _record("b")]), {})
        self.assertEqual(aggregate_languages([]), {})


class TestTopicAggregation(unittest.TestCase):
    """Tests for topic aggregation."""

    def test_sample_batch(self):
        """Test topic counts for a three-repository batch."""
        result = aggregate_topics(_sample_batch())

        self.assertEqual(
            result,
            {"api": 3, "typescript": 1, "test": 1, "javascript": 1, "python": 1},
        )
        self.assertEqual(
            list(result),
            ["api", "typescript", "test", "javascript", "python"],
        )

    def test_duplicates_within_record(self):
        """Test that a topic listed twice by one record counts once."""
        records = [
            _record("a", topics=["api", "api", "web"]),
            _record("b", topics=["web"]),
        ]

        result = aggregate_topics(records)

        self.assertEqual(result, {"web": 2, "api": 1})
        self.assertEqual(list(result), ["web", "api"])

    def test_not_truncated(self):
        """Test that every topic is kept."""
        records = [_record("a", topics=[f"t{i}" for i in range(40)])]

        self.assertEqual(len(aggregate_topics(records)), 40)


class TestTotals(unittest.TestCase):
    """Tests for visibility counts and metric sums."""

    def test_visibility(self):
        """Test public/private partition."""
        records = [
            _record("a", is_private=True),
            _record("b"),
            _record("c"),
        ]

        self.assertEqual(count_visibility(records), (2, 1))
        self.assertEqual(count_visibility([]), (0, 0))

    def test_metric_sums(self):
        """Test that missing metrics count as zero."""
        records = [
            _record("a", stars=3, forks=1),
            _record("b", stars=None, forks=4),
            _record("c", stars=5, forks=None),
        ]

        self.assertEqual(total_stars(records), 8)
        self.assertEqual(total_forks(records), 5)

    def test_sum_is_order_independent(self):
        """Test that totals do not depend on batch order."""
        records = [_record(f"r{i}", stars=i * 7, forks=i) for i in range(10)]

        self.assertEqual(total_stars(records), total_stars(list(reversed(records))))
        self.assertEqual(total_forks(records), sum(range(10)))


class TestTopicClusters(unittest.TestCase):
    """Tests for topic cluster building."""

    def test_sample_batch(self):
        """Test clusters for a three-repository batch."""
        self.assertEqual(
            build_topic_clusters(_sample_batch()),
            {"api": ["R1", "R2", "R3"]},
        )

    def test_singletons_dropped(self):
        """Test that no cluster has fewer than two members."""
        records = [
            _record("a", topics=["web", "cli"]),
            _record("b", topics=["web"]),
            _record("c", topics=["data"]),
        ]

        clusters = build_topic_clusters(records)

        self.assertEqual(clusters, {"web": ["a", "b"]})
        for members in clusters.values():
            self.assertGreaterEqual(len(members), 2)

    def test_relisted_topic(self):
        """Test that a relisted topic does not repeat the repository."""
        records = [
            _record("a", topics=["web", "web"]),
            _record("b", topics=["web"]),
        ]

        self.assertEqual(build_topic_clusters(records), {"web": ["a", "b"]})

    def test_relisted_topic_alone(self):
        """Test that one repository listing a topic twice is not a cluster."""
        self.assertEqual(build_topic_clusters([_record("a", topics=["web", "web"])]), {})


class TestContributorIndex(unittest.TestCase):
    """Tests for contributor overlap indexing."""

    def test_shared_contributors(self):
        """Test that only multi-repository contributors are kept."""
        records = [
            _record("R1", logins=["alice", "carol"]),
            _record("R2", logins=["bob"]),
            _record("R3", logins=["alice", "carol", "bob"]),
        ]

        index = build_contributor_index(records)

        self.assertEqual(index, [
            ContributorOverlap("alice", ["R1", "R3"]),
            ContributorOverlap("carol", ["R1", "R3"]),
            ContributorOverlap("bob", ["R2", "R3"]),
        ])
        for entry in index:
            self.assertGreaterEqual(len(entry.repositories), 2)

    def test_contribution_counts_ignored(self):
        """Test that a single contribution is enough to be indexed."""
        records = [
            RepositoryRecord(name="a", contributors=(Contributor("dave", 1),)),
            RepositoryRecord(name="b", contributors=(Contributor("dave", 900),)),
        ]

        self.assertEqual(
            [entry.to_dict() for entry in build_contributor_index(records)],
            [{"contributor": "dave", "repositories": ["a", "b"]}],
        )

    def test_no_contributors(self):
        """Test batches without contributor data."""
        self.assertEqual(build_contributor_index(_sample_batch()), [])


if __name__ == "__main__":
    unittest.main()
