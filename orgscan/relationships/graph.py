"""
Relationship graph over the repositories of one organization.

Wraps a NetworkX multi-digraph keyed by repository name. Several edges
may join the same pair (one per kind, and one per matching declared
dependency), so edge insertion order is tracked separately.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set

import networkx as nx
import numpy as np

from orgscan.records.edges import RelationshipEdge, RelationshipKind

logger = logging.getLogger(__name__)


class RelationshipGraph:
    """
    Graph of inferred relationships between repositories.

    Nodes are repository names; edges are RelationshipEdge values.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._graph = nx.MultiDiGraph()
        self._edges: List[RelationshipEdge] = []
        self._kind_index: Dict[RelationshipKind, List[RelationshipEdge]] = {}

    @classmethod
    def from_edges(
        cls,
        repository_names: Iterable[str],
        edges: Iterable[RelationshipEdge],
        name: str = "",
    ) -> "RelationshipGraph":
        """Build a graph holding every repository and every edge."""
        graph = cls(name=name)
        for repository_name in repository_names:
            graph.add_repository(repository_name)
        for edge in edges:
            graph.add_edge(edge)
        return graph

    @property
    def node_count(self) -> int:
        """Number of repositories in the graph."""
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        """Number of edges in the graph."""
        return len(self._edges)

    def add_repository(self, name: str, **attributes: Any) -> None:
        """Add a repository node."""
        self._graph.add_node(name, **attributes)

    def add_edge(self, edge: RelationshipEdge) -> None:
        """
        Add an edge between two known repositories.

        Edges whose endpoints are not in the graph are ignored.
        """
        if edge.source_name not in self._graph:
            logger.warning(f"Source repository not found: {edge.source_name}")
            return
        if edge.target_name not in self._graph:
            logger.warning(f"Target repository not found: {edge.target_name}")
            return

        self._graph.add_edge(
            edge.source_name,
            edge.target_name,
            kind=edge.kind.value,
            strength=edge.strength,
        )
        self._edges.append(edge)
        self._kind_index.setdefault(edge.kind, []).append(edge)

    def iter_edges(self) -> Iterator[RelationshipEdge]:
        """Iterate over all edges in insertion order."""
        yield from self._edges

    def edges_by_kind(self, kind: RelationshipKind) -> List[RelationshipEdge]:
        """Get all edges of a specific kind."""
        return list(self._kind_index.get(kind, []))

    def edges_for(self, name: str) -> List[RelationshipEdge]:
        """Get every edge that has the repository as an endpoint."""
        return [edge for edge in self._edges if edge.involves(name)]

    def neighbors(self, name: str) -> Set[str]:
        """Repositories related to the named one by any edge."""
        if name not in self._graph:
            return set()
        return set(self._graph.successors(name)) | set(self._graph.predecessors(name))

    def dependencies_of(self, name: str) -> List[str]:
        """Repositories the named repository depends on."""
        targets = []
        for edge in self._kind_index.get(RelationshipKind.DEPENDENCY, []):
            if edge.source_name == name and edge.target_name not in targets:
                targets.append(edge.target_name)
        return targets

    def dependents_of(self, name: str) -> List[str]:
        """Repositories depending on the named repository."""
        sources = []
        for edge in self._kind_index.get(RelationshipKind.DEPENDENCY, []):
            if edge.target_name == name and edge.source_name not in sources:
                sources.append(edge.source_name)
        return sources

    def get_dependency_graph(self) -> nx.DiGraph:
        """Simple directed graph of dependency edges only."""
        dependency_graph = nx.DiGraph()
        dependency_graph.add_nodes_from(self._graph.nodes())
        for edge in self._kind_index.get(RelationshipKind.DEPENDENCY, []):
            dependency_graph.add_edge(edge.source_name, edge.target_name)
        return dependency_graph

    def dependency_cycles(self) -> List[List[str]]:
        """
        Find circular dependencies between repositories.

        Each cycle starts at its alphabetically smallest member and the
        list of cycles is sorted.
        """
        cycles = []
        for cycle in nx.simple_cycles(self.get_dependency_graph()):
            start = cycle.index(min(cycle))
            cycles.append(cycle[start:] + cycle[:start])
        return sorted(cycles)

    def find_dependency_path(self, source: str, target: str) -> Optional[List[str]]:
        """Shortest chain of dependencies from source to target."""
        try:
            return nx.shortest_path(self.get_dependency_graph(), source, target)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return None

    def get_statistics(self) -> Dict[str, Any]:
        """Get graph statistics."""
        edges_by_kind = {}
        mean_strength_by_kind = {}
        for kind in RelationshipKind:
            strengths = [edge.strength for edge in self._kind_index.get(kind, [])]
            edges_by_kind[kind.value] = len(strengths)
            mean_strength_by_kind[kind.value] = (
                float(np.mean(strengths)) if strengths else 0.0
            )

        if self.node_count == 0:
            components = 0
        else:
            components = nx.number_weakly_connected_components(self._graph)

        return {
            "repository_count": self.node_count,
            "edge_count": self.edge_count,
            "edges_by_kind": edges_by_kind,
            "mean_strength_by_kind": mean_strength_by_kind,
            "connected_components": components,
            "isolated_repositories": sorted(nx.isolates(self._graph)),
            "dependency_cycles": self.dependency_cycles(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert graph to dictionary for serialization."""
        return {
            "name": self.name,
            "repositories": list(self._graph.nodes()),
            "edges": [edge.to_dict() for edge in self._edges],
            "statistics": self.get_statistics(),
        }
