"""Domain-keyed causal graph registry.

Graphs group nodes and links under a domain label for organisation and
reporting. They are never consulted by traversal.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from causelink.causal.models import CausalGraph, CausalLink

logger = logging.getLogger(__name__)


class CausalGraphRegistry:
    """Holds one CausalGraph per domain."""

    def __init__(self, default_confidence: float = 0.5):
        self._default_confidence = default_confidence
        self._graphs: Dict[str, CausalGraph] = {}

    def __len__(self) -> int:
        return len(self._graphs)

    def create_graph(self, domain: str) -> CausalGraph:
        """Create a new, empty graph for ``domain``, replacing any existing one."""
        graph = CausalGraph(domain=domain, confidence=self._default_confidence)
        self._graphs[domain] = graph
        logger.debug(f"Created causal graph {graph.id} for domain '{domain}'")
        return graph

    def get_graph(self, domain: str) -> CausalGraph:
        """Get the graph for ``domain``, creating it on first use."""
        graph = self._graphs.get(domain)
        if graph is None:
            graph = self.create_graph(domain)
        return graph

    def find_graph(self, domain: str) -> Optional[CausalGraph]:
        return self._graphs.get(domain)

    def add_node(self, domain: str, concept_id: str, payload: Any = None) -> None:
        graph = self.get_graph(domain)
        graph.nodes[concept_id] = payload
        graph.touch()

    def add_edge(self, domain: str, link: CausalLink) -> None:
        """Record ``link`` and its endpoints in the domain graph."""
        graph = self.get_graph(domain)
        graph.edges[link.id] = link
        graph.nodes.setdefault(link.cause, None)
        graph.nodes.setdefault(link.effect, None)
        graph.touch()

    def remove_link(self, link_id: str) -> None:
        """Drop ``link_id`` from every graph that references it."""
        for graph in self._graphs.values():
            if graph.edges.pop(link_id, None) is not None:
                graph.touch()

    def graphs(self) -> List[CausalGraph]:
        return list(self._graphs.values())

    def clear(self) -> None:
        self._graphs.clear()
