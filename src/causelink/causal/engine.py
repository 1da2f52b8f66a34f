"""Causal Reasoning Engine.

Implements the CausalReasoning facade consumed by planning, orchestration
and learning collaborators:
- Link mutation (create, evidence, Bayesian update, delete)
- Forward prediction and backward explanation
- Causal path enumeration
- Intervention and counterfactual "what-if" queries
- Causal discovery from observation batches
- Monitoring snapshot via get_stats()

The engine is an in-process, synchronous component. It owns no concept
data; node ids are opaque strings.
"""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any, List, Mapping, Optional, Sequence, Union

from causelink.causal.belief import BeliefUpdater
from causelink.causal.config import CausalReasoningConfig
from causelink.causal.discovery import CausalDiscovery
from causelink.causal.exceptions import CausalReasoningError, InvalidCausalQueryError
from causelink.causal.graphs import CausalGraphRegistry
from causelink.causal.intervention import InterventionEngine
from causelink.causal.models import CausalGraph, CausalLink, Evidence, Observation
from causelink.causal.results import (
    CausalInferenceResult,
    CausalPathResult,
    CausalStats,
    CounterfactualResult,
    GraphStats,
)
from causelink.causal.store import CausalLinkStore
from causelink.causal.traversal import CausalTraversal
from causelink.causal.types import CausalQuery, CausalQueryType, TraversalMode

logger = logging.getLogger(__name__)

QueryResult = Union[
    List[CausalInferenceResult],
    List[CausalPathResult],
    Optional[CausalInferenceResult],
    CounterfactualResult,
]


class CausalReasoning:
    """Causal graph reasoning engine.

    Example:
        >>> engine = CausalReasoning()
        >>> engine.create_link("smoking", "tar", strength=0.9, mechanism="inhalation")
        >>> engine.create_link("tar", "cancer", strength=0.7)
        >>> results = engine.predict_effect("smoking", max_steps=2)
        >>> results[-1].explanation
        'smoking causes tar (via inhalation), which causes cancer'

        >>> outcome = engine.counterfactual({"smoking": True}, {"smoking": False}, "cancer")
        >>> outcome.counterfactual_outcome is None
        True

    Attributes:
        config: Engine configuration
    """

    def __init__(self, config: Optional[CausalReasoningConfig] = None):
        """Initialize the causal reasoning engine.

        Args:
            config: Engine configuration (defaults apply when omitted)
        """
        self._config = config or CausalReasoningConfig()
        self._store = CausalLinkStore(self._config)
        self._graphs = CausalGraphRegistry(self._config.default_graph_confidence)
        self._traversal = CausalTraversal(self._store, self._config)
        self._interventions = InterventionEngine(self._store, self._traversal)
        self._beliefs = BeliefUpdater(self._store)
        self._discovery = CausalDiscovery(self._store, self._graphs, self._config)

        logger.info(
            f"Initialized CausalReasoning with "
            f"max_steps={self._config.default_max_steps}"
        )

    @property
    def config(self) -> CausalReasoningConfig:
        """Get the configuration."""
        return self._config

    @property
    def store(self) -> CausalLinkStore:
        return self._store

    # -------------------------------------------------------------------------
    # Graph Management
    # -------------------------------------------------------------------------

    def create_graph(self, domain: str) -> CausalGraph:
        return self._graphs.create_graph(domain)

    def get_graph(self, domain: str) -> CausalGraph:
        return self._graphs.get_graph(domain)

    def add_node(self, domain: str, concept_id: str, payload: Any = None) -> None:
        self._graphs.add_node(domain, concept_id, payload)

    def add_edge(self, domain: str, link: CausalLink) -> None:
        """Record ``link`` in the domain graph and make sure it is stored."""
        self._graphs.add_edge(domain, link)
        self._store.store_link(link)

    # -------------------------------------------------------------------------
    # Link Operations
    # -------------------------------------------------------------------------

    def create_link(
        self,
        cause: str,
        effect: str,
        strength: float = 0.5,
        necessity: float = 0.5,
        sufficiency: float = 0.5,
        mechanism: Optional[str] = None,
        time_delay: Union[timedelta, float] = 0,
        conditions: Optional[Sequence[str]] = None,
    ) -> CausalLink:
        return self._store.create_link(
            cause,
            effect,
            strength=strength,
            necessity=necessity,
            sufficiency=sufficiency,
            mechanism=mechanism,
            time_delay=time_delay,
            conditions=conditions,
        )

    def get_link(self, link_id: str) -> Optional[CausalLink]:
        return self._store.get_link(link_id)

    def get_effects(self, cause: str) -> List[CausalLink]:
        return self._store.get_effects(cause)

    def get_causes(self, effect: str) -> List[CausalLink]:
        return self._store.get_causes(effect)

    def find_link(self, cause: str, effect: str) -> Optional[CausalLink]:
        return self._store.find_link(cause, effect)

    def add_evidence(self, link_id: str, evidence: Evidence) -> Optional[CausalLink]:
        return self._store.add_evidence(link_id, evidence)

    def update_model(self, link_id: str, evidence: Evidence) -> Optional[CausalLink]:
        """Append evidence and apply a Bayesian update to the link's strength."""
        return self._beliefs.update_model(link_id, evidence)

    def delete_link(self, link_id: str) -> bool:
        """Remove a link from both indices and every domain graph."""
        deleted = self._store.delete_link(link_id)
        if deleted:
            self._graphs.remove_link(link_id)
        return deleted

    # -------------------------------------------------------------------------
    # Causal Inference
    # -------------------------------------------------------------------------

    def predict_effect(
        self,
        cause: str,
        max_steps: Optional[int] = None,
        mode: TraversalMode = TraversalMode.SINGLE_PASS,
        min_confidence: float = 0.0,
    ) -> List[CausalInferenceResult]:
        """Predict downstream effects of ``cause`` (confidence = product of strength)."""
        return self._traversal.predict_effect(
            cause, max_steps=max_steps, mode=mode, min_confidence=min_confidence
        )

    def explain_effect(
        self,
        effect: str,
        max_steps: Optional[int] = None,
        mode: TraversalMode = TraversalMode.SINGLE_PASS,
        min_confidence: float = 0.0,
    ) -> List[CausalInferenceResult]:
        """Explain ``effect`` via its causes (confidence = product of necessity)."""
        return self._traversal.explain_effect(
            effect, max_steps=max_steps, mode=mode, min_confidence=min_confidence
        )

    def find_causal_paths(
        self,
        start: str,
        end: str,
        max_length: Optional[int] = None,
    ) -> List[CausalPathResult]:
        """Enumerate every simple causal path from ``start`` to ``end``."""
        return self._traversal.find_causal_paths(start, end, max_length=max_length)

    # -------------------------------------------------------------------------
    # Intervention & Counterfactuals
    # -------------------------------------------------------------------------

    def predict_intervention(
        self,
        intervention: Mapping[str, Any],
        target_effect: str,
        max_steps: Optional[int] = None,
    ) -> Optional[CausalInferenceResult]:
        """Predict ``target_effect`` when the given variables are forced."""
        return self._interventions.predict_intervention(
            intervention, target_effect, max_steps=max_steps
        )

    def counterfactual(
        self,
        actual: Mapping[str, Any],
        counterfactual: Mapping[str, Any],
        target_effect: str,
        max_steps: Optional[int] = None,
    ) -> CounterfactualResult:
        """Compare ``target_effect`` under actual and counterfactual assignments."""
        return self._interventions.counterfactual(
            actual, counterfactual, target_effect, max_steps=max_steps
        )

    # -------------------------------------------------------------------------
    # Learning & Discovery
    # -------------------------------------------------------------------------

    def discover_causality(
        self,
        observations: Sequence[Observation],
        domain: str,
    ) -> List[CausalLink]:
        """Propose and store links from co-occurrence and temporal order."""
        return self._discovery.discover_causality(observations, domain)

    # -------------------------------------------------------------------------
    # Unified Query Interface
    # -------------------------------------------------------------------------

    def query(self, query: CausalQuery) -> QueryResult:
        """Execute a causal query based on query type.

        Args:
            query: CausalQuery specification

        Returns:
            Result type depends on query_type

        Raises:
            InvalidCausalQueryError: If the query type is not supported
            CausalReasoningError: If query execution fails
        """
        start_time = time.perf_counter()
        query_type = getattr(query.query_type, "value", str(query.query_type))
        logger.debug(f"Executing causal query: {query_type}")

        try:
            result = self._dispatch_query(query)
        except CausalReasoningError:
            raise
        except Exception as e:
            logger.error(f"Causal query failed: {e}")
            raise CausalReasoningError(
                f"Query execution failed: {e}",
                query_type=query_type,
                cause=e,
            ) from e

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Causal query completed in {elapsed_ms:.1f}ms")
        return result

    def _dispatch_query(self, query: CausalQuery) -> QueryResult:
        """Dispatch query to appropriate handler."""
        qt = query.query_type

        if qt == CausalQueryType.PREDICT_EFFECT:
            return self.predict_effect(
                query.node_id,
                max_steps=query.max_steps,
                mode=query.mode,
                min_confidence=query.min_confidence,
            )

        elif qt == CausalQueryType.EXPLAIN_EFFECT:
            return self.explain_effect(
                query.node_id,
                max_steps=query.max_steps,
                mode=query.mode,
                min_confidence=query.min_confidence,
            )

        elif qt == CausalQueryType.CAUSAL_PATHS:
            return self.find_causal_paths(
                query.start_node_id,
                query.end_node_id,
                max_length=query.max_steps,
            )

        elif qt == CausalQueryType.INTERVENTION:
            return self.predict_intervention(
                query.intervention,
                query.target_effect,
                max_steps=query.max_steps,
            )

        elif qt == CausalQueryType.COUNTERFACTUAL:
            return self.counterfactual(
                query.intervention,
                query.counterfactual,
                query.target_effect,
                max_steps=query.max_steps,
            )

        else:
            raise InvalidCausalQueryError(
                f"Unsupported query type: {qt}",
                query_type=getattr(qt, "value", str(qt)),
            )

    # -------------------------------------------------------------------------
    # Statistics & Utilities
    # -------------------------------------------------------------------------

    def get_stats(self) -> CausalStats:
        """Read-only snapshot of link and graph counts."""
        links = list(self._store.links())
        return CausalStats(
            graph_count=len(self._graphs),
            link_count=len(links),
            node_count=len(self._store.node_ids()),
            evidence_count=sum(len(link.evidence) for link in links),
            graphs={
                graph.domain: GraphStats(
                    node_count=len(graph.nodes),
                    edge_count=len(graph.edges),
                    confidence=graph.confidence,
                )
                for graph in self._graphs.graphs()
            },
        )

    def clear(self) -> None:
        """Forget all causal knowledge."""
        self._graphs.clear()
        self._store.clear()
        logger.info("Cleared all causal links and graphs")
