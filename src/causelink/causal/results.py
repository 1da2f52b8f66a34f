"""Causal Reasoning Result Models.

- CausalInferenceResult: One prediction or explanation produced by traversal
- CausalPathResult: One enumerated path between two nodes
- CounterfactualResult: Actual vs. counterfactual intervention outcomes
- GraphStats / CausalStats: Read-only monitoring snapshot
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from causelink.causal.models import CausalLink


class CausalInferenceResult(BaseModel):
    """Single result of a forward prediction or backward explanation.

    ``node_id`` is the predicted effect (forward) or the explaining cause
    (backward). ``causal_path`` is always in causal order, cause first.

    Example:
        >>> results = engine.predict_effect("rain", max_steps=2)
        >>> print(results[0].explanation)
        rain causes wet_grass
    """

    node_id: str = Field(..., description="Predicted effect or explaining cause")
    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Product of link weights along the path",
    )
    causal_path: List[CausalLink] = Field(
        ...,
        min_length=1,
        description="Links in causal order [cause, ..., effect]",
    )
    explanation: str = Field(..., description="Natural-language path rendering")

    @computed_field
    @property
    def distance(self) -> int:
        """Number of causal hops from the origin."""
        return len(self.causal_path)

    @computed_field
    @property
    def link_ids(self) -> List[str]:
        """Ids of the links along the path."""
        return [link.id for link in self.causal_path]


class CausalPathResult(BaseModel):
    """One causal path found between two nodes."""

    start_node_id: str
    end_node_id: str
    links: List[CausalLink] = Field(..., min_length=1)
    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Product of link strengths along the path",
    )

    @computed_field
    @property
    def path_length(self) -> int:
        """Number of causal hops in this path."""
        return len(self.links)

    @computed_field
    @property
    def node_ids(self) -> List[str]:
        """Node ids in causal order."""
        return [self.links[0].cause] + [link.effect for link in self.links]


class CounterfactualResult(BaseModel):
    """Comparison of the actual and counterfactual intervention outcomes."""

    target_effect: str
    actual_outcome: Optional[CausalInferenceResult] = None
    counterfactual_outcome: Optional[CausalInferenceResult] = None
    difference: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Absolute confidence delta when both outcomes exist, else 0",
    )

    @computed_field
    @property
    def outcome_changed(self) -> bool:
        """True if the target is reachable in exactly one of the scenarios."""
        return (self.actual_outcome is None) != (self.counterfactual_outcome is None)


class GraphStats(BaseModel):
    """Per-domain graph statistics."""

    node_count: int = Field(default=0, ge=0)
    edge_count: int = Field(default=0, ge=0)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class CausalStats(BaseModel):
    """Read-only snapshot of the engine for monitoring."""

    graph_count: int = Field(default=0, ge=0)
    link_count: int = Field(default=0, ge=0)
    node_count: int = Field(
        default=0,
        ge=0,
        description="Distinct concept ids referenced by stored links",
    )
    evidence_count: int = Field(default=0, ge=0)
    graphs: Dict[str, GraphStats] = Field(default_factory=dict)
