"""Causal Graph Reasoning Module.

Store of directed, weighted cause -> effect links plus algorithms to:
- Predict downstream effects of a cause
- Explain an effect by tracing back to its causes
- Enumerate all causal paths between two nodes
- Simulate interventions and compare counterfactual scenarios
- Revise link strength from evidence with a Bayesian rule
- Propose new links from co-occurrence observations

Example:
    >>> from causelink.causal import CausalReasoning, Evidence

    >>> engine = CausalReasoning()
    >>> link = engine.create_link("rain", "wet_grass", strength=0.9)

    >>> # What does rain lead to?
    >>> effects = engine.predict_effect("rain", max_steps=3)

    >>> # Would the grass be wet if it had not rained?
    >>> outcome = engine.counterfactual({"rain": True}, {"rain": False}, "wet_grass")
"""

from causelink.causal.config import CausalReasoningConfig
from causelink.causal.engine import CausalReasoning
from causelink.causal.exceptions import CausalReasoningError, InvalidCausalQueryError
from causelink.causal.models import (
    CausalGraph,
    CausalLink,
    Evidence,
    EvidenceType,
    Observation,
)
from causelink.causal.results import (
    CausalInferenceResult,
    CausalPathResult,
    CausalStats,
    CounterfactualResult,
    GraphStats,
)
from causelink.causal.types import (
    CausalQuery,
    CausalQueryType,
    ForcedValue,
    ForcedValueKind,
    TraversalDirection,
    TraversalMode,
)

__all__ = [
    # Engine
    "CausalReasoning",
    "CausalReasoningConfig",
    # Models
    "CausalGraph",
    "CausalLink",
    "Evidence",
    "EvidenceType",
    "Observation",
    # Types
    "CausalQuery",
    "CausalQueryType",
    "ForcedValue",
    "ForcedValueKind",
    "TraversalDirection",
    "TraversalMode",
    # Results
    "CausalInferenceResult",
    "CausalPathResult",
    "CausalStats",
    "CounterfactualResult",
    "GraphStats",
    # Exceptions
    "CausalReasoningError",
    "InvalidCausalQueryError",
]
