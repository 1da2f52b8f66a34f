"""Causal Query Types and Models.

Defines the core types for causal queries:
- TraversalMode: Visited-node policy for graph traversal
- TraversalDirection: Follow outgoing (effects) or incoming (causes) links
- ForcedValueKind / ForcedValue: Tagged union for intervention values
- CausalQueryType: Enum of supported causal query types
- CausalQuery: Pydantic model for query specification
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, model_validator


class TraversalMode(str, Enum):
    """Visited-node policy used by the traversal engine.

    SINGLE_PASS trades completeness for guaranteed termination on graphs with
    cycles or reconverging paths: a node is expanded at most once per call,
    so only the first path reaching a descendant is reported.

    EXHAUSTIVE backtracks (node marked on entry, unmarked on return) and
    reports every simple path within the step bound.
    """

    SINGLE_PASS = "single_pass"
    EXHAUSTIVE = "exhaustive"


class TraversalDirection(str, Enum):
    """Direction of link expansion."""

    FORWARD = "forward"
    """Follow outgoing links (cause -> effect)."""

    BACKWARD = "backward"
    """Follow incoming links (effect -> cause)."""


class ForcedValueKind(str, Enum):
    """Kinds of values an intervention can force a variable to."""

    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    SYMBOLIC = "symbolic"


# Symbolic labels that mean "the variable is forced off".
INACTIVE_SYMBOLS = frozenset({"", "false", "no", "off", "absent", "none"})


class ForcedValue(BaseModel):
    """Value an intervention forces a variable to.

    A forced value is *active* when the variable is switched on: True, any
    non-zero number, or a symbolic label that is not a negation. An inactive
    variable cannot propagate its effects.

    Example:
        >>> ForcedValue.coerce(True).is_active
        True
        >>> ForcedValue.coerce("off").is_active
        False
    """

    kind: ForcedValueKind
    value: Union[bool, float, str]

    @model_validator(mode="after")
    def validate_kind_matches_value(self) -> "ForcedValue":
        """Reject values whose Python type disagrees with the declared kind."""
        expected = {
            ForcedValueKind.BOOLEAN: bool,
            ForcedValueKind.NUMERIC: float,
            ForcedValueKind.SYMBOLIC: str,
        }[self.kind]
        if self.kind == ForcedValueKind.NUMERIC and isinstance(self.value, bool):
            raise ValueError("numeric forced value cannot be a boolean")
        if not isinstance(self.value, expected):
            raise ValueError(
                f"{self.kind.value} forced value must be {expected.__name__}, "
                f"got {type(self.value).__name__}"
            )
        return self

    @classmethod
    def coerce(cls, raw: Any) -> "ForcedValue":
        """Build a ForcedValue from a raw bool, number, string or ForcedValue."""
        if isinstance(raw, ForcedValue):
            return raw
        if isinstance(raw, bool):
            return cls(kind=ForcedValueKind.BOOLEAN, value=raw)
        if isinstance(raw, (int, float)):
            return cls(kind=ForcedValueKind.NUMERIC, value=float(raw))
        if isinstance(raw, str):
            return cls(kind=ForcedValueKind.SYMBOLIC, value=raw)
        raise TypeError(
            f"Unsupported forced value type: {type(raw).__name__}"
        )

    @property
    def is_active(self) -> bool:
        """True if the forced variable propagates its effects."""
        if self.kind == ForcedValueKind.BOOLEAN:
            return bool(self.value)
        if self.kind == ForcedValueKind.NUMERIC:
            return self.value != 0.0
        return str(self.value).strip().lower() not in INACTIVE_SYMBOLS


class CausalQueryType(str, Enum):
    """Types of causal queries supported by the reasoning engine."""

    PREDICT_EFFECT = "predict_effect"
    """What does this cause lead to?"""

    EXPLAIN_EFFECT = "explain_effect"
    """What led to this effect?"""

    CAUSAL_PATHS = "causal_paths"
    """All causal paths from start to end node."""

    INTERVENTION = "intervention"
    """What happens to the target if we force these variables?"""

    COUNTERFACTUAL = "counterfactual"
    """How does the target differ between two forced assignments?"""


class CausalQuery(BaseModel):
    """Causal query specification.

    Unified query model for all causal query types.
    query_type determines which parameters are required.

    Example:
        >>> query = CausalQuery(
        ...     query_type=CausalQueryType.PREDICT_EFFECT,
        ...     node_id="smoking",
        ...     max_steps=3,
        ... )
    """

    query_type: CausalQueryType = Field(
        ...,
        description="Type of causal query to execute",
    )

    # Node reference parameters
    node_id: Optional[str] = Field(
        default=None,
        description="Origin node for PREDICT_EFFECT/EXPLAIN_EFFECT",
    )
    start_node_id: Optional[str] = Field(
        default=None,
        description="Start node for CAUSAL_PATHS",
    )
    end_node_id: Optional[str] = Field(
        default=None,
        description="End node for CAUSAL_PATHS",
    )

    # Intervention parameters
    intervention: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Forced assignment for INTERVENTION, actual for COUNTERFACTUAL",
    )
    counterfactual: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Alternative forced assignment for COUNTERFACTUAL",
    )
    target_effect: Optional[str] = Field(
        default=None,
        description="Target node for INTERVENTION/COUNTERFACTUAL",
    )

    # Traversal parameters
    max_steps: Optional[int] = Field(
        default=None,
        ge=1,
        le=10,
        description=(
            "Maximum traversal depth in links (1-10). The engine further "
            "clamps it to CausalReasoningConfig.max_allowed_steps"
        ),
    )
    mode: TraversalMode = Field(
        default=TraversalMode.SINGLE_PASS,
        description="Visited-node policy for PREDICT_EFFECT/EXPLAIN_EFFECT",
    )
    min_confidence: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Drop results below this confidence",
    )

    @model_validator(mode="after")
    def validate_query_parameters(self) -> "CausalQuery":
        """Validate required parameters for query type."""
        qt = self.query_type

        if qt in (CausalQueryType.PREDICT_EFFECT, CausalQueryType.EXPLAIN_EFFECT):
            if self.node_id is None:
                raise ValueError(f"{qt.value} query requires node_id")

        elif qt == CausalQueryType.CAUSAL_PATHS:
            if self.start_node_id is None or self.end_node_id is None:
                raise ValueError(
                    "CAUSAL_PATHS requires start_node_id and end_node_id"
                )

        elif qt == CausalQueryType.INTERVENTION:
            if not self.intervention or self.target_effect is None:
                raise ValueError(
                    "INTERVENTION requires intervention and target_effect"
                )

        elif qt == CausalQueryType.COUNTERFACTUAL:
            if (
                self.intervention is None
                or self.counterfactual is None
                or self.target_effect is None
            ):
                raise ValueError(
                    "COUNTERFACTUAL requires intervention, counterfactual "
                    "and target_effect"
                )

        return self
