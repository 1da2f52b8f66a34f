"""Causal Reasoning Configuration.

Defines configuration for the causal engine:
- CausalReasoningConfig: Traversal bounds, evidence and discovery constants
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CausalReasoningConfig:
    """Configuration for the causal reasoning engine.

    Example:
        >>> config = CausalReasoningConfig(
        ...     default_max_steps=5,
        ...     correlation_threshold=0.8,
        ... )
    """

    # Traversal configuration
    default_max_steps: int = 3
    """Default depth for predict/explain traversal. Default: 3."""

    max_allowed_steps: int = 10
    """Larger step requests are clamped to this value. Default: 10."""

    default_max_path_length: int = 5
    """Default maximum edges for path enumeration. Default: 5."""

    # Evidence accumulation
    reliable_evidence_threshold: float = 0.7
    """Evidence with reliability strictly above this counts as reliable."""

    evidence_count_floor: int = 5
    """Minimum denominator for the reliable-evidence fraction. Default: 5."""

    evidence_strength_gain: float = 0.1
    """Strength added per unit of reliable-evidence fraction. Default: 0.1."""

    # Discovery
    correlation_threshold: float = 0.7
    """Correlations strictly above this become candidate links. Default: 0.7."""

    discovery_necessity_ratio: float = 0.8
    """Discovered necessity = ratio x correlation. Default: 0.8."""

    discovery_sufficiency_ratio: float = 0.6
    """Discovered sufficiency = ratio x correlation. Default: 0.6."""

    # Graph registry
    default_graph_confidence: float = 0.5
    """Initial confidence of a new domain graph. Default: 0.5."""

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.default_max_steps < 1:
            raise ValueError("default_max_steps must be at least 1")

        if self.default_max_steps > self.max_allowed_steps:
            raise ValueError("default_max_steps cannot exceed max_allowed_steps")

        if self.default_max_path_length < 1:
            raise ValueError("default_max_path_length must be at least 1")

        if self.evidence_count_floor < 1:
            raise ValueError("evidence_count_floor must be at least 1")

        for name in (
            "reliable_evidence_threshold",
            "evidence_strength_gain",
            "correlation_threshold",
            "discovery_necessity_ratio",
            "discovery_sufficiency_ratio",
            "default_graph_confidence",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0")
