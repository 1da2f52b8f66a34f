"""Causal Data Models.

Defines the data structures owned by the causal engine:
- EvidenceType: Kinds of evidence that can back a causal link
- Evidence: A single observational or inferential data point
- CausalLink: Directed, weighted cause -> effect edge (the only mutable entity)
- CausalGraph: Domain-keyed aggregation of nodes and links for reporting
- Observation: Input record for causal discovery

Probabilities (strength, necessity, sufficiency, reliability) are clamped into
[0, 1] on construction and on every assignment. They are never rejected, so a
best-effort caller always gets a usable link back.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def generate_id(prefix: str) -> str:
    """Generate a unique identifier with a readable prefix."""
    return f"{prefix}_{uuid4().hex[:12]}"


def clamp01(value: float) -> float:
    """Clamp a value into the closed interval [0, 1]."""
    return max(0.0, min(1.0, float(value)))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EvidenceType(str, Enum):
    """Kinds of evidence that can support or contradict a causal link."""

    OBSERVATION = "observation"
    EXPERIMENT = "experiment"
    TESTIMONY = "testimony"
    INFERENCE = "inference"


class Evidence(BaseModel):
    """An observational or inferential data point.

    Evidence is appended to a link and never removed. It may declare the
    link id it supports or contradicts; the belief updater only revises a
    link's strength for evidence that names that link.

    Example:
        >>> evidence = Evidence(
        ...     type=EvidenceType.EXPERIMENT,
        ...     reliability=0.9,
        ...     supports_hypothesis=link.id,
        ... )
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default_factory=lambda: generate_id("evidence"),
        description="Unique evidence identifier",
    )
    type: EvidenceType = Field(
        default=EvidenceType.OBSERVATION,
        description="Kind of evidence",
    )
    reliability: float = Field(
        default=0.5,
        description="Reliability of the evidence (clamped to 0.0-1.0)",
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the evidence was recorded",
    )
    source: Optional[str] = Field(
        default=None,
        description="Where the evidence came from",
    )
    data: Any = Field(
        default=None,
        description="Opaque payload carried for the caller",
    )
    supports_hypothesis: Optional[str] = Field(
        default=None,
        description="Link id this evidence supports",
    )
    contradicts_hypothesis: Optional[str] = Field(
        default=None,
        description="Link id this evidence contradicts",
    )

    @field_validator("reliability", mode="before")
    @classmethod
    def _clamp_reliability(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return clamp01(value)
        return value


class CausalLink(BaseModel):
    """Directed, weighted cause -> effect edge.

    Links are never deduplicated: creating two links between the same pair
    yields two independent entities. The id and both endpoints are fixed at
    construction, since the store indexes a link by them.

    Attributes:
        necessity: Probability the effect would not occur without the cause
        sufficiency: Probability the effect occurs given the cause
        strength: Magnitude of causal influence, revised by evidence
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default_factory=lambda: generate_id("causal"),
        frozen=True,
        description="Unique link identifier (immutable)",
    )
    cause: str = Field(..., frozen=True, description="Concept id of the cause")
    effect: str = Field(..., frozen=True, description="Concept id of the effect")
    mechanism: Optional[str] = Field(
        default=None,
        description="How the cause produces the effect",
    )
    necessity: float = Field(default=0.5, description="Necessity (0.0-1.0)")
    sufficiency: float = Field(default=0.5, description="Sufficiency (0.0-1.0)")
    strength: float = Field(default=0.5, description="Causal strength (0.0-1.0)")
    time_delay: timedelta = Field(
        default=timedelta(0),
        description="Delay between cause and effect occurrence",
    )
    conditions: List[str] = Field(
        default_factory=list,
        description="Context concepts required for the link to be active",
    )
    evidence: List[Evidence] = Field(
        default_factory=list,
        description="Append-only evidence history",
    )
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("necessity", "sufficiency", "strength", mode="before")
    @classmethod
    def _clamp_probability(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return clamp01(value)
        return value

    @field_validator("time_delay", mode="after")
    @classmethod
    def _non_negative_delay(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            return timedelta(0)
        return value


class CausalGraph(BaseModel):
    """Domain-keyed aggregation of causal nodes and links.

    Used for organisation and reporting only. The link store's indices are
    the single source of truth for traversal.
    """

    id: str = Field(default_factory=lambda: generate_id("graph"))
    domain: str = Field(..., description="Domain label this graph belongs to")
    nodes: Dict[str, Any] = Field(
        default_factory=dict,
        description="Concept id -> opaque concept payload",
    )
    edges: Dict[str, CausalLink] = Field(
        default_factory=dict,
        description="Link id -> link",
    )
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    created_at: datetime = Field(default_factory=_utcnow)
    last_updated: datetime = Field(default_factory=_utcnow)

    def touch(self) -> None:
        self.last_updated = _utcnow()


class Observation(BaseModel):
    """A single co-occurrence record used for causal discovery.

    ``event_times`` carries explicit ordering metadata: for each variable,
    when it occurred (a datetime or any comparable number). Discovery never
    guesses a direction for variables without timing information.

    Example:
        >>> Observation(
        ...     variables={"rain": True, "wet_grass": True},
        ...     outcome="wet_grass",
        ...     event_times={"rain": 1.0, "wet_grass": 2.0},
        ... )
    """

    variables: Dict[str, Any] = Field(default_factory=dict)
    outcome: Optional[str] = Field(default=None, description="Outcome label")
    event_times: Dict[str, Union[float, datetime]] = Field(
        default_factory=dict,
        description="Variable id -> occurrence time",
    )

    def time_of(self, variable: str) -> Optional[float]:
        """Occurrence time of ``variable`` as a float, if known."""
        value = self.event_times.get(variable)
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.timestamp()
        return float(value)
