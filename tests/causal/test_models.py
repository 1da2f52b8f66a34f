"""Tests for causal data models.

Test Coverage:
- Probability clamping on construction and assignment
- Immutable link ids and endpoints
- Non-negative time delay
- Evidence reliability clamping
- Observation ordering metadata
"""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from causelink.causal.models import (
    CausalGraph,
    CausalLink,
    Evidence,
    EvidenceType,
    Observation,
    clamp01,
    generate_id,
)


class TestClamping:
    """Out-of-range probabilities are clamped, never rejected."""

    def test_strength_above_one_clamped(self):
        link = CausalLink(cause="A", effect="B", strength=1.5)
        assert link.strength == 1.0

    def test_strength_below_zero_clamped(self):
        link = CausalLink(cause="A", effect="B", strength=-0.2)
        assert link.strength == 0.0

    def test_necessity_and_sufficiency_clamped(self):
        link = CausalLink(cause="A", effect="B", necessity=2, sufficiency=-3)
        assert link.necessity == 1.0
        assert link.sufficiency == 0.0

    def test_assignment_clamped(self):
        """Clamping holds after every mutation, not just construction."""
        link = CausalLink(cause="A", effect="B", strength=0.5)
        link.strength = 3.0
        assert link.strength == 1.0
        link.strength = -1.0
        assert link.strength == 0.0

    def test_non_numeric_probability_rejected(self):
        with pytest.raises(ValidationError):
            CausalLink(cause="A", effect="B", strength="very strong")

    def test_clamp01(self):
        assert clamp01(0.3) == 0.3
        assert clamp01(7) == 1.0
        assert clamp01(-7) == 0.0


class TestCausalLink:
    """Test CausalLink defaults and invariants."""

    def test_defaults(self):
        link = CausalLink(cause="A", effect="B")
        assert link.strength == 0.5
        assert link.necessity == 0.5
        assert link.sufficiency == 0.5
        assert link.mechanism is None
        assert link.time_delay == timedelta(0)
        assert link.conditions == []
        assert link.evidence == []

    def test_id_generated_with_prefix(self):
        link = CausalLink(cause="A", effect="B")
        assert link.id.startswith("causal_")

    def test_ids_unique(self):
        ids = {CausalLink(cause="A", effect="B").id for _ in range(50)}
        assert len(ids) == 50

    def test_id_immutable(self):
        link = CausalLink(cause="A", effect="B")
        with pytest.raises(ValidationError):
            link.id = "other"

    def test_endpoints_immutable(self):
        link = CausalLink(cause="A", effect="B")
        with pytest.raises(ValidationError):
            link.cause = "Z"
        with pytest.raises(ValidationError):
            link.effect = "Z"
        assert (link.cause, link.effect) == ("A", "B")

    def test_numeric_time_delay_is_seconds(self):
        link = CausalLink(cause="A", effect="B", time_delay=2.5)
        assert link.time_delay == timedelta(seconds=2.5)

    def test_negative_time_delay_clamped(self):
        link = CausalLink(cause="A", effect="B", time_delay=-5)
        assert link.time_delay == timedelta(0)

    def test_conditions_preserve_order(self):
        link = CausalLink(cause="A", effect="B", conditions=["oxygen", "fuel"])
        assert link.conditions == ["oxygen", "fuel"]


class TestEvidence:
    """Test Evidence model."""

    def test_defaults(self):
        evidence = Evidence()
        assert evidence.id.startswith("evidence_")
        assert evidence.type == EvidenceType.OBSERVATION
        assert evidence.supports_hypothesis is None
        assert evidence.contradicts_hypothesis is None
        assert isinstance(evidence.timestamp, datetime)

    def test_reliability_clamped(self):
        assert Evidence(reliability=1.4).reliability == 1.0
        assert Evidence(reliability=-0.1).reliability == 0.0

    def test_evidence_type_values(self):
        assert {t.value for t in EvidenceType} == {
            "observation",
            "experiment",
            "testimony",
            "inference",
        }

    def test_type_from_string(self):
        assert Evidence(type="experiment").type == EvidenceType.EXPERIMENT


class TestObservation:
    """Test Observation ordering metadata."""

    def test_numeric_times(self):
        obs = Observation(variables={"a": 1}, event_times={"a": 3})
        assert obs.time_of("a") == 3.0

    def test_datetime_times(self):
        ts = datetime(2024, 1, 1, 10, 0)
        obs = Observation(variables={"a": 1}, event_times={"a": ts})
        assert obs.time_of("a") == ts.timestamp()

    def test_missing_time(self):
        obs = Observation(variables={"a": 1})
        assert obs.time_of("a") is None


class TestCausalGraph:
    def test_defaults(self):
        graph = CausalGraph(domain="weather")
        assert graph.id.startswith("graph_")
        assert graph.nodes == {}
        assert graph.edges == {}
        assert graph.confidence == 0.5

    def test_touch_updates_timestamp(self):
        graph = CausalGraph(domain="weather")
        before = graph.last_updated
        graph.touch()
        assert graph.last_updated >= before


def test_generate_id_prefix():
    assert generate_id("x").startswith("x_")
