"""Causal reasoning test fixtures.

Provides engines preloaded with small causal structures:
- Pure chain A -> B -> C -> D
- Diamond A -> {B, C} -> D -> E (reconverging paths)
- Cycle A -> B -> A
"""

from __future__ import annotations

from typing import Dict

import pytest

from causelink.causal import CausalLink, CausalReasoning, CausalReasoningConfig, Observation


# ---------------------------------------------------------------------------
# Engine Factories
# ---------------------------------------------------------------------------


def build_chain_engine() -> CausalReasoning:
    """Chain A -> B -> C -> D.

    Strengths: 0.9, 0.8, 0.7
    Necessities: 0.6, 0.5, 0.4
    """
    engine = CausalReasoning()
    engine.create_link("A", "B", strength=0.9, necessity=0.6)
    engine.create_link("B", "C", strength=0.8, necessity=0.5)
    engine.create_link("C", "D", strength=0.7, necessity=0.4)
    return engine


def build_diamond_engine() -> CausalReasoning:
    """Diamond A -> B -> D, A -> C -> D, then D -> E."""
    engine = CausalReasoning()
    engine.create_link("A", "B", strength=0.9)
    engine.create_link("A", "C", strength=0.5)
    engine.create_link("B", "D", strength=0.8)
    engine.create_link("C", "D", strength=0.6)
    engine.create_link("D", "E", strength=0.5)
    return engine


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> CausalReasoning:
    return CausalReasoning()


@pytest.fixture
def chain_engine() -> CausalReasoning:
    return build_chain_engine()


@pytest.fixture
def diamond_engine() -> CausalReasoning:
    return build_diamond_engine()


@pytest.fixture
def cycle_engine() -> CausalReasoning:
    engine = CausalReasoning()
    engine.create_link("A", "B", strength=0.9)
    engine.create_link("B", "A", strength=0.8)
    return engine


@pytest.fixture
def chain_links(chain_engine) -> Dict[str, CausalLink]:
    """Links of the chain keyed by 'AB', 'BC', 'CD'."""
    return {
        "AB": chain_engine.find_link("A", "B"),
        "BC": chain_engine.find_link("B", "C"),
        "CD": chain_engine.find_link("C", "D"),
    }


@pytest.fixture
def causal_config() -> CausalReasoningConfig:
    return CausalReasoningConfig(default_max_steps=4, max_allowed_steps=6)


@pytest.fixture
def weather_observations():
    """Rain always precedes wet grass; umbrella appears once, untimed."""
    return [
        Observation(
            variables={"rain": True, "wet_grass": True},
            outcome="wet_grass",
            event_times={"rain": 1.0, "wet_grass": 2.0},
        ),
        Observation(
            variables={"rain": True, "wet_grass": True, "umbrella": True},
            outcome="wet_grass",
            event_times={"rain": 5.0, "wet_grass": 6.5},
        ),
        Observation(
            variables={"rain": True, "wet_grass": True},
            outcome="wet_grass",
            event_times={"rain": 10.0, "wet_grass": 10.5},
        ),
    ]
