"""Causal Discovery Heuristic.

Proposes causal links from batches of co-occurrence observations:

1. Co-occurrence counting - presence-based counts for every ordered pair
2. Correlation proxy - co / sqrt(count(v1) * count(v2))
3. Temporal precedence - direction from caller-supplied event times
4. Link materialisation - strength = c, necessity = 0.8c, sufficiency = 0.6c

Direction is a pure function of the observations' ``event_times``. Pairs
without timing information, or with no clear majority order, produce no
link, so identical input always yields identical output.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from causelink.causal.config import CausalReasoningConfig
from causelink.causal.graphs import CausalGraphRegistry
from causelink.causal.models import CausalLink, Observation
from causelink.causal.store import CausalLinkStore

logger = logging.getLogger(__name__)

VariablePair = Tuple[str, str]


def compute_correlations(observations: Sequence[Observation]) -> Dict[VariablePair, float]:
    """Co-occurrence correlation proxy for every ordered variable pair.

    A variable counts as present in an observation whenever it is a key of
    ``variables``, whatever its value. Pairs are returned in first-seen
    order.
    """
    co_occurrences: Dict[VariablePair, int] = {}
    var_counts: Dict[str, int] = {}

    for obs in observations:
        names = list(obs.variables)
        for var1 in names:
            var_counts[var1] = var_counts.get(var1, 0) + 1
            for var2 in names:
                if var1 != var2:
                    key = (var1, var2)
                    co_occurrences[key] = co_occurrences.get(key, 0) + 1

    correlations: Dict[VariablePair, float] = {}
    for (var1, var2), co_count in co_occurrences.items():
        count1 = var_counts.get(var1, 1)
        count2 = var_counts.get(var2, 1)
        correlations[(var1, var2)] = co_count / math.sqrt(count1 * count2)

    return correlations


def precedence_counts(
    var1: str,
    var2: str,
    observations: Sequence[Observation],
) -> Tuple[int, int]:
    """Count observations where ``var1`` occurred before / after ``var2``.

    Observations lacking a time for either variable, or timing them equal,
    are not counted.
    """
    before = after = 0
    for obs in observations:
        t1 = obs.time_of(var1)
        t2 = obs.time_of(var2)
        if t1 is None or t2 is None:
            continue
        if t1 < t2:
            before += 1
        elif t1 > t2:
            after += 1
    return before, after


def precedes(var1: str, var2: str, observations: Sequence[Observation]) -> bool:
    """True if ``var1`` occurs before ``var2`` in a strict majority of timed observations."""
    before, after = precedence_counts(var1, var2, observations)
    return before > after


class CausalDiscovery:
    """Grows the link store from observed experience batches.

    Example:
        >>> discovery = CausalDiscovery(store, graphs)
        >>> links = discovery.discover_causality(observations, domain="weather")
        >>> [(l.cause, l.effect) for l in links]
        [('rain', 'wet_grass')]
    """

    def __init__(
        self,
        store: CausalLinkStore,
        graphs: CausalGraphRegistry,
        config: Optional[CausalReasoningConfig] = None,
    ):
        self._store = store
        self._graphs = graphs
        self._config = config or CausalReasoningConfig()

    def discover_causality(
        self,
        observations: Sequence[Observation],
        domain: str,
    ) -> List[CausalLink]:
        """Propose causal links from co-occurrence and temporal order.

        Every created link is stored and recorded in the ``domain`` graph.
        Existing links are not consulted, so repeated discovery over the same
        data creates new, independent links.

        Returns:
            Newly created links in discovery order
        """
        cfg = self._config
        discovered: List[CausalLink] = []
        correlations = compute_correlations(observations)

        for (var1, var2), correlation in correlations.items():
            if correlation <= cfg.correlation_threshold:
                continue

            if not precedes(var1, var2, observations):
                logger.debug(
                    f"Skipping {var1} -> {var2}: no temporal precedence "
                    f"(correlation={correlation:.3f})"
                )
                continue

            link = self._store.create_link(
                var1,
                var2,
                strength=correlation,
                necessity=correlation * cfg.discovery_necessity_ratio,
                sufficiency=correlation * cfg.discovery_sufficiency_ratio,
            )
            self._graphs.add_edge(domain, link)
            discovered.append(link)

        logger.info(
            f"Discovered {len(discovered)} causal links in domain '{domain}' "
            f"from {len(observations)} observations"
        )
        return discovered
