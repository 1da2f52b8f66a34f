"""Intervention and Counterfactual Engine.

Simulates "doing" an intervention with simplified edge-cutting semantics:
every incoming link of an intervened node is cut, making that node
exogenous, and the forward prediction from the node is searched for the
target effect. This is not do-calculus; no identifiability or backdoor
analysis is performed.

Cut links are passed to the traversal engine as an exclusion set. The
store's indices are never edited, so there is nothing to restore after an
exception and concurrent readers never observe a cut link.

Forced-value policy:
    Active value (True, non-zero number, non-negated label) -> explore the
    node's effects normally. Inactive value (False, 0, "off", ...) -> the
    node propagates nothing and yields no predictions.

The exclusion set applies to forward expansion too, so a path never passes
through another intervened node: with {X: True, M: True} on X -> M -> Y,
Y is reached only through M -> Y.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, Mapping, Optional

from causelink.causal.results import CausalInferenceResult, CounterfactualResult
from causelink.causal.store import CausalLinkStore
from causelink.causal.traversal import CausalTraversal
from causelink.causal.types import ForcedValue

logger = logging.getLogger(__name__)


class InterventionEngine:
    """Intervention prediction and counterfactual comparison.

    Example:
        >>> engine = InterventionEngine(store, traversal)
        >>> outcome = engine.predict_intervention({"sprinkler": True}, "wet_grass")
        >>> outcome.confidence if outcome else None
        0.9
    """

    def __init__(self, store: CausalLinkStore, traversal: CausalTraversal):
        self._store = store
        self._traversal = traversal

    def severed_links(self, intervened: Mapping[str, Any]) -> FrozenSet[str]:
        """Ids of the incoming links cut by intervening on ``intervened``."""
        return frozenset(
            link.id
            for node_id in intervened
            for link in self._store.get_causes(node_id)
        )

    def predict_intervention(
        self,
        intervention: Mapping[str, Any],
        target_effect: str,
        max_steps: Optional[int] = None,
    ) -> Optional[CausalInferenceResult]:
        """Predict ``target_effect`` under a forced assignment.

        Intervened nodes are scanned in mapping order; the first prediction
        reaching ``target_effect`` wins.

        Args:
            intervention: Node id -> forced value (bool, number, str or
                ForcedValue)
            target_effect: Node whose outcome is of interest
            max_steps: Forward search depth (default from config)

        Returns:
            Matching prediction, or None if the target is unreachable
        """
        forced: Dict[str, ForcedValue] = {
            node_id: ForcedValue.coerce(value)
            for node_id, value in intervention.items()
        }
        excluded = self.severed_links(forced)

        for node_id, value in forced.items():
            if not value.is_active:
                logger.debug(
                    f"Intervened node {node_id} forced inactive ({value.value!r}); "
                    f"no propagation"
                )
                continue

            predictions = self._traversal.predict_effect(
                node_id,
                max_steps=max_steps,
                excluded=excluded,
            )
            for prediction in predictions:
                if prediction.node_id == target_effect:
                    logger.debug(
                        f"Intervention on {node_id} reaches {target_effect} "
                        f"with confidence {prediction.confidence:.3f}"
                    )
                    return prediction

        return None

    def counterfactual(
        self,
        actual: Mapping[str, Any],
        counterfactual: Mapping[str, Any],
        target_effect: str,
        max_steps: Optional[int] = None,
    ) -> CounterfactualResult:
        """Compare the target under actual and counterfactual assignments.

        ``difference`` is the absolute confidence delta when both outcomes
        exist, otherwise 0.
        """
        actual_outcome = self.predict_intervention(actual, target_effect, max_steps)
        counterfactual_outcome = self.predict_intervention(
            counterfactual, target_effect, max_steps
        )

        difference = 0.0
        if actual_outcome is not None and counterfactual_outcome is not None:
            difference = abs(actual_outcome.confidence - counterfactual_outcome.confidence)

        return CounterfactualResult(
            target_effect=target_effect,
            actual_outcome=actual_outcome,
            counterfactual_outcome=counterfactual_outcome,
            difference=difference,
        )
