"""Bayesian belief revision for causal links."""

from __future__ import annotations

import logging
from typing import Optional

from causelink.causal.models import CausalLink, Evidence, clamp01
from causelink.causal.store import CausalLinkStore

logger = logging.getLogger(__name__)


def bayesian_update(prior: float, likelihood_true: float, likelihood_false: float) -> float:
    """Posterior P(H|E) from a prior and the two likelihoods.

    P(H|E) = l_true * prior / (l_true * prior + l_false * (1 - prior))

    Returns the prior unchanged when the denominator is zero.
    """
    numerator = likelihood_true * prior
    denominator = numerator + likelihood_false * (1.0 - prior)
    if denominator <= 0.0:
        return prior
    return clamp01(numerator / denominator)


class BeliefUpdater:
    """Applies evidence to a link and revises its strength."""

    def __init__(self, store: CausalLinkStore):
        self._store = store

    def update_model(self, link_id: str, evidence: Evidence) -> Optional[CausalLink]:
        """Append ``evidence`` to the link, then revise its strength.

        The prior is the strength after the evidence has been appended.
        Supporting evidence uses likelihood = reliability; contradicting
        evidence swaps the likelihood and its complement. Evidence that names
        neither this link's id leaves the strength as the append set it.

        The append and the revision happen as one step under the store lock.

        Returns:
            The updated link, or None if the link does not exist
        """
        reliability = evidence.reliability

        if evidence.supports_hypothesis == link_id:
            likelihoods = (reliability, 1.0 - reliability)
        elif evidence.contradicts_hypothesis == link_id:
            likelihoods = (1.0 - reliability, reliability)
        else:
            return self._store.add_evidence(link_id, evidence)

        def revise(link: CausalLink) -> float:
            posterior = bayesian_update(link.strength, *likelihoods)
            logger.debug(
                f"Bayesian update on {link_id}: {link.strength:.3f} -> {posterior:.3f} "
                f"(reliability={reliability:.2f})"
            )
            return posterior

        return self._store.add_evidence(link_id, evidence, revise=revise)
