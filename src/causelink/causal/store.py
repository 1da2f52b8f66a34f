"""Causal Link Store.

Owns the set of causal links as an arena keyed by link id, plus two
auxiliary indices (cause -> links, effect -> links) for O(branching)
lookup. Every mutation goes through this class under a single lock, so the
invariant "every stored link is reachable from both indices" is enforced in
one place.
"""

from __future__ import annotations

import logging
import threading
from datetime import timedelta
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Union

from causelink.causal.config import CausalReasoningConfig
from causelink.causal.models import CausalLink, Evidence

logger = logging.getLogger(__name__)


class CausalLinkStore:
    """Arena of causal links with cause and effect indices.

    Indices map a node id to an insertion-ordered set of link ids, so
    lookups return links in creation order.

    Example:
        >>> store = CausalLinkStore()
        >>> link = store.create_link("rain", "wet_grass", strength=0.9)
        >>> [l.effect for l in store.get_effects("rain")]
        ['wet_grass']
    """

    def __init__(self, config: Optional[CausalReasoningConfig] = None):
        self._config = config or CausalReasoningConfig()
        self._links: Dict[str, CausalLink] = {}
        self._by_cause: Dict[str, Dict[str, None]] = {}
        self._by_effect: Dict[str, Dict[str, None]] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._links)

    def __contains__(self, link_id: object) -> bool:
        return link_id in self._links

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def create_link(
        self,
        cause: str,
        effect: str,
        strength: float = 0.5,
        necessity: float = 0.5,
        sufficiency: float = 0.5,
        mechanism: Optional[str] = None,
        time_delay: Union[timedelta, float] = 0,
        conditions: Optional[Sequence[str]] = None,
    ) -> CausalLink:
        """Create and store a new causal link.

        Probabilities outside [0, 1] are clamped. Links between the same
        pair are never merged.
        """
        link = CausalLink(
            cause=cause,
            effect=effect,
            strength=strength,
            necessity=necessity,
            sufficiency=sufficiency,
            mechanism=mechanism,
            time_delay=time_delay,
            conditions=list(conditions or []),
        )
        self.store_link(link)
        logger.debug(
            f"Created causal link {link.id}: {cause} -> {effect} "
            f"(strength={link.strength:.3f})"
        )
        return link

    def store_link(self, link: CausalLink) -> None:
        """Insert an existing link into the arena and both indices.

        Storing the same link twice is a no-op. A different link under an
        existing id replaces it; if its endpoints differ, the old index
        entries are dropped first.
        """
        with self._lock:
            previous = self._links.get(link.id)
            if previous is not None and (
                previous.cause != link.cause or previous.effect != link.effect
            ):
                self._discard(self._by_cause, previous.cause, link.id)
                self._discard(self._by_effect, previous.effect, link.id)
                logger.debug(
                    f"Re-indexed causal link {link.id}: "
                    f"{previous.cause} -> {previous.effect} replaced by "
                    f"{link.cause} -> {link.effect}"
                )

            self._links[link.id] = link
            self._by_cause.setdefault(link.cause, {})[link.id] = None
            self._by_effect.setdefault(link.effect, {})[link.id] = None

    def delete_link(self, link_id: str) -> bool:
        """Remove a link from the arena and both indices.

        Returns:
            True if the link existed
        """
        with self._lock:
            link = self._links.pop(link_id, None)
            if link is None:
                return False
            self._discard(self._by_cause, link.cause, link_id)
            self._discard(self._by_effect, link.effect, link_id)

        logger.debug(f"Deleted causal link {link_id}")
        return True

    def add_evidence(
        self,
        link_id: str,
        evidence: Evidence,
        revise: Optional[Callable[[CausalLink], float]] = None,
    ) -> Optional[CausalLink]:
        """Append evidence to a link and strengthen it.

        Strength grows by ``gain x reliable / max(floor, total)``, capped at 1.
        Evidence alone never decreases strength, and the increments shrink
        relative to the evidence count as it grows past the floor.

        Args:
            link_id: Link to update
            evidence: Evidence record to append
            revise: Optional callback returning a new strength for the
                updated link. It runs under the store lock in the same step
                as the append, so no other writer can interleave.

        Returns:
            The updated link, or None if the link does not exist
        """
        with self._lock:
            link = self._links.get(link_id)
            if link is None:
                logger.debug(f"Ignoring evidence for unknown link {link_id}")
                return None

            link.evidence.append(evidence)

            cfg = self._config
            reliable = sum(
                1
                for e in link.evidence
                if e.reliability > cfg.reliable_evidence_threshold
            )
            fraction = reliable / max(cfg.evidence_count_floor, len(link.evidence))
            link.strength = min(1.0, link.strength + fraction * cfg.evidence_strength_gain)

            if revise is not None:
                link.strength = revise(link)

        return link

    def clear(self) -> None:
        """Remove every link."""
        with self._lock:
            self._links.clear()
            self._by_cause.clear()
            self._by_effect.clear()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_link(self, link_id: str) -> Optional[CausalLink]:
        return self._links.get(link_id)

    def get_effects(self, cause: str) -> List[CausalLink]:
        """Links whose cause is ``cause``."""
        return self._resolve(self._by_cause.get(cause))

    def get_causes(self, effect: str) -> List[CausalLink]:
        """Links whose effect is ``effect``."""
        return self._resolve(self._by_effect.get(effect))

    def find_link(self, cause: str, effect: str) -> Optional[CausalLink]:
        """First link from ``cause`` to ``effect``, regardless of mechanism."""
        for link in self.get_effects(cause):
            if link.effect == effect:
                return link
        return None

    def links(self) -> Iterator[CausalLink]:
        """Iterate over all stored links in creation order."""
        return iter(list(self._links.values()))

    def node_ids(self) -> List[str]:
        """Distinct node ids referenced by stored links."""
        nodes: Dict[str, None] = {}
        for node_id in self._by_cause:
            nodes[node_id] = None
        for node_id in self._by_effect:
            nodes[node_id] = None
        return list(nodes)

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _resolve(self, link_ids: Optional[Dict[str, None]]) -> List[CausalLink]:
        if not link_ids:
            return []
        return [self._links[i] for i in list(link_ids) if i in self._links]

    @staticmethod
    def _discard(index: Dict[str, Dict[str, None]], node_id: str, link_id: str) -> None:
        bucket = index.get(node_id)
        if bucket is None:
            return
        bucket.pop(link_id, None)
        if not bucket:
            del index[node_id]
