"""Causal Traversal Engine.

Depth-bounded search over the link store:
- predict_effect: forward, confidence = product of link strength
- explain_effect: backward, confidence = product of link necessity
- find_causal_paths: exhaustive enumeration of simple paths to a target

All three share one walker parameterised by direction and TraversalMode.
Callers may pass an ``excluded`` set of link ids; those links are invisible
at every expansion step. Interventions use this instead of editing the
store's indices, so traversal never mutates shared state.
"""

from __future__ import annotations

import logging
import time
from typing import AbstractSet, Callable, Iterator, List, Optional, Set

from causelink.causal.config import CausalReasoningConfig
from causelink.causal.models import CausalLink
from causelink.causal.results import CausalInferenceResult, CausalPathResult
from causelink.causal.store import CausalLinkStore
from causelink.causal.types import TraversalDirection, TraversalMode

logger = logging.getLogger(__name__)

NO_CONNECTION = "No causal connection found"


def generate_explanation(path: List[CausalLink]) -> str:
    """Render a causal path as text.

    One link:   "A causes B through M"
    Many links: "A causes B (via M), which causes C"
    """
    if not path:
        return NO_CONNECTION

    if len(path) == 1:
        link = path[0]
        if link.mechanism:
            return f"{link.cause} causes {link.effect} through {link.mechanism}"
        return f"{link.cause} causes {link.effect}"

    steps = []
    for i, link in enumerate(path):
        connector = "" if i == 0 else "which "
        mechanism = f" (via {link.mechanism})" if link.mechanism else ""
        steps.append(f"{connector}causes {link.effect}{mechanism}")

    return f"{path[0].cause} {', '.join(steps)}"


def path_confidence(path: List[CausalLink], weight: Callable[[CausalLink], float]) -> float:
    confidence = 1.0
    for link in path:
        confidence *= weight(link)
    return confidence


class CausalTraversal:
    """Bounded forward/backward search over a CausalLinkStore.

    Example:
        >>> traversal = CausalTraversal(store)
        >>> for result in traversal.predict_effect("rain", max_steps=2):
        ...     print(f"{result.node_id}: {result.confidence:.2f}")
    """

    def __init__(
        self,
        store: CausalLinkStore,
        config: Optional[CausalReasoningConfig] = None,
    ):
        self._store = store
        self._config = config or CausalReasoningConfig()

    # -------------------------------------------------------------------------
    # Public queries
    # -------------------------------------------------------------------------

    def predict_effect(
        self,
        cause: str,
        max_steps: Optional[int] = None,
        mode: TraversalMode = TraversalMode.SINGLE_PASS,
        excluded: Optional[AbstractSet[str]] = None,
        min_confidence: float = 0.0,
    ) -> List[CausalInferenceResult]:
        """Predict downstream effects of ``cause``.

        Emits one result per link traversed, carrying the cumulative
        product of strengths from the origin.

        Args:
            cause: Origin node id
            max_steps: Maximum path length in links (default from config)
            mode: SINGLE_PASS never revisits a node; EXHAUSTIVE backtracks
            excluded: Link ids to ignore
            min_confidence: Drop results below this confidence

        Returns:
            Results sorted by descending confidence (stable for ties)
        """
        return self._infer(
            origin=cause,
            direction=TraversalDirection.FORWARD,
            max_steps=max_steps,
            mode=mode,
            excluded=excluded,
            min_confidence=min_confidence,
        )

    def explain_effect(
        self,
        effect: str,
        max_steps: Optional[int] = None,
        mode: TraversalMode = TraversalMode.SINGLE_PASS,
        excluded: Optional[AbstractSet[str]] = None,
        min_confidence: float = 0.0,
    ) -> List[CausalInferenceResult]:
        """Explain ``effect`` by tracing back through its causes.

        Confidence is the product of link necessity, not strength.
        Each result's path is reported in causal order, cause first.
        """
        return self._infer(
            origin=effect,
            direction=TraversalDirection.BACKWARD,
            max_steps=max_steps,
            mode=mode,
            excluded=excluded,
            min_confidence=min_confidence,
        )

    def find_causal_paths(
        self,
        start: str,
        end: str,
        max_length: Optional[int] = None,
        excluded: Optional[AbstractSet[str]] = None,
    ) -> List[CausalPathResult]:
        """Enumerate every simple causal path from ``start`` to ``end``.

        Paths stop the first time they reach ``end``. A path back to
        ``start`` is reported when ``start == end`` and a cycle exists.

        Returns:
            Paths of at most ``max_length`` links, sorted by descending
            product of strengths (stable for ties)
        """
        if max_length is None:
            max_length = self._config.default_max_path_length
        max_length = self._bound_steps(max_length)

        start_time = time.perf_counter()
        paths: List[CausalPathResult] = []

        for path in self.walk(
            start,
            TraversalDirection.FORWARD,
            max_length,
            TraversalMode.EXHAUSTIVE,
            excluded=excluded,
            stop_at=end,
        ):
            if path[-1].effect != end:
                continue
            paths.append(
                CausalPathResult(
                    start_node_id=start,
                    end_node_id=end,
                    links=path,
                    confidence=path_confidence(path, lambda link: link.strength),
                )
            )

        paths.sort(key=lambda p: p.confidence, reverse=True)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Found {len(paths)} causal paths {start} -> {end} "
            f"(max_length={max_length}) in {elapsed_ms:.1f}ms"
        )
        return paths

    # -------------------------------------------------------------------------
    # Walker
    # -------------------------------------------------------------------------

    def walk(
        self,
        origin: str,
        direction: TraversalDirection,
        max_steps: int,
        mode: TraversalMode,
        excluded: Optional[AbstractSet[str]] = None,
        stop_at: Optional[str] = None,
    ) -> Iterator[List[CausalLink]]:
        """Depth-first walk yielding the path to every link traversed.

        Yielded paths are in causal order. A node at depth ``d`` is expanded
        only while ``d < max_steps``, so no path exceeds ``max_steps`` links.
        Paths reaching ``stop_at`` are yielded but not extended.
        """
        excluded = excluded or frozenset()
        forward = direction == TraversalDirection.FORWARD
        visited: Set[str] = set()

        def expand(node_id: str, path: List[CausalLink], depth: int) -> Iterator[List[CausalLink]]:
            if depth >= max_steps or node_id in visited:
                return
            visited.add(node_id)

            links = self._store.get_effects(node_id) if forward else self._store.get_causes(node_id)
            for link in links:
                if link.id in excluded:
                    continue

                new_path = path + [link] if forward else [link] + path
                yield new_path

                next_id = link.effect if forward else link.cause
                if stop_at is not None and next_id == stop_at:
                    continue
                yield from expand(next_id, new_path, depth + 1)

            if mode == TraversalMode.EXHAUSTIVE:
                visited.discard(node_id)

        yield from expand(origin, [], 0)

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _infer(
        self,
        origin: str,
        direction: TraversalDirection,
        max_steps: Optional[int],
        mode: TraversalMode,
        excluded: Optional[AbstractSet[str]],
        min_confidence: float,
    ) -> List[CausalInferenceResult]:
        if max_steps is None:
            max_steps = self._config.default_max_steps
        max_steps = self._bound_steps(max_steps)

        forward = direction == TraversalDirection.FORWARD
        results: List[CausalInferenceResult] = []

        for path in self.walk(origin, direction, max_steps, mode, excluded=excluded):
            if forward:
                node_id = path[-1].effect
                confidence = path_confidence(path, lambda link: link.strength)
            else:
                node_id = path[0].cause
                confidence = path_confidence(path, lambda link: link.necessity)

            if confidence < min_confidence:
                continue

            results.append(
                CausalInferenceResult(
                    node_id=node_id,
                    confidence=confidence,
                    causal_path=path,
                    explanation=generate_explanation(path),
                )
            )

        results.sort(key=lambda r: r.confidence, reverse=True)
        logger.debug(
            f"{direction.value} traversal from {origin} ({mode.value}, "
            f"max_steps={max_steps}) produced {len(results)} results"
        )
        return results

    def _bound_steps(self, steps: int) -> int:
        limit = self._config.max_allowed_steps
        if steps > limit:
            logger.warning(f"Requested depth {steps} exceeds maximum {limit}; clamping")
            return limit
        return steps
