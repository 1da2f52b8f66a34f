"""Tests for CausalLinkStore.

Test Coverage:
- Bidirectional index consistency
- No deduplication of links between the same pair
- Evidence accumulation rule
- Deletion from both indices
"""

import threading

import pytest
from pydantic import ValidationError

from causelink.causal import CausalLink, CausalReasoningConfig, Evidence
from causelink.causal.store import CausalLinkStore


@pytest.fixture
def store():
    return CausalLinkStore()


class TestCreateAndLookup:
    """Test link creation and index lookups."""

    def test_create_link_indexed_both_ways(self, store):
        link = store.create_link("A", "B", strength=0.9)

        assert store.get_link(link.id) is link
        assert store.get_effects("A") == [link]
        assert store.get_causes("B") == [link]
        assert link.id in store
        assert len(store) == 1

    def test_create_link_clamps(self, store):
        high = store.create_link("A", "B", strength=1.5)
        low = store.create_link("A", "C", strength=-0.2)
        assert high.strength == 1.0
        assert low.strength == 0.0

    def test_unknown_ids_return_empty(self, store):
        assert store.get_link("missing") is None
        assert store.get_effects("missing") == []
        assert store.get_causes("missing") == []
        assert store.find_link("X", "Y") is None

    def test_no_deduplication(self, store):
        """Two links between the same pair are independent entities."""
        first = store.create_link("A", "B", mechanism="heat")
        second = store.create_link("A", "B", mechanism="heat")

        assert first.id != second.id
        assert store.get_effects("A") == [first, second]
        assert store.get_causes("B") == [first, second]

    def test_find_link_returns_first_match(self, store):
        store.create_link("A", "C")
        first = store.create_link("A", "B", mechanism="m1")
        store.create_link("A", "B", mechanism="m2")

        assert store.find_link("A", "B") is first

    def test_lookup_preserves_creation_order(self, store):
        links = [store.create_link("hub", f"n{i}") for i in range(5)]
        assert store.get_effects("hub") == links

    def test_node_ids(self, store):
        store.create_link("A", "B")
        store.create_link("B", "C")
        assert sorted(store.node_ids()) == ["A", "B", "C"]

    def test_store_link_twice_is_noop(self, store):
        link = store.create_link("A", "B")
        store.store_link(link)
        assert store.get_effects("A") == [link]
        assert len(store) == 1


class TestDeleteLink:
    """Test deletion keeps both indices consistent."""

    def test_delete_removes_from_both_indices(self, store):
        link = store.create_link("A", "B")
        other = store.create_link("A", "C")

        assert store.delete_link(link.id) is True
        assert store.get_link(link.id) is None
        assert store.get_effects("A") == [other]
        assert store.get_causes("B") == []
        assert link.id not in store

    def test_delete_unknown_returns_false(self, store):
        assert store.delete_link("missing") is False

    def test_delete_twice(self, store):
        link = store.create_link("A", "B")
        assert store.delete_link(link.id) is True
        assert store.delete_link(link.id) is False

    def test_clear(self, store):
        store.create_link("A", "B")
        store.clear()
        assert len(store) == 0
        assert store.get_effects("A") == []
        assert store.get_causes("B") == []


class TestAddEvidence:
    """Test reliable-evidence strength accumulation."""

    def test_single_reliable_evidence(self, store):
        link = store.create_link("A", "B", strength=0.5)
        store.add_evidence(link.id, Evidence(reliability=0.9))

        # 1 reliable / max(5, 1) = 0.2 -> +0.02
        assert link.strength == pytest.approx(0.52)
        assert len(link.evidence) == 1

    def test_accumulation_sequence(self, store):
        link = store.create_link("A", "B", strength=0.5)
        expected = 0.5
        for count in range(1, 8):
            store.add_evidence(link.id, Evidence(reliability=0.95))
            expected = min(1.0, expected + 0.1 * count / max(5, count))
            assert link.strength == pytest.approx(expected)

    def test_unreliable_evidence_does_not_change_strength(self, store):
        link = store.create_link("A", "B", strength=0.5)
        store.add_evidence(link.id, Evidence(reliability=0.7))
        store.add_evidence(link.id, Evidence(reliability=0.2))

        assert link.strength == pytest.approx(0.5)
        assert len(link.evidence) == 2

    def test_evidence_never_decreases_strength(self, store):
        link = store.create_link("A", "B", strength=0.6)
        previous = link.strength
        for reliability in (0.9, 0.1, 0.8, 0.0, 0.3, 0.99):
            store.add_evidence(link.id, Evidence(reliability=reliability))
            assert link.strength >= previous
            previous = link.strength

    def test_strength_capped_at_one(self, store):
        link = store.create_link("A", "B", strength=0.99)
        for _ in range(10):
            store.add_evidence(link.id, Evidence(reliability=1.0))
        assert link.strength == 1.0

    def test_unknown_link_ignored(self, store):
        assert store.add_evidence("missing", Evidence(reliability=0.9)) is None

    def test_constants_from_config(self):
        config = CausalReasoningConfig(
            reliable_evidence_threshold=0.5,
            evidence_count_floor=2,
            evidence_strength_gain=0.2,
        )
        store = CausalLinkStore(config)
        link = store.create_link("A", "B", strength=0.5)
        store.add_evidence(link.id, Evidence(reliability=0.6))

        # 1 reliable / max(2, 1) = 0.5 -> +0.1
        assert link.strength == pytest.approx(0.6)


def test_concurrent_creation_keeps_indices_consistent(store):
    def create_links(prefix: str) -> None:
        for i in range(50):
            store.create_link("hub", f"{prefix}{i}")

    threads = [
        threading.Thread(target=create_links, args=(f"t{n}_",))
        for n in range(4)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == 200
    assert len(store.get_effects("hub")) == 200
    for link in store.links():
        assert store.get_causes(link.effect) == [link]


class TestStoreLinkReplacement:
    """Replacing a link under an existing id keeps both indices consistent."""

    def test_replacement_with_new_endpoints_reindexed(self, store):
        original = store.create_link("A", "B", strength=0.9)
        replacement = CausalLink(id=original.id, cause="X", effect="Y", strength=0.4)

        store.store_link(replacement)

        assert len(store) == 1
        assert store.get_link(original.id) is replacement
        assert store.get_effects("A") == []
        assert store.get_causes("B") == []
        assert store.get_effects("X") == [replacement]
        assert store.get_causes("Y") == [replacement]
        assert sorted(store.node_ids()) == ["X", "Y"]

    def test_delete_after_replacement_leaves_no_buckets(self, store):
        original = store.create_link("A", "B")
        store.store_link(CausalLink(id=original.id, cause="X", effect="Y"))

        assert store.delete_link(original.id) is True
        assert store.node_ids() == []

    def test_replacement_with_same_endpoints_keeps_order(self, store):
        first = store.create_link("A", "B")
        second = store.create_link("A", "C")
        replacement = CausalLink(id=first.id, cause="A", effect="B", strength=0.1)

        store.store_link(replacement)

        assert store.get_effects("A") == [replacement, second]

    def test_endpoints_cannot_be_reassigned(self, store):
        link = store.create_link("A", "B")

        with pytest.raises(ValidationError):
            link.cause = "Z"
        with pytest.raises(ValidationError):
            link.effect = "Z"

        assert store.get_effects("A") == [link]
        assert store.get_effects("Z") == []


class TestRevise:
    """The revise callback runs in the same locked step as the append."""

    def test_revise_sees_appended_evidence(self, store):
        link = store.create_link("A", "B", strength=0.5)
        evidence = Evidence(reliability=0.9)
        seen = []

        def revise(updated):
            seen.append((list(updated.evidence), updated.strength))
            return 0.3

        store.add_evidence(link.id, evidence, revise=revise)

        assert seen == [([evidence], pytest.approx(0.52))]
        assert link.strength == pytest.approx(0.3)

    def test_revised_strength_clamped(self, store):
        link = store.create_link("A", "B")
        store.add_evidence(link.id, Evidence(), revise=lambda updated: 1.5)
        assert link.strength == 1.0

    def test_revise_holds_store_lock(self, store):
        link = store.create_link("A", "B")
        acquired = []

        def try_lock_from_other_thread():
            got = store._lock.acquire(blocking=False)
            if got:
                store._lock.release()
            acquired.append(got)

        def revise(updated):
            thread = threading.Thread(target=try_lock_from_other_thread)
            thread.start()
            thread.join()
            return updated.strength

        store.add_evidence(link.id, Evidence(), revise=revise)

        assert acquired == [False]

    def test_revise_not_called_for_unknown_link(self, store):
        calls = []
        store.add_evidence("missing", Evidence(), revise=calls.append)
        assert calls == []
