"""Tests for resolution candidate planning."""

from __future__ import annotations

from pagehub.core.models import ContentRecord
from pagehub.core.types import CandidateSource
from pagehub.resolution.candidates import ResolutionCandidate, chains_in_scope, plan_candidates

CHAINS = ["ethereum", "base", "zora"]
REGISTERED = ["nft", "book"]
FALLBACK = ["alexandria_book", "publication"]


def keys(plan: list[ResolutionCandidate]) -> list[tuple[str, str]]:
    return [candidate.key for candidate in plan]


# ============================================================================
# chains_in_scope Tests
# ============================================================================


class TestChainsInScope:
    """Tests for chain scoping."""

    def test_hint(self):
        assert chains_in_scope("base", CHAINS) == ["base"]

    def test_all_and_none(self):
        assert chains_in_scope("all", CHAINS) == CHAINS
        assert chains_in_scope(None, CHAINS) == CHAINS


# ============================================================================
# plan_candidates Tests
# ============================================================================


class TestPlanCandidates:
    """Tests for the ordered probe plan."""

    def test_no_hints_no_record(self):
        """Registered types sweep every chain, then fallback types do."""
        plan = plan_candidates(
            supported_chains=CHAINS,
            registered_types=REGISTERED,
            fallback_types=FALLBACK,
        )
        assert keys(plan) == [
            ("ethereum", "nft"),
            ("base", "nft"),
            ("zora", "nft"),
            ("ethereum", "book"),
            ("base", "book"),
            ("zora", "book"),
            ("ethereum", "alexandria_book"),
            ("base", "alexandria_book"),
            ("zora", "alexandria_book"),
            ("ethereum", "publication"),
            ("base", "publication"),
            ("zora", "publication"),
        ]
        assert {c.source for c in plan[:6]} == {CandidateSource.REGISTERED_TYPE}
        assert {c.source for c in plan[6:]} == {CandidateSource.FALLBACK_TYPE}

    def test_registry_record_first(self):
        """The curated (chain, type) is probed before any sweep."""
        record = ContentRecord(address="0xAA", chain="base", type="book")
        plan = plan_candidates(
            supported_chains=CHAINS,
            registered_types=REGISTERED,
            fallback_types=FALLBACK,
            record=record,
        )
        assert plan[0].key == ("base", "book")
        assert plan[0].source == CandidateSource.REGISTRY
        assert keys(plan).count(("base", "book")) == 1

    def test_explicit_chain_overrides_record_chain(self):
        record = ContentRecord(address="0xAA", chain="base", type="book")
        plan = plan_candidates(
            supported_chains=CHAINS,
            registered_types=REGISTERED,
            fallback_types=FALLBACK,
            record=record,
            chain_hint="zora",
        )
        assert plan[0].key == ("zora", "book")
        assert all(candidate.chain == "zora" for candidate in plan)

    def test_type_hint_on_every_chain_first(self):
        plan = plan_candidates(
            supported_chains=CHAINS,
            registered_types=REGISTERED,
            fallback_types=FALLBACK,
            type_hint="book",
        )
        assert keys(plan)[:3] == [("ethereum", "book"), ("base", "book"), ("zora", "book")]
        assert {c.source for c in plan[:3]} == {CandidateSource.TYPE_HINT}

    def test_each_pair_once(self):
        """Hints, registry and sweeps never repeat a (chain, type) pair."""
        record = ContentRecord(address="0xAA", chain="base", type="nft")
        plan = plan_candidates(
            supported_chains=CHAINS,
            registered_types=REGISTERED,
            fallback_types=["nft", "publication"],
            record=record,
            type_hint="nft",
        )
        assert len(keys(plan)) == len(set(keys(plan)))

    def test_fallback_already_registered_skipped(self):
        plan = plan_candidates(
            supported_chains=["base"],
            registered_types=REGISTERED,
            fallback_types=["book", "publication"],
        )
        assert keys(plan) == [("base", "nft"), ("base", "book"), ("base", "publication")]
        assert plan[1].source == CandidateSource.REGISTERED_TYPE

    def test_type_scope_restricts_sweeps(self):
        """Out-of-scope registry types and sweeps are dropped."""
        record = ContentRecord(address="0xAA", chain="base", type="nft")
        plan = plan_candidates(
            supported_chains=["base"],
            registered_types=REGISTERED,
            fallback_types=FALLBACK,
            record=record,
            type_scope=("book", "alexandria_book"),
        )
        assert keys(plan) == [("base", "book"), ("base", "alexandria_book")]

    def test_unknown_record_type_is_planned(self):
        """A curated type outside the registered set is still tried first."""
        record = ContentRecord(address="0xAA", chain="ethereum", type="publication")
        plan = plan_candidates(
            supported_chains=CHAINS,
            registered_types=REGISTERED,
            fallback_types=[],
            record=record,
        )
        assert plan[0].key == ("ethereum", "publication")

    def test_candidate_str(self):
        candidate = ResolutionCandidate("base", "book", CandidateSource.REGISTRY)
        assert str(candidate) == "book@base"
