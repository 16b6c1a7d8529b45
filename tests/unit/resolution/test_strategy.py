"""Tests for address resolution."""

from __future__ import annotations

import pytest

from pagehub.core.exceptions import MissingParameterError, ResolutionNotFound, ValidationError
from pagehub.core.models import ContentRecord
from pagehub.core.types import ResolutionStatus
from pagehub.resolution.probe import ProbeFailure
from pagehub.resolution.strategy import ResolutionOutcome, StrategyConfig

# ============================================================================
# StrategyConfig Tests
# ============================================================================


class TestStrategyConfig:
    """Tests for StrategyConfig dataclass."""

    def test_default_values(self):
        """Default config should probe sequentially."""
        config = StrategyConfig()
        assert config.parallel_probes is False
        assert config.probe_timeout == 10.0
        assert config.total_timeout == 60.0


# ============================================================================
# ResolutionOutcome Tests
# ============================================================================


class TestResolutionOutcome:
    """Tests for ResolutionOutcome."""

    def test_empty_outcome_not_found(self):
        outcome = ResolutionOutcome(address="0xCC")
        assert outcome.found is False
        assert outcome.resolved is None
        assert outcome.last_error is None

    def test_require_raises(self):
        """require() on a failed outcome should raise ResolutionNotFound."""
        with pytest.raises(ResolutionNotFound) as exc_info:
            ResolutionOutcome(address="0xCC").require()
        assert exc_info.value.address == "0xCC"

    def test_timed_out_error(self):
        outcome = ResolutionOutcome(address="0xCC", timed_out=True)
        assert outcome.last_error == "Resolution timed out"


# ============================================================================
# Validation Tests
# ============================================================================


class TestValidation:
    """Tests for hint validation."""

    def test_chain_normalized(self, strategy):
        assert strategy.validate_chain(" Base ") == "base"

    @pytest.mark.parametrize("value", [None, "", "all", "ALL"])
    def test_chain_all(self, strategy, value):
        """Missing chain and 'all' both mean every supported chain."""
        assert strategy.validate_chain(value) is None

    def test_unsupported_chain(self, strategy):
        with pytest.raises(ValidationError) as exc_info:
            strategy.validate_chain("solana")
        assert exc_info.value.details["supported"] == ["ethereum", "base", "zora"]

    def test_known_types(self, strategy):
        assert strategy.known_types == ["nft", "book", "alexandria_book", "publication"]

    def test_unknown_type(self, strategy):
        with pytest.raises(ValidationError):
            strategy.validate_type("video")

    async def test_blank_address(self, strategy):
        with pytest.raises(MissingParameterError):
            await strategy.resolve("  ")

    async def test_invalid_chain_before_any_probe(self, strategy, world):
        with pytest.raises(ValidationError):
            await strategy.resolve("0xAA", chain_hint="solana")
        assert world.calls == []


# ============================================================================
# Resolution Tests
# ============================================================================


class TestResolve:
    """Tests for ResolutionStrategy.resolve."""

    async def test_registry_hit(self, strategy, world):
        """Curated address resolves on its curated chain and type first."""
        world.add("0xAA", "base", "book", info={"name": "X"})

        outcome = await strategy.resolve("0xAA")

        assert outcome.found
        assert outcome.resolved.chain == "base"
        assert outcome.resolved.content_type == "book"
        assert outcome.resolved.collection_info["name"] == "X"
        assert world.calls == [("0xAA", "base", "book")]

    async def test_registry_lookup_case_insensitive(self, strategy, world):
        world.add("0xaa", "base", "book")
        outcome = await strategy.resolve("0xaa")
        assert outcome.record is not None
        assert outcome.record.address == "0xAA"

    async def test_sweep_finds_single_pair(self, make_strategy, world):
        """Only (nft, zora) validates; the sweep finds exactly that pair."""
        world.add("0xBB", "zora", "nft", info={"name": "Z"})
        strategy = make_strategy()

        outcome = await strategy.resolve("0xBB", chain_hint="all")

        assert outcome.resolved.chain == "zora"
        assert outcome.resolved.content_type == "nft"
        assert outcome.candidates_tried == ["nft@ethereum", "nft@base", "nft@zora"]

    async def test_type_hint_probed_first(self, make_strategy, world):
        world.add("0xBB", "ethereum", "nft")
        world.add("0xBB", "base", "book")
        strategy = make_strategy()

        outcome = await strategy.resolve("0xBB", type_hint="book")

        assert outcome.resolution.candidate.key == ("base", "book")

    async def test_fallback_type_last(self, make_strategy, world):
        """Convention types are only reached after every registered type fails."""
        world.add("0xEE", "base", "alexandria_book")
        strategy = make_strategy()

        outcome = await strategy.resolve("0xEE")

        assert outcome.resolved.content_type == "alexandria_book"
        assert len(outcome.attempts) == 8

    async def test_fallback_failure_continues(self, make_strategy, world):
        """A failing fallback type never stops later ones from being tried."""
        world.add("0xEE", "ethereum", "alexandria_book", error="reverted")
        world.add("0xEE", "ethereum", "publication")
        strategy = make_strategy()

        outcome = await strategy.resolve("0xEE", chain_hint="ethereum")

        assert outcome.resolved.content_type == "publication"

    async def test_not_found_is_terminal(self, make_strategy, world):
        """Exhausting every candidate yields no partial success."""
        strategy = make_strategy()

        outcome = await strategy.resolve("0xCC")

        assert outcome.found is False
        assert outcome.resolution is None
        assert len(outcome.attempts) == 12
        assert all(isinstance(a, ProbeFailure) for a in outcome.attempts)
        with pytest.raises(ResolutionNotFound):
            outcome.require()

    async def test_chain_hint_limits_sweep(self, make_strategy, world):
        world.add("0xBB", "zora", "nft")
        strategy = make_strategy()

        outcome = await strategy.resolve("0xBB", chain_hint="base")

        assert outcome.found is False
        assert all(chain == "base" for _, chain, _ in world.calls)

    async def test_type_scope(self, make_strategy, world):
        world.add("0xBB", "base", "nft")
        strategy = make_strategy()

        outcome = await strategy.resolve("0xBB", type_scope=("book", "alexandria_book"))

        assert outcome.found is False
        assert {content_type for _, _, content_type in world.calls} == {"book", "alexandria_book"}

    @pytest.mark.parametrize("parallel", [False, True])
    async def test_first_success_is_deterministic(self, make_strategy, world, parallel):
        """The winner is the first success in plan order, however fast others finish."""
        world.add("0xBB", "ethereum", "book", delay=0.05)
        world.add("0xBB", "zora", "nft", delay=0.0)
        world.add("0xBB", "base", "book")
        strategy = make_strategy(parallel=parallel)

        winners = {(await strategy.resolve("0xBB")).resolution.candidate.key for _ in range(3)}

        assert winners == {("zora", "nft")}

    async def test_parallel_prefers_plan_order_over_speed(self, make_strategy, world):
        world.add("0xBB", "ethereum", "nft", delay=0.1)
        world.add("0xBB", "base", "nft")
        strategy = make_strategy(parallel=True)

        outcome = await strategy.resolve("0xBB")

        assert outcome.resolution.candidate.key == ("ethereum", "nft")

    async def test_probe_timeout_moves_on(self, make_strategy, world):
        world.add("0xBB", "ethereum", "nft", delay=1.0)
        world.add("0xBB", "base", "nft")
        strategy = make_strategy(probe_timeout=0.05)

        outcome = await strategy.resolve("0xBB")

        assert outcome.attempts[0].status == ResolutionStatus.TIMEOUT
        assert outcome.resolution.candidate.key == ("base", "nft")

    async def test_total_timeout(self, make_strategy, world):
        world.add("0xBB", "ethereum", "nft", delay=1.0)
        strategy = make_strategy(probe_timeout=5.0, total_timeout=0.05)

        outcome = await strategy.resolve("0xBB")

        assert outcome.timed_out is True
        assert outcome.found is False
        assert outcome.last_error == "Resolution timed out"

    async def test_registry_record_on_other_chain(self, make_strategy, world):
        """An explicit chain overrides the curated chain for the registry candidate."""
        world.add("0xAA", "zora", "book")
        strategy = make_strategy([ContentRecord(address="0xAA", chain="base", type="book")])

        outcome = await strategy.resolve("0xAA", chain_hint="zora")

        assert outcome.resolution.candidate.key == ("zora", "book")
        assert world.calls[0] == ("0xAA", "zora", "book")
