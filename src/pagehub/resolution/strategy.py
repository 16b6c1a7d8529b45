"""Resolution of an ambiguous address into a validated tracker."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pagehub.core.exceptions import MissingParameterError, ResolutionNotFound, ValidationError
from pagehub.core.models import ContentRecord, ResolvedContent
from pagehub.core.types import ALL_CHAINS
from pagehub.registry.index import RegistryIndex
from pagehub.resolution.candidates import ResolutionCandidate, plan_candidates
from pagehub.resolution.probe import ProbeFailure, ProbeResult, ProbeSuccess, TrackerProbe
from pagehub.trackers.base import TrackerProvider

if TYPE_CHECKING:
    from pagehub.config import PageHubSettings

logger = logging.getLogger(__name__)


@dataclass
class StrategyConfig:
    """Configuration for candidate probing."""

    # Probe every candidate concurrently, then pick the first success in plan order
    parallel_probes: bool = False

    # Timeout for a single probe (seconds)
    probe_timeout: float = 10.0

    # Timeout for the whole resolution (seconds)
    total_timeout: float = 60.0


@dataclass
class ResolutionOutcome:
    """Everything a resolution attempt produced."""

    address: str
    record: ContentRecord | None = None
    resolution: ProbeSuccess | None = None
    attempts: list[ProbeResult] = field(default_factory=list)
    timed_out: bool = False

    @property
    def found(self) -> bool:
        return self.resolution is not None

    @property
    def candidates_tried(self) -> list[str]:
        return [str(attempt.candidate) for attempt in self.attempts]

    @property
    def last_error(self) -> str | None:
        failures = [a for a in self.attempts if isinstance(a, ProbeFailure)]
        if self.timed_out:
            return "Resolution timed out"
        return failures[-1].error if failures else None

    @property
    def resolved(self) -> ResolvedContent | None:
        if self.resolution is None:
            return None
        return ResolvedContent(
            address=self.address,
            chain=self.resolution.chain,
            type=self.resolution.content_type,
            collection_info=self.resolution.collection_info,
        )

    def require(self) -> ProbeSuccess:
        """The successful probe, or `ResolutionNotFound`."""
        if self.resolution is None:
            raise ResolutionNotFound(
                message=f"No content found at {self.address}",
                address=self.address,
                attempts=len(self.attempts),
                details={"candidates": self.candidates_tried},
            )
        return self.resolution


class ResolutionStrategy:
    """
    Resolves (address, chain hint, type hint) into a validated tracker.

    Candidates are planned up front (see `plan_candidates`) and probed in
    order; the first success wins. In parallel mode every candidate is probed
    concurrently and the winner is still the earliest success in plan order,
    so the outcome does not depend on which probe finishes first.

    The strategy holds no per-request state.
    """

    def __init__(
        self,
        registry: RegistryIndex,
        factory: TrackerProvider,
        supported_chains: Sequence[str],
        fallback_types: Sequence[str] = (),
        config: StrategyConfig | None = None,
    ) -> None:
        self.registry = registry
        self.factory = factory
        self.supported_chains = list(supported_chains)
        self.fallback_types = list(fallback_types)
        self.config = config or StrategyConfig()
        self.probe = TrackerProbe(factory, timeout=self.config.probe_timeout)

    @classmethod
    def from_settings(
        cls,
        registry: RegistryIndex,
        factory: TrackerProvider,
        settings: PageHubSettings,
    ) -> ResolutionStrategy:
        return cls(
            registry,
            factory,
            supported_chains=settings.supported_chains,
            fallback_types=settings.fallback_content_types,
            config=StrategyConfig(
                parallel_probes=settings.parallel_probes,
                probe_timeout=settings.probe_timeout,
                total_timeout=settings.resolution_timeout,
            ),
        )

    @property
    def known_types(self) -> list[str]:
        types = list(self.factory.known_types)
        types.extend(t for t in self.fallback_types if t not in types)
        return types

    def validate_chain(self, chain: str | None) -> str | None:
        """Normalize a chain hint; `None` means every supported chain."""
        if chain is None or not chain.strip():
            return None
        chain = chain.strip().lower()
        if chain == ALL_CHAINS:
            return None
        if chain not in self.supported_chains:
            raise ValidationError(
                f"Invalid chain: {chain}",
                details={"supported": self.supported_chains},
            )
        return chain

    def validate_type(self, content_type: str | None) -> str | None:
        if content_type is None or not content_type.strip():
            return None
        content_type = content_type.strip().lower()
        if content_type not in self.known_types:
            raise ValidationError(
                f"Invalid content type: {content_type}",
                details={"supported": self.known_types},
            )
        return content_type

    def plan(
        self,
        address: str,
        chain_hint: str | None = None,
        type_hint: str | None = None,
        type_scope: Iterable[str] | None = None,
    ) -> list[ResolutionCandidate]:
        """The ordered probe plan for an address (hints must already be validated)."""
        return plan_candidates(
            supported_chains=self.supported_chains,
            registered_types=self.factory.registered_types,
            fallback_types=self.fallback_types,
            record=self.registry.lookup(address, chain_hint),
            chain_hint=chain_hint,
            type_hint=type_hint,
            type_scope=type_scope,
        )

    async def resolve(
        self,
        address: str,
        chain_hint: str | None = None,
        type_hint: str | None = None,
        type_scope: Iterable[str] | None = None,
    ) -> ResolutionOutcome:
        """
        Resolve an address.

        Args:
            address: Contract address (compared case-insensitively)
            chain_hint: Chain name, `"all"` or None
            type_hint: Content type to try first
            type_scope: Restrict registry and type sweeps to these types

        Returns:
            ResolutionOutcome; `found` is False when every candidate failed

        Raises:
            MissingParameterError: address is blank
            ValidationError: unsupported chain or unknown content type
        """
        if not address or not address.strip():
            raise MissingParameterError("Address is required")
        address = address.strip()
        chain_hint = self.validate_chain(chain_hint)
        type_hint = self.validate_type(type_hint)

        outcome = ResolutionOutcome(
            address=address,
            record=self.registry.lookup(address, chain_hint),
        )
        plan = self.plan(address, chain_hint, type_hint, type_scope)

        try:
            async with asyncio.timeout(self.config.total_timeout):
                if self.config.parallel_probes:
                    await self._run_parallel(address, plan, outcome)
                else:
                    await self._run_sequential(address, plan, outcome)
        except asyncio.TimeoutError:
            outcome.timed_out = True
            logger.warning(f"Resolution of {address} timed out after {len(outcome.attempts)} probes")

        if outcome.found:
            logger.info(
                f"Resolved {address} as {outcome.resolution.candidate} "
                f"after {len(outcome.attempts)} probe(s)"
            )
        else:
            logger.info(f"No content found at {address} ({len(plan)} candidates)")
        return outcome

    async def _run_sequential(
        self,
        address: str,
        plan: list[ResolutionCandidate],
        outcome: ResolutionOutcome,
    ) -> None:
        """Probe candidates one at a time, stopping on the first success."""
        for candidate in plan:
            result = await self.probe.probe(address, candidate)
            outcome.attempts.append(result)

            match result:
                case ProbeSuccess():
                    outcome.resolution = result
                    return
                case ProbeFailure():
                    continue

    async def _run_parallel(
        self,
        address: str,
        plan: list[ResolutionCandidate],
        outcome: ResolutionOutcome,
    ) -> None:
        """Probe every candidate concurrently; ties go to plan order."""
        results = await asyncio.gather(
            *(self.probe.probe(address, candidate) for candidate in plan)
        )
        outcome.attempts.extend(results)

        for result in results:
            if isinstance(result, ProbeSuccess):
                outcome.resolution = result
                return
