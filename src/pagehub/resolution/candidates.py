"""Ordered candidate plans for address resolution."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from pagehub.core.models import ContentRecord
from pagehub.core.types import ALL_CHAINS, CandidateSource


@dataclass(frozen=True)
class ResolutionCandidate:
    """One (chain, content type) pair to probe, tagged with why it was planned."""

    chain: str
    content_type: str
    source: CandidateSource

    @property
    def key(self) -> tuple[str, str]:
        return (self.chain, self.content_type)

    def __str__(self) -> str:
        return f"{self.content_type}@{self.chain}"


def chains_in_scope(chain_hint: str | None, supported_chains: Sequence[str]) -> list[str]:
    """The hinted chain, or every supported chain in priority order."""
    if chain_hint and chain_hint != ALL_CHAINS:
        return [chain_hint]
    return list(supported_chains)


def plan_candidates(
    *,
    supported_chains: Sequence[str],
    registered_types: Sequence[str],
    fallback_types: Sequence[str],
    record: ContentRecord | None = None,
    chain_hint: str | None = None,
    type_hint: str | None = None,
    type_scope: Iterable[str] | None = None,
) -> list[ResolutionCandidate]:
    """
    Build the probe order for one address.

    1. Type hint on the hinted chain, or on every supported chain.
    2. The registry record's type on its chain (an explicit chain wins).
    3. Every registered type, in registration order, on every chain in scope.
    4. Fallback (convention) types, on every chain in scope.

    Pairs already planned are skipped, so each (chain, type) is probed at
    most once. `type_scope` restricts steps 2-4 to the given content types.
    """
    scope = chains_in_scope(chain_hint, supported_chains)
    allowed = set(type_scope) if type_scope is not None else None

    plan: list[ResolutionCandidate] = []
    seen: set[tuple[str, str]] = set()

    def add(chain: str, content_type: str, source: CandidateSource) -> None:
        if (chain, content_type) in seen:
            return
        seen.add((chain, content_type))
        plan.append(ResolutionCandidate(chain, content_type, source))

    def in_scope(content_type: str) -> bool:
        return allowed is None or content_type in allowed

    if type_hint:
        for chain in scope:
            add(chain, type_hint, CandidateSource.TYPE_HINT)

    if record is not None and in_scope(record.type):
        chain = chain_hint if chain_hint and chain_hint != ALL_CHAINS else record.chain
        add(chain, record.type, CandidateSource.REGISTRY)

    for content_type in registered_types:
        if not in_scope(content_type):
            continue
        for chain in scope:
            add(chain, content_type, CandidateSource.REGISTERED_TYPE)

    for content_type in fallback_types:
        if content_type in registered_types or not in_scope(content_type):
            continue
        for chain in scope:
            add(chain, content_type, CandidateSource.FALLBACK_TYPE)

    return plan
