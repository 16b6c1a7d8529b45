"""Candidate planning, probing, resolution and merging."""

from .candidates import ResolutionCandidate, chains_in_scope, plan_candidates
from .merge import (
    FETCH_ERROR,
    FROM_REGISTRY,
    degraded_item,
    merge_content,
    merge_or_degrade,
    registry_fallback,
)
from .probe import ProbeFailure, ProbeResult, ProbeSuccess, TrackerProbe
from .strategy import ResolutionOutcome, ResolutionStrategy, StrategyConfig

__all__ = [
    "FETCH_ERROR",
    "FROM_REGISTRY",
    "ProbeFailure",
    "ProbeResult",
    "ProbeSuccess",
    "ResolutionCandidate",
    "ResolutionOutcome",
    "ResolutionStrategy",
    "StrategyConfig",
    "TrackerProbe",
    "chains_in_scope",
    "degraded_item",
    "merge_content",
    "merge_or_degrade",
    "plan_candidates",
    "registry_fallback",
]
