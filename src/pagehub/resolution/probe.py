"""Single-candidate tracker probes."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from pagehub.core.types import ResolutionStatus
from pagehub.resolution.candidates import ResolutionCandidate
from pagehub.trackers.base import ContentTracker, TrackerProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeSuccess:
    """A candidate whose tracker validated."""

    candidate: ResolutionCandidate
    tracker: ContentTracker
    collection_info: dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    status = ResolutionStatus.SUCCESS

    @property
    def chain(self) -> str:
        return self.candidate.chain

    @property
    def content_type(self) -> str:
        return self.candidate.content_type


@dataclass(frozen=True)
class ProbeFailure:
    """A candidate that could not be constructed or validated."""

    candidate: ResolutionCandidate
    error: str
    status: ResolutionStatus = ResolutionStatus.ERROR
    duration_ms: float = 0.0


ProbeResult = ProbeSuccess | ProbeFailure


class TrackerProbe:
    """
    Builds a tracker for one candidate and validates it with a single
    `get_collection_info` call bounded by `timeout`.

    Never raises for adapter errors: every outcome is returned as a
    `ProbeSuccess` or `ProbeFailure`. There is no retry within a probe.
    """

    def __init__(self, factory: TrackerProvider, timeout: float = 10.0) -> None:
        self.factory = factory
        self.timeout = timeout

    async def probe(self, address: str, candidate: ResolutionCandidate) -> ProbeResult:
        start = time.monotonic()
        logger.debug(f"Probing {address} as {candidate} ({candidate.source})")

        try:
            tracker = self.factory.create(address, candidate.content_type, candidate.chain)
            async with asyncio.timeout(self.timeout):
                info = await tracker.get_collection_info()
        except asyncio.TimeoutError:
            logger.warning(f"Probe {candidate} for {address} timed out after {self.timeout}s")
            return ProbeFailure(
                candidate=candidate,
                error=f"Timed out after {self.timeout}s",
                status=ResolutionStatus.TIMEOUT,
                duration_ms=(time.monotonic() - start) * 1000,
            )
        except Exception as e:
            logger.warning(f"Probe {candidate} for {address} failed: {e}")
            return ProbeFailure(
                candidate=candidate,
                error=str(e) or type(e).__name__,
                duration_ms=(time.monotonic() - start) * 1000,
            )

        return ProbeSuccess(
            candidate=candidate,
            tracker=tracker,
            collection_info=dict(info or {}),
            duration_ms=(time.monotonic() - start) * 1000,
        )
