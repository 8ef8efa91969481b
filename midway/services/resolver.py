"""Equidistant point resolution.

Given the A->B route, samples candidate points along it, asks the
duration oracle how long A->point and point->B take for every
candidate, and keeps the candidate whose two travel times are
closest.

Per-candidate queries run concurrently and the resolver waits for
all of them. Each query outcome is captured as a LegResult; what a
failed leg means is decided in exactly one place,
``apply_failure_policy``:

- ``LegFailurePolicy.ZERO`` counts a failed leg as 0 seconds. This is
  the historical behaviour and an approximation: it favours candidates
  whose real travel time is unknown.
- ``LegFailurePolicy.DISCARD`` drops any candidate with a failed leg.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..config import ResolverConfig
from ..domain.errors import DurationQueryError
from ..domain.models import Candidate, Coordinate, Route, TransportMode
from ..ports.routing import DurationOraclePort
from .sampler import DEFAULT_SAMPLE_COUNT, sample_route


class LegFailurePolicy(Enum):
    """What a failed per-candidate duration query counts as."""

    ZERO = "zero"
    DISCARD = "discard"


@dataclass(frozen=True, slots=True)
class LegResult:
    """Outcome of one duration query: a duration or an error."""

    duration: Optional[float] = None
    error: Optional[DurationQueryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.duration is not None


def apply_failure_policy(
    to_point: LegResult,
    from_point: LegResult,
    policy: LegFailurePolicy,
) -> Optional[Tuple[float, float, bool]]:
    """Turn two leg results into usable durations.

    Returns:
        ``(start_duration, end_duration, degraded)``, or None when the
        policy discards the candidate.
    """
    degraded = not (to_point.ok and from_point.ok)
    if degraded and policy is LegFailurePolicy.DISCARD:
        return None
    start_duration = to_point.duration if to_point.ok else 0.0
    end_duration = from_point.duration if from_point.ok else 0.0
    return float(start_duration), float(end_duration), degraded


def select_best(candidates: Sequence[Candidate]) -> Optional[Candidate]:
    """Candidate with the smallest time difference.

    Ties go to the candidate that comes first, i.e. closest to the
    start of the route. Total time is not a tie-break.
    """
    if not candidates:
        return None
    return min(candidates, key=lambda c: c.time_difference)


@dataclass(frozen=True)
class ResolutionReport:
    """Everything one resolution pass computed.

    Attributes:
        sampled: Candidate points in sample order
        candidates: Candidates that survived the failure policy
        winner: Best candidate, or None if none is usable
        degraded_legs: Number of failed duration queries
    """

    sampled: Tuple[Coordinate, ...]
    candidates: Tuple[Candidate, ...]
    winner: Optional[Candidate]
    degraded_legs: int

    @property
    def point(self) -> Optional[Coordinate]:
        return self.winner.point if self.winner is not None else None


@dataclass
class EquidistantResolver:
    """Finds the route point with the most balanced travel times.

    Attributes:
        oracle: Duration oracle used for every leg query
        sample_count: Number of candidates sampled along the route
        failure_policy: Meaning of a failed leg query
        max_concurrency: Optional cap on in-flight leg queries
    """

    oracle: DurationOraclePort
    sample_count: int = DEFAULT_SAMPLE_COUNT
    failure_policy: LegFailurePolicy = LegFailurePolicy.ZERO
    max_concurrency: Optional[int] = None

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_config(
        cls,
        oracle: DurationOraclePort,
        config: ResolverConfig,
    ) -> EquidistantResolver:
        return cls(
            oracle=oracle,
            sample_count=config.sample_count,
            failure_policy=LegFailurePolicy(config.failure_policy),
            max_concurrency=config.max_concurrency,
        )

    async def resolve(
        self,
        route: Route,
        start: Coordinate,
        end: Coordinate,
        mode: TransportMode,
    ) -> Optional[Coordinate]:
        """Resolve the equidistant point of a route.

        Returns:
            One of the sampled route coordinates, or None if no
            candidate has usable durations.
        """
        report = await self.evaluate(route, start, end, mode)
        return report.point

    async def evaluate(
        self,
        route: Route,
        start: Coordinate,
        end: Coordinate,
        mode: TransportMode,
    ) -> ResolutionReport:
        """Run one resolution pass and report every candidate.

        Args:
            route: The A->B route to sample.
            start: Point A.
            end: Point B.
            mode: Transport mode for all leg queries.

        Returns:
            A ResolutionReport. Its winner is None when no candidate
            survived the failure policy or when every leg failed.
        """
        sampled = sample_route(route.geometry, self.sample_count)
        self._logger.info(
            "Evaluating candidates",
            extra={
                "route_points": route.num_points,
                "samples": len(sampled),
                "mode": mode.value,
                "policy": self.failure_policy.value,
            },
        )

        semaphore = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        )
        queries = []
        for point in sampled:
            queries.append(self._query_leg(start, point, mode, "start", semaphore))
            queries.append(self._query_leg(point, end, mode, "end", semaphore))
        legs: List[LegResult] = list(await asyncio.gather(*queries))

        degraded_legs = sum(1 for leg in legs if not leg.ok)
        candidates: List[Candidate] = []
        informed = 0
        for index, point in enumerate(sampled):
            to_point, from_point = legs[2 * index], legs[2 * index + 1]
            durations = apply_failure_policy(to_point, from_point, self.failure_policy)
            if durations is None:
                continue
            start_duration, end_duration, degraded = durations
            if to_point.ok or from_point.ok:
                informed += 1
            candidates.append(
                Candidate(
                    index=index,
                    point=point,
                    start_duration=start_duration,
                    end_duration=end_duration,
                    degraded=degraded,
                )
            )

        if degraded_legs:
            self._logger.warning(
                "Duration queries failed during resolution",
                extra={
                    "degraded_legs": degraded_legs,
                    "total_legs": len(legs),
                    "policy": self.failure_policy.value,
                },
            )

        # Candidates with both legs failed carry no information.
        winner = select_best(candidates) if informed else None

        if winner is None:
            self._logger.info(
                "No resolvable midpoint",
                extra={"candidates": len(candidates), "degraded_legs": degraded_legs},
            )
        else:
            self._logger.info(
                "Midpoint resolved",
                extra={
                    "index": winner.index,
                    "time_difference": winner.time_difference,
                    "total_time": winner.total_time,
                },
            )

        return ResolutionReport(
            sampled=tuple(sampled),
            candidates=tuple(candidates),
            winner=winner,
            degraded_legs=degraded_legs,
        )

    async def _query_leg(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TransportMode,
        leg: str,
        semaphore: Optional[asyncio.Semaphore],
    ) -> LegResult:
        try:
            async with AsyncExitStack() as stack:
                if semaphore is not None:
                    await stack.enter_async_context(semaphore)
                route = await self.oracle.route(origin, destination, mode)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return LegResult(
                error=DurationQueryError(
                    f"Duration query for {leg} leg raised", leg=leg, cause=e
                )
            )

        if route is None:
            return LegResult(
                error=DurationQueryError(f"No route for {leg} leg", leg=leg)
            )
        return LegResult(duration=route.duration_seconds)
