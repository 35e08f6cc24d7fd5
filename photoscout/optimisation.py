"""
Stop‑order optimisation for PhotoScout trips.

This module reorders the stops of a multi‑stop trip so that the total
straight‑line travel distance is as short as practical. It combines
two classic travelling salesman heuristics:

    - ``nearest_neighbor``: build an initial route by repeatedly
      visiting the nearest unvisited stop.
    - ``two_opt``: refine a route by reversing segments while doing so
      shortens it.

Routes are open paths: the trip starts at one stop and ends at another,
so there is no edge from the last stop back to the first. The first
and/or last stop can be pinned in place.

Distances are haversine (great‑circle) meters, a proxy for ranking
orders only. Real road distances and travel times come from
:mod:`photoscout.routing` once the order is chosen.

Example usage:

    stops = [OptimizableStop("a", Coordinates(35.65, 139.74)), ...]
    result = optimise_stop_order(stops, fix_first_stop=True)
    ordered = apply_order(stops, result.new_order)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Sequence, TypeVar

from photoscout.geo import Coordinates, calculate_distance

logger = logging.getLogger(__name__)

# Minimum gain for a 2‑opt move; smaller deltas are floating point noise.
IMPROVEMENT_EPSILON = 1e-10
# Upper bound on full 2‑opt sweeps. Realistic trips converge in a few.
DEFAULT_MAX_SWEEPS = 500

T = TypeVar("T")


@dataclass(frozen=True)
class OptimizableStop:
    """A stop as seen by the optimiser.

    ``id`` is passed through untouched so callers can map the result
    back to their own objects; only ``coordinates`` affect the order.
    """

    id: Any
    coordinates: Coordinates


@dataclass(frozen=True)
class OptimizationResult:
    new_order: List[int]
    original_distance: float  # meters, input order
    optimized_distance: float  # meters, new_order
    improvement_percent: int  # 0-100


def build_distance_matrix(stops: Sequence[OptimizableStop]) -> List[List[float]]:
    """Compute the pairwise haversine distance matrix for ``stops``.

    Only the upper triangle is evaluated; each value is mirrored so the
    matrix is symmetric with a zero diagonal.

    Args:
        stops: Stops in their input order.

    Returns:
        An N×N list of lists where ``matrix[i][j]`` is the distance in
        meters between stop ``i`` and stop ``j``.
    """
    n = len(stops)
    matrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            dist = calculate_distance(stops[i].coordinates, stops[j].coordinates)
            matrix[i][j] = dist
            matrix[j][i] = dist
    return matrix


def route_distance(dist_matrix: Sequence[Sequence[float]], order: Sequence[int]) -> float:
    """Total length of an open path visiting ``order``."""
    length = 0.0
    for i in range(len(order) - 1):
        length += dist_matrix[order[i]][order[i + 1]]
    return length


def nearest_neighbor(dist_matrix: Sequence[Sequence[float]], start: int = 0) -> List[int]:
    """Construct an initial route using the nearest neighbor heuristic.

    Ties are broken by index: when several unvisited stops are equally
    close, the lowest index wins.

    Args:
        dist_matrix: A square matrix of distances.
        start: Index of the start stop in the matrix.

    Returns:
        A list of indices representing the visiting order, starting
        with ``start`` and including all other indices exactly once.
    """
    n = len(dist_matrix)
    if n == 0:
        return []
    visited = [False] * n
    visited[start] = True
    route = [start]
    current = start
    while len(route) < n:
        nearest = -1
        nearest_dist = math.inf
        for j in range(n):
            if not visited[j] and dist_matrix[current][j] < nearest_dist:
                nearest = j
                nearest_dist = dist_matrix[current][j]
        if nearest == -1:
            # only reachable with NaN distances; keep the permutation complete
            nearest = visited.index(False)
        route.append(nearest)
        visited[nearest] = True
        current = nearest
    return route


def two_opt(
    dist_matrix: Sequence[Sequence[float]],
    route: Sequence[int],
    fix_first: bool = True,
    fix_last: bool = False,
    max_sweeps: int = DEFAULT_MAX_SWEEPS,
) -> List[int]:
    """Perform open‑path 2‑opt optimisation on a given route.

    Each candidate move reverses ``route[i..j]``. Only the two edges at
    the segment boundaries change, and a boundary at either end of the
    path has no edge at all, since the path does not wrap around. The
    first improving move found is applied at once and the sweep carries
    on; sweeps repeat until one completes without an improvement.

    Args:
        dist_matrix: Square matrix of distances corresponding to the
            indices in ``route``.
        route: Initial route as a list of indices. It is not modified.
        fix_first: Keep the stop at position 0 in place.
        fix_last: Keep the stop at the final position in place.
        max_sweeps: Stop after this many full sweeps even if the last
            one still improved the route.

    Returns:
        A new route that is never longer than ``route``.
    """
    best = list(route)
    n = len(best)
    start = 1 if fix_first else 0
    end = n - 1 if fix_last else n

    improved = True
    sweeps = 0
    while improved:
        if sweeps >= max_sweeps:
            logger.warning("2-opt stopped after %d sweeps without converging (%d stops)", sweeps, n)
            break
        improved = False
        sweeps += 1
        for i in range(start, end - 1):
            for j in range(i + 1, end):
                a, b = best[i], best[j]
                before = best[i - 1] if i > 0 else None
                after = best[j + 1] if j < n - 1 else None
                current_cost = 0.0
                new_cost = 0.0
                if before is not None:
                    current_cost += dist_matrix[before][a]
                    new_cost += dist_matrix[before][b]
                if after is not None:
                    current_cost += dist_matrix[b][after]
                    new_cost += dist_matrix[a][after]
                if new_cost < current_cost - IMPROVEMENT_EPSILON:
                    best[i:j + 1] = best[i:j + 1][::-1]
                    improved = True
    logger.debug("2-opt finished after %d sweeps", sweeps)
    return best


def improvement_percent(original: float, optimized: float) -> int:
    """Percentage saved by the optimised order, rounded half up, in 0‑100."""
    if not original > 0:
        return 0
    ratio = (original - optimized) / original * 100.0
    if not ratio > 0:
        return 0
    return min(100, int(math.floor(ratio + 0.5)))


def optimise_stop_order(
    stops: Sequence[OptimizableStop],
    fix_first_stop: bool = True,
    fix_last_stop: bool = False,
) -> OptimizationResult:
    """Optimise the visiting order of ``stops`` to minimise travel distance.

    Builds a nearest neighbor route from the first stop, optionally
    moves the last input stop back to the end, then refines the route
    with 2‑opt. Trips of two stops or fewer are returned unchanged.

    Args:
        stops: Stops in their current order.
        fix_first_stop: Keep the first stop first.
        fix_last_stop: Keep the last stop last.

    Returns:
        An ``OptimizationResult`` whose ``new_order`` indexes into ``stops``.
    """
    n = len(stops)
    identity = list(range(n))
    if n <= 2:
        dist = calculate_distance(stops[0].coordinates, stops[1].coordinates) if n == 2 else 0.0
        return OptimizationResult(
            new_order=identity,
            original_distance=dist,
            optimized_distance=dist,
            improvement_percent=0,
        )

    dist_matrix = build_distance_matrix(stops)
    original_dist = route_distance(dist_matrix, identity)

    order = nearest_neighbor(dist_matrix, start=0)
    if fix_last_stop:
        last = n - 1
        order.remove(last)
        order.append(last)

    order = two_opt(dist_matrix, order, fix_first=fix_first_stop, fix_last=fix_last_stop)
    optimized_dist = route_distance(dist_matrix, order)

    if optimized_dist > original_dist:
        # 2-opt refines the greedy route, not the input order, so it can
        # settle in a worse local optimum than the one supplied
        logger.debug("Optimised route longer than input (%.1f m > %.1f m); keeping input order",
                     optimized_dist, original_dist)
        order = identity
        optimized_dist = original_dist

    result = OptimizationResult(
        new_order=order,
        original_distance=original_dist,
        optimized_distance=optimized_dist,
        improvement_percent=improvement_percent(original_dist, optimized_dist),
    )
    logger.debug("Optimised %d stops: %.1f m -> %.1f m (%d%%)",
                 n, original_dist, optimized_dist, result.improvement_percent)
    return result


def apply_order(items: Sequence[T], new_order: Sequence[int]) -> List[T]:
    """Return ``items`` rearranged according to ``new_order``.

    Raises:
        ValueError: If ``new_order`` is not a permutation of the item indices.
    """
    if sorted(new_order) != list(range(len(items))):
        raise ValueError(f"order {list(new_order)!r} is not a permutation of {len(items)} items")
    return [items[i] for i in new_order]
