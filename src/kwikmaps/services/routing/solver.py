"""Open-path tour construction and 2-opt improvement."""

from __future__ import annotations

import logging
from typing import Sequence

from .models import TourSolution

logger = logging.getLogger(__name__)


def tour_length(tour: Sequence[int], distance_matrix: Sequence[Sequence[float]]) -> float:
    """Sum of consecutive leg distances. The path is open: no return leg."""
    total = 0.0
    for index in range(len(tour) - 1):
        total += distance_matrix[tour[index]][tour[index + 1]]
    return total


def nearest_neighbor_tour(distance_matrix: Sequence[Sequence[float]], start: int = 0) -> list[int]:
    """Build a tour greedily by always moving to the closest unvisited index.

    Ties go to the lowest index because candidates are scanned in ascending
    order with a strict comparison.
    """
    count = len(distance_matrix)
    if count == 0:
        return []

    visited = [False] * count
    tour = [start]
    visited[start] = True

    for _ in range(count - 1):
        current = tour[-1]
        nearest = -1
        min_distance = float("inf")
        for candidate in range(count):
            if not visited[candidate] and distance_matrix[current][candidate] < min_distance:
                min_distance = distance_matrix[current][candidate]
                nearest = candidate
        tour.append(nearest)
        visited[nearest] = True

    return tour


def two_opt_improve(
    tour: Sequence[int],
    distance_matrix: Sequence[Sequence[float]],
    *,
    wrap_boundary: bool = True,
) -> tuple[list[int], int]:
    """Apply first-improvement 2-opt until a full scan finds no improving move.

    With ``wrap_boundary`` the last element's missing successor is replaced by
    ``tour[0]`` when scoring a move, so the comparison is made against a
    virtual closing edge. Without it the missing edge costs nothing, which is
    plain open-path 2-opt.

    Returns the improved tour (a new list) and the number of accepted moves.
    """
    best = list(tour)
    count = len(best)
    swaps = 0
    improved = True

    while improved:
        improved = False
        for i in range(count - 1):
            for k in range(i + 2, count):
                a = best[i]
                b = best[i + 1]
                c = best[k]
                if k + 1 < count:
                    d = best[k + 1]
                elif wrap_boundary:
                    d = best[0]
                else:
                    d = None

                if d is None:
                    current_distance = distance_matrix[a][b]
                    new_distance = distance_matrix[a][c]
                else:
                    current_distance = distance_matrix[a][b] + distance_matrix[c][d]
                    new_distance = distance_matrix[a][c] + distance_matrix[b][d]

                if new_distance < current_distance:
                    best[i + 1 : k + 1] = best[i + 1 : k + 1][::-1]
                    swaps += 1
                    improved = True
                    break
            if improved:
                break

    return best, swaps


def solve_tour(distance_matrix: Sequence[Sequence[float]], *, wrap_boundary: bool = True) -> TourSolution:
    """Nearest-neighbor construction from index 0 followed by 2-opt refinement."""
    initial_tour = nearest_neighbor_tour(distance_matrix)
    initial_distance = tour_length(initial_tour, distance_matrix)

    improved_tour, swaps = two_opt_improve(initial_tour, distance_matrix, wrap_boundary=wrap_boundary)
    improved_distance = tour_length(improved_tour, distance_matrix)

    # The wrap-around score can accept a move that lengthens the open path.
    if improved_distance > initial_distance:
        logger.debug(
            f"2-opt result ({improved_distance:.3f} km) longer than nearest neighbor "
            f"({initial_distance:.3f} km); keeping nearest-neighbor tour"
        )
        improved_tour = list(initial_tour)
        improved_distance = initial_distance
        swaps = 0

    logger.debug(
        f"Solved tour over {len(distance_matrix)} waypoints: "
        f"{initial_distance:.3f} km -> {improved_distance:.3f} km after {swaps} swaps"
    )
    return TourSolution(
        tour=improved_tour,
        initial_tour=initial_tour,
        initial_distance_km=initial_distance,
        distance_km=improved_distance,
        swaps=swaps,
    )
