"""
Complete-linkage clustering of stations under a distance threshold.

Candidate pairs within the threshold are found with a KD-Tree and merged
greedily, closest first, as long as the farthest pair across the two
clusters stays within the threshold.
"""

import logging
import math
import time
from collections import defaultdict

import numpy as np
from scipy.spatial import cKDTree
from tqdm import tqdm

from src.geo.distance import chord_length, haversine_array, haversine_matrix, to_unit_vectors
from src.geo.stations import Station

from .union_find import DisjointSet

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE_KM = 25.0

# Relative slack on the KD-Tree radius; pairs are filtered exactly afterwards
RADIUS_TOLERANCE = 1e-9


def _coordinates(stations: list[Station]) -> tuple[np.ndarray, np.ndarray]:
    lats = np.array([s.lat for s in stations], dtype=float)
    lons = np.array([s.lon for s in stations], dtype=float)
    return lats, lons


def candidate_pairs(
    stations: list[Station], max_distance_km: float
) -> list[tuple[float, int, int]]:
    """
    Find every pair of stations within max_distance_km of each other.

    Pairs farther apart can never share a cluster, so they are never
    considered for a merge.

    Args:
        stations: Stations with valid coordinates
        max_distance_km: Distance threshold in kilometers

    Returns:
        List of (distance_km, i, j) with i < j, sorted by distance then
        by input index
    """
    if len(stations) < 2:
        return []

    lats, lons = _coordinates(stations)

    # Built on unit vectors so the chord radius matches great-circle distance
    tree = cKDTree(to_unit_vectors(lats, lons))
    radius = chord_length(max_distance_km) * (1 + RADIUS_TOLERANCE) + RADIUS_TOLERANCE
    pairs = tree.query_pairs(radius, output_type="ndarray")

    if len(pairs) == 0:
        return []

    first, second = pairs[:, 0], pairs[:, 1]
    distances = haversine_array(lats[first], lons[first], lats[second], lons[second])

    keep = distances <= max_distance_km
    first, second, distances = first[keep], second[keep], distances[keep]

    order = np.lexsort((second, first, distances))
    return [
        (float(distances[k]), int(first[k]), int(second[k]))
        for k in order
    ]


def complete_linkage(
    cluster_a: list[int], cluster_b: list[int], lats: np.ndarray, lons: np.ndarray
) -> float:
    """Largest distance between any member of cluster_a and any member of cluster_b."""
    distances = haversine_matrix(
        lats[cluster_a], lons[cluster_a], lats[cluster_b], lons[cluster_b]
    )
    return float(distances.max())


def cluster_stations(
    stations: list[Station],
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
    progress: bool = False,
) -> list[list[Station]]:
    """
    Partition stations into clusters of bounded diameter.

    Every station ends up in exactly one cluster, and no two stations of
    a cluster are more than max_distance_km apart.

    Args:
        stations: Stations with valid coordinates
        max_distance_km: Maximum great-circle distance inside a cluster
        progress: Show a progress bar over the candidate pairs

    Returns:
        Clusters ordered by the input position of their first station,
        each listing its stations in input order
    """
    if not math.isfinite(max_distance_km) or max_distance_km < 0:
        raise ValueError(f"max_distance_km must be a finite, non-negative number, got {max_distance_km}")

    if not stations:
        return []

    start = time.perf_counter()
    lats, lons = _coordinates(stations)
    candidates = candidate_pairs(stations, max_distance_km)
    logger.info(
        "Clustering %d stations: %d candidate pairs within %.1f km",
        len(stations),
        len(candidates),
        max_distance_km,
    )

    forest = DisjointSet(len(stations))
    members = {i: [i] for i in range(len(stations))}

    # Linkage per unordered root pair, dropped when either root merges
    linkage_cache: dict[tuple[int, int], float] = {}
    keys_by_root: dict[int, set[tuple[int, int]]] = defaultdict(set)

    merges = 0
    for distance, i, j in tqdm(candidates, desc="Clustering stations", disable=not progress):
        root_i = forest.find(i)
        root_j = forest.find(j)
        if root_i == root_j:
            continue

        key = (root_i, root_j) if root_i < root_j else (root_j, root_i)
        linkage = linkage_cache.get(key)
        if linkage is None:
            if len(members[root_i]) == 1 and len(members[root_j]) == 1:
                linkage = distance
            else:
                linkage = complete_linkage(members[root_i], members[root_j], lats, lons)
            linkage_cache[key] = linkage
            keys_by_root[root_i].add(key)
            keys_by_root[root_j].add(key)

        if linkage > max_distance_km:
            continue

        root = forest.union(root_i, root_j)
        absorbed = root_j if root == root_i else root_i
        members[root].extend(members.pop(absorbed))

        for stale_root in (root_i, root_j):
            for stale_key in keys_by_root.pop(stale_root, ()):
                linkage_cache.pop(stale_key, None)
        merges += 1

    clusters = sorted((sorted(indices) for indices in members.values()), key=lambda c: c[0])

    logger.info(
        "Formed %d clusters from %d stations (%d merges) in %.2fs",
        len(clusters),
        len(stations),
        merges,
        time.perf_counter() - start,
    )
    return [[stations[k] for k in cluster] for cluster in clusters]
