"""Distance calculation utilities using Haversine formula."""

import math

import numpy as np

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in km between two (lat, lon) points in degrees.

    Plain-math reference form of haversine_array()/haversine_matrix(),
    which the clustering code uses. Handy for one-off distances and as an
    independent check of the vectorized versions in tests.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    half_dphi = math.radians(lat2 - lat1) / 2
    half_dlambda = math.radians(lon2 - lon1) / 2

    a = math.sin(half_dphi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_dlambda) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(a, 1.0)))


def haversine_array(lat1, lon1, lat2, lon2) -> np.ndarray:
    """
    Element-wise Haversine over numpy arrays (broadcasting applies).

    Returns:
        Distances in kilometers
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    delta_lat = lat2_rad - lat1_rad
    delta_lon = np.radians(lon2) - np.radians(lon1)

    a = (
        np.sin(delta_lat / 2) ** 2
        + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(delta_lon / 2) ** 2
    )
    # Rounding can push a slightly outside [0, 1] for antipodal points
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def haversine_matrix(lats_a, lons_a, lats_b, lons_b) -> np.ndarray:
    """
    Vectorized Haversine between two sets of points.

    Args:
        lats_a, lons_a: Coordinates of the first set (degrees)
        lats_b, lons_b: Coordinates of the second set (degrees)

    Returns:
        Array of shape (len(a), len(b)) with distances in kilometers
    """
    lats_a = np.asarray(lats_a, dtype=float)[:, np.newaxis]
    lons_a = np.asarray(lons_a, dtype=float)[:, np.newaxis]
    lats_b = np.asarray(lats_b, dtype=float)[np.newaxis, :]
    lons_b = np.asarray(lons_b, dtype=float)[np.newaxis, :]

    return haversine_array(lats_a, lons_a, lats_b, lons_b)


def chord_length(distance_km: float) -> float:
    """
    Straight-line distance on the unit sphere for a surface distance.

    Lets a KD-tree built on 3-D unit vectors answer "within distance_km"
    queries without projecting coordinates.
    """
    angle = min(distance_km / EARTH_RADIUS_KM, math.pi)
    return 2 * math.sin(angle / 2)


def to_unit_vectors(lats, lons) -> np.ndarray:
    """Convert degree coordinates to 3-D points on the unit sphere."""
    lat_rad = np.radians(np.asarray(lats, dtype=float))
    lon_rad = np.radians(np.asarray(lons, dtype=float))
    cos_lat = np.cos(lat_rad)
    return np.column_stack(
        (cos_lat * np.cos(lon_rad), cos_lat * np.sin(lon_rad), np.sin(lat_rad))
    )
