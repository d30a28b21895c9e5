"""Great-circle distance and bearing.

All angles are decimal degrees; distances are nautical miles on a sphere of
radius 3440.065 nm.

Typical usage:
    from airfinder.navigation.great_circle import distance_nm, initial_bearing_deg

    dist = distance_nm(40.6413, -73.7781, 42.3656, -71.0096)
    course = initial_bearing_deg(40.6413, -73.7781, 42.3656, -71.0096)
"""

import math

import numpy as np
import numpy.typing as npt

EARTH_RADIUS_NM = 3440.065


def distance_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate great circle distance between two points.

    Uses the Haversine formula for accuracy over large distances.

    Args:
        lat1: Latitude of the first point
        lon1: Longitude of the first point
        lat2: Latitude of the second point
        lon2: Longitude of the second point

    Returns:
        Distance in nautical miles

    Examples:
        >>> round(distance_nm(0.0, 0.0, 0.0, 1.0), 2)
        60.04
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_NM * c


def distances_nm(
    lat: float, lon: float, lats: npt.ArrayLike, lons: npt.ArrayLike
) -> npt.NDArray[np.float64]:
    """Calculate great circle distances from one point to many.

    Args:
        lat: Latitude of the origin
        lon: Longitude of the origin
        lats: Latitudes of the targets
        lons: Longitudes of the targets (same length as lats)

    Returns:
        Array of distances in nautical miles, one per target

    Examples:
        >>> distances_nm(0.0, 0.0, [0.0, 1.0], [1.0, 0.0])
        array([60.04..., 60.04...])
    """
    phi1 = np.radians(lat)
    phi2 = np.radians(np.asarray(lats, dtype=np.float64))
    dphi = phi2 - phi1
    dlambda = np.radians(np.asarray(lons, dtype=np.float64) - lon)

    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlambda / 2) ** 2
    # Rounding can push a fractionally past 1 for antipodal points.
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_NM * c


def initial_bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the initial true bearing from the first point to the second.

    Args:
        lat1: Latitude of the origin
        lon1: Longitude of the origin
        lat2: Latitude of the destination
        lon2: Longitude of the destination

    Returns:
        Bearing in degrees true, in [0, 360)

    Examples:
        >>> initial_bearing_deg(0.0, 0.0, 0.0, 1.0)
        90.0
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlambda = math.radians(lon2 - lon1)

    y = math.sin(dlambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlambda)

    bearing = (math.degrees(math.atan2(y, x)) + 360) % 360
    # -0.0 and tiny negatives can round up to exactly 360.0
    if bearing >= 360:
        bearing = 0.0
    return bearing


def format_bearing(deg: float) -> str:
    """Format a bearing as a three-digit heading.

    Args:
        deg: Bearing in degrees

    Returns:
        Zero-padded whole degrees with a degree sign

    Examples:
        >>> format_bearing(45.2)
        '045°'
        >>> format_bearing(359.6)
        '000°'
    """
    return f"{round(deg) % 360:03d}°"
