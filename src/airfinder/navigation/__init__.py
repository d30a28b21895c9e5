"""Coordinate parsing and great-circle navigation math.

Typical usage:
    from airfinder.navigation import distance_nm, initial_bearing_deg, parse_lat_lon

    origin = parse_lat_lon("n40.64 w73.78")
    destination = parse_lat_lon("42.37 -71.01")
    dist = distance_nm(origin.lat, origin.lon, destination.lat, destination.lon)
    course = initial_bearing_deg(origin.lat, origin.lon, destination.lat, destination.lon)
"""

from airfinder.navigation.coordinates import LatLon, parse_lat_lon
from airfinder.navigation.great_circle import (
    EARTH_RADIUS_NM,
    distance_nm,
    distances_nm,
    format_bearing,
    initial_bearing_deg,
)

__all__ = [
    "EARTH_RADIUS_NM",
    "LatLon",
    "distance_nm",
    "distances_nm",
    "format_bearing",
    "initial_bearing_deg",
    "parse_lat_lon",
]
