"""Point-to-point distance and bearing measurement.

Endpoints may be typed as ICAO codes or as free-form coordinates; codes are
tried first.

Typical usage:
    from airfinder.navigation.measure import measure

    result = measure(index, "KJFK", "42.3656 -71.0096")
    if result:
        print(result.describe())  # "KJFK → 42.3656, -71.0096: 162.8 nm @ 054°"
"""

import logging
from dataclasses import dataclass

from airfinder.airports.index import ExactField, FeatureIndex
from airfinder.navigation.coordinates import parse_lat_lon
from airfinder.navigation.great_circle import distance_nm, format_bearing, initial_bearing_deg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """A resolved measurement endpoint.

    Attributes:
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees
        label: Display label (ICAO code or formatted coordinates)
    """

    lat: float
    lon: float
    label: str


@dataclass(frozen=True)
class Measurement:
    """Distance and initial bearing between two endpoints."""

    origin: Endpoint
    destination: Endpoint
    distance_nm: float
    bearing_deg: float

    def describe(self) -> str:
        """Format as "ORIGIN → DEST: 12.3 nm @ 045°"."""
        return (
            f"{self.origin.label} → {self.destination.label}: "
            f"{self.distance_nm:.1f} nm @ {format_bearing(self.bearing_deg)}"
        )


def resolve_endpoint(index: FeatureIndex, text: str | None) -> Endpoint | None:
    """Resolve user input to an endpoint.

    Args:
        index: Feature index used for ICAO lookups
        text: ICAO code or coordinate text

    Returns:
        Endpoint, or None if the input is neither a known code nor valid
        coordinates

    Examples:
        >>> resolve_endpoint(index, "kjfk").label
        'KJFK'
        >>> resolve_endpoint(index, "n41.5 w87.6").label
        '41.5000, -87.6000'
    """
    if not text:
        return None
    raw = text.strip()
    if not raw:
        return None

    feature = index.by_exact_code(ExactField.ICAO, raw)
    if feature is not None:
        label = (feature.properties.icao or raw).strip().upper()
        return Endpoint(feature.lat, feature.lon, label)

    coords = parse_lat_lon(raw)
    if coords is not None:
        return Endpoint(coords.lat, coords.lon, f"{coords.lat:.4f}, {coords.lon:.4f}")

    logger.debug("Could not resolve endpoint %r", raw)
    return None


def measure(
    index: FeatureIndex, origin_text: str | None, destination_text: str | None
) -> Measurement | None:
    """Measure great-circle distance and initial bearing between two inputs.

    Args:
        index: Feature index used for ICAO lookups
        origin_text: Origin ICAO code or coordinates
        destination_text: Destination ICAO code or coordinates

    Returns:
        Measurement, or None if either endpoint cannot be resolved
    """
    origin = resolve_endpoint(index, origin_text)
    destination = resolve_endpoint(index, destination_text)
    if origin is None or destination is None:
        return None

    return Measurement(
        origin=origin,
        destination=destination,
        distance_nm=distance_nm(origin.lat, origin.lon, destination.lat, destination.lon),
        bearing_deg=initial_bearing_deg(origin.lat, origin.lon, destination.lat, destination.lon),
    )
