"""Airport feature model and GeoJSON decoding.

An airport is a point feature: a (longitude, latitude) geometry plus a flat
set of optional properties. Features are immutable once created; the index
and filter layers only ever read them.

Typical usage:
    from airfinder.airports.feature import load_feature_collection

    features = load_feature_collection("data/airports.geojson")
    print(features[0].properties.icao, features[0].lat, features[0].lon)
"""

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# GeoJSON property name -> AirportProperties attribute
_PROPERTY_NAMES = {
    "icao": "icao",
    "iata": "iata",
    "name": "name",
    "city": "city",
    "state": "state",
    "country": "country",
    "type": "type",
    "size": "size",
    "surfaceType": "surface_type",
    "services": "services",
    "longestRwy": "longest_rwy",
    "elev": "elev",
}

_NUMERIC_PROPERTIES = {"size", "longest_rwy", "elev"}
_CODE_PROPERTIES = {"surface_type", "services"}


def to_number(value: Any) -> float | None:
    """Coerce a property value to a finite float.

    Args:
        value: Raw property value (number, numeric string, or anything else)

    Returns:
        The value as a float, or None if it is missing or not a finite number

    Examples:
        >>> to_number("14511")
        14511.0
        >>> to_number("") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def to_text(value: Any) -> str | None:
    """Render a code or label property as text.

    Integral floats render without a trailing ".0" so that a services code
    decoded as 3.0 still compares equal to "3".

    Args:
        value: Raw property value

    Returns:
        Text form of the value, or None if missing
    """
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class AirportProperties:
    """Named airport attributes.

    Every field is optional. Missing text fields are None and are never
    indexed. Numeric fields that cannot be parsed are None ("missing");
    the size classifier treats a missing size as 0.

    Attributes:
        icao: ICAO code (e.g., "KJFK"), expected unique
        iata: IATA code (e.g., "JFK"), expected unique
        name: Airport name
        city: City name
        state: State or region
        country: Country name
        type: Category string (e.g., "civil", "military", "water")
        size: Numeric size driving the small/medium/large bucket
        surface_type: Runway surface label or numeric code
        services: Services code, compared as a literal token
        longest_rwy: Longest runway length in feet
        elev: Field elevation in feet
        extra: Any other properties from the source, kept read-only
    """

    icao: str | None = None
    iata: str | None = None
    name: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    type: str | None = None
    size: float | None = None
    surface_type: str | int | float | None = None
    services: str | int | float | None = None
    longest_rwy: float | None = None
    elev: float | None = None
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "AirportProperties":
        """Build properties from a GeoJSON properties object.

        Accepts both the GeoJSON names (surfaceType, longestRwy) and the
        attribute names (surface_type, longest_rwy).

        Args:
            raw: Properties mapping (None is treated as empty)

        Returns:
            AirportProperties with numeric fields coerced
        """
        values: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        attributes = set(_PROPERTY_NAMES.values())

        for key, value in (raw or {}).items():
            attr = _PROPERTY_NAMES.get(key, key if key in attributes else None)
            if attr is None:
                extra[key] = value
                continue

            if attr in _NUMERIC_PROPERTIES:
                values[attr] = to_number(value)
            elif attr in _CODE_PROPERTIES:
                values[attr] = value if isinstance(value, (int, float)) else to_text(value)
            else:
                values[attr] = to_text(value)

        return cls(**values, extra=extra)


@dataclass(frozen=True)
class Feature:
    """Airport point feature.

    Attributes:
        geometry: (longitude, latitude) in decimal degrees
        properties: Airport attributes

    Examples:
        >>> jfk = Feature((-73.7781, 40.6413), AirportProperties(icao="KJFK"))
        >>> jfk.lat
        40.6413
    """

    geometry: tuple[float, float]
    properties: AirportProperties = field(default_factory=AirportProperties)

    def __post_init__(self) -> None:
        lon, lat = self.geometry
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise ValueError(f"Non-finite coordinates: {self.geometry}")
        if abs(lat) > 90 or abs(lon) > 180:
            raise ValueError(f"Coordinates out of range: {self.geometry}")

    @property
    def lon(self) -> float:
        """Longitude in decimal degrees."""
        return self.geometry[0]

    @property
    def lat(self) -> float:
        """Latitude in decimal degrees."""
        return self.geometry[1]

    @classmethod
    def from_geojson(cls, raw: Mapping[str, Any]) -> "Feature | None":
        """Decode a GeoJSON point feature.

        Args:
            raw: GeoJSON Feature object with geometry.coordinates = [lon, lat]

        Returns:
            Feature, or None if the geometry is missing or invalid

        Examples:
            >>> Feature.from_geojson({
            ...     "type": "Feature",
            ...     "geometry": {"type": "Point", "coordinates": [-73.78, 40.64]},
            ...     "properties": {"icao": "KJFK", "size": 4000},
            ... })
        """
        if not isinstance(raw, Mapping):
            return None

        geometry = raw.get("geometry")
        coords = geometry.get("coordinates") if isinstance(geometry, Mapping) else None
        if not isinstance(coords, (list, tuple)) or len(coords) < 2:
            logger.debug("Skipping feature without point coordinates: %r", geometry)
            return None

        lon = to_number(coords[0])
        lat = to_number(coords[1])
        if lon is None or lat is None or abs(lat) > 90 or abs(lon) > 180:
            logger.debug("Skipping feature with invalid coordinates: %r", coords)
            return None

        properties = raw.get("properties")
        if not isinstance(properties, Mapping):
            properties = None

        return cls((lon, lat), AirportProperties.from_mapping(properties))


def load_feature_collection(path: str | Path) -> list[Feature]:
    """Load airport features from a GeoJSON FeatureCollection file.

    Args:
        path: Path to the .geojson file

    Returns:
        Features in file order; malformed features are skipped

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a GeoJSON FeatureCollection
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Feature collection not found: {path}")

    logger.info("Loading features from %s", path)
    with path.open(encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid GeoJSON in {path}: {e}") from e

    if not isinstance(data, Mapping) or not isinstance(data.get("features"), list):
        raise ValueError(f"Not a GeoJSON FeatureCollection: {path}")

    features = []
    skipped = 0
    for raw in data["features"]:
        feature = Feature.from_geojson(raw)
        if feature is None:
            skipped += 1
            continue
        features.append(feature)

    logger.info("Loaded %d features (%d skipped)", len(features), skipped)
    return features
