"""Lookup tables over an airport feature collection.

The index keeps one exact-match table per singular code field (ICAO, IATA)
and one bucket table per grouping field (city, country, state, surface type,
airport type). Keys are trimmed and lowercased, so every lookup is
case-insensitive.

The index is rebuilt wholesale: build() assembles a fresh set of tables and
swaps them in with a single assignment, so readers never observe a
half-built index.

Typical usage:
    from airfinder.airports.index import FeatureIndex

    index = FeatureIndex()
    index.build(features)

    jfk = index.by_exact_code("icao", "kjfk")
    countries = index.enumerate("country")
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from airfinder.airports.feature import Feature, to_text

logger = logging.getLogger(__name__)


class ExactField(Enum):
    """Singular code fields, at most one feature per key."""

    ICAO = "icao"
    IATA = "iata"

    @property
    def attribute(self) -> str:
        """AirportProperties attribute holding this field."""
        return self.value


class GroupingField(Enum):
    """Fields shared by many features, indexed as ordered buckets."""

    CITY = "city"
    COUNTRY = "country"
    STATE = "state"
    SURFACE_TYPE = "surfaceType"
    TYPE = "type"

    @property
    def attribute(self) -> str:
        """AirportProperties attribute holding this field."""
        if self is GroupingField.SURFACE_TYPE:
            return "surface_type"
        return self.value


def normalize_key(value: Any) -> str | None:
    """Derive an index key from a property value.

    Args:
        value: Raw property value (text or numeric code)

    Returns:
        Trimmed, lowercased key, or None for missing or blank values

    Examples:
        >>> normalize_key("  New York ")
        'new york'
        >>> normalize_key(5)
        '5'
    """
    text = to_text(value)
    if text is None:
        return None
    key = text.strip().lower()
    return key or None


def parse_field(name: "str | ExactField | GroupingField") -> "ExactField | GroupingField":
    """Resolve a field name to its enumeration member.

    Accepts enum members, GeoJSON names ("surfaceType") and attribute names
    ("surface_type"), case-insensitively.

    Raises:
        ValueError: If the name is not an indexed field
    """
    if isinstance(name, (ExactField, GroupingField)):
        return name

    wanted = str(name).strip().lower()
    for member in (*ExactField, *GroupingField):
        if wanted in (member.value.lower(), member.attribute, member.name.lower()):
            return member

    raise ValueError(f"Not an indexed field: {name!r}")


@dataclass
class IndexTables:
    """One complete generation of index tables."""

    features: tuple[Feature, ...] = ()
    icao: dict[str, Feature] = field(default_factory=dict)
    iata: dict[str, Feature] = field(default_factory=dict)
    city: dict[str, list[Feature]] = field(default_factory=dict)
    country: dict[str, list[Feature]] = field(default_factory=dict)
    state: dict[str, list[Feature]] = field(default_factory=dict)
    surface_type: dict[str, list[Feature]] = field(default_factory=dict)
    type: dict[str, list[Feature]] = field(default_factory=dict)

    def exact_table(self, exact: ExactField) -> dict[str, Feature]:
        """Get the exact-match table for a code field."""
        if exact is ExactField.ICAO:
            return self.icao
        return self.iata

    def grouping_table(self, grouping: GroupingField) -> dict[str, list[Feature]]:
        """Get the bucket table for a grouping field."""
        tables = {
            GroupingField.CITY: self.city,
            GroupingField.COUNTRY: self.country,
            GroupingField.STATE: self.state,
            GroupingField.SURFACE_TYPE: self.surface_type,
            GroupingField.TYPE: self.type,
        }
        return tables[grouping]

    def add(self, feature: Feature) -> None:
        """Index a single feature into every table it belongs to."""
        props = feature.properties

        # Last write wins for duplicate codes.
        for exact in ExactField:
            key = normalize_key(getattr(props, exact.attribute))
            if key is not None:
                self.exact_table(exact)[key] = feature

        for grouping in GroupingField:
            key = normalize_key(getattr(props, grouping.attribute))
            if key is not None:
                self.grouping_table(grouping).setdefault(key, []).append(feature)


class FeatureIndex:
    """Case-insensitive lookup tables over an airport feature collection.

    Examples:
        >>> index = FeatureIndex()
        >>> index.is_ready
        False
        >>> index.build(features)
        >>> index.by_exact_code("icao", "KJFK")
        >>> index.lookup_exact("city", "boston")  # list of features
    """

    def __init__(self) -> None:
        """Initialize an empty, not-yet-built index."""
        self._tables: IndexTables | None = None

    @property
    def is_ready(self) -> bool:
        """True once build() has completed at least once."""
        return self._tables is not None

    @property
    def features(self) -> tuple[Feature, ...]:
        """Full feature collection in original order (empty before build)."""
        if self._tables is None:
            return ()
        return self._tables.features

    def __len__(self) -> int:
        return len(self.features)

    def build(self, features: Sequence[Feature | Mapping[str, Any]] | None) -> None:
        """Replace the entire index with tables built from features.

        Non-sequence input is treated as an empty collection. GeoJSON
        feature mappings are decoded on the fly; anything that is neither a
        Feature nor a decodable mapping is skipped.

        Args:
            features: Feature collection, in display order

        Examples:
            >>> index.build(load_feature_collection("data/airports.geojson"))
        """
        if not isinstance(features, Sequence) or isinstance(features, (str, bytes)):
            if features is not None:
                logger.warning("Ignoring non-sequence feature input: %s", type(features).__name__)
            features = ()

        tables = IndexTables()
        accepted: list[Feature] = []
        skipped = 0

        for item in features:
            feature = item if isinstance(item, Feature) else Feature.from_geojson(item)
            if feature is None:
                skipped += 1
                continue
            accepted.append(feature)
            tables.add(feature)

        tables.features = tuple(accepted)

        # Swap in the new generation in one step.
        self._tables = tables

        logger.info(
            "Indexed %d features (%d ICAO codes, %d countries, %d skipped)",
            len(accepted),
            len(tables.icao),
            len(tables.country),
            skipped,
        )

    def lookup_exact(
        self, table: "str | ExactField | GroupingField", key: Any
    ) -> Feature | list[Feature] | None:
        """Look up a normalized key in one table.

        Args:
            table: Field whose table to search (e.g. "icao", "city")
            key: Value to look up; trimmed and lowercased first

        Returns:
            The owning feature for exact tables, a copy of the ordered
            bucket for grouping tables, or None if absent or the index is not built

        Raises:
            ValueError: If table is not an indexed field
        """
        member = parse_field(table)
        normalized = normalize_key(key)
        if self._tables is None or normalized is None:
            return None

        if isinstance(member, ExactField):
            return self._tables.exact_table(member).get(normalized)
        bucket = self._tables.grouping_table(member).get(normalized)
        return list(bucket) if bucket is not None else None

    def by_exact_code(self, field_name: "str | ExactField", code: Any) -> Feature | None:
        """Look up a feature by ICAO or IATA code.

        Args:
            field_name: "icao" or "iata"
            code: Code to find (case-insensitive, surrounding spaces ignored)

        Returns:
            Matching feature, or None

        Raises:
            ValueError: If field_name is not an exact-match field

        Examples:
            >>> index.by_exact_code("icao", " kjfk ")
        """
        member = parse_field(field_name)
        if not isinstance(member, ExactField):
            raise ValueError(f"Not an exact-match field: {field_name!r}")

        found = self.lookup_exact(member, code)
        return found if isinstance(found, Feature) else None

    def enumerate(self, field_name: "str | GroupingField") -> list[str]:
        """List the distinct known keys of a grouping field.

        Args:
            field_name: Grouping field (e.g. "country", "state", "surfaceType")

        Returns:
            Sorted, deduplicated normalized keys (empty before build)

        Raises:
            ValueError: If field_name is not a grouping field

        Examples:
            >>> index.enumerate("country")
            ['canada', 'usa']
        """
        member = parse_field(field_name)
        if not isinstance(member, GroupingField):
            raise ValueError(f"Not a grouping field: {field_name!r}")

        if self._tables is None:
            return []
        return sorted(key for key in self._tables.grouping_table(member) if key)

    def countries(self) -> list[str]:
        """Known countries, sorted."""
        return self.enumerate(GroupingField.COUNTRY)

    def states(self) -> list[str]:
        """Known states and regions, sorted."""
        return self.enumerate(GroupingField.STATE)

    def surfaces(self) -> list[str]:
        """Known surface types, sorted."""
        return self.enumerate(GroupingField.SURFACE_TYPE)
