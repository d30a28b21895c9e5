"""Multi-criteria airport search.

A query first picks a base set from the free-text search, then narrows it
through a fixed pipeline of stages:

    1. text query     exact ICAO, exact IATA, city, country, then substring
    2. categorical    country, state, type, surface type, services
    3. size bucket    small / medium / large
    4. runway length  inclusive min and max on the longest runway
    5. radius         great-circle distance from an airport or coordinate

Stages are combined with AND; values selected within one stage are combined
with OR; a stage with nothing selected passes everything. Results keep the
base-set order.

Typical usage:
    from airfinder.airports import FeatureIndex, FilterEvaluator, QuerySpec

    index = FeatureIndex()
    index.build(features)
    search = FilterEvaluator(index)

    large_us = search.filter(QuerySpec(country_sel=["usa"], size_sel=["large"]))
    near_jfk = search.filter(QuerySpec(radius_center="KJFK", radius_nm=50))
"""

import logging
from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from airfinder.airports.classifier import SizeBucket, classify_size
from airfinder.airports.feature import Feature, to_number, to_text
from airfinder.airports.index import ExactField, FeatureIndex, GroupingField, normalize_key
from airfinder.navigation.coordinates import LatLon, parse_lat_lon
from airfinder.navigation.great_circle import distances_nm

logger = logging.getLogger(__name__)

# Query mapping key -> QuerySpec attribute
_SPEC_KEYS = {
    "q": "q",
    "countrySel": "country_sel",
    "stateSel": "state_sel",
    "typeSel": "type_sel",
    "surfaceSel": "surface_sel",
    "sizeSel": "size_sel",
    "servicesSel": "services_sel",
    "rwyMin": "rwy_min",
    "rwyMax": "rwy_max",
    "radiusCenter": "radius_center",
    "radiusNm": "radius_nm",
}

_TEXT_SEARCH_ATTRIBUTES = ("name", "city", "country", "icao", "iata")


def _as_collection(value: Any) -> tuple[Any, ...]:
    """Turn a selection value into a tuple (a lone string is one value)."""
    if value is None:
        return ()
    if isinstance(value, (str, SizeBucket)):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(value)
    return (value,)


@dataclass(frozen=True)
class QuerySpec:
    """Filter intent for one search.

    Every field is optional; defaults select everything.

    Attributes:
        q: Free-text query
        country_sel: Selected countries (case-insensitive)
        state_sel: Selected states or regions (case-insensitive)
        type_sel: Selected airport types (case-insensitive)
        surface_sel: Selected surface types (case-insensitive)
        size_sel: Selected size buckets
        services_sel: Selected service codes (exact, case-sensitive)
        rwy_min: Minimum longest runway, inclusive
        rwy_max: Maximum longest runway, inclusive
        radius_center: ICAO code or coordinate text for the radius filter
        radius_nm: Radius in nautical miles (must be > 0 to apply)
    """

    q: str = ""
    country_sel: Collection[str] = ()
    state_sel: Collection[str] = ()
    type_sel: Collection[str] = ()
    surface_sel: Collection[str] = ()
    size_sel: Collection[str | SizeBucket] = ()
    services_sel: Collection[str] = ()
    rwy_min: float | None = None
    rwy_max: float | None = None
    radius_center: str | None = None
    radius_nm: float | None = None

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any] | None) -> "QuerySpec":
        """Build a query from a parameter mapping.

        Accepts the camelCase names used by the map UI (countrySel, rwyMin,
        radiusNm, ...) as well as the attribute names. Blank or unparsable
        numbers mean "not given"; unknown keys are ignored.

        Args:
            params: Query parameters

        Returns:
            QuerySpec

        Examples:
            >>> QuerySpec.from_mapping({"q": "kjfk", "rwyMin": "", "sizeSel": ["large"]})
        """
        values: dict[str, Any] = {}
        attributes = set(_SPEC_KEYS.values())

        for key, value in (params or {}).items():
            attr = _SPEC_KEYS.get(key, key if key in attributes else None)
            if attr is None:
                logger.debug("Ignoring unknown query parameter: %s", key)
                continue

            if attr in ("rwy_min", "rwy_max", "radius_nm"):
                values[attr] = to_number(value)
            elif attr == "q":
                values[attr] = to_text(value) or ""
            elif attr == "radius_center":
                values[attr] = to_text(value)
            else:
                values[attr] = _as_collection(value)

        return cls(**values)

    @property
    def has_radius(self) -> bool:
        """True if the query asks for a radius filter."""
        return (
            bool(self.radius_center and self.radius_center.strip())
            and self.radius_nm is not None
            and self.radius_nm > 0
        )


Predicate = Callable[[Feature], bool]


class FilterEvaluator:
    """Resolves queries against a feature index.

    The evaluator holds no state of its own beyond the index reference, so
    rebuilding the index is immediately visible to later queries.

    Examples:
        >>> search = FilterEvaluator(index)
        >>> search.filter({"q": "boston"})
        >>> search.filter(QuerySpec(rwy_min=10000, rwy_max=12000))
    """

    def __init__(self, index: FeatureIndex) -> None:
        """Initialize with the index to query.

        Args:
            index: Feature index (may be built later)
        """
        self.index = index

    def filter(self, spec: QuerySpec | Mapping[str, Any] | None = None) -> list[Feature]:
        """Run a query.

        Args:
            spec: Query, as a QuerySpec or a parameter mapping

        Returns:
            Matching features in base-set order (empty if the index has
            not been built)
        """
        if not self.index.is_ready:
            logger.debug("Index not built, returning no results")
            return []

        if not isinstance(spec, QuerySpec):
            spec = QuerySpec.from_mapping(spec)

        candidates = self._base_set(spec.q)

        for predicate in self._stage_predicates(spec):
            candidates = [f for f in candidates if predicate(f)]

        if spec.has_radius:
            candidates = self._apply_radius(candidates, spec.radius_center, spec.radius_nm)

        logger.debug("Query %r matched %d features", spec.q, len(candidates))
        return candidates

    def by_exact_code(self, field_name: str | ExactField, code: Any) -> Feature | None:
        """Look up a single feature by ICAO or IATA code.

        Args:
            field_name: "icao" or "iata"
            code: Code to find (case-insensitive)

        Returns:
            Matching feature, or None
        """
        return self.index.by_exact_code(field_name, code)

    def resolve_center(self, text: str | None) -> LatLon | None:
        """Resolve a radius center from an ICAO code or coordinate text.

        Args:
            text: ICAO code (e.g. "KJFK") or coordinates (e.g. "40.6 -73.8")

        Returns:
            Center coordinates, or None if neither form resolves
        """
        if not text or not text.strip():
            return None

        feature = self.index.by_exact_code(ExactField.ICAO, text)
        if feature is not None:
            return LatLon(feature.lat, feature.lon)

        return parse_lat_lon(text)

    def _base_set(self, q: str | None) -> list[Feature]:
        """Pick the candidate set for a free-text query.

        Args:
            q: Free-text query

        Returns:
            Candidates in collection order
        """
        query = (q or "").strip().lower()
        if not query:
            return list(self.index.features)

        for exact in (ExactField.ICAO, ExactField.IATA):
            hit = self.index.lookup_exact(exact, query)
            if isinstance(hit, Feature):
                logger.debug("Query %r matched %s exactly", query, exact.value)
                return [hit]

        for grouping in (GroupingField.CITY, GroupingField.COUNTRY):
            bucket = self.index.lookup_exact(grouping, query)
            if bucket:
                logger.debug("Query %r matched %s bucket", query, grouping.value)
                return list(bucket)

        return [f for f in self.index.features if self._contains_text(f, query)]

    @staticmethod
    def _contains_text(feature: Feature, query: str) -> bool:
        """Check whether any searchable text property contains the query."""
        props = feature.properties
        for attr in _TEXT_SEARCH_ATTRIBUTES:
            value = getattr(props, attr)
            if value is not None and query in str(value).lower():
                return True
        return False

    def _stage_predicates(self, spec: QuerySpec) -> list[Predicate]:
        """Build the predicates for every active non-radius stage.

        Args:
            spec: Query

        Returns:
            Predicates to AND together, in pipeline order
        """
        predicates: list[Predicate] = []

        categorical = (
            ("country", spec.country_sel),
            ("state", spec.state_sel),
            ("type", spec.type_sel),
            ("surface_type", spec.surface_sel),
        )
        for attr, selected in categorical:
            keys = {k for k in map(normalize_key, _as_collection(selected)) if k}
            if keys:
                predicates.append(self._categorical_predicate(attr, keys))

        services = {str(v) for v in _as_collection(spec.services_sel)}
        if services:
            predicates.append(lambda f: (to_text(f.properties.services) or "") in services)

        buckets = self._size_buckets(spec.size_sel)
        if buckets is not None:
            predicates.append(lambda f: classify_size(f.properties.size) in buckets)

        if spec.rwy_min is not None or spec.rwy_max is not None:
            predicates.append(self._runway_predicate(spec.rwy_min, spec.rwy_max))

        return predicates

    @staticmethod
    def _runway_predicate(rwy_min: float | None, rwy_max: float | None) -> Predicate:
        """Match the longest runway against inclusive bounds.

        A feature with no runway length fails whenever any bound is set.
        """

        def predicate(feature: Feature) -> bool:
            length = feature.properties.longest_rwy
            if length is None:
                return False
            if rwy_min is not None and length < rwy_min:
                return False
            return rwy_max is None or length <= rwy_max

        return predicate

    @staticmethod
    def _categorical_predicate(attr: str, keys: set[str]) -> Predicate:
        """Match a feature's normalized attribute against selected keys."""

        def predicate(feature: Feature) -> bool:
            return (normalize_key(getattr(feature.properties, attr)) or "") in keys

        return predicate

    @staticmethod
    def _size_buckets(selected: Collection[str | SizeBucket]) -> set[SizeBucket] | None:
        """Parse the size selection.

        Returns:
            Selected buckets, or None when nothing is selected. Unknown
            names select nothing, so a selection of only unknown names
            matches no feature.
        """
        names = _as_collection(selected)
        if not names:
            return None

        buckets = set()
        for name in names:
            bucket = SizeBucket.parse(name)
            if bucket is None:
                logger.debug("Ignoring unknown size bucket: %r", name)
                continue
            buckets.add(bucket)
        return buckets

    def _apply_radius(
        self, candidates: list[Feature], center_text: str | None, radius_nm: float | None
    ) -> list[Feature]:
        """Keep candidates within radius_nm of the resolved center.

        An unresolvable center leaves the candidates untouched.
        """
        center = self.resolve_center(center_text)
        if center is None:
            logger.debug("Radius center %r did not resolve, radius filter skipped", center_text)
            return candidates

        if not candidates:
            return candidates

        distances = distances_nm(
            center.lat,
            center.lon,
            [f.lat for f in candidates],
            [f.lon for f in candidates],
        )
        return [f for f, d in zip(candidates, distances) if d <= radius_nm]
