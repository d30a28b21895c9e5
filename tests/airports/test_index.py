"""Tests for the airport feature index."""

import pytest

from airfinder.airports.feature import Feature
from airfinder.airports.index import ExactField, FeatureIndex, GroupingField, normalize_key
from airfinder.airports.search import FilterEvaluator


class TestNormalizeKey:
    """Test key normalization."""

    def test_trims_and_lowercases(self) -> None:
        """Test keys are trimmed and lowercased."""
        assert normalize_key("  New York ") == "new york"
        assert normalize_key("KJFK") == "kjfk"

    def test_numeric_codes(self) -> None:
        """Test numeric values become text keys."""
        assert normalize_key(5) == "5"
        assert normalize_key(5.0) == "5"

    def test_blank_values(self) -> None:
        """Test missing and blank values produce no key."""
        assert normalize_key(None) is None
        assert normalize_key("   ") is None


class TestFeatureIndexBeforeBuild:
    """Test an index that has not been built."""

    def test_not_ready(self) -> None:
        """Test a fresh index reports not ready and holds nothing."""
        index = FeatureIndex()

        assert not index.is_ready
        assert index.features == ()
        assert len(index) == 0

    def test_lookups_return_nothing(self) -> None:
        """Test lookups on an unbuilt index are empty."""
        index = FeatureIndex()

        assert index.by_exact_code("icao", "KJFK") is None
        assert index.lookup_exact("city", "boston") is None
        assert index.enumerate("country") == []


class TestFeatureIndexBuild:
    """Test building and rebuilding the index."""

    def test_build_indexes_every_table(self, index: FeatureIndex) -> None:
        """Test features are reachable through each table."""
        assert index.is_ready
        assert len(index) == 6
        assert index.by_exact_code("icao", "KBOS").properties.city == "Boston"
        assert index.by_exact_code("iata", "yyz").properties.icao == "CYYZ"
        assert len(index.lookup_exact("city", "new york")) == 2
        assert len(index.lookup_exact(GroupingField.TYPE, "civil")) == 4
        assert len(index.lookup_exact("surfaceType", "asphalt")) == 3

    def test_lookups_are_case_insensitive(self, index: FeatureIndex) -> None:
        """Test lookups ignore case and surrounding spaces."""
        jfk = index.by_exact_code(ExactField.ICAO, "KJFK")

        assert index.by_exact_code("icao", "kjfk") is jfk
        assert index.by_exact_code("icao", "  KjFk ") is jfk
        assert index.by_exact_code("IATA", "jfk") is jfk

    def test_buckets_keep_collection_order(self, index: FeatureIndex) -> None:
        """Test bucket members appear in collection order."""
        new_york = index.lookup_exact("city", "NEW YORK")
        assert [f.properties.icao for f in new_york] == ["KJFK", "KLGA"]

    def test_rebuild_replaces_index(self, index: FeatureIndex, make_feature) -> None:
        """Test a rebuild discards every previous entry."""
        index.build([make_feature(2.5479, 49.0097, icao="LFPG", iata="CDG", country="France")])

        assert len(index) == 1
        assert index.by_exact_code("icao", "KJFK") is None
        assert index.lookup_exact("city", "boston") is None
        assert index.countries() == ["france"]

    def test_duplicate_icao_last_write_wins(self, make_feature) -> None:
        """Test the later feature owns a duplicated code but both stay in buckets."""
        first = make_feature(0.0, 0.0, icao="XDUP", city="Alpha")
        second = make_feature(1.0, 1.0, icao="xdup", city="Alpha")
        index = FeatureIndex()

        index.build([first, second])

        assert index.by_exact_code("icao", "XDUP") is second
        assert index.lookup_exact("city", "alpha") == [first, second]
        assert index.features == (first, second)

    def test_missing_fields_are_not_indexed(self, index: FeatureIndex) -> None:
        """Test features without a value are absent from that table only."""
        palh = index.by_exact_code("icao", "PALH")

        assert palh is not None
        assert palh.properties.iata is None
        assert all(f is not palh for f in index.lookup_exact("surfaceType", "asphalt"))

    @pytest.mark.parametrize("raw", [None, 42, "KJFK", b"bytes", {"type": "FeatureCollection"}])
    def test_non_sequence_input_builds_empty(self, raw) -> None:
        """Test non-sequence input yields a ready but empty index."""
        index = FeatureIndex()

        index.build(raw)

        assert index.is_ready
        assert len(index) == 0
        assert index.enumerate("country") == []

    def test_build_from_geojson_mappings(self) -> None:
        """Test raw GeoJSON features are decoded and bad ones skipped."""
        index = FeatureIndex()

        index.build(
            [
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [-71.0096, 42.3656]},
                    "properties": {"icao": "KBOS", "surfaceType": 5},
                },
                {"type": "Feature", "geometry": None, "properties": {"icao": "BAD"}},
                "garbage",
            ]
        )

        assert len(index) == 1
        assert isinstance(index.by_exact_code("icao", "kbos"), Feature)
        assert index.surfaces() == ["5"]

    @pytest.mark.parametrize(
        "raw",
        [
            {"geometry": {"coordinates": [0, 0]}, "properties": {"icao": "XBIG", "size": 10**400}},
            {"geometry": {"coordinates": [0, 0]}, "properties": {"icao": "XBIG", "elev": 10**400}},
            {
                "geometry": {"coordinates": [0, 0]},
                "properties": {"icao": "XBIG", "longestRwy": 10**400},
            },
        ],
    )
    def test_oversized_number_is_missing(self, raw: dict) -> None:
        """Test integers too large for a float count as missing values."""
        index = FeatureIndex()

        index.build([raw])

        feature = index.by_exact_code("icao", "XBIG")
        assert feature is not None
        assert feature.properties.size is None
        assert feature.properties.longest_rwy is None
        assert feature.properties.elev is None

    def test_oversized_coordinate_is_skipped(self) -> None:
        """Test a feature whose coordinate overflows a float is skipped."""
        index = FeatureIndex()

        index.build(
            [
                {"geometry": {"coordinates": [10**400, 0]}, "properties": {"icao": "XBAD"}},
                {"geometry": {"coordinates": [1, 2]}, "properties": {"icao": "XOK"}},
            ]
        )

        assert [f.properties.icao for f in index.features] == ["XOK"]

    def test_returned_bucket_is_a_copy(self, index: FeatureIndex) -> None:
        """Test changing a looked-up bucket leaves the index untouched."""
        bucket = index.lookup_exact("city", "boston")
        bucket.append(bucket[0])
        bucket.clear()

        assert [f.properties.icao for f in index.lookup_exact("city", "boston")] == ["KBOS"]
        results = FilterEvaluator(index).filter({"q": "boston"})
        assert [f.properties.icao for f in results] == ["KBOS"]


class TestFeatureIndexEnumerate:
    """Test listing known filter values."""

    def test_enumerate_sorted_and_distinct(self, index: FeatureIndex) -> None:
        """Test enumerate returns sorted unique keys."""
        assert index.countries() == ["canada", "usa"]
        assert index.states() == ["ak", "ma", "ny", "on", "va"]
        assert index.surfaces() == ["asphalt", "concrete", "water"]
        assert index.enumerate("type") == ["civil", "military", "water"]

    def test_enumerate_merges_case_variants(self, make_feature) -> None:
        """Test values differing only in case share one key."""
        index = FeatureIndex()
        index.build(
            [
                make_feature(0.0, 0.0, country="USA"),
                make_feature(1.0, 1.0, country="usa"),
                make_feature(2.0, 2.0, country=" Canada "),
            ]
        )

        assert index.countries() == ["canada", "usa"]

    def test_enumerate_rejects_exact_fields(self, index: FeatureIndex) -> None:
        """Test enumerate only accepts grouping fields."""
        with pytest.raises(ValueError):
            index.enumerate("icao")

    def test_unknown_field_raises(self, index: FeatureIndex) -> None:
        """Test unknown field names are rejected."""
        with pytest.raises(ValueError):
            index.enumerate("runway")
        with pytest.raises(ValueError):
            index.by_exact_code("city", "boston")
        with pytest.raises(ValueError):
            index.lookup_exact("name", "logan")
