"""Pytest configuration and fixtures for all tests."""

from collections.abc import Callable
from typing import Any

import pytest

from airfinder.airports.feature import AirportProperties, Feature
from airfinder.airports.index import FeatureIndex
from airfinder.airports.search import FilterEvaluator

FeatureFactory = Callable[..., Feature]


@pytest.fixture
def make_feature() -> FeatureFactory:
    """Factory for features: make_feature(lon, lat, **properties)."""

    def factory(lon: float, lat: float, **properties: Any) -> Feature:
        return Feature((lon, lat), AirportProperties(**properties))

    return factory


@pytest.fixture
def sample_features(make_feature: FeatureFactory) -> list[Feature]:
    """Small airport collection used across index and search tests."""
    return [
        make_feature(
            -73.7781,
            40.6413,
            icao="KJFK",
            iata="JFK",
            name="John F Kennedy Intl",
            city="New York",
            state="NY",
            country="USA",
            type="civil",
            size=4000,
            surface_type="Asphalt",
            services="7",
            longest_rwy=14511,
        ),
        make_feature(
            -71.0096,
            42.3656,
            icao="KBOS",
            iata="BOS",
            name="General Edward Lawrence Logan Intl",
            city="Boston",
            state="MA",
            country="USA",
            type="civil",
            size=2000,
            surface_type="Asphalt",
            services="3",
            longest_rwy=10005,
        ),
        make_feature(
            -73.8726,
            40.7769,
            icao="KLGA",
            iata="LGA",
            name="LaGuardia",
            city="New York",
            state="NY",
            country="USA",
            type="civil",
            size=3499,
            surface_type="Concrete",
            services="7",
            longest_rwy=7003,
        ),
        make_feature(
            -79.6306,
            43.6777,
            icao="CYYZ",
            iata="YYZ",
            name="Toronto Pearson Intl",
            city="Toronto",
            state="ON",
            country="Canada",
            type="civil",
            size=5000,
            surface_type="Concrete",
            services="7",
            longest_rwy=11120,
        ),
        make_feature(
            -149.9003,
            61.1744,
            icao="PALH",
            name="Lake Hood Seaplane Base",
            city="Anchorage",
            state="AK",
            country="USA",
            type="water",
            size=800,
            surface_type="Water",
            services="0",
        ),
        make_feature(
            -76.2890,
            36.9376,
            icao="KNGU",
            name="Norfolk Naval Station",
            city="Norfolk",
            state="VA",
            country="USA",
            type="military",
            size=1000,
            surface_type="Asphalt",
            longest_rwy=8369,
        ),
    ]


@pytest.fixture
def index(sample_features: list[Feature]) -> FeatureIndex:
    """Index built over the sample collection."""
    built = FeatureIndex()
    built.build(sample_features)
    return built


@pytest.fixture
def search(index: FeatureIndex) -> FilterEvaluator:
    """Filter evaluator over the sample index."""
    return FilterEvaluator(index)
