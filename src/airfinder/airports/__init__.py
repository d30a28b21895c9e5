"""Airport feature index and search.

This module provides the in-memory airport feature model, the lookup index
built over a feature collection, and the multi-criteria filter used by the
map's search box and filter panel.

Typical usage:
    from airfinder.airports import FeatureIndex, FilterEvaluator, load_feature_collection

    index = FeatureIndex()
    index.build(load_feature_collection("data/airports.geojson"))

    search = FilterEvaluator(index)
    results = search.filter({"q": "boston", "sizeSel": ["large"]})
    jfk = index.by_exact_code("icao", "KJFK")
"""

from airfinder.airports.classifier import SizeBucket, classify_size
from airfinder.airports.feature import AirportProperties, Feature, load_feature_collection
from airfinder.airports.index import ExactField, FeatureIndex, GroupingField
from airfinder.airports.search import FilterEvaluator, QuerySpec

__all__ = [
    "AirportProperties",
    "ExactField",
    "Feature",
    "FeatureIndex",
    "FilterEvaluator",
    "GroupingField",
    "QuerySpec",
    "SizeBucket",
    "classify_size",
    "load_feature_collection",
]
