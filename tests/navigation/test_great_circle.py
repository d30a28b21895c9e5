"""Tests for great-circle distance and bearing."""

import numpy as np
import pytest

from airfinder.navigation.great_circle import (
    EARTH_RADIUS_NM,
    distance_nm,
    distances_nm,
    format_bearing,
    initial_bearing_deg,
)

JFK = (40.6413, -73.7781)
BOS = (42.3656, -71.0096)


class TestDistance:
    """Test point-to-point distance."""

    def test_same_point_is_zero(self) -> None:
        """Test distance from a point to itself."""
        assert distance_nm(*JFK, *JFK) == pytest.approx(0.0, abs=1e-9)

    def test_one_degree_of_longitude_at_equator(self) -> None:
        """Test one degree along the equator."""
        assert distance_nm(0.0, 0.0, 0.0, 1.0) == pytest.approx(60.04, abs=0.01)

    def test_symmetric(self) -> None:
        """Test distance does not depend on direction."""
        assert distance_nm(*JFK, *BOS) == pytest.approx(distance_nm(*BOS, *JFK))

    def test_jfk_to_bos(self) -> None:
        """Test a known city pair."""
        assert 155 < distance_nm(*JFK, *BOS) < 170

    def test_antipodal(self) -> None:
        """Test antipodal points are half the circumference apart."""
        assert distance_nm(0.0, 0.0, 0.0, 180.0) == pytest.approx(np.pi * EARTH_RADIUS_NM)


class TestDistances:
    """Test the vectorized form."""

    def test_matches_scalar(self) -> None:
        """Test each vectorized distance equals the scalar one."""
        lats = [40.7769, 42.3656, 43.6777, 61.1744]
        lons = [-73.8726, -71.0096, -79.6306, -149.9003]

        result = distances_nm(*JFK, lats, lons)

        assert result.shape == (4,)
        for got, lat, lon in zip(result, lats, lons):
            assert got == pytest.approx(distance_nm(*JFK, lat, lon))

    def test_empty(self) -> None:
        """Test no targets give an empty array."""
        assert distances_nm(0.0, 0.0, [], []).size == 0


class TestBearing:
    """Test initial bearing."""

    @pytest.mark.parametrize(
        ("lat2", "lon2", "expected"),
        [(1.0, 0.0, 0.0), (0.0, 1.0, 90.0), (-1.0, 0.0, 180.0), (0.0, -1.0, 270.0)],
    )
    def test_cardinal_directions(self, lat2: float, lon2: float, expected: float) -> None:
        """Test bearings to the four cardinal neighbours."""
        assert initial_bearing_deg(0.0, 0.0, lat2, lon2) == pytest.approx(expected)

    def test_jfk_to_bos_is_northeast(self) -> None:
        """Test a known city pair."""
        assert 40 < initial_bearing_deg(*JFK, *BOS) < 65

    def test_range(self) -> None:
        """Test bearings always lie in [0, 360)."""
        for lat2 in (-60.0, -0.001, 0.0, 0.001, 60.0):
            for lon2 in (-179.0, -0.001, 0.001, 179.0):
                bearing = initial_bearing_deg(0.0, 0.0, lat2, lon2)
                assert 0 <= bearing < 360


class TestFormatBearing:
    """Test bearing display."""

    @pytest.mark.parametrize(
        ("deg", "expected"),
        [
            (0.0, "000°"),
            (45.0, "045°"),
            (45.4, "045°"),
            (90.0, "090°"),
            (270.6, "271°"),
            (359.6, "000°"),
        ],
    )
    def test_format(self, deg: float, expected: str) -> None:
        """Test three-digit zero-padded output."""
        assert format_bearing(deg) == expected
