"""Free-form latitude/longitude parsing.

Accepts coordinates the way people type them into a search box:

    41.5 -87.6              decimal degrees, latitude first
    n41.5 w87.6             hemisphere letters attached
    87.6w, 41.5n            letters decide which value is latitude
    41.5 n 87.6w            a standalone hemisphere token
    n61°33.56' w149°37.46'  degrees-minutes-seconds
    61°33'30"n 149°37'28"w

DMS notation is detected by a degree, minute or second mark anywhere in the
input. Both notations share the same token-count rules: two coordinate
tokens, or three tokens where hemisphere letters stand alone.

Typical usage:
    from airfinder.navigation.coordinates import parse_lat_lon

    coords = parse_lat_lon("n41.5 w87.6")
    if coords:
        print(coords.lat, coords.lon)
"""

import math
import re
from collections.abc import Callable
from typing import NamedTuple

_DECIMAL_TOKEN = re.compile(r"^([nsew])?(-?\d+(?:\.\d+)?)([nsew])?$")
_DMS_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_DMS_MARKS = re.compile(r"[°'\"]")
_HEMISPHERES = frozenset("nsew")
_LATITUDE_HEMISPHERES = frozenset("ns")
_LONGITUDE_HEMISPHERES = frozenset("ew")


class LatLon(NamedTuple):
    """Signed latitude/longitude in decimal degrees."""

    lat: float
    lon: float


class CoordinateToken(NamedTuple):
    """One parsed coordinate value with its hemisphere letter ("" if none)."""

    hemisphere: str
    value: float


def parse_decimal_token(token: str) -> CoordinateToken | None:
    """Parse a decimal-degrees token such as "n41.5", "87.6w" or "-87.6".

    Args:
        token: Lowercased token

    Returns:
        Parsed token, or None if it does not match
    """
    match = _DECIMAL_TOKEN.match(token)
    if not match:
        return None

    value = float(match.group(2))
    if not math.isfinite(value):
        return None
    return CoordinateToken(match.group(1) or match.group(3) or "", value)


def parse_dms_token(token: str) -> CoordinateToken | None:
    """Parse a degrees-minutes-seconds token such as "n61°33.56'".

    Up to three numeric groups are read as degrees, minutes and seconds;
    missing groups are 0. A trailing hemisphere letter wins over a leading
    one.

    Args:
        token: Lowercased token

    Returns:
        Parsed token, or None if no number is present or a part is out of
        range (degrees 0-180, minutes and seconds 0 to under 60)
    """
    token = token.strip()
    hemisphere = ""

    if token[:1] in _HEMISPHERES:
        hemisphere = token[0]
        token = token[1:].strip()
    if token[-1:] in _HEMISPHERES:
        hemisphere = token[-1]
        token = token[:-1].strip()

    numbers = [float(n) for n in _DMS_NUMBER.findall(token)]
    if not numbers:
        return None

    degrees = numbers[0]
    minutes = numbers[1] if len(numbers) > 1 else 0.0
    seconds = numbers[2] if len(numbers) > 2 else 0.0

    if not 0 <= degrees <= 180:
        return None
    if not 0 <= minutes < 60 or not 0 <= seconds < 60:
        return None

    return CoordinateToken(hemisphere, degrees + minutes / 60 + seconds / 3600)


def apply_hemispheres(
    first: CoordinateToken, second: CoordinateToken, first_dir: str, second_dir: str
) -> LatLon | None:
    """Assign latitude/longitude and signs from a pair of hemisphere letters.

    The n/s value is latitude and the e/w value longitude, whatever their
    order; s and w negate.

    Returns:
        Signed coordinates, or None unless exactly one letter is n/s and the
        other e/w
    """
    if first_dir in _LATITUDE_HEMISPHERES and second_dir in _LONGITUDE_HEMISPHERES:
        lat_token, lat_dir, lon_token, lon_dir = first, first_dir, second, second_dir
    elif second_dir in _LATITUDE_HEMISPHERES and first_dir in _LONGITUDE_HEMISPHERES:
        lat_token, lat_dir, lon_token, lon_dir = second, second_dir, first, first_dir
    else:
        return None

    lat = -lat_token.value if lat_dir == "s" else lat_token.value
    lon = -lon_token.value if lon_dir == "w" else lon_token.value
    return LatLon(lat, lon)


def resolve_two_tokens(
    tokens: list[str], parse_token: Callable[[str], CoordinateToken | None]
) -> LatLon | None:
    """Resolve a two-token coordinate pair.

    With hemisphere letters on both tokens, the letters decide the order
    and signs. Otherwise the input is taken as latitude then longitude with
    literal signs.
    """
    first = parse_token(tokens[0])
    second = parse_token(tokens[1])
    if first is None or second is None:
        return None

    resolved = apply_hemispheres(first, second, first.hemisphere, second.hemisphere)
    if resolved is not None:
        return resolved
    return LatLon(first.value, second.value)


def resolve_three_tokens(
    tokens: list[str], parse_token: Callable[[str], CoordinateToken | None]
) -> LatLon | None:
    """Resolve a three-token pair with a standalone hemisphere letter.

    Examples: "41.5 n 87.6w", "n 61°33.56' 149°37.46'w". Standalone letters
    are taken in order; a number's attached letter fills in when no
    standalone letter is left for it. The letters must resolve to one
    latitude and one longitude hemisphere.
    """
    letters = [t for t in tokens if t in _HEMISPHERES]
    numbers = [parse_token(t) for t in tokens if t not in _HEMISPHERES]
    if len(numbers) != 2 or None in numbers:
        return None

    first, second = numbers
    first_dir = letters[0] if letters else first.hemisphere
    second_dir = letters[1] if len(letters) > 1 else second.hemisphere
    return apply_hemispheres(first, second, first_dir, second_dir)


def parse_lat_lon(text: str | None) -> LatLon | None:
    """Parse a free-form coordinate string.

    Args:
        text: User input holding one latitude/longitude pair

    Returns:
        Signed coordinates, or None if the text is not a valid pair

    Examples:
        >>> parse_lat_lon("41.5 -87.6")
        LatLon(lat=41.5, lon=-87.6)
        >>> parse_lat_lon("87.6w 41.5n")
        LatLon(lat=41.5, lon=-87.6)
        >>> parse_lat_lon("200 50") is None
        True
    """
    if not text:
        return None

    normalized = " ".join(text.strip().lower().replace(",", " ").split())
    if not normalized:
        return None

    tokens = normalized.split(" ")
    parse_token = parse_dms_token if _DMS_MARKS.search(normalized) else parse_decimal_token

    if len(tokens) == 2:
        coords = resolve_two_tokens(tokens, parse_token)
    elif len(tokens) == 3:
        coords = resolve_three_tokens(tokens, parse_token)
    else:
        return None

    if coords is None:
        return None
    if not (math.isfinite(coords.lat) and math.isfinite(coords.lon)):
        return None
    if abs(coords.lat) > 90 or abs(coords.lon) > 180:
        return None
    return coords
