"""Encoded polyline format (as used by OSRM with geometries=polyline6)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

DEFAULT_PRECISION = 6

# one value never needs more than 32 bits; longer chunk runs are garbage
MAX_VALUE_SHIFT = 30


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def as_list(self) -> list[float]:
        return [self.lat, self.lng]


def to_lat_lng(point) -> LatLng:
    if isinstance(point, LatLng):
        return point
    if isinstance(point, dict):
        return LatLng(float(point["lat"]), float(point["lng"]))
    lat, lng = point
    return LatLng(float(lat), float(lng))


def _finite_point(point) -> Optional[LatLng]:
    try:
        p = to_lat_lng(point)
    except (KeyError, OverflowError, TypeError, ValueError):
        return None
    if not (math.isfinite(p.lat) and math.isfinite(p.lng)):
        return None
    return p


def _encode_value(value: int) -> str:
    # zigzag: sign moves to the lowest bit
    v = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while v >= 0x20:
        chunks.append(chr((0x20 | (v & 0x1F)) + 63))
        v >>= 5
    chunks.append(chr(v + 63))
    return "".join(chunks)


def encode(points: Iterable, precision: int = DEFAULT_PRECISION) -> str:
    """Encode points, skipping any that are malformed or not finite."""
    factor = 10**precision
    output = []
    prev_lat = prev_lng = 0

    try:
        points = list(points or [])
    except TypeError:
        return ""

    for point in points:
        p = _finite_point(point)
        if p is None or not (math.isfinite(p.lat * factor) and math.isfinite(p.lng * factor)):
            continue
        lat = round(p.lat * factor)
        lng = round(p.lng * factor)
        output.append(_encode_value(lat - prev_lat))
        output.append(_encode_value(lng - prev_lng))
        prev_lat, prev_lng = lat, lng

    return "".join(output)


def _decode_value(encoded: str, index: int) -> tuple[int, int] | None:
    result = shift = 0
    while True:
        if index >= len(encoded) or shift > MAX_VALUE_SHIFT:
            return None
        byte = ord(encoded[index]) - 63
        if byte < 0 or byte > 0x3F:
            return None
        index += 1
        result |= (byte & 0x1F) << shift
        shift += 5
        if byte < 0x20:
            break

    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def decode(encoded, precision: int = DEFAULT_PRECISION) -> list[LatLng]:
    """Decode a polyline; a malformed tail is dropped and the points before it are kept."""
    if not encoded or not isinstance(encoded, str):
        return []

    factor = 10**precision
    coordinates: list[LatLng] = []
    index = lat = lng = 0

    while index < len(encoded):
        lat_delta = _decode_value(encoded, index)
        if lat_delta is None:
            break
        lng_delta = _decode_value(encoded, lat_delta[1])
        if lng_delta is None:
            break

        lat += lat_delta[0]
        lng += lng_delta[0]
        index = lng_delta[1]
        coordinates.append(LatLng(lat / factor, lng / factor))

    return coordinates
