"""GeoJSON boundary ingestion for areas.

validate_and_normalize() takes a FeatureCollection, keeps the first
feature (the rest are ignored on purpose), checks that it is a closed
Polygon or MultiPolygon and returns canonical 2D geometry JSON text for
storage. simplify_geometry() thins stored boundaries for map listings.
"""

import json
import math
from typing import Any, List, Sequence

from app.core.exceptions import (
    InvalidGeoJSONError,
    InvalidMultiPolygonError,
    InvalidPolygonError,
    UnsupportedGeometryError,
)

POLYGON = "Polygon"
MULTI_POLYGON = "MultiPolygon"
MIN_RING_POINTS = 4

Position = List[float]
Ring = List[Position]


def _parse_position(raw: Any) -> Position:
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        raise InvalidGeoJSONError("failed to parse GeoJSON: position needs at least two numbers")
    x, y = raw[0], raw[1]
    position = []
    for value in (x, y):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidGeoJSONError("failed to parse GeoJSON: coordinates must be numbers")
        try:
            number = float(value)
        except OverflowError as exc:
            raise InvalidGeoJSONError("failed to parse GeoJSON: coordinate out of range") from exc
        if not math.isfinite(number):
            raise InvalidGeoJSONError("failed to parse GeoJSON: coordinates must be finite")
        position.append(number)
    # altitude and anything after it is dropped
    return position


def _reject_constant(name: str) -> Any:
    raise InvalidGeoJSONError(f"failed to parse GeoJSON: {name} is not a valid number")


def _parse_rings(raw: Any) -> List[Ring]:
    if not isinstance(raw, list):
        raise InvalidGeoJSONError("failed to parse GeoJSON: polygon must be an array of rings")
    rings = []
    for ring in raw:
        if not isinstance(ring, list):
            raise InvalidGeoJSONError("failed to parse GeoJSON: ring must be an array of positions")
        rings.append([_parse_position(p) for p in ring])
    return rings


def _ring_is_valid(ring: Ring) -> bool:
    return len(ring) >= MIN_RING_POINTS and ring[0] == ring[-1]


def first_feature_geometry(raw: str) -> dict:
    """Return the geometry object of the first feature of a FeatureCollection."""
    try:
        collection = json.loads(raw, parse_constant=_reject_constant)
    except InvalidGeoJSONError:
        raise
    except (TypeError, ValueError) as exc:
        raise InvalidGeoJSONError(f"failed to parse GeoJSON: {exc}") from exc

    if not isinstance(collection, dict):
        raise InvalidGeoJSONError("failed to parse GeoJSON: expected a FeatureCollection object")
    if collection.get("type", "FeatureCollection") != "FeatureCollection":
        raise InvalidGeoJSONError("failed to parse GeoJSON: expected a FeatureCollection")

    features = collection.get("features")
    if not isinstance(features, list):
        raise InvalidGeoJSONError("failed to parse GeoJSON: features must be an array")
    if not features:
        raise InvalidGeoJSONError("geojson must have at least one feature")

    feature = features[0]
    if not isinstance(feature, dict):
        raise InvalidGeoJSONError("failed to parse GeoJSON: feature must be an object")

    geometry = feature.get("geometry")
    if not isinstance(geometry, dict) or not isinstance(geometry.get("type"), str):
        raise InvalidGeoJSONError("failed to parse GeoJSON: feature has no geometry")
    return geometry


def validate_and_normalize(raw: str) -> str:
    """Validate a GeoJSON FeatureCollection boundary and return canonical 2D geometry JSON."""
    geometry = first_feature_geometry(raw)
    geometry_type = geometry["type"]

    if geometry_type == POLYGON:
        rings = _parse_rings(geometry.get("coordinates"))
        if not rings:
            raise InvalidPolygonError("polygon has no coordinates")
        if not all(_ring_is_valid(ring) for ring in rings):
            raise InvalidPolygonError("invalid polygon: must have at least 4 points and be closed")
        coordinates: Any = rings

    elif geometry_type == MULTI_POLYGON:
        raw_polygons = geometry.get("coordinates")
        if not isinstance(raw_polygons, list):
            raise InvalidGeoJSONError("failed to parse GeoJSON: multipolygon must be an array of polygons")
        polygons = [_parse_rings(polygon) for polygon in raw_polygons]
        if not polygons:
            raise InvalidMultiPolygonError("multipolygon has no coordinates")
        for polygon in polygons:
            if not all(_ring_is_valid(ring) for ring in polygon):
                raise InvalidMultiPolygonError(
                    "invalid multipolygon: must have at least 4 points and be closed"
                )
        coordinates = polygons

    else:
        raise UnsupportedGeometryError("only Polygon and MultiPolygon geojson formats are allowed")

    return json.dumps({"type": geometry_type, "coordinates": coordinates}, separators=(",", ":"))


def _perpendicular_distance(point: Sequence[float], start: Sequence[float], end: Sequence[float]) -> float:
    dx, dy = end[0] - start[0], end[1] - start[1]
    if dx == 0 and dy == 0:
        return math.hypot(point[0] - start[0], point[1] - start[1])
    return abs(dy * point[0] - dx * point[1] + end[0] * start[1] - end[1] * start[0]) / math.hypot(dx, dy)


def _douglas_peucker(points: Ring, tolerance: float) -> Ring:
    if len(points) < 3:
        return points

    index, max_distance = 0, 0.0
    for i in range(1, len(points) - 1):
        distance = _perpendicular_distance(points[i], points[0], points[-1])
        if distance > max_distance:
            index, max_distance = i, distance

    if max_distance <= tolerance:
        return [points[0], points[-1]]

    left = _douglas_peucker(points[: index + 1], tolerance)
    right = _douglas_peucker(points[index:], tolerance)
    return left[:-1] + right


def _simplify_ring(ring: Ring, tolerance: float) -> Ring:
    simplified = _douglas_peucker(ring, tolerance)
    # never collapse a ring below a valid closed shape
    if len(simplified) < MIN_RING_POINTS or simplified[0] != simplified[-1]:
        return ring
    return simplified


def simplify_geometry(boundary: str, tolerance: float) -> dict:
    """Simplify a stored canonical boundary. A tolerance of 0 returns it unchanged."""
    geometry = json.loads(boundary)
    if tolerance <= 0:
        return geometry

    if geometry["type"] == POLYGON:
        geometry["coordinates"] = [_simplify_ring(r, tolerance) for r in geometry["coordinates"]]
    elif geometry["type"] == MULTI_POLYGON:
        geometry["coordinates"] = [
            [_simplify_ring(r, tolerance) for r in polygon] for polygon in geometry["coordinates"]
        ]
    return geometry
