import json

import pytest

from app.core.exceptions import (
    InvalidGeoJSONError,
    InvalidMultiPolygonError,
    InvalidPolygonError,
    UnsupportedGeometryError,
    ValidationError,
)
from app.core.geometry import simplify_geometry, validate_and_normalize

SQUARE = [[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]
TRIANGLE = [[0, 0], [1, 0], [0, 1], [0, 0]]


def collection(*geometries):
    return json.dumps(
        {
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "properties": {}, "geometry": g} for g in geometries],
        }
    )


def polygon(*rings):
    return {"type": "Polygon", "coordinates": list(rings)}


def test_closed_triangle_is_accepted():
    result = json.loads(validate_and_normalize(collection(polygon(TRIANGLE))))
    assert result == {"type": "Polygon", "coordinates": [[[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [0.0, 0.0]]]}


def test_open_ring_is_rejected():
    with pytest.raises(InvalidPolygonError):
        validate_and_normalize(collection(polygon([[0, 0], [1, 0], [1, 1], [0, 1]])))


def test_ring_with_too_few_points_is_rejected():
    with pytest.raises(InvalidPolygonError):
        validate_and_normalize(collection(polygon([[0, 0], [1, 0], [0, 0]])))


def test_empty_polygon_is_rejected():
    with pytest.raises(InvalidPolygonError):
        validate_and_normalize(collection(polygon()))


def test_invalid_hole_rejects_whole_polygon():
    with pytest.raises(InvalidPolygonError):
        validate_and_normalize(collection(polygon(SQUARE, [[0.2, 0.2], [0.4, 0.2], [0.4, 0.4]])))


def test_altitude_is_dropped():
    ring = [[106.8, -6.2, 12.5], [106.9, -6.2, 13], [106.9, -6.1, 9], [106.8, -6.2, 12.5]]
    result = json.loads(validate_and_normalize(collection(polygon(ring))))
    assert all(len(position) == 2 for position in result["coordinates"][0])


def test_only_first_feature_is_kept():
    result = json.loads(
        validate_and_normalize(collection(polygon(TRIANGLE), {"type": "Point", "coordinates": [1, 1]}))
    )
    assert result["type"] == "Polygon"


def test_line_string_is_unsupported():
    line = {"type": "LineString", "coordinates": [[0, 0], [1, 1]]}
    with pytest.raises(UnsupportedGeometryError):
        validate_and_normalize(collection(line))


def test_point_is_unsupported():
    with pytest.raises(UnsupportedGeometryError):
        validate_and_normalize(collection({"type": "Point", "coordinates": [0, 0]}))


def test_multipolygon_is_accepted():
    multi = {"type": "MultiPolygon", "coordinates": [[SQUARE], [TRIANGLE]]}
    result = json.loads(validate_and_normalize(collection(multi)))
    assert result["type"] == "MultiPolygon"
    assert len(result["coordinates"]) == 2


def test_multipolygon_with_one_bad_member_is_rejected():
    multi = {"type": "MultiPolygon", "coordinates": [[SQUARE], [[[0, 0], [1, 0], [1, 1]]]]}
    with pytest.raises(InvalidMultiPolygonError):
        validate_and_normalize(collection(multi))


def test_empty_multipolygon_is_rejected():
    with pytest.raises(InvalidMultiPolygonError):
        validate_and_normalize(collection({"type": "MultiPolygon", "coordinates": []}))


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        json.dumps({"type": "Feature", "geometry": polygon(SQUARE)}),
        json.dumps({"type": "FeatureCollection", "features": "nope"}),
        json.dumps({"type": "FeatureCollection", "features": [{"type": "Feature", "geometry": None}]}),
        collection(polygon([[0, 0], ["a", 0], [1, 1], [0, 0]])),
    ],
)
def test_malformed_input_is_invalid_geojson(raw):
    with pytest.raises(InvalidGeoJSONError):
        validate_and_normalize(raw)


def test_empty_feature_collection_is_rejected():
    with pytest.raises(InvalidGeoJSONError, match="at least one feature"):
        validate_and_normalize(json.dumps({"type": "FeatureCollection", "features": []}))


def test_geometry_errors_are_validation_errors():
    for error in (InvalidGeoJSONError, UnsupportedGeometryError, InvalidPolygonError, InvalidMultiPolygonError):
        assert issubclass(error, ValidationError)


def test_normalization_is_deterministic():
    raw = collection(polygon(SQUARE))
    assert validate_and_normalize(raw) == validate_and_normalize(raw)


def test_simplify_removes_collinear_points():
    ring = [[0, 0], [0.5, 0], [1, 0], [1, 1], [0, 1], [0, 0]]
    boundary = validate_and_normalize(collection(polygon(ring)))
    simplified = simplify_geometry(boundary, 0.001)
    assert [0.5, 0.0] not in simplified["coordinates"][0]
    assert simplified["coordinates"][0][0] == simplified["coordinates"][0][-1]


def test_simplify_never_collapses_a_ring():
    boundary = validate_and_normalize(collection(polygon(TRIANGLE)))
    simplified = simplify_geometry(boundary, 10.0)
    assert simplified["coordinates"][0] == json.loads(boundary)["coordinates"][0]


def test_simplify_with_zero_tolerance_is_identity():
    boundary = validate_and_normalize(collection({"type": "MultiPolygon", "coordinates": [[SQUARE]]}))
    assert simplify_geometry(boundary, 0) == json.loads(boundary)


def _raw_polygon(vertex: str) -> str:
    return (
        '{"type":"FeatureCollection","features":[{"type":"Feature","properties":{},'
        '"geometry":{"type":"Polygon","coordinates":[[[0,0],' + vertex + ',[1,1],[0,0]]]}}]}'
    )


@pytest.mark.parametrize("vertex", ["[Infinity,0]", "[0,-Infinity]", "[NaN,0]"])
def test_non_finite_literals_are_rejected(vertex):
    with pytest.raises(InvalidGeoJSONError):
        validate_and_normalize(_raw_polygon(vertex))


def test_coordinate_too_large_for_float_is_rejected():
    with pytest.raises(InvalidGeoJSONError, match="out of range"):
        validate_and_normalize(_raw_polygon("[1" + "0" * 400 + ",0]"))


def test_non_finite_float_from_decoded_object_is_rejected():
    raw = collection(polygon([[0, 0], [float("inf"), 0], [1, 1], [0, 0]]))
    with pytest.raises(InvalidGeoJSONError):
        validate_and_normalize(raw)
