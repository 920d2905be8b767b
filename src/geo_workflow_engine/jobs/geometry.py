"""GeoJSON helpers shared by the geometry jobs."""

import json
from collections.abc import Iterator
from typing import Any

import numpy as np

# WGS84 equatorial radius, as used by common GeoJSON area implementations
EARTH_RADIUS_M = 6378137.0

GEOMETRY_TYPES = {
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
}


def load_geojson(payload: str) -> dict[str, Any]:
    """
    Parse a GeoJSON document.

    Raises:
        ValueError: payload is not JSON or not a GeoJSON object
    """
    try:
        data = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValueError(f"Input is not valid JSON: {e}") from e

    if not isinstance(data, dict) or "type" not in data:
        raise ValueError("Input is not a GeoJSON object")
    return data


def iter_features(data: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield features; a bare geometry counts as one feature."""
    kind = data.get("type")
    if kind == "FeatureCollection":
        yield from data.get("features") or []
    elif kind == "Feature":
        yield data
    elif kind in GEOMETRY_TYPES:
        yield {"type": "Feature", "geometry": data, "properties": {}}
    else:
        raise ValueError(f"Unsupported GeoJSON type: {kind}")


def iter_geometries(data: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield every geometry, unpacking geometry collections."""
    for feature in iter_features(data):
        geometry = feature.get("geometry")
        if geometry is None:
            continue
        if geometry.get("type") == "GeometryCollection":
            for child in geometry.get("geometries") or []:
                yield from iter_geometries(child)
        else:
            yield geometry


def _positions(coords: Any) -> Iterator[list[float]]:
    if coords is None:
        return
    if not isinstance(coords, (list, tuple)):
        raise ValueError(f"Invalid coordinates: {coords!r}")
    if not coords:
        return
    if isinstance(coords[0], (int, float)):
        yield coords[:2]
    else:
        for item in coords:
            yield from _positions(item)


def coordinates_array(geometry: dict[str, Any]) -> np.ndarray:
    """All positions of a geometry as an (N, 2) lon/lat array."""
    points = list(_positions(geometry.get("coordinates")))
    if not points:
        return np.empty((0, 2))
    return np.asarray(points, dtype=float)


def polygon_rings(geometry: dict[str, Any]) -> list[list[list[list[float]]]]:
    """Rings of every polygon in a Polygon or MultiPolygon."""
    kind = geometry.get("type")
    if kind == "Polygon":
        return [geometry["coordinates"]]
    if kind == "MultiPolygon":
        return list(geometry["coordinates"])
    return []


def ring_area(ring: list[list[float]]) -> float:
    """
    Signed area of a lon/lat ring on a sphere, in square meters.

    Uses the spherical excess approximation from
    Chamberlain & Duquette, "Some Algorithms for Polygons on a Sphere" (2007).
    Counter-clockwise rings are negative.
    """
    pts = np.asarray(ring, dtype=float)[:, :2]
    if len(pts) > 1 and np.array_equal(pts[0], pts[-1]):
        pts = pts[:-1]
    if len(pts) < 3:
        return 0.0

    lon = np.radians(pts[:, 0])
    lat = np.radians(pts[:, 1])
    total = np.sum((np.roll(lon, -2) - lon) * np.sin(np.roll(lat, -1)))
    return float(total * EARTH_RADIUS_M * EARTH_RADIUS_M / 2.0)


def polygon_area(rings: list[list[list[float]]]) -> float:
    """Area of one polygon: outer ring minus holes."""
    if not rings:
        return 0.0
    area = abs(ring_area(rings[0]))
    for hole in rings[1:]:
        area -= abs(ring_area(hole))
    return area
