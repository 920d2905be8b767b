"""Polygon area job - Spherical area of the polygons in a GeoJSON input."""

from typing import Any

from ..errors import JobExecutionError
from ..workflow import Task
from .base import JobContext
from .geometry import iter_geometries, load_geojson, polygon_area, polygon_rings


class PolygonAreaJob:
    """Sums the area of every Polygon/MultiPolygon, in square meters."""

    task_type = "polygon_area"

    def execute(self, task: Task, context: JobContext) -> dict[str, Any]:
        try:
            geometries = list(iter_geometries(load_geojson(task.input_payload)))
            polygons = [rings for g in geometries for rings in polygon_rings(g)]
            if not polygons:
                raise ValueError("Input contains no polygons")
            areas = [polygon_area(rings) for rings in polygons]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise JobExecutionError(self.task_type, task.id, str(e)) from e

        return {
            "polygon_count": len(polygons),
            "areas_sq_meters": areas,
            "area_sq_meters": sum(areas),
        }
