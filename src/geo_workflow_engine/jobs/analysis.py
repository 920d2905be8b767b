"""Data analysis job - Summary statistics for a GeoJSON input."""

import logging
from collections import Counter
from typing import Any

import numpy as np

from ..errors import JobExecutionError
from ..workflow import Task
from .base import JobContext
from .geometry import coordinates_array, iter_features, iter_geometries, load_geojson

logger = logging.getLogger(__name__)


class DataAnalysisJob:
    """Counts features and geometries and computes the bounding box."""

    task_type = "analysis"

    def execute(self, task: Task, context: JobContext) -> dict[str, Any]:
        try:
            data = load_geojson(task.input_payload)
            features = list(iter_features(data))
            geometries = list(iter_geometries(data))
            geometry_types = Counter(g.get("type", "unknown") for g in geometries)
            arrays = [coordinates_array(g) for g in geometries]
            coords = np.vstack(arrays) if arrays else np.empty((0, 2))
        except (ValueError, AttributeError, TypeError) as e:
            raise JobExecutionError(self.task_type, task.id, str(e)) from e

        output: dict[str, Any] = {
            "feature_count": len(features),
            "geometry_types": dict(sorted(geometry_types.items())),
            "vertex_count": int(coords.shape[0]),
            "bbox": None,
            "centroid": None,
        }
        if coords.shape[0] > 0:
            min_lon, min_lat = coords.min(axis=0)
            max_lon, max_lat = coords.max(axis=0)
            mean_lon, mean_lat = coords.mean(axis=0)
            output["bbox"] = [float(min_lon), float(min_lat), float(max_lon), float(max_lat)]
            output["centroid"] = [float(mean_lon), float(mean_lat)]

        logger.debug("Analysed task %s: %d features, %d vertices", task.id, len(features), coords.shape[0])
        return output
