from __future__ import annotations

import logging
from typing import List, Type, Union

from domain.models import (
    LEGACY_CONTROL_TAG,
    LEGACY_LINE_TAG,
    LegacyPolylineRecord,
    VertexRole,
)
from domain.path import Path
from domain.polygon import Polygon
from domain.registry import IdentityRegistry
from domain.vertex import Vertex

logger = logging.getLogger(__name__)

LegacyShape = Union[Path, Polygon]


def import_legacy_polyline(
    registry: IdentityRegistry,
    record: LegacyPolylineRecord,
    shape_type: Type[LegacyShape] = Polygon,
) -> LegacyShape:
    """Build a polyline from the flattened ``vertices``/``types`` export.

    ``L`` points are vertices. A run of exactly two ``C`` points between two
    ``L`` points turns the edge between them into a bezier curve. Control runs
    before the first vertex, or of any other length, are dropped.
    """
    if record.closed is not None:
        shape_type = Polygon if record.closed else Path
    polyline = shape_type(registry)
    pending: List[Vertex] = []
    for (x, y), tag in zip(record.vertices, record.types):
        if tag == LEGACY_CONTROL_TAG:
            pending.append(Vertex(registry, x, y, VertexRole.CONTROL_POINT))
            continue
        if tag != LEGACY_LINE_TAG:
            continue
        polyline.push_vertex(Vertex(registry, x, y))
        if pending:
            _curve_edge(polyline, len(polyline.vertices) - 2, pending)
            pending = []
    if pending:
        if isinstance(polyline, Polygon) and len(polyline.vertices) > 1:
            _curve_edge(polyline, len(polyline.edges) - 1, pending)
        else:
            _drop_control_run(pending, "trailing control points without a destination")
    polyline.end_path()
    return polyline


def _curve_edge(polyline: LegacyShape, edge_index: int, control_points: List[Vertex]) -> None:
    if edge_index < 0:
        _drop_control_run(control_points, "control points before the first vertex")
        return
    if len(control_points) != 2:
        _drop_control_run(control_points, f"run of {len(control_points)} control points")
        return
    polyline.align_edges()
    polyline.edges[edge_index].to_bezier_with_control_points(control_points[0], control_points[1])


def _drop_control_run(control_points: List[Vertex], reason: str) -> None:
    logger.warning("Dropping legacy %s", reason)
    for point in control_points:
        point.delete()
