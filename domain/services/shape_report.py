from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import List, Optional, Tuple

from domain.models import INTERSECTION_TOLERANCE, BoundingBox, EdgeKind, Point
from domain.polyline import Polyline
from domain.rect import Rect
from domain.services.shape_serialization import Shape, shape_kind


@dataclass(frozen=True)
class ShapeReport:
    shape_id: Optional[int]
    kind: str
    vertices: int
    edges: int
    bezier_edges: int
    ended: bool
    self_intersecting: bool
    valid: bool
    bbox: Optional[BoundingBox]
    centroid: Optional[Tuple[float, float]]


def build_shape_report(shape: Shape, tolerance: float = INTERSECTION_TOLERANCE) -> ShapeReport:
    if isinstance(shape, Rect):
        return ShapeReport(
            shape_id=shape.id,
            kind=shape_kind(shape),
            vertices=len(shape.vertices),
            edges=0,
            bezier_edges=0,
            ended=True,
            self_intersecting=False,
            valid=shape.w > 0 and shape.h > 0,
            bbox=BoundingBox(
                min=Point(shape.x, shape.y),
                max=Point(shape.x + shape.w, shape.y + shape.h),
            ),
            centroid=(shape.x + shape.w / 2, shape.y + shape.h / 2),
        )
    return _polyline_report(shape, tolerance)


def _polyline_report(shape: Polyline, tolerance: float) -> ShapeReport:
    self_intersecting = shape.is_self_intersecting(tolerance)
    centroid = shape.centroid()
    return ShapeReport(
        shape_id=shape.id,
        kind=shape_kind(shape),
        vertices=len(shape.vertices),
        edges=len(shape.edges),
        bezier_edges=sum(1 for edge in shape.edges if edge.kind == EdgeKind.BEZIER),
        ended=shape.is_ended(),
        self_intersecting=self_intersecting,
        valid=len(shape.vertices) > 1 and not self_intersecting,
        bbox=shape.bbox,
        centroid=None if any(math.isnan(value) for value in centroid) else centroid,
    )


def build_shape_reports(
    shapes: Iterable[Shape], tolerance: float = INTERSECTION_TOLERANCE
) -> List[ShapeReport]:
    return [build_shape_report(shape, tolerance) for shape in shapes]
