from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from domain.models import EdgeKind, Point
from domain.polyline import Polyline
from domain.ports.rendering import CoordinateTransform, identity_transform
from domain.rect import Rect
from domain.vertex import Vertex


@dataclass(frozen=True)
class MoveTo:
    to: Point


@dataclass(frozen=True)
class LineTo:
    to: Point


@dataclass(frozen=True)
class CurveTo:
    control1: Point
    control2: Point
    to: Point


@dataclass(frozen=True)
class ClosePath:
    pass


OutlineCommand = Union[MoveTo, LineTo, CurveTo, ClosePath]


def _point(vertex: Vertex, to_canvas: CoordinateTransform) -> Point:
    x, y = to_canvas(vertex.x, vertex.y)
    return Point(x, y)


def build_outline(
    shape: Union[Polyline, Rect],
    to_canvas: CoordinateTransform = identity_transform,
) -> List[OutlineCommand]:
    if isinstance(shape, Rect):
        corners = [shape.get_handle(index) for index in range(0, 8, 2)]
        commands: List[OutlineCommand] = [MoveTo(_point(corners[0], to_canvas))]
        commands.extend(LineTo(_point(corner, to_canvas)) for corner in corners[1:])
        commands.append(ClosePath())
        return commands

    if not shape.vertices:
        return []
    shape.align_edges()
    commands = [MoveTo(_point(shape.vertices[0], to_canvas))]
    for edge in shape.edges:
        destination = _point(edge.destination, to_canvas)
        if edge.kind == EdgeKind.BEZIER:
            control1, control2 = edge.control_points
            commands.append(
                CurveTo(_point(control1, to_canvas), _point(control2, to_canvas), destination)
            )
        else:
            commands.append(LineTo(destination))
    if shape.closed:
        commands.append(ClosePath())
    return commands


def handle_points(
    shape: Union[Polyline, Rect], include_control_points: bool = True
) -> List[Vertex]:
    if isinstance(shape, Rect):
        return list(shape.vertices)
    handles = list(shape.vertices)
    if shape.is_ended() and include_control_points:
        handles.extend(shape.control_points)
    return handles
