from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence, Tuple, Union

from domain.errors import UnresolvedReferenceError
from domain.models import (
    BEZIER_EDGE_SIZE,
    EQUALITY_TOLERANCE,
    INTERSECTION_TOLERANCE,
    LINE_EDGE_SIZE,
    TEMPORARY_ID,
    BezierEdgeRecord,
    BoundingBox,
    EdgeKind,
    LineEdgeRecord,
    Point,
    VertexRole,
)
from domain.registry import IdentityRegistry, Entity
from domain.vertex import Vertex

_COLLINEAR_EPSILON = 1e-9


def bounding_box(points: Sequence[Vertex]) -> Optional[BoundingBox]:
    if not points:
        return None
    xs = [point.x for point in points]
    ys = [point.y for point in points]
    return BoundingBox(min=Point(min(xs), min(ys)), max=Point(max(xs), max(ys)))


class Edge(Entity):
    """A directed connector between two vertices of a polyline.

    The edge only references its endpoints; the polyline owns them. Auxiliary
    points belong to the edge: a LINE keeps one midpoint that is recomputed on
    every read, a BEZIER keeps two control points that stay where the user put
    them. Re-pointing ``source`` or ``destination`` does not touch the control
    points, call ``init_control_points`` for that.
    """

    def __init__(
        self,
        registry: IdentityRegistry,
        source: Vertex,
        destination: Vertex,
        kind: EdgeKind = EdgeKind.LINE,
        id: Optional[int] = None,
        control_points: Optional[Sequence[Vertex]] = None,
    ) -> None:
        super().__init__(registry, id)
        self.source = source
        self.destination = destination
        self._kind = EdgeKind(kind)
        self._control_points: List[Vertex] = []
        if control_points:
            self._control_points = list(control_points)
        else:
            self.init_control_points()
        self.sub_shape_id: Optional[int] = TEMPORARY_ID if id == TEMPORARY_ID else None

    @property
    def kind(self) -> EdgeKind:
        return self._kind

    @kind.setter
    def kind(self, new_kind: EdgeKind) -> None:
        new_kind = EdgeKind(new_kind)
        if new_kind == self._kind:
            return
        self._kind = new_kind
        self.init_control_points()

    @property
    def control_points(self) -> List[Vertex]:
        if self._kind == EdgeKind.LINE:
            self._control_points[0].xy = self.source.interpolate_coords(self.destination, 0.5)
        return self._control_points

    @control_points.setter
    def control_points(self, points: Sequence[Vertex]) -> None:
        self._control_points = list(points)

    @property
    def midpoint(self) -> Optional[Vertex]:
        if self._kind != EdgeKind.LINE:
            return None
        return self.control_points[0]

    @property
    def bbox(self) -> Optional[BoundingBox]:
        return bounding_box([self.source, self.destination, *self.control_points])

    @property
    def length(self) -> float:
        return self.source.distance_to(self.destination)

    @property
    def size(self) -> int:
        """Number of drag handles: 2 for LINE, 3 for BEZIER."""
        return BEZIER_EDGE_SIZE if self._kind == EdgeKind.BEZIER else LINE_EDGE_SIZE

    def init_control_points(self) -> None:
        # Replaced points leave the registry; temporary midpoints were never in it.
        for point in self._control_points:
            point.delete()
        if self._kind == EdgeKind.LINE:
            midpoint = self.source.interpolate(
                self.destination, 0.5, VertexRole.MIDPOINT, TEMPORARY_ID
            )
            self._control_points = [midpoint]
        elif self._kind == EdgeKind.BEZIER:
            control1 = self.source.interpolate(
                self.destination, 1 / 3, VertexRole.CONTROL_POINT, self._auxiliary_id()
            )
            control2 = self.source.interpolate(
                self.destination, 2 / 3, VertexRole.CONTROL_POINT, self._auxiliary_id()
            )
            self._control_points = [control1, control2]

    def to_bezier_with_control_points(self, control1: Vertex, control2: Vertex) -> None:
        for point in (control1, control2):
            if point.id is not None and point.id > 0 and not self.registry.has_id(point.id):
                self.registry.register(point, point.id)
        self._kind = EdgeKind.BEZIER
        self._control_points = [control1, control2]

    def to_line_with_midpoint(self, midpoint: Vertex) -> None:
        self._kind = EdgeKind.LINE
        self._control_points = [midpoint]

    def reverse(self) -> None:
        self.source, self.destination = self.destination, self.source
        self._control_points.reverse()

    def has_vertices(self, first: Vertex, second: Vertex) -> bool:
        return (self.source is first and self.destination is second) or (
            self.source is second and self.destination is first
        )

    def contains(self, point: Vertex) -> bool:
        """True if ``point`` lies strictly inside the segment, endpoints excluded."""
        dx = self.destination.x - self.source.x
        dy = self.destination.y - self.source.y
        squared_length = dx * dx + dy * dy
        if squared_length == 0:
            return False
        px = point.x - self.source.x
        py = point.y - self.source.y
        cross = dx * py - dy * px
        if abs(cross) > _COLLINEAR_EPSILON * squared_length:
            return False
        fraction = (px * dx + py * dy) / squared_length
        return 0 < fraction < 1

    def intersect_with(self, other: Edge, tolerance: float = INTERSECTION_TOLERANCE) -> bool:
        # Bezier curvature is ignored: both edges are tested as straight segments.
        if self.equals(other):
            return True
        p1, p2 = self.source, self.destination
        q1, q2 = other.source, other.destination
        det = (p2.x - p1.x) * (q2.y - q1.y) - (q2.x - q1.x) * (p2.y - p1.y)
        if math.isclose(det, 0.0, abs_tol=_COLLINEAR_EPSILON):
            return (
                self.contains(q1)
                or self.contains(q2)
                or other.contains(p1)
                or other.contains(p2)
            )
        own = ((q2.y - q1.y) * (q2.x - p1.x) + (q1.x - q2.x) * (q2.y - p1.y)) / det
        theirs = ((p1.y - p2.y) * (q2.x - p1.x) + (p2.x - p1.x) * (q2.y - p1.y)) / det
        return tolerance < own < 1 - tolerance and tolerance < theirs < 1 - tolerance

    def equals(self, other: Optional[Edge], tolerance: float = EQUALITY_TOLERANCE) -> bool:
        """Undirected structural equality."""
        if other is None:
            return False
        forward = self.source.equals(other.source, tolerance) and self.destination.equals(
            other.destination, tolerance
        )
        backward = self.source.equals(other.destination, tolerance) and self.destination.equals(
            other.source, tolerance
        )
        if not (forward or backward):
            return False
        if self._kind != other.kind or self.size != other.size:
            return False
        own_points = self.control_points
        other_points = other.control_points
        if not forward:
            other_points = list(reversed(other_points))
        return all(
            mine.equals(theirs, tolerance) for mine, theirs in zip(own_points, other_points)
        )

    def delete(self) -> None:
        super().delete()
        if self._kind == EdgeKind.BEZIER:
            for point in self._control_points:
                point.delete()

    def copy(self, id: Optional[int] = None) -> Edge:
        child_id = TEMPORARY_ID if id is not None and id <= 0 else None
        control_points = None
        if self._kind == EdgeKind.BEZIER:
            control_points = [point.copy(child_id) for point in self._control_points]
        return Edge(
            self.registry,
            self.source.copy(child_id),
            self.destination.copy(child_id),
            self._kind,
            id,
            control_points,
        )

    def to_record(self) -> Union[LineEdgeRecord, BezierEdgeRecord]:
        if self._kind == EdgeKind.BEZIER:
            return BezierEdgeRecord(
                id=self.id,
                src=self.source.id,
                dest=self.destination.id,
                control_points=[point.to_record() for point in self._control_points],
            )
        return LineEdgeRecord(id=self.id, src=self.source.id, dest=self.destination.id)

    @classmethod
    def from_record(
        cls,
        registry: IdentityRegistry,
        record: Union[LineEdgeRecord, BezierEdgeRecord],
        vertices: Optional[Dict[int, Vertex]] = None,
    ) -> Edge:
        """Rebuild an edge whose endpoints were imported beforehand.

        ``vertices`` maps record ids to vertices imported in the same pass; it
        takes precedence over the registry so that a renumbered vertex still
        binds to the edges of its own shape.
        """
        source = _resolve_endpoint(registry, record.src, vertices, record.id)
        destination = _resolve_endpoint(registry, record.dest, vertices, record.id)
        control_points: List[Vertex] = []
        if isinstance(record, BezierEdgeRecord):
            control_points = [Vertex.from_record(registry, point) for point in record.control_points]
        return cls(registry, source, destination, EdgeKind(record.type), record.id, control_points)

    def _auxiliary_id(self) -> Optional[int]:
        return TEMPORARY_ID if self.is_temporary else None

    def __repr__(self) -> str:
        return (
            f"Edge(id={self.id}, {self.source.xy} -> {self.destination.xy}, "
            f"kind={self._kind.value})"
        )


def _resolve_endpoint(
    registry: IdentityRegistry,
    vertex_id: int,
    vertices: Optional[Dict[int, Vertex]],
    edge_id: int,
) -> Vertex:
    if vertices is not None and vertex_id in vertices:
        return vertices[vertex_id]
    found = registry.lookup(vertex_id)
    if not isinstance(found, Vertex):
        raise UnresolvedReferenceError(vertex_id, f"Edge {edge_id}")
    return found


def edge_pairs(edges: Sequence[Edge]) -> List[Tuple[Edge, Edge]]:
    return [(edges[i], edges[j]) for i in range(len(edges)) for j in range(i + 1, len(edges))]
