from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from domain.edge import Edge
from domain.models import EQUALITY_TOLERANCE, TEMPORARY_ID, EdgeKind, PolygonRecord
from domain.polyline import Polyline
from domain.vertex import Vertex


@dataclass(frozen=True)
class ArcPath:
    vertices: List[Vertex] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    length: float = 0.0


@dataclass(frozen=True)
class PathsBetween:
    short: ArcPath
    long: ArcPath


class Polygon(Polyline):
    """Closed polyline; vertex and edge indices wrap around."""

    closed: ClassVar[bool] = True
    record_type = PolygonRecord

    def reverse(self) -> None:
        # Vertex 0 stays in place, the rest of the cycle flips direction.
        self.vertices.reverse()
        if self.vertices:
            self.vertices.insert(0, self.vertices.pop())
        self.edges.reverse()
        self.align_edges()

    def insert_vertex_at(self, index: int, vertex: Vertex) -> None:
        if index < 0 or index > len(self.vertices):
            return
        self.align_edges()
        self.vertices.insert(index, vertex)
        count = len(self.vertices)
        if count < 2:
            return
        if not self.edges:
            self.edges.append(self._new_line_edge(self.vertices[(index - 1) % count], vertex))
        else:
            previous = self.edges[(index - 1) % len(self.edges)]
            previous.destination = vertex
            previous.init_control_points()
        self.edges.insert(index, self._new_line_edge(vertex, self.vertices[(index + 1) % count]))

    def delete_vertex_at(self, index: int) -> None:
        if index < 0 or index >= len(self.vertices):
            return
        self.vertices.pop(index).delete()
        count = len(self.vertices)
        if count < 2:
            removed, self.edges = self.edges, []
        else:
            bridge = self._new_line_edge(
                self.vertices[(index - 1) % count], self.vertices[index % count]
            )
            removed = [self.edges.pop(index)]
            bridge_index = (index - 1) % len(self.edges)
            removed.append(self.edges[bridge_index])
            self.edges[bridge_index] = bridge
        for edge in removed:
            edge.delete()

    def get_path_between(self, start: Vertex, end: Vertex) -> PathsBetween:
        """Both arcs of the cycle between two vertices, shorter one first.

        On equal length the forward arc (increasing indices) is reported as short.
        """
        start_index = self.index_of(start)
        end_index = self.index_of(end)
        if start_index == -1 or end_index == -1:
            return PathsBetween(short=ArcPath(), long=ArcPath())
        if start_index == end_index:
            single = ArcPath(vertices=[self.vertices[start_index]])
            return PathsBetween(short=single, long=single)
        forward = self._walk(start_index, end_index, step=1)
        backward = self._walk(start_index, end_index, step=-1)
        if forward.length <= backward.length:
            return PathsBetween(short=forward, long=backward)
        return PathsBetween(short=backward, long=forward)

    def push_path(
        self,
        source: Polygon,
        start: Vertex,
        end: Vertex,
        long_path: bool = False,
        temporary: bool = False,
    ) -> None:
        """Append an arc of ``source`` between ``start`` and ``end`` to this polygon.

        The arc is copied, so the two polygons never share vertices. Edges built
        here carry the temporary marker when ``temporary`` is set.
        """
        marker = TEMPORARY_ID if temporary else None
        paths = source.get_path_between(start, end)
        arc = paths.long if long_path else paths.short
        if not arc.vertices:
            return
        self.align_edges()

        if len(self.vertices) > 1:
            self.edges.pop().delete()
        if self.vertices and start.equals(self.vertices[-1]):
            self.vertices.pop().delete()
            if self.edges:
                self.edges.pop().delete()

        copies = [vertex.copy(marker) for vertex in arc.vertices]
        if self.vertices:
            self.edges.append(self._marked_line_edge(self.vertices[-1], copies[0], marker))
        for position, edge in enumerate(arc.edges):
            self.edges.append(
                self._copy_arc_edge(
                    edge, arc.vertices[position], copies[position], copies[position + 1], marker
                )
            )
        self.vertices.extend(copies)

        if len(self.vertices) > 1 and end.equals(self.vertices[0]):
            self.vertices.pop().delete()
            if self.edges:
                self.edges[-1].destination = self.vertices[0]
        elif len(self.vertices) > 1:
            self.edges.append(
                self._marked_line_edge(self.vertices[-1], self.vertices[0], marker)
            )

    def equals(self, other: Polyline, tolerance: float = EQUALITY_TOLERANCE) -> bool:
        count = len(self.vertices)
        if count != len(other.vertices) or len(self.edges) != len(other.edges):
            return False
        if count == 0:
            return True
        anchor = other.index_of(self.vertices[0], tolerance)
        if anchor == -1:
            return False
        reversed_order = count > 1 and self.vertices[1].equals(
            other.vertices[(anchor - 1) % count], tolerance
        )
        direction = -1 if reversed_order else 1
        offset = -1 if reversed_order else 0
        for index, vertex in enumerate(self.vertices):
            counterpart_vertex = other.vertices[(anchor + direction * index) % count]
            if not vertex.equals(counterpart_vertex, tolerance):
                return False
        edge_count = len(other.edges)
        for index, edge in enumerate(self.edges):
            counterpart = other.edges[(anchor + direction * index + offset) % edge_count]
            if not edge.equals(counterpart, tolerance):
                return False
        return True

    def _walk(self, start_index: int, end_index: int, step: int) -> ArcPath:
        count = len(self.vertices)
        vertices = [self.vertices[start_index]]
        edges: List[Edge] = []
        length = 0.0
        index = start_index
        while index != end_index:
            edge_index = index if step > 0 else (index - 1) % count
            edge = self.edges[edge_index]
            edges.append(edge)
            length += edge.length
            index = (index + step) % count
            vertices.append(self.vertices[index])
        return ArcPath(vertices=vertices, edges=edges, length=length)

    def _marked_line_edge(
        self, source: Vertex, destination: Vertex, marker: Optional[int]
    ) -> Edge:
        return Edge(self.registry, source, destination, EdgeKind.LINE, marker)

    def _copy_arc_edge(
        self,
        edge: Edge,
        arc_source: Vertex,
        source: Vertex,
        destination: Vertex,
        marker: Optional[int],
    ) -> Edge:
        if edge.kind != EdgeKind.BEZIER:
            return self._marked_line_edge(source, destination, marker)
        control_points = [point.copy(marker) for point in edge.control_points]
        if edge.source is not arc_source:
            control_points.reverse()
        return Edge(self.registry, source, destination, EdgeKind.BEZIER, marker, control_points)
