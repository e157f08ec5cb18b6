from __future__ import annotations

from typing import ClassVar, Sequence

from domain.edge import Edge
from domain.models import EQUALITY_TOLERANCE, PathRecord
from domain.polyline import Polyline
from domain.vertex import Vertex


class Path(Polyline):
    """Open polyline: a chain with two free ends."""

    closed: ClassVar[bool] = False
    record_type = PathRecord

    def reverse(self) -> None:
        self.vertices.reverse()
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
        if index == 0:
            edge = self._new_line_edge(self.vertices[0], self.vertices[1])
        elif index == count - 1:
            edge = self._new_line_edge(self.vertices[index - 1], self.vertices[index])
        else:
            # The edge that used to reach the successor now stops at the new vertex.
            previous = self.edges[index - 1]
            previous.destination = vertex
            previous.init_control_points()
            edge = self._new_line_edge(vertex, self.vertices[index + 1])
        self.edges.insert(index, edge)

    def delete_vertex_at(self, index: int) -> None:
        if index < 0 or index >= len(self.vertices):
            return
        count = len(self.vertices)
        if count <= 2:
            removed, self.edges = self.edges, []
        elif index == 0:
            removed = [self.edges.pop(0)]
        elif index == count - 1:
            removed = [self.edges.pop(index - 1)]
        else:
            # Curvature of the two merged edges is dropped.
            bridge = self._new_line_edge(self.vertices[index - 1], self.vertices[index + 1])
            removed = [self.edges.pop(index), self.edges[index - 1]]
            self.edges[index - 1] = bridge
        for edge in removed:
            edge.delete()
        self.vertices.pop(index).delete()

    def equals(self, other: Polyline, tolerance: float = EQUALITY_TOLERANCE) -> bool:
        if len(self.vertices) != len(other.vertices) or len(self.edges) != len(other.edges):
            return False
        if not self.vertices:
            return True
        if self._matches(other.vertices, other.edges, tolerance):
            return True
        return self._matches(other.vertices[::-1], other.edges[::-1], tolerance)

    def _matches(
        self, vertices: Sequence[Vertex], edges: Sequence[Edge], tolerance: float
    ) -> bool:
        return all(
            mine.equals(theirs, tolerance) for mine, theirs in zip(self.vertices, vertices)
        ) and all(mine.equals(theirs, tolerance) for mine, theirs in zip(self.edges, edges))
