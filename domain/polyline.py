from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Dict, List, Optional, Tuple, Type, TypeVar, Union

from domain.edge import Edge, bounding_box, edge_pairs
from domain.errors import TemporaryEntityError
from domain.models import (
    EQUALITY_TOLERANCE,
    INTERSECTION_TOLERANCE,
    TEMPORARY_ID,
    BoundingBox,
    EdgeKind,
    PathRecord,
    PolygonRecord,
    VertexRole,
)
from domain.registry import Entity, IdentityRegistry
from domain.vertex import Vertex

PolylineT = TypeVar("PolylineT", bound="Polyline")


class Polyline(Entity, ABC):
    """Ordered vertices joined by a parallel list of edges.

    ``edges[i]`` joins ``vertices[i]`` and ``vertices[i + 1]`` (wrapping for closed
    shapes), but editing operations do not keep edge direction in order. Call
    ``align_edges`` before anything that depends on direction.
    """

    closed: ClassVar[bool] = False
    record_type: ClassVar[Type[Union[PathRecord, PolygonRecord]]]

    def __init__(self, registry: IdentityRegistry, id: Optional[int] = None) -> None:
        super().__init__(registry, id)
        self.vertices: List[Vertex] = []
        self.edges: List[Edge] = []
        self.ended = False
        self.sub_shape_id: Optional[int] = TEMPORARY_ID if id == TEMPORARY_ID else None

    @abstractmethod
    def insert_vertex_at(self, index: int, vertex: Vertex) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_vertex_at(self, index: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def reverse(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def equals(self, other: Polyline, tolerance: float = EQUALITY_TOLERANCE) -> bool:
        raise NotImplementedError

    @property
    def control_points(self) -> List[Vertex]:
        points: List[Vertex] = []
        for edge in self.edges:
            points.extend(edge.control_points)
        return points

    @property
    def bbox(self) -> Optional[BoundingBox]:
        return bounding_box(self.control_points + self.vertices)

    @property
    def length(self) -> float:
        return sum(edge.length for edge in self.edges)

    def delete(self) -> None:
        for edge in self.edges:
            edge.delete()
        for vertex in self.vertices:
            vertex.delete()
        super().delete()

    def end_path(self) -> None:
        self.ended = True

    def is_ended(self) -> bool:
        return self.ended

    def centroid(self) -> Tuple[float, float]:
        count = len(self.vertices)
        if count == 0:
            return float("nan"), float("nan")
        return (
            sum(vertex.x for vertex in self.vertices) / count,
            sum(vertex.y for vertex in self.vertices) / count,
        )

    def is_self_intersecting(self, tolerance: float = INTERSECTION_TOLERANCE) -> bool:
        return any(
            first.intersect_with(second, tolerance) for first, second in edge_pairs(self.edges)
        )

    def is_valid(self, tolerance: float = INTERSECTION_TOLERANCE) -> bool:
        return len(self.vertices) > 1 and not self.is_self_intersecting(tolerance)

    def align_edges(self) -> None:
        for vertex, edge in zip(self.vertices, self.edges):
            if edge.destination is vertex:
                edge.reverse()

    def push_vertex(self, vertex: Vertex) -> None:
        self.insert_vertex_at(len(self.vertices), vertex)

    def pop_vertex(self) -> None:
        self.delete_vertex_at(len(self.vertices) - 1)

    def index_of(self, vertex: Vertex, tolerance: float = EQUALITY_TOLERANCE) -> int:
        for index, candidate in enumerate(self.vertices):
            if vertex.equals(candidate, tolerance):
                return index
        return -1

    def edge_index_with_control_point(self, point: Vertex) -> int:
        for index, edge in enumerate(self.edges):
            if any(candidate is point for candidate in edge.control_points):
                return index
        return -1

    def midpoint_to_vertex(self, edge_index: int) -> Vertex:
        vertex = self.edges[edge_index].control_points[0].copy()
        vertex.role = VertexRole.VERTEX
        self.align_edges()
        self.insert_vertex_at(edge_index + 1, vertex)
        return vertex

    def convert_midpoint_to_known_vertex_between(
        self, vertex: Vertex, first: Vertex, second: Vertex
    ) -> None:
        for index, edge in enumerate(self.edges):
            if edge.has_vertices(first, second):
                self.align_edges()
                self.insert_vertex_at(index + 1, vertex)
                return

    def midpoint_to_bezier(self, edge_index: int) -> List[Vertex]:
        edge = self.edges[edge_index]
        edge.kind = EdgeKind.BEZIER
        return edge.control_points

    def convert_midpoint_to_known_bezier_between(
        self, control1: Vertex, control2: Vertex, first: Vertex, second: Vertex
    ) -> None:
        for edge in self.edges:
            if edge.source is first and edge.destination is second:
                edge.to_bezier_with_control_points(control1, control2)
                return
            if edge.source is second and edge.destination is first:
                edge.to_bezier_with_control_points(control2, control1)
                return

    def bezier_to_midpoint(self, edge_index: int) -> Vertex:
        edge = self.edges[edge_index]
        edge.kind = EdgeKind.LINE
        return edge.control_points[0]

    def convert_bezier_to_known_midpoint_between(
        self, midpoint: Vertex, first: Vertex, second: Vertex
    ) -> None:
        for edge in self.edges:
            if edge.has_vertices(first, second):
                edge.to_line_with_midpoint(midpoint)
                return

    def copy(self: PolylineT, id: Optional[int] = None) -> PolylineT:
        """Deep copy with fresh identities; nothing is shared with ``self``."""
        self.align_edges()
        duplicate = type(self)(self.registry, id)
        child_id = TEMPORARY_ID if duplicate.is_temporary else None
        duplicate.vertices = [vertex.copy(child_id) for vertex in self.vertices]
        count = len(duplicate.vertices)
        for index, edge in enumerate(self.edges):
            control_points = None
            if edge.kind == EdgeKind.BEZIER:
                control_points = [point.copy(child_id) for point in edge.control_points]
            duplicate.edges.append(
                Edge(
                    self.registry,
                    duplicate.vertices[index % count],
                    duplicate.vertices[(index + 1) % count],
                    edge.kind,
                    child_id,
                    control_points,
                )
            )
        duplicate.end_path()
        return duplicate

    def to_record(self) -> Union[PathRecord, PolygonRecord]:
        self.align_edges()
        self._ensure_persistable()
        return self.record_type(
            id=self.id,
            vertices=[vertex.to_record() for vertex in self.vertices],
            edges=[edge.to_record() for edge in self.edges],
        )

    @classmethod
    def from_record(
        cls: Type[PolylineT],
        registry: IdentityRegistry,
        record: Union[PathRecord, PolygonRecord],
    ) -> PolylineT:
        polyline = cls(registry, record.id)
        imported: Dict[int, Vertex] = {}
        for vertex_record in record.vertices:
            vertex = Vertex.from_record(registry, vertex_record)
            imported[vertex_record.id] = vertex
            polyline.vertices.append(vertex)
        for edge_record in record.edges:
            polyline.edges.append(Edge.from_record(registry, edge_record, imported))
        polyline.end_path()
        return polyline

    def _ensure_persistable(self) -> None:
        entities: List[Entity] = [self, *self.vertices, *self.edges]
        for edge in self.edges:
            if edge.kind == EdgeKind.BEZIER:
                entities.extend(edge.control_points)
        for entity in entities:
            if entity.is_temporary:
                raise TemporaryEntityError(entity.id, f"{type(self).__name__} {self.id}")

    def _new_line_edge(self, source: Vertex, destination: Vertex) -> Edge:
        return Edge(self.registry, source, destination, EdgeKind.LINE, self.sub_shape_id)

    def __str__(self) -> str:
        vertices = ", ".join(str(vertex.xy) for vertex in self.vertices)
        edges = ", ".join(
            str((edge.source.xy, edge.destination.xy)) for edge in self.edges
        )
        return f"{vertices}\n{edges}"
