from __future__ import annotations

import math

import pytest

from domain.edge import Edge, edge_pairs
from domain.errors import UnresolvedReferenceError
from domain.models import (
    BEZIER_EDGE_SIZE,
    LINE_EDGE_SIZE,
    TEMPORARY_ID,
    BezierEdgeRecord,
    EdgeKind,
    LineEdgeRecord,
    VertexRecord,
    VertexRole,
)
from domain.registry import IdentityRegistry
from domain.vertex import Vertex


def _edge(
    registry: IdentityRegistry,
    start: tuple[float, float],
    end: tuple[float, float],
    kind: EdgeKind = EdgeKind.LINE,
) -> Edge:
    return Edge(registry, Vertex(registry, *start), Vertex(registry, *end), kind)


def test_line_midpoint_follows_endpoints(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (4, 2))

    assert edge.size == 2
    assert edge.midpoint is not None
    assert edge.midpoint.xy == (2.0, 1.0)
    assert edge.midpoint.role == VertexRole.MIDPOINT
    assert edge.midpoint.is_temporary

    edge.destination.xy = (8, 6)

    assert edge.control_points[0].xy == (4.0, 3.0)


def test_bezier_conversion_places_controls_at_thirds(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0))

    edge.kind = EdgeKind.BEZIER

    assert edge.size == 3
    assert edge.midpoint is None
    assert [point.xy for point in edge.control_points] == [(1.0, 0.0), (2.0, 0.0)]
    assert all(point.role == VertexRole.CONTROL_POINT for point in edge.control_points)
    assert all(registry.has_id(point.id) for point in edge.control_points)


def test_bezier_controls_stay_put_when_endpoints_move(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)

    edge.destination.xy = (30, 30)

    assert [point.xy for point in edge.control_points] == [(1.0, 0.0), (2.0, 0.0)]


def test_temporary_edge_has_temporary_controls(registry: IdentityRegistry) -> None:
    edge = Edge(
        registry,
        Vertex(registry, 0, 0),
        Vertex(registry, 3, 3),
        EdgeKind.BEZIER,
        TEMPORARY_ID,
    )

    assert edge.sub_shape_id == TEMPORARY_ID
    assert all(point.id == TEMPORARY_ID for point in edge.control_points)


def test_back_to_line_regenerates_midpoint(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (2, 4), EdgeKind.BEZIER)

    edge.kind = EdgeKind.LINE

    assert edge.size == 2
    assert edge.control_points[0].xy == (1.0, 2.0)


def test_reverse_swaps_endpoints_and_controls(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)
    source, destination = edge.source, edge.destination

    edge.reverse()

    assert edge.source is destination
    assert edge.destination is source
    assert [point.xy for point in edge.control_points] == [(2.0, 0.0), (1.0, 0.0)]


def test_has_vertices_is_identity_based(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (1, 1))
    twin = Vertex(registry, 0, 0)

    assert edge.has_vertices(edge.destination, edge.source)
    assert not edge.has_vertices(twin, edge.destination)


def test_contains_excludes_endpoints(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (4, 4))

    assert edge.contains(Vertex(registry, 2, 2))
    assert not edge.contains(Vertex(registry, 0, 0))
    assert not edge.contains(Vertex(registry, 4, 4))
    assert not edge.contains(Vertex(registry, 5, 5))
    assert not edge.contains(Vertex(registry, 2, 3))


def test_shared_endpoint_is_not_an_intersection(registry: IdentityRegistry) -> None:
    corner = Vertex(registry, 0, 0)
    first = Edge(registry, corner, Vertex(registry, 2, 0))
    second = Edge(registry, corner, Vertex(registry, 0, 2))

    assert not first.intersect_with(second)


def test_interior_crossing_intersects(registry: IdentityRegistry) -> None:
    first = _edge(registry, (0, 0), (2, 2))
    second = _edge(registry, (0, 2), (2, 0))

    assert first.intersect_with(second)
    assert second.intersect_with(first)


def test_parallel_and_disjoint_edges(registry: IdentityRegistry) -> None:
    first = _edge(registry, (0, 0), (2, 0))

    assert not first.intersect_with(_edge(registry, (0, 1), (2, 1)))
    assert not first.intersect_with(_edge(registry, (3, -1), (3, 1)))


def test_collinear_overlap_intersects(registry: IdentityRegistry) -> None:
    first = _edge(registry, (0, 0), (4, 0))
    second = _edge(registry, (2, 0), (6, 0))

    assert first.intersect_with(second)


def test_equal_edges_intersect(registry: IdentityRegistry) -> None:
    first = _edge(registry, (0, 0), (4, 0))
    second = _edge(registry, (4, 0), (0, 0))

    assert first.intersect_with(second)


def test_equality_is_undirected(registry: IdentityRegistry) -> None:
    forward = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)
    backward = _edge(registry, (3, 0), (0, 0), EdgeKind.BEZIER)

    assert forward.equals(backward)
    assert not forward.equals(_edge(registry, (0, 0), (3, 0)))
    assert not forward.equals(None)


def test_equality_compares_controls(registry: IdentityRegistry) -> None:
    first = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)
    second = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)
    second.control_points[0].xy = (1, 5)

    assert not first.equals(second)


def test_delete_unregisters_bezier_controls(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)
    control_ids = [point.id for point in edge.control_points]

    edge.delete()

    assert not registry.has_id(edge.id)
    assert not any(registry.has_id(point_id) for point_id in control_ids)
    assert registry.has_id(edge.source.id)


def test_copy_is_deep(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)

    duplicate = edge.copy()

    assert duplicate.equals(edge)
    assert duplicate.id != edge.id
    assert duplicate.source is not edge.source
    assert all(
        mine is not theirs
        for mine, theirs in zip(duplicate.control_points, edge.control_points)
    )


def test_temporary_copy_keeps_children_temporary(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)
    before = set(registry.entities)

    duplicate = edge.copy(TEMPORARY_ID)

    assert duplicate.is_temporary
    assert duplicate.source.is_temporary
    assert set(registry.entities) == before


def test_bbox_and_length(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 4), EdgeKind.BEZIER)
    edge.control_points[0].xy = (-1, 6)

    bbox = edge.bbox

    assert bbox is not None
    assert (bbox.min.x, bbox.min.y, bbox.max.x, bbox.max.y) == (-1, 0, 3, 6)
    assert math.isclose(edge.length, 5.0)


def test_record_roundtrip_for_bezier(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)

    record = edge.to_record()
    vertices = {edge.source.id: edge.source, edge.destination.id: edge.destination}
    restored = Edge.from_record(IdentityRegistry(), record, vertices)

    assert isinstance(record, BezierEdgeRecord)
    assert restored.kind == EdgeKind.BEZIER
    assert restored.source is edge.source
    assert restored.equals(edge)


def test_line_record_has_no_control_points(registry: IdentityRegistry) -> None:
    record = _edge(registry, (0, 0), (1, 0)).to_record()

    assert isinstance(record, LineEdgeRecord)
    assert record.control_points == []


def test_from_record_falls_back_to_registry(registry: IdentityRegistry) -> None:
    start = Vertex(registry, 0, 0, id=1)
    end = Vertex(registry, 1, 0, id=2)

    edge = Edge.from_record(registry, LineEdgeRecord(id=3, src=1, dest=2))

    assert edge.source is start
    assert edge.destination is end


def test_from_record_unknown_vertex_raises(registry: IdentityRegistry) -> None:
    Vertex(registry, 0, 0, id=1)
    record = BezierEdgeRecord(
        id=3,
        src=1,
        dest=42,
        control_points=[
            VertexRecord(id=4, type="control_point", x=0, y=0),
            VertexRecord(id=5, type="control_point", x=1, y=0),
        ],
    )

    with pytest.raises(UnresolvedReferenceError) as excinfo:
        Edge.from_record(registry, record)

    assert excinfo.value.entity_id == 42
    assert "Edge 3" in str(excinfo.value)


def test_edge_pairs_are_unordered_combinations(registry: IdentityRegistry) -> None:
    edges = [_edge(registry, (index, 0), (index, 1)) for index in range(4)]

    assert len(edge_pairs(edges)) == 6
    assert edge_pairs(edges[:1]) == []


def test_size_matches_handle_counts(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0))
    assert edge.size == LINE_EDGE_SIZE

    edge.kind = EdgeKind.BEZIER
    assert edge.size == BEZIER_EDGE_SIZE


def test_switching_to_line_unregisters_bezier_controls(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)
    control_ids = [point.id for point in edge.control_points]

    edge.kind = EdgeKind.LINE

    assert all(point_id > 0 for point_id in control_ids)
    assert not any(registry.has_id(point_id) for point_id in control_ids)


def test_regenerated_bezier_controls_replace_old_ones(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)
    old_ids = [point.id for point in edge.control_points]

    edge.destination = Vertex(registry, 6, 0)
    edge.init_control_points()

    assert not any(registry.has_id(point_id) for point_id in old_ids)
    assert [point.x for point in edge.control_points] == [pytest.approx(2), pytest.approx(4)]
    assert all(registry.lookup(point.id) is point for point in edge.control_points)


def test_restoring_known_controls_registers_them_again(registry: IdentityRegistry) -> None:
    edge = _edge(registry, (0, 0), (3, 0), EdgeKind.BEZIER)
    control1, control2 = edge.control_points

    edge.kind = EdgeKind.LINE
    edge.to_bezier_with_control_points(control1, control2)

    assert registry.lookup(control1.id) is control1
    assert registry.lookup(control2.id) is control2
