from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from domain.models import EdgeKind, LegacyPolylineRecord, VertexRole
from domain.path import Path
from domain.polygon import Polygon
from domain.registry import IdentityRegistry
from domain.services.legacy_import import import_legacy_polyline
from tests.helpers.shape_fixtures import coordinates_of, load_example_payload

LOGGER_NAME = "domain.services.legacy_import"


def _record(
    points: list[tuple[float, float]], types: str, **extra: object
) -> LegacyPolylineRecord:
    return LegacyPolylineRecord(vertices=points, types=types, **extra)


def test_example_export_becomes_curved_polygon(registry: IdentityRegistry) -> None:
    record = LegacyPolylineRecord.model_validate(load_example_payload("legacy.json")[0])

    polygon = import_legacy_polyline(registry, record)

    assert isinstance(polygon, Polygon)
    assert polygon.is_ended()
    assert coordinates_of(polygon.vertices) == [(0, 0), (3, 0), (3, 3), (0, 3)]
    assert [edge.kind for edge in polygon.edges] == [
        EdgeKind.BEZIER,
        EdgeKind.LINE,
        EdgeKind.LINE,
        EdgeKind.LINE,
    ]
    controls = polygon.edges[0].control_points
    assert [point.xy for point in controls] == [(1, 1), (2, 1)]
    assert all(point.role == VertexRole.CONTROL_POINT for point in controls)
    assert all(registry.has_id(point.id) for point in controls)


def test_path_shape_type(registry: IdentityRegistry) -> None:
    path = import_legacy_polyline(
        registry, _record([(0, 0), (1, 1), (2, 1), (3, 0)], "LCCL"), Path
    )

    assert isinstance(path, Path)
    assert len(path.edges) == 1
    assert path.edges[0].kind == EdgeKind.BEZIER


def test_curve_in_later_edge(registry: IdentityRegistry) -> None:
    polygon = import_legacy_polyline(
        registry, _record([(0, 0), (4, 0), (5, 1), (5, 3), (4, 4)], "LLCCL")
    )

    polygon.align_edges()
    assert [edge.kind for edge in polygon.edges] == [
        EdgeKind.LINE,
        EdgeKind.BEZIER,
        EdgeKind.LINE,
    ]
    assert polygon.edges[1].source.xy == (4, 0)
    assert polygon.edges[1].destination.xy == (4, 4)


def test_closed_flag_overrides_shape_type(registry: IdentityRegistry) -> None:
    open_shape = import_legacy_polyline(
        registry, _record([(0, 0), (1, 0), (1, 1)], "LLL", closed=False), Polygon
    )
    closed_shape = import_legacy_polyline(
        registry, _record([(0, 0), (1, 0), (1, 1)], "LLL", closed=True), Path
    )

    assert isinstance(open_shape, Path)
    assert isinstance(closed_shape, Polygon)
    assert len(closed_shape.edges) == 3


def test_trailing_run_curves_closing_edge(registry: IdentityRegistry) -> None:
    polygon = import_legacy_polyline(
        registry, _record([(0, 0), (2, 0), (2, 2), (1, 3), (0, 2)], "LLLCC")
    )

    polygon.align_edges()
    closing = polygon.edges[-1]
    assert closing.kind == EdgeKind.BEZIER
    assert closing.source.xy == (2, 2)
    assert closing.destination.xy == (0, 0)
    assert [point.xy for point in closing.control_points] == [(1, 3), (0, 2)]


def test_trailing_run_is_dropped_for_path(
    registry: IdentityRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        path = import_legacy_polyline(
            registry, _record([(0, 0), (2, 0), (1, 3), (0, 2)], "LLCC"), Path
        )

    assert all(edge.kind == EdgeKind.LINE for edge in path.edges)
    assert "trailing control points" in caplog.text
    assert len(registry.entities) == 4


@pytest.mark.parametrize(
    ("points", "types", "reason"),
    [
        ([(0, 0), (1, 1), (2, 2), (3, 3)], "CCLL", "before the first vertex"),
        ([(0, 0), (1, 1), (2, 2)], "LCL", "run of 1 control points"),
        ([(0, 0), (1, 1), (2, 1), (3, 1), (4, 0)], "LCCCL", "run of 3 control points"),
    ],
)
def test_malformed_runs_are_dropped(
    registry: IdentityRegistry,
    caplog: pytest.LogCaptureFixture,
    points: list[tuple[float, float]],
    types: str,
    reason: str,
) -> None:
    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        polyline = import_legacy_polyline(registry, _record(points, types), Path)

    assert reason in caplog.text
    assert all(edge.kind == EdgeKind.LINE for edge in polyline.edges)
    assert all(
        entity.role == VertexRole.VERTEX
        for entity in registry.entities.values()
        if hasattr(entity, "role")
    )


def test_empty_record(registry: IdentityRegistry) -> None:
    polygon = import_legacy_polyline(registry, _record([], ""))

    assert polygon.vertices == []
    assert polygon.edges == []
    assert polygon.is_ended()


@pytest.mark.parametrize(
    ("points", "types"),
    [
        ([(0, 0), (1, 1)], "LX"),
        ([(0, 0), (1, 1)], "L"),
    ],
)
def test_malformed_records_are_rejected(
    points: list[tuple[float, float]], types: str
) -> None:
    with pytest.raises(ValidationError):
        LegacyPolylineRecord(vertices=points, types=types)
