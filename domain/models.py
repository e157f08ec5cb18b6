from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

DOCUMENT_SCHEMA_VERSION = "1.0"

EQUALITY_TOLERANCE = 1e-6
INTERSECTION_TOLERANCE = 0.01
TEMPORARY_ID = -1

LINE_EDGE_SIZE = 2
BEZIER_EDGE_SIZE = 3

LEGACY_LINE_TAG = "L"
LEGACY_CONTROL_TAG = "C"


class VertexRole(str, Enum):
    VERTEX = "vertex"
    MIDPOINT = "midpoint"
    CONTROL_POINT = "control_point"


class EdgeKind(str, Enum):
    LINE = "line"
    BEZIER = "bezier"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class BoundingBox:
    min: Point
    max: Point

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y


# Temporary entities (id <= 0) are never persisted.
PersistedId = Annotated[int, Field(gt=0)]


class VertexRecord(BaseModel):
    id: PersistedId
    type: VertexRole = VertexRole.VERTEX
    x: float
    y: float


class LineEdgeRecord(BaseModel):
    id: PersistedId
    src: PersistedId
    dest: PersistedId
    type: Literal["line"] = "line"
    control_points: List[VertexRecord] = Field(default_factory=list, max_length=0)


class BezierEdgeRecord(BaseModel):
    id: PersistedId
    src: PersistedId
    dest: PersistedId
    type: Literal["bezier"] = "bezier"
    control_points: List[VertexRecord] = Field(..., min_length=2, max_length=2)


EdgeRecord = Annotated[Union[LineEdgeRecord, BezierEdgeRecord], Field(discriminator="type")]


class PolylineRecord(BaseModel):
    id: PersistedId
    vertices: List[VertexRecord] = Field(default_factory=list)
    edges: List[EdgeRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def ensure_unique_vertex_ids(self) -> "PolylineRecord":
        seen: set[int] = set()
        for vertex in self.vertices:
            if vertex.id in seen:
                msg = f"Duplicate vertex id {vertex.id} in shape {self.id}"
                raise ValueError(msg)
            seen.add(vertex.id)
        return self


class PathRecord(PolylineRecord):
    kind: Literal["path"] = "path"


class PolygonRecord(PolylineRecord):
    kind: Literal["polygon"] = "polygon"


class RectRecord(BaseModel):
    kind: Literal["rect"] = "rect"
    id: PersistedId
    x: float
    y: float
    w: float = Field(..., ge=0)
    h: float = Field(..., ge=0)


ShapeRecord = Annotated[
    Union[PathRecord, PolygonRecord, RectRecord], Field(discriminator="kind")
]


class ShapeDocument(BaseModel):
    version: str = DOCUMENT_SCHEMA_VERSION
    shapes: List[ShapeRecord] = Field(default_factory=list)


class LegacyPolylineRecord(BaseModel):
    vertices: List[Tuple[float, float]] = Field(default_factory=list)
    types: str = ""
    closed: Optional[bool] = None

    @field_validator("types", mode="after")
    @classmethod
    def ensure_known_tags(cls, types: str) -> str:
        unknown = set(types) - {LEGACY_LINE_TAG, LEGACY_CONTROL_TAG}
        if unknown:
            msg = f"Unknown legacy point tags: {''.join(sorted(unknown))}"
            raise ValueError(msg)
        return types

    @model_validator(mode="after")
    def ensure_tag_per_vertex(self) -> "LegacyPolylineRecord":
        if len(self.types) != len(self.vertices):
            msg = (
                f"Legacy record has {len(self.vertices)} vertices "
                f"but {len(self.types)} type tags"
            )
            raise ValueError(msg)
        return self
