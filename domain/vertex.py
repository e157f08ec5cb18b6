from __future__ import annotations

import math
from typing import Optional, Tuple

from domain.models import EQUALITY_TOLERANCE, VertexRecord, VertexRole
from domain.registry import Entity, IdentityRegistry


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class Vertex(Entity):
    """A point in image coordinates.

    Vertices are not traversable by themselves; the polyline that holds a vertex
    is responsible for walking its neighbours.
    """

    def __init__(
        self,
        registry: IdentityRegistry,
        x: float = 0.0,
        y: float = 0.0,
        role: VertexRole = VertexRole.VERTEX,
        id: Optional[int] = None,
    ) -> None:
        super().__init__(registry, id)
        self.x = float(x)
        self.y = float(y)
        self.role = VertexRole(role)

    @property
    def xy(self) -> Tuple[float, float]:
        return self.x, self.y

    @xy.setter
    def xy(self, value: Tuple[float, float]) -> None:
        self.x, self.y = float(value[0]), float(value[1])

    @property
    def x_int(self) -> int:
        return _round_half_up(self.x)

    @property
    def y_int(self) -> int:
        return _round_half_up(self.y)

    def interpolate_coords(self, target: Vertex, fraction: float) -> Tuple[float, float]:
        return (
            self.x + (target.x - self.x) * fraction,
            self.y + (target.y - self.y) * fraction,
        )

    def interpolate(
        self,
        target: Vertex,
        fraction: float,
        role: VertexRole,
        id: Optional[int] = None,
    ) -> Vertex:
        x, y = self.interpolate_coords(target, fraction)
        return Vertex(self.registry, x, y, role, id)

    def distance_to(self, other: Vertex) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def equals(self, other: Optional[Vertex], tolerance: float = EQUALITY_TOLERANCE) -> bool:
        if other is None:
            return False
        return abs(self.x - other.x) < tolerance and abs(self.y - other.y) < tolerance

    def copy(self, id: Optional[int] = None) -> Vertex:
        return Vertex(self.registry, self.x, self.y, self.role, id)

    def to_record(self) -> VertexRecord:
        return VertexRecord(id=self.id, type=self.role, x=self.x, y=self.y)

    @classmethod
    def from_record(cls, registry: IdentityRegistry, record: VertexRecord) -> Vertex:
        existing = registry.lookup(record.id)
        if (
            isinstance(existing, Vertex)
            and existing.role == record.type
            and existing.x == record.x
            and existing.y == record.y
        ):
            return existing
        return cls(registry, record.x, record.y, record.type, record.id)

    def __repr__(self) -> str:
        return f"Vertex(id={self.id}, x={self.x}, y={self.y}, role={self.role.value})"
