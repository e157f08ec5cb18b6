from __future__ import annotations

from typing import List, Optional

from domain.errors import TemporaryEntityError
from domain.models import EQUALITY_TOLERANCE, TEMPORARY_ID, RectRecord, VertexRole
from domain.registry import Entity, IdentityRegistry
from domain.vertex import Vertex

HANDLE_COUNT = 8


class Rect(Entity):
    """Axis-aligned box with 8 drag handles.

    Handles run clockwise from the top-left corner: even indices are corners,
    odd indices are the midpoints between their neighbours. Geometry is read
    from the 0/4 corner pair only.
    """

    def __init__(
        self,
        registry: IdentityRegistry,
        x: float = -1,
        y: float = -1,
        w: float = -1,
        h: float = -1,
        id: Optional[int] = None,
    ) -> None:
        super().__init__(registry, id)
        self.vertices: List[Vertex] = [
            Vertex(
                registry,
                role=VertexRole.MIDPOINT if index % 2 else VertexRole.VERTEX,
                id=TEMPORARY_ID,
            )
            for index in range(HANDLE_COUNT)
        ]
        if x >= 0 and y >= 0 and w >= 0 and h >= 0:
            self.set_rect(x, y, w, h)

    @property
    def x(self) -> float:
        return min(self.vertices[0].x, self.vertices[4].x)

    @property
    def y(self) -> float:
        return min(self.vertices[0].y, self.vertices[4].y)

    @property
    def w(self) -> float:
        return abs(self.vertices[0].x - self.vertices[4].x)

    @property
    def h(self) -> float:
        return abs(self.vertices[0].y - self.vertices[4].y)

    def set_rect(self, x: float, y: float, w: float, h: float) -> None:
        self.vertices[0].xy = (x, y)
        self.vertices[2].xy = (x + w, y)
        self.vertices[4].xy = (x + w, y + h)
        self.vertices[6].xy = (x, y + h)
        self.update_midpoints()

    def update_midpoints(self) -> None:
        for index in range(1, HANDLE_COUNT, 2):
            before = self.get_handle(index - 1)
            after = self.get_handle(index + 1)
            self.vertices[index].xy = ((before.x + after.x) / 2, (before.y + after.y) / 2)

    def get_handle(self, index: int) -> Vertex:
        return self.vertices[index % HANDLE_COUNT]

    def handle_index(self, handle: Vertex) -> int:
        for index, vertex in enumerate(self.vertices):
            if vertex is handle:
                return index
        return -1

    def opposite_handle(self, index: int) -> int:
        return (index + HANDLE_COUNT // 2) % HANDLE_COUNT

    def copy(self, id: Optional[int] = None) -> Rect:
        duplicate = Rect(self.registry, id=id)
        duplicate.set_rect(self.x, self.y, self.w, self.h)
        return duplicate

    def equals(self, other: Rect, tolerance: float = EQUALITY_TOLERANCE) -> bool:
        return all(
            abs(mine - theirs) < tolerance
            for mine, theirs in (
                (self.x, other.x),
                (self.y, other.y),
                (self.w, other.w),
                (self.h, other.h),
            )
        )

    def to_record(self) -> RectRecord:
        if self.is_temporary:
            raise TemporaryEntityError(self.id, f"Rect {self.id}")
        return RectRecord(id=self.id, x=self.x, y=self.y, w=self.w, h=self.h)

    @classmethod
    def from_record(cls, registry: IdentityRegistry, record: RectRecord) -> Rect:
        rect = cls(registry, id=record.id)
        rect.set_rect(record.x, record.y, record.w, record.h)
        return rect

    def __repr__(self) -> str:
        return f"Rect(id={self.id}, x={self.x}, y={self.y}, w={self.w}, h={self.h})"
