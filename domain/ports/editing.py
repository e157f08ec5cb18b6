from __future__ import annotations

from typing import Protocol, runtime_checkable

from domain.vertex import Vertex


@runtime_checkable
class VertexEditable(Protocol):
    def insert_vertex_at(self, index: int, vertex: Vertex) -> None: ...

    def delete_vertex_at(self, index: int) -> None: ...

    def reverse(self) -> None: ...
