from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import LegacyPolylineRecord, ShapeDocument


class ShapeDocumentRepository(Protocol):
    def load(self, path: Path) -> ShapeDocument: ...

    def load_legacy(self, path: Path) -> Sequence[LegacyPolylineRecord]: ...

    def save(self, document: ShapeDocument, path: Path) -> None: ...
