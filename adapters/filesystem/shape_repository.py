from __future__ import annotations

from pathlib import Path
from typing import List

from adapters.filesystem.json_utils import load_json, write_json_atomic
from domain.models import LegacyPolylineRecord, ShapeDocument
from domain.ports.repositories import ShapeDocumentRepository


class FileSystemShapeDocumentRepository(ShapeDocumentRepository):
    def __init__(self, indent: bool = True) -> None:
        self._indent = indent

    def load(self, path: Path) -> ShapeDocument:
        return ShapeDocument.model_validate(load_json(path))

    def load_legacy(self, path: Path) -> List[LegacyPolylineRecord]:
        content = load_json(path)
        items = content if isinstance(content, list) else [content]
        return [LegacyPolylineRecord.model_validate(item) for item in items]

    def save(self, document: ShapeDocument, path: Path) -> None:
        write_json_atomic(path, document.model_dump(mode="json"), indent=self._indent)
