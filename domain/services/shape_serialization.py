from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, Union

from domain.models import (
    EQUALITY_TOLERANCE,
    PathRecord,
    PolygonRecord,
    RectRecord,
    ShapeDocument,
    ShapeRecord,
)
from domain.path import Path
from domain.polygon import Polygon
from domain.rect import Rect
from domain.registry import IdentityRegistry

logger = logging.getLogger(__name__)

Shape = Union[Path, Polygon, Rect]

SHAPE_TYPES: Dict[str, Type[Shape]] = {
    "path": Path,
    "polygon": Polygon,
    "rect": Rect,
}


@dataclass
class LoadedDocument:
    registry: IdentityRegistry
    shapes: List[Shape] = field(default_factory=list)
    renumbered: int = 0


def shape_kind(shape: Shape) -> str:
    for kind, shape_type in SHAPE_TYPES.items():
        if type(shape) is shape_type:
            return kind
    msg = f"Unsupported shape type: {type(shape).__name__}"
    raise TypeError(msg)


def export_shape(shape: Shape) -> ShapeRecord:
    return shape.to_record()


def export_document(shapes: Iterable[Shape]) -> ShapeDocument:
    return ShapeDocument(shapes=[export_shape(shape) for shape in shapes])


def export_document_dict(shapes: Iterable[Shape]) -> dict[str, Any]:
    return export_document(shapes).model_dump(mode="json")


def import_shape(
    registry: IdentityRegistry,
    record: Union[PathRecord, PolygonRecord, RectRecord],
) -> Shape:
    shape_type = SHAPE_TYPES[record.kind]
    return shape_type.from_record(registry, record)


def load_document(
    payload: Union[ShapeDocument, Mapping[str, Any]],
    registry: Optional[IdentityRegistry] = None,
) -> LoadedDocument:
    """Decode a whole document into live shapes.

    The payload is validated completely before any entity is built. Without an
    explicit registry the load starts a new session. Ids taken by earlier
    entities are renumbered once, after every shape has been imported.
    """
    document = (
        payload if isinstance(payload, ShapeDocument) else ShapeDocument.model_validate(payload)
    )
    if registry is None:
        registry = IdentityRegistry()
    shapes = [import_shape(registry, record) for record in document.shapes]
    renumbered = registry.resolve_collisions()
    logger.debug("Loaded %d shapes (%d ids renumbered)", len(shapes), renumbered)
    return LoadedDocument(registry=registry, shapes=shapes, renumbered=renumbered)


def shapes_equal(first: Shape, second: Shape, tolerance: float = EQUALITY_TOLERANCE) -> bool:
    if type(first) is not type(second):
        return False
    return first.equals(second, tolerance)
