from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class Entity:
    """Base for everything that lives in the shape graph and carries an id.

    Entities register themselves on construction. A positive id is persisted and
    unique within the registry; an id of zero or below marks a temporary entity
    (previews, derived midpoints) that the registry never sees.
    """

    def __init__(self, registry: IdentityRegistry, id: Optional[int] = None) -> None:
        self.registry = registry
        self.id: Optional[int] = None
        registry.register(self, id)

    @property
    def is_temporary(self) -> bool:
        return self.id is not None and self.id <= 0

    def delete(self) -> None:
        if self.id is not None and self.registry.lookup(self.id) is self:
            self.registry.unregister(self.id)


@dataclass
class IdentityRegistry:
    """Id allocator and lookup table for one editing session."""

    entities: Dict[int, Entity] = field(default_factory=dict)
    largest_id: int = 0
    collisions: List[Entity] = field(default_factory=list)

    def register(self, entity: Entity, explicit_id: Optional[int] = None) -> None:
        if explicit_id is None:
            entity.id = self.new_id()
        elif explicit_id <= 0:
            entity.id = explicit_id
            return
        elif self.has_id(explicit_id):
            logger.debug(
                "Id %s already taken, queueing %s for renumbering",
                explicit_id,
                type(entity).__name__,
            )
            self.collisions.append(entity)
            return
        else:
            entity.id = explicit_id
        self._update_largest_id(entity.id)
        self.entities[entity.id] = entity

    def new_id(self) -> int:
        return self.largest_id + 1

    def resolve_collisions(self) -> int:
        resolved = len(self.collisions)
        for entity in self.collisions:
            entity.id = self.new_id()
            self.entities[entity.id] = entity
            self._update_largest_id(entity.id)
        self.collisions = []
        if resolved:
            logger.info("Renumbered %d colliding entities", resolved)
        return resolved

    def lookup(self, entity_id: int) -> Optional[Entity]:
        return self.entities.get(entity_id)

    def has_id(self, entity_id: int) -> bool:
        return entity_id in self.entities

    def unregister(self, entity_id: int) -> None:
        self.entities.pop(entity_id, None)

    def reset_session(self) -> None:
        self.entities.clear()
        self.collisions.clear()
        self.largest_id = 0

    def _update_largest_id(self, entity_id: int) -> None:
        if entity_id > self.largest_id:
            self.largest_id = entity_id
