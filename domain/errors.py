from __future__ import annotations


class ShapeGraphError(Exception):
    pass


class UnresolvedReferenceError(ShapeGraphError, LookupError):
    def __init__(self, entity_id: int, referenced_by: str) -> None:
        self.entity_id = entity_id
        self.referenced_by = referenced_by
        super().__init__(f"{referenced_by} references unknown vertex id {entity_id}")


class TemporaryEntityError(ShapeGraphError, ValueError):
    def __init__(self, entity_id: int, owner: str) -> None:
        self.entity_id = entity_id
        self.owner = owner
        super().__init__(f"{owner} holds temporary entity {entity_id}, which cannot be persisted")
