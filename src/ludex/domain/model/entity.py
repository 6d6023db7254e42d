"""Identity shared by every persisted catalog record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from ludex.domain.model.enums import EntityType


@dataclass(eq=False, kw_only=True)
class Entity:
    """Base for catalog records.

    The id is assigned on construction so that links between records created in
    the same import batch can be wired before anything is flushed.
    """

    id: UUID = field(default_factory=uuid4)

    ENTITY_TYPE: ClassVar[EntityType]

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE

    @property
    def label(self) -> str:
        """Short ``type:id-prefix`` tag for log lines."""
        return f"{self.ENTITY_TYPE}:{str(self.id)[:8]}"
