"""Import job tracking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from ludex.domain.model.entity import Entity
from ludex.domain.model.enums import EntityType, ImportJobStatus

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class ImportJob(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.IMPORT_JOB

    library_id: UUID
    status: ImportJobStatus = ImportJobStatus.PROCESSING
    total_items: int = 0
    processed_items: int = 0
    successful_items: int = 0
    failed_items: int = 0

    def record_progress(self, *, processed: int, successful: int, failed: int) -> None:
        self.processed_items = processed
        self.successful_items = successful
        self.failed_items = failed

    def finish(self) -> None:
        self.status = ImportJobStatus.COMPLETED

    def fail(self) -> None:
        self.status = ImportJobStatus.FAILED
