"""Per-item outcomes and the aggregated job result."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class FailureCategory(StrEnum):
    MISSING_TITLE = "missing_title"
    ALREADY_EXISTS = "already_exists"
    CREATE_FAILED = "create_failed"
    EXCEPTION = "exception"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class ItemCreated:
    id: UUID
    title: str


@dataclass(frozen=True, slots=True)
class ItemSkipped:
    """Duplicate title in the target library; nothing was written."""

    title: str
    category: FailureCategory = FailureCategory.ALREADY_EXISTS

    @property
    def reason(self) -> str:
        return f'"{self.title}" already exists'


@dataclass(frozen=True, slots=True)
class ItemFailed:
    label: str
    reason: str
    category: FailureCategory = FailureCategory.UNKNOWN


type ImportOutcome = ItemCreated | ItemSkipped | ItemFailed


@dataclass(slots=True)
class ImportJobResult:
    """Aggregate outcome of one bulk import.

    ``imported`` and ``failed`` are true totals; ``errors`` is capped for reporting.
    """

    success: bool
    imported: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list[str])
    items: list[ItemCreated] = field(default_factory=list[ItemCreated])
    failures: list[ItemSkipped | ItemFailed] = field(
        default_factory=list["ItemSkipped | ItemFailed"]
    )
    error: str | None = None
    job_id: UUID | None = None

    @classmethod
    def from_outcomes(
        cls,
        outcomes: list[ImportOutcome],
        *,
        max_reported_errors: int,
        job_id: UUID | None = None,
    ) -> ImportJobResult:
        created = [outcome for outcome in outcomes if isinstance(outcome, ItemCreated)]
        failures = [outcome for outcome in outcomes if not isinstance(outcome, ItemCreated)]
        return cls(
            success=bool(created),
            imported=len(created),
            failed=len(failures),
            errors=[failure.reason for failure in failures[:max_reported_errors]],
            items=created,
            failures=failures[:max_reported_errors],
            job_id=job_id,
        )

    @classmethod
    def job_failure(cls, message: str) -> ImportJobResult:
        return cls(success=False, error=message)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "success": self.success,
            "imported": self.imported,
            "failed": self.failed,
            "errors": list(self.errors),
            "items": [{"title": item.title, "id": str(item.id)} for item in self.items],
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.job_id is not None:
            payload["job_id"] = str(self.job_id)
        return payload
