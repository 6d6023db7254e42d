"""Bulk import defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int

DEFAULT_MAX_REPORTED_ERRORS = 50
DEFAULT_SUBSTANTIAL_DESCRIPTION_LENGTH = 50
DEFAULT_SLUG_CONFLICT_RETRIES = 3


@dataclass(frozen=True, slots=True)
class ImportConfig:
    max_reported_errors: int = DEFAULT_MAX_REPORTED_ERRORS
    substantial_description_length: int = DEFAULT_SUBSTANTIAL_DESCRIPTION_LENGTH
    slug_conflict_retries: int = DEFAULT_SLUG_CONFLICT_RETRIES


def get_import_config() -> ImportConfig:
    return ImportConfig(
        max_reported_errors=env_int("LUDEX_MAX_REPORTED_ERRORS", DEFAULT_MAX_REPORTED_ERRORS),
    )
