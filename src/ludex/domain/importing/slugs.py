"""URL-safe slugs that are unique within a library."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Collection

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
FALLBACK_SLUG = "game"


def slugify(title: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to ``-`` and trim edge hyphens."""

    return _NON_ALNUM_RUN.sub("-", title.lower()).strip("-")


def base_slug(title: str) -> str:
    return slugify(title) or FALLBACK_SLUG


def assign_unique_slug(title: str, is_taken: Callable[[str], bool]) -> str:
    """Try ``base``, ``base-1``, ``base-2``… until ``is_taken`` says no.

    The search is unbounded; the loop length is bounded in practice by how many
    records already share the base slug.
    """

    base = base_slug(title)
    candidate = base
    counter = 1
    while is_taken(candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate


def unique_slug_among(title: str, existing: Collection[str]) -> str:
    """Deterministic variant of :func:`assign_unique_slug` over a known slug set."""

    return assign_unique_slug(title, existing.__contains__)
