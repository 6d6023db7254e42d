"""BoardGameGeek enrichment entry points.

``BggEnrichmentFetcher`` implements both the enrichment and the collection port.
BGG answers slow requests with ``202 Accepted`` (or a 200 carrying a placeholder
message) and expects the caller to come back; the polling loop lives here rather
than in the transport so that each answer can be classified first.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from ludex.config.bgg import get_bgg_config
from ludex.domain.importing.descriptor import EnrichmentResult
from ludex.domain.ports.enrichment import (
    CollectionEntry,
    CollectionFetcher,
    CollectionFetchError,
    EnrichmentFetcher,
)

from .client import BggClient
from .translator import (
    is_placeholder,
    parse_collection,
    parse_search,
    parse_thing,
    translate_thing,
)

if TYPE_CHECKING:
    from ludex.adapters.http_resilience import ResilientClient
    from ludex.config.bgg import BggConfig

    from .client import BggResponse

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


class ResponseKind(StrEnum):
    READY = "ready"
    NOT_READY = "not_ready"
    FAILED = "failed"


def classify_thing_response(response: BggResponse) -> ResponseKind:
    if response.status_code == 202:
        return ResponseKind.NOT_READY
    if not response.ok:
        return ResponseKind.FAILED
    if is_placeholder(response.body):
        return ResponseKind.NOT_READY
    return ResponseKind.READY


@dataclass(slots=True, frozen=True)
class BackoffPolicy:
    """Linear backoff capped at ``ceiling_seconds``, bounded by ``max_attempts``."""

    max_attempts: int = 6
    step_seconds: float = 0.75
    ceiling_seconds: float = 4.0

    def delay(self, attempt: int) -> float:
        return min(self.step_seconds * attempt, self.ceiling_seconds)


@dataclass(slots=True)
class RetryState:
    policy: BackoffPolicy
    attempt: int = 0

    def begin_attempt(self) -> int:
        self.attempt += 1
        return self.attempt

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.policy.max_attempts

    def next_delay(self) -> float:
        return self.policy.delay(self.attempt)


class BggEnrichmentFetcher:
    """Fetch and translate BGG ``thing`` records, search titles and list collections.

    ``fetch`` never raises: an id that cannot be read yields
    :meth:`EnrichmentResult.stub`. ``fetch_collection`` raises
    :class:`CollectionFetchError` with a user-facing message.
    """

    def __init__(
        self,
        *,
        config: BggConfig | None = None,
        client: BggClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config or get_bgg_config()
        self._client = client or BggClient(config=self._config)
        self._sleep = sleep
        self._backoff = BackoffPolicy(
            max_attempts=self._config.max_attempts,
            step_seconds=self._config.backoff_step_seconds,
            ceiling_seconds=self._config.backoff_ceiling_seconds,
        )

    def fetch(self, external_id: str) -> EnrichmentResult:
        return asyncio.run(self._fetch_async(external_id))

    def search_by_title(self, title: str) -> str | None:
        return asyncio.run(self._search_async(title))

    def fetch_collection(self, username: str) -> list[CollectionEntry]:
        return asyncio.run(self._fetch_collection_async(username))

    async def _fetch_async(self, external_id: str) -> EnrichmentResult:
        state = RetryState(self._backoff)
        async with self._client.session() as session:
            while True:
                attempt = state.begin_attempt()
                kind, result = await self._attempt_thing(session, external_id)

                if result is not None:
                    return result
                if kind is ResponseKind.FAILED:
                    return EnrichmentResult.stub(external_id)
                if state.exhausted:
                    log.warning(
                        "BGG data for %s still not ready after %d attempts", external_id, attempt
                    )
                    return EnrichmentResult.stub(external_id)

                delay = state.next_delay()
                log.info(
                    "BGG data not ready for %s, retrying (%d/%d) in %.2fs",
                    external_id,
                    attempt,
                    self._backoff.max_attempts,
                    delay,
                )
                await self._sleep(delay)

    async def _attempt_thing(
        self,
        session: ResilientClient,
        external_id: str,
    ) -> tuple[ResponseKind, EnrichmentResult | None]:
        """Run one request; a result is returned only for a ready answer.

        Anything raised while requesting or reading the answer counts as not ready.
        """

        try:
            response = await self._client.thing(session, external_id)
            kind = classify_thing_response(response)
            if kind is ResponseKind.FAILED:
                log.warning("BGG returned %s for %s", response.status_code, external_id)
                return kind, None
            if kind is ResponseKind.NOT_READY:
                return kind, None
            payload = parse_thing(response.body, external_id=external_id)
            result = translate_thing(payload, description_limit=self._config.description_limit)
        except Exception as exc:  # noqa: BLE001
            log.warning("BGG request for %s failed: %s", external_id, exc)
            return ResponseKind.NOT_READY, None
        log.info("BGG data fetched for %s: %s", external_id, payload.name or "unknown title")
        return kind, result

    async def _search_async(self, title: str) -> str | None:
        async with self._client.session() as session:
            try:
                response = await self._client.search(session, title)
            except httpx.HTTPError as exc:
                log.warning("BGG search for %r failed: %s", title, exc)
                return None
        if not response.ok:
            log.warning("BGG search for %r returned %s", title, response.status_code)
            return None
        hit = parse_search(response.body)
        return hit.id if hit is not None else None

    async def _fetch_collection_async(self, username: str) -> list[CollectionEntry]:
        async with self._client.session() as session:
            for attempt in range(1, self._config.collection_attempts + 1):
                try:
                    response = await self._client.collection(session, username)
                except httpx.HTTPError as exc:
                    raise CollectionFetchError(
                        f"Failed to fetch BGG collection: {exc}. "
                        "Please try again or use CSV import."
                    ) from exc

                if response.status_code == 202:
                    log.info(
                        "BGG collection for %s is being prepared (%d/%d)",
                        username,
                        attempt,
                        self._config.collection_attempts,
                    )
                    await self._sleep(self._config.collection_wait_seconds)
                    continue
                return _collection_entries(response, username)

        raise CollectionFetchError(
            "BGG collection request timed out. The collection may be too large - "
            "please try using CSV export instead."
        )


def _collection_entries(response: BggResponse, username: str) -> list[CollectionEntry]:
    if response.status_code == 401:
        raise CollectionFetchError(
            "BGG API requires authentication. As an alternative, please export your "
            "collection as CSV from BoardGameGeek (Collection > Export) and use the "
            "CSV import option instead."
        )
    if response.status_code in {400, 404}:
        raise CollectionFetchError(
            f'BGG username "{username}" not found or collection is private. Please check '
            "the username is correct and your collection is public."
        )
    if not response.ok:
        raise CollectionFetchError(
            f"Failed to fetch BGG collection (status {response.status_code}). "
            "Please try again or use CSV import."
        )
    if "<error>" in response.body or "Invalid username" in response.body:
        raise CollectionFetchError(
            f'BGG username "{username}" not found. Please check the username is correct.'
        )

    items = parse_collection(response.body)
    if not items:
        log.info("BGG collection for %s is empty or has no owned games", username)
    return [CollectionEntry(external_id=item.object_id, title=item.name) for item in items]


if TYPE_CHECKING:
    _enrichment_check: EnrichmentFetcher = BggEnrichmentFetcher()
    _collection_check: CollectionFetcher = BggEnrichmentFetcher()
