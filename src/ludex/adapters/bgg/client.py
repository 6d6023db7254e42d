"""HTTP client for the BoardGameGeek XML API 2."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from ludex.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from ludex.config.bgg import BggConfig
    from ludex.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class BggResponse:
    """Status and decoded body of one BGG answer; classification is up to the caller."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class BggClient:
    """Low-level HTTP client for the BGG XML API.

    Requests never raise for HTTP status codes: BGG uses ``202 Accepted`` as a
    "come back later" signal, so the raw status is handed back to the caller.
    Transport errors (``httpx.HTTPError``) propagate.
    """

    def __init__(
        self,
        *,
        config: BggConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def session(self) -> ResilientClient:
        return self._client_factory(self._resilience)

    async def thing(self, client: ResilientClient, external_id: str) -> BggResponse:
        return await self._get(client, "thing", {"id": external_id, "stats": "1"})

    async def search(self, client: ResilientClient, title: str) -> BggResponse:
        params = {"query": title, "type": "boardgame", "exact": "1"}
        return await self._get(client, "search", params)

    async def collection(self, client: ResilientClient, username: str) -> BggResponse:
        return await self._get(
            client,
            "collection",
            {"username": username, "own": "1", "excludesubtype": "boardgameexpansion"},
        )

    async def _get(
        self,
        client: ResilientClient,
        path: str,
        params: dict[str, str],
    ) -> BggResponse:
        response = await client.get(f"{self._config.base_url.rstrip('/')}/{path}", params=params)
        log.debug("BGG %s %s -> %s", path, params, response.status_code)
        return BggResponse(status_code=response.status_code, body=response.text)
