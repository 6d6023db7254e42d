"""BoardGameGeek configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int, optional_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_BGG_BASE_URL = "https://boardgamegeek.com/xmlapi2"
DEFAULT_BGG_USER_AGENT = "ludex/1.0 (Bulk Import)"
BGG_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True, slots=True)
class BggConfig:
    """Holds BoardGameGeek API configuration values.

    ``max_attempts`` and the backoff values drive the fetcher's own retry loop; the
    transport-level retry policy stays disabled so that a ``202 Accepted`` or a
    plain error status reaches the fetcher untouched.
    """

    resilience: ResilienceConfig
    api_token: str | None = None
    max_attempts: int = 6
    backoff_step_seconds: float = 0.75
    backoff_ceiling_seconds: float = 4.0
    description_limit: int = 2000
    collection_attempts: int = 5
    collection_wait_seconds: float = 3.0

    @property
    def base_url(self) -> str:
        return self.resilience.base_url or DEFAULT_BGG_BASE_URL


def _cacheable_thing_payload(body: bytes) -> bool:
    # placeholder "still processing" bodies must never be cached
    text = body.decode("utf-8", errors="replace")
    return "<item" in text and "<message>" not in text


def get_bgg_config(*, resilience: ResilienceConfig | None = None) -> BggConfig:
    base_url = optional_env_var("BGG_BASE_URL") or DEFAULT_BGG_BASE_URL
    user_agent = optional_env_var("BGG_USER_AGENT") or DEFAULT_BGG_USER_AGENT
    api_token = optional_env_var("BGG_API_TOKEN")

    headers = {"User-Agent": user_agent, "Accept": "application/xml"}
    if api_token:
        headers["Authorization"] = f"Bearer {api_token}"

    return BggConfig(
        resilience=resilience
        or ResilienceConfig(
            name="bgg",
            base_url=base_url,
            timeout_seconds=BGG_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
            retry=RetryPolicy(total=0),
            cache=CacheConfig(
                enabled=True, backend="memory", should_cache=_cacheable_thing_payload
            ),
            headers=headers,
        ),
        api_token=api_token,
        max_attempts=env_int("BGG_MAX_ATTEMPTS", 6),
        backoff_step_seconds=env_float("BGG_BACKOFF_STEP_SECONDS", 0.75),
        backoff_ceiling_seconds=env_float("BGG_BACKOFF_CEILING_SECONDS", 4.0),
    )
