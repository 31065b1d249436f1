"""Fetch orchestration for the Chutes model list.

``ModelFetcher`` owns a :class:`ModelCache` and a :class:`ModelRegistry`.
It serves the cached list while it is valid and otherwise calls the API
with retry, then replaces the cache and rebuilds the registry. Neither is
touched until a response has been received and fully parsed.
"""

import time
from dataclasses import dataclass
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Dict, List, Optional

import requests

from .cache import DEFAULT_TTL_SECONDS, ModelCache
from .errors import FetchErrorKind, ModelFetchError
from .logging import LogEvent, log_debug, log_info, log_warning
from .registry import ModelRegistry
from .types import DEFAULT_PREFIX, ChutesModel

DEFAULT_API_BASE_URL = "https://llm.chutes.ai/v1"
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_SECONDS = 1.0
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass
class FetcherConfig:
    """Configuration for :class:`ModelFetcher`.

    Attributes:
        api_base_url: Base URL of the OpenAI-compatible API
        cache_ttl_seconds: Lifetime of the cached model list
        max_retries: Retries after the first attempt for retryable failures
        retry_delay_seconds: Base delay; server and network errors wait
            ``retry_delay_seconds * attempt``
        timeout: Per-request timeout in seconds
        prefix: Namespace for display ids
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    prefix: str = DEFAULT_PREFIX

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")
        if self.retry_delay_seconds < 0:
            raise ValueError("retry_delay_seconds must not be negative")
        self.api_base_url = self.api_base_url.rstrip("/")


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Parse a ``Retry-After`` header into seconds.

    Accepts delta-seconds or an HTTP date. Returns None if absent or unparseable.
    """
    if not value:
        return None
    value = value.strip()
    try:
        return max(0.0, float(int(value)))
    except ValueError:
        pass
    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_at is None:
        return None
    return max(0.0, retry_at.timestamp() - time.time())


class ModelFetcher:
    """Fetches the model list, caching it and keeping the registry in sync."""

    def __init__(
        self,
        config: Optional[FetcherConfig] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the fetcher.

        Args:
            config: Fetcher configuration (defaults used when None)
            session: HTTP session to use; one is created when None
            sleep: Function used to wait between retries
            clock: Time source for the cache, in seconds
        """
        self.config = config or FetcherConfig()
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._sleep = sleep
        self._cache = ModelCache(self.config.cache_ttl_seconds, clock=clock)
        self._registry = ModelRegistry(prefix=self.config.prefix)
        self._api_token: Optional[str] = None

    @property
    def models_url(self) -> str:
        """URL of the model list endpoint."""
        return f"{self.config.api_base_url}/models"

    def set_api_token(self, token: Optional[str]) -> None:
        """Set the bearer token sent with requests; None disables auth."""
        self._api_token = token

    def get_api_token(self) -> Optional[str]:
        """Return the configured bearer token."""
        return self._api_token

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def _backoff(self, attempt: int) -> float:
        return self.config.retry_delay_seconds * (attempt + 1)

    def _request_with_retry(self, url: str) -> requests.Response:
        """GET ``url``, retrying rate limits, server errors and network failures.

        Raises:
            ModelFetchError: The classified failure once retries are exhausted,
                or immediately for auth and other client errors
        """
        max_retries = self.config.max_retries

        for attempt in range(max_retries + 1):
            can_retry = attempt < max_retries
            try:
                response = self._session.get(url, headers=self._get_headers(), timeout=self.config.timeout)
            except requests.RequestException as e:
                if can_retry:
                    delay = self._backoff(attempt)
                    log_warning(
                        LogEvent.MODEL_FETCH, "Request failed, retrying", error=str(e), attempt=attempt + 1, delay=delay
                    )
                    self._sleep(delay)
                    continue
                raise ModelFetchError(f"Failed to fetch models: {e}", FetchErrorKind.NETWORK, url=url, cause=e) from e

            status = response.status_code
            if response.ok:
                return response

            if status in (401, 403):
                raise ModelFetchError(
                    "Invalid or missing API token. Please configure your CHUTES_API_TOKEN.",
                    FetchErrorKind.AUTH,
                    status_code=status,
                    url=url,
                )

            if status == 429:
                if can_retry:
                    retry_after = parse_retry_after(response.headers.get("Retry-After"))
                    delay = retry_after if retry_after is not None else self.config.retry_delay_seconds
                    log_warning(LogEvent.MODEL_FETCH, "Rate limited, retrying", attempt=attempt + 1, delay=delay)
                    self._sleep(delay)
                    continue
                raise ModelFetchError(
                    "Rate limit exceeded. Please try again later.",
                    FetchErrorKind.RATE_LIMIT,
                    status_code=status,
                    url=url,
                )

            if status >= 500:
                if can_retry:
                    delay = self._backoff(attempt)
                    log_warning(
                        LogEvent.MODEL_FETCH, "Server error, retrying", status=status, attempt=attempt + 1, delay=delay
                    )
                    self._sleep(delay)
                    continue
                raise ModelFetchError(
                    f"Server error: {status} {response.reason}",
                    FetchErrorKind.SERVER,
                    status_code=status,
                    url=url,
                )

            raise ModelFetchError(
                f"HTTP error: {status} {response.reason}",
                FetchErrorKind.HTTP,
                status_code=status,
                url=url,
            )

        # The loop always returns or raises; this guards a negative retry budget
        raise ModelFetchError("Failed to fetch models: no attempts made", FetchErrorKind.NETWORK, url=url)

    def _parse_models(self, response: requests.Response) -> List[ChutesModel]:
        try:
            payload: Any = response.json()
        except ValueError as e:
            raise ModelFetchError(
                "Invalid response format from API: body is not JSON",
                FetchErrorKind.INVALID_RESPONSE,
                status_code=response.status_code,
                url=self.models_url,
                cause=e,
            ) from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise ModelFetchError(
                "Invalid response format from API",
                FetchErrorKind.INVALID_RESPONSE,
                status_code=response.status_code,
                url=self.models_url,
            )

        return [ChutesModel.from_dict(entry) for entry in data]

    def fetch_models(self) -> List[ChutesModel]:
        """Return the model list, from cache when valid, otherwise from the API.

        Raises:
            ModelFetchError: If the API call fails; cache and registry keep
                their previous contents
        """
        cached_models = self._cache.get_models()
        if cached_models is not None:
            log_debug(LogEvent.MODEL_FETCH, "Serving models from cache", count=len(cached_models))
            return cached_models

        url = self.models_url
        log_info(LogEvent.MODEL_FETCH, "Fetching models", url=url)
        response = self._request_with_retry(url)
        models = self._parse_models(response)

        # Cache first, then registry; readers must not assume both changed atomically
        self._cache.set(models)
        self._registry.clear()
        self._registry.register_all(models)

        log_info(LogEvent.MODEL_FETCH, "Fetched models", count=len(models))
        return models

    def refresh_models(self, force: bool = False) -> List[ChutesModel]:
        """Fetch models, discarding the cache first when ``force`` is set."""
        if force:
            self._cache.clear()
        return self.fetch_models()

    def get_cached_models(self) -> Optional[List[ChutesModel]]:
        """Cached models, or None when the cache is empty or expired."""
        return self._cache.get_models()

    def get_registry(self) -> ModelRegistry:
        """The registry rebuilt on every successful fetch."""
        return self._registry

    def get_cache(self) -> ModelCache:
        """The underlying model cache."""
        return self._cache

    def is_cache_valid(self) -> bool:
        """Check for a valid cached model list."""
        return self._cache.is_valid()

    def is_cache_stale(self) -> bool:
        """Check whether the cache is missing or expired, without clearing it."""
        return self._cache.is_stale()

    def clear_cache(self) -> None:
        """Clear both the cache and the registry."""
        self._cache.clear()
        self._registry.clear()

    def get_cache_age(self) -> Optional[float]:
        """Age of the cached snapshot in milliseconds."""
        return self._cache.get_age()

    def get_cache_remaining_ttl(self) -> Optional[float]:
        """Milliseconds left before the cached snapshot expires."""
        return self._cache.get_remaining_ttl()

    def close(self) -> None:
        """Close the HTTP session if this fetcher created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "ModelFetcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
