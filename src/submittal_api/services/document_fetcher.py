from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from urllib.parse import quote

import httpx

from submittal_api.settings import DEFAULT_CONTENT_ORIGIN, DEFAULT_FETCH_USER_AGENT


LOGGER = logging.getLogger(__name__)
# Characters left unescaped in a path segment, in addition to letters, digits and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"


class FetchStatus(str, Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class FetchResult:
    status: FetchStatus
    url: str
    payload: bytes | None = None
    http_status: int | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @classmethod
    def success(cls, *, url: str, payload: bytes, http_status: int) -> FetchResult:
        return cls(status=FetchStatus.OK, url=url, payload=payload, http_status=http_status)

    @classmethod
    def unavailable(
        cls, *, url: str, reason: str, http_status: int | None = None
    ) -> FetchResult:
        return cls(
            status=FetchStatus.UNAVAILABLE,
            url=url,
            http_status=http_status,
            reason=reason,
        )


class DocumentFetcher:
    def __init__(
        self,
        *,
        content_origin: str = DEFAULT_CONTENT_ORIGIN,
        user_agent: str = DEFAULT_FETCH_USER_AGENT,
        timeout_seconds: float = 30.0,
        max_bytes: int = 50 * 1024 * 1024,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if max_bytes < 1:
            raise ValueError("max_bytes must be >= 1")
        self._content_origin = content_origin.rstrip("/")
        self._user_agent = user_agent
        self._timeout_seconds = timeout_seconds
        self._max_bytes = max_bytes
        self._transport = transport

    def resolve_url(self, address: str) -> str:
        if address.startswith("http"):
            return address
        clean_path = address[1:] if address.startswith("/") else address
        encoded_path = "/".join(
            quote(segment, safe=_URI_COMPONENT_SAFE) for segment in clean_path.split("/")
        )
        return f"{self._content_origin}/{encoded_path}"

    def open_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"User-Agent": self._user_agent},
            timeout=self._timeout_seconds,
            follow_redirects=True,
            transport=self._transport,
        )

    async def fetch(
        self, address: str, *, client: httpx.AsyncClient | None = None
    ) -> FetchResult:
        """Retrieve one document; transport and status problems come back as UNAVAILABLE."""
        url = self.resolve_url(address)
        LOGGER.info("Fetching document from %s", url)
        if client is not None:
            return await self._fetch_with_client(client, url)
        async with self.open_client() as owned_client:
            return await self._fetch_with_client(owned_client, url)

    async def _fetch_with_client(self, client: httpx.AsyncClient, url: str) -> FetchResult:
        try:
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    LOGGER.warning(
                        "Document fetch returned %s %s for %s",
                        response.status_code,
                        response.reason_phrase,
                        url,
                    )
                    return FetchResult.unavailable(
                        url=url,
                        reason=f"http_status_{response.status_code}",
                        http_status=response.status_code,
                    )

                chunks: list[bytes] = []
                total_bytes = 0
                async for chunk in response.aiter_bytes():
                    total_bytes += len(chunk)
                    if total_bytes > self._max_bytes:
                        LOGGER.warning(
                            "Document at %s exceeds the %s byte limit",
                            url,
                            self._max_bytes,
                        )
                        return FetchResult.unavailable(
                            url=url,
                            reason="payload_too_large",
                            http_status=response.status_code,
                        )
                    chunks.append(chunk)
                http_status = response.status_code
        except httpx.HTTPError as exc:
            LOGGER.warning("Document fetch failed for %s: %s", url, exc)
            return FetchResult.unavailable(url=url, reason=f"transport_error: {exc}")

        payload = b"".join(chunks)
        if not payload:
            LOGGER.warning("Document fetch returned an empty body for %s", url)
            return FetchResult.unavailable(url=url, reason="empty_payload", http_status=http_status)

        LOGGER.info("Document fetched successfully: %s bytes from %s", len(payload), url)
        return FetchResult.success(url=url, payload=payload, http_status=http_status)
