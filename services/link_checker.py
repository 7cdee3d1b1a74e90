"""
External link checking.

Each URL gets exactly one timeout-bounded HEAD request; there are no retries.
A failing link is reported, never raised: callers turn "unavailable" results
into warnings. Results are cached per URL for ``cache_ttl`` seconds.
"""
from __future__ import annotations

import asyncio
import logging
import re
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Literal, Optional, Set, Tuple

import aiohttp
from pydantic import BaseModel

from core.config import get_settings

logger = logging.getLogger("link_checker")

USER_AGENT = "ABMind-Content-Validator/1.0"

LinkStatus = Literal["available", "unavailable", "unknown"]

# coroutine returning the HTTP status code of a URL
Fetcher = Callable[[str], Awaitable[int]]

_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


class LinkCheckResult(BaseModel):
    url: str
    status: LinkStatus
    status_code: Optional[int] = None
    error: Optional[str] = None
    checked_at: datetime

    @property
    def is_broken(self) -> bool:
        return self.status == "unavailable"


def classify_status_code(code: int) -> LinkStatus:
    if 200 <= code < 400:
        return "available"
    # servers that refuse HEAD cannot be verified with a single request
    if code == 405:
        return "unknown"
    return "unavailable"


def extract_urls(obj: Any, urls: Optional[Set[str]] = None) -> Set[str]:
    """Collect every http(s) string found anywhere in a parsed YAML document."""
    if urls is None:
        urls = set()
    if isinstance(obj, str):
        if _URL_RE.match(obj.strip()):
            urls.add(obj.strip())
    elif isinstance(obj, dict):
        for value in obj.values():
            extract_urls(value, urls)
    elif isinstance(obj, (list, tuple)):
        for item in obj:
            extract_urls(item, urls)
    return urls


class LinkChecker:
    def __init__(
        self,
        timeout: Optional[float] = None,
        concurrency: Optional[int] = None,
        fetch: Optional[Fetcher] = None,
        cache_ttl: float = 300.0,
    ) -> None:
        settings = get_settings()
        self.timeout = timeout if timeout is not None else settings.link_check_timeout
        self.concurrency = concurrency or settings.link_check_concurrency
        self.cache_ttl = cache_ttl
        self._fetch = fetch
        self._cache: Dict[str, Tuple[float, LinkCheckResult]] = {}

    def _cached(self, url: str) -> Optional[LinkCheckResult]:
        entry = self._cache.get(url)
        if entry is None:
            return None
        stored_at, result = entry
        if time.monotonic() - stored_at > self.cache_ttl:
            del self._cache[url]
            return None
        return result

    async def _check_one(self, url: str, fetch: Fetcher, semaphore: asyncio.Semaphore) -> LinkCheckResult:
        async with semaphore:
            now = datetime.now(timezone.utc)
            try:
                code = await fetch(url)
                status = classify_status_code(code)
                result = LinkCheckResult(
                    url=url,
                    status=status,
                    status_code=code,
                    error=None if status != "unavailable" else f"HTTP {code}",
                    checked_at=now,
                )
            except asyncio.TimeoutError:
                result = LinkCheckResult(url=url, status="unavailable", error="Request timeout", checked_at=now)
            except (aiohttp.ClientError, ValueError) as e:
                result = LinkCheckResult(url=url, status="unavailable", error=str(e) or type(e).__name__, checked_at=now)

        if result.is_broken:
            logger.warning("link unavailable", extra={"url": url, "status": result.status_code})
        self._cache[url] = (time.monotonic(), result)
        return result

    async def _run(self, urls: List[str], fetch: Fetcher) -> List[LinkCheckResult]:
        semaphore = asyncio.Semaphore(self.concurrency)
        return await asyncio.gather(*(self._check_one(u, fetch, semaphore) for u in urls))

    async def check_many(self, urls: Iterable[str]) -> Dict[str, LinkCheckResult]:
        unique = list(dict.fromkeys(urls))
        results: Dict[str, LinkCheckResult] = {}
        pending = []
        for url in unique:
            cached = self._cached(url)
            if cached is None:
                pending.append(url)
            else:
                results[url] = cached

        if pending:
            if self._fetch is not None:
                fresh = await self._run(pending, self._fetch)
            else:
                timeout = aiohttp.ClientTimeout(total=self.timeout)
                async with aiohttp.ClientSession(timeout=timeout, headers={"User-Agent": USER_AGENT}) as session:
                    async def _head(url: str) -> int:
                        async with session.head(url, allow_redirects=True) as response:
                            return response.status

                    fresh = await self._run(pending, _head)

            results.update((r.url, r) for r in fresh)
        return {url: results[url] for url in unique}

    async def check(self, url: str) -> LinkCheckResult:
        return (await self.check_many([url]))[url]
