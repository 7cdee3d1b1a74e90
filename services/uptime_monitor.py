"""
Uptime monitoring for the deployed portal.

Each check issues one GET per configured URL, records status code and response
time, and appends a summary to a rolling JSON history (``status.json``, last
100 entries) that the report command aggregates into uptime percentages.
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Union

import aiohttp
from pydantic import BaseModel, Field

from core.config import get_settings

logger = logging.getLogger("uptime_monitor")

USER_AGENT = "ABMind-Uptime-Monitor/1.0"
HISTORY_LIMIT = 100

# coroutine returning the HTTP status code for a GET of the URL
Fetcher = Callable[[str], Awaitable[int]]


class UrlCheck(BaseModel):
    url: str
    status: Optional[int] = None
    response_time_ms: int = 0
    is_up: bool = False
    error: Optional[str] = None


class CheckSummary(BaseModel):
    timestamp: datetime
    results: List[UrlCheck]
    total_checked: int
    up_count: int
    down_count: int


class UrlUptime(BaseModel):
    url: str
    total: int = 0
    up: int = 0
    uptime_percent: float = 0.0
    avg_response_time_ms: Optional[float] = None


class UptimeReport(BaseModel):
    urls: List[UrlUptime] = Field(default_factory=list)
    last_check: Optional[datetime] = None
    last_up_count: int = 0
    last_total: int = 0


class UptimeMonitor:
    def __init__(
        self,
        urls: Optional[Sequence[str]] = None,
        log_dir: Union[str, Path, None] = None,
        timeout: Optional[float] = None,
        fetch: Optional[Fetcher] = None,
    ) -> None:
        settings = get_settings()
        self.urls = list(urls if urls is not None else settings.monitor_urls)
        self.log_dir = Path(log_dir or settings.monitor_log_dir)
        self.timeout = timeout if timeout is not None else settings.link_check_timeout
        self._fetch = fetch

    @property
    def status_file(self) -> Path:
        return self.log_dir / "status.json"

    async def _check_url(self, url: str, fetch: Fetcher) -> UrlCheck:
        start = time.monotonic()
        try:
            code = await fetch(url)
        except asyncio.TimeoutError:
            return UrlCheck(url=url, response_time_ms=_elapsed_ms(start), error="Request timeout")
        except (aiohttp.ClientError, ValueError) as e:
            return UrlCheck(url=url, response_time_ms=_elapsed_ms(start), error=str(e) or type(e).__name__)
        return UrlCheck(url=url, status=code, response_time_ms=_elapsed_ms(start), is_up=200 <= code < 400)

    async def _check_with(self, fetch: Fetcher) -> List[UrlCheck]:
        return list(await asyncio.gather(*(self._check_url(u, fetch) for u in self.urls)))

    async def check_all(self) -> CheckSummary:
        logger.info("starting uptime check", extra={"count": len(self.urls)})
        if self._fetch is not None:
            results = await self._check_with(self._fetch)
        else:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout, headers={"User-Agent": USER_AGENT}) as session:
                async def _get(url: str) -> int:
                    async with session.get(url) as response:
                        return response.status

                results = await self._check_with(_get)

        up = sum(1 for r in results if r.is_up)
        summary = CheckSummary(
            timestamp=datetime.now(timezone.utc),
            results=results,
            total_checked=len(results),
            up_count=up,
            down_count=len(results) - up,
        )
        for r in results:
            level = logging.INFO if r.is_up else logging.WARNING
            logger.log(
                level,
                "UP" if r.is_up else f"DOWN{f' ({r.error})' if r.error else ''}",
                extra={"url": r.url, "status": r.status, "response_time_ms": r.response_time_ms},
            )
        self.save_status(summary)
        return summary

    def load_history(self) -> List[CheckSummary]:
        """Saved check summaries, oldest first. An unreadable history counts as empty."""
        if not self.status_file.is_file():
            return []
        try:
            with open(self.status_file, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError("status history is not a list")
            return [CheckSummary.model_validate(entry) for entry in raw]
        except ValueError as e:
            # also JSONDecodeError, UnicodeDecodeError and pydantic ValidationError
            logger.warning(f"ignoring unreadable status history: {e}", extra={"path": str(self.status_file)})
            return []

    def save_status(self, summary: CheckSummary) -> None:
        history = self.load_history()
        history.append(summary)
        history = history[-HISTORY_LIMIT:]
        self.log_dir.mkdir(parents=True, exist_ok=True)
        tmp_file = self.status_file.with_name(self.status_file.name + ".tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump([entry.model_dump(mode="json") for entry in history], f, indent=2, ensure_ascii=False)
        os.replace(tmp_file, self.status_file)

    def generate_report(self) -> UptimeReport:
        history = self.load_history()
        if not history:
            logger.info("no status history available")
            return UptimeReport()

        stats: Dict[str, UrlUptime] = {}
        times: Dict[str, List[int]] = {}
        for entry in history:
            for result in entry.results:
                s = stats.setdefault(result.url, UrlUptime(url=result.url))
                s.total += 1
                if result.is_up:
                    s.up += 1
                if result.response_time_ms:
                    times.setdefault(result.url, []).append(result.response_time_ms)

        for url, s in stats.items():
            s.uptime_percent = round(s.up / s.total * 100, 2)
            samples = times.get(url)
            s.avg_response_time_ms = round(sum(samples) / len(samples), 0) if samples else None
            logger.info(
                f"uptime {s.uptime_percent}% ({s.up}/{s.total} checks)",
                extra={"url": url, "response_time_ms": s.avg_response_time_ms},
            )

        latest = history[-1]
        return UptimeReport(
            urls=list(stats.values()),
            last_check=latest.timestamp,
            last_up_count=latest.up_count,
            last_total=latest.total_checked,
        )

    async def run_continuous(self, interval_minutes: float = 5, iterations: Optional[int] = None) -> None:
        """Check every ``interval_minutes``; runs forever unless ``iterations`` is given."""
        logger.info(f"starting continuous monitoring every {interval_minutes} minutes")
        done = 0
        while iterations is None or done < iterations:
            try:
                summary = await self.check_all()
            except OSError:
                logger.exception("monitoring error")
            else:
                if summary.down_count:
                    logger.error(f"ALERT: {summary.down_count} service(s) are down")
            done += 1
            if iterations is None or done < iterations:
                await asyncio.sleep(interval_minutes * 60)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
