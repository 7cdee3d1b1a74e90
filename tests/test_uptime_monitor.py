import asyncio

import aiohttp
import pytest

from services.uptime_monitor import HISTORY_LIMIT, UptimeMonitor


class FakeFetcher:
    def __init__(self, responses):
        self.responses = responses

    async def __call__(self, url):
        outcome = self.responses[url]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _monitor(tmp_path, responses):
    return UptimeMonitor(urls=list(responses), log_dir=tmp_path, timeout=1, fetch=FakeFetcher(responses))


@pytest.mark.asyncio
async def test_check_all_summary_and_history(tmp_path):
    monitor = _monitor(tmp_path, {
        "https://up.org": 200,
        "https://down.org": 502,
        "https://timeout.org": asyncio.TimeoutError(),
    })
    summary = await monitor.check_all()
    assert summary.total_checked == 3
    assert summary.up_count == 1 and summary.down_count == 2
    results = {r.url: r for r in summary.results}
    assert results["https://timeout.org"].error == "Request timeout"
    assert results["https://down.org"].status == 502
    assert len(monitor.load_history()) == 1


@pytest.mark.asyncio
async def test_history_is_capped(tmp_path):
    monitor = _monitor(tmp_path, {"https://up.org": 200})
    for _ in range(HISTORY_LIMIT + 5):
        await monitor.check_all()
    assert len(monitor.load_history()) == HISTORY_LIMIT


@pytest.mark.asyncio
async def test_report_uptime_percentage(tmp_path):
    responses = {"https://flaky.org": 200}
    monitor = _monitor(tmp_path, responses)
    await monitor.check_all()
    responses["https://flaky.org"] = aiohttp.ClientConnectionError("refused")
    await monitor.check_all()
    report = monitor.generate_report()
    assert report.urls[0].uptime_percent == 50.0
    assert report.urls[0].total == 2
    assert report.last_up_count == 0 and report.last_total == 1


def test_report_without_history(tmp_path):
    assert UptimeMonitor(urls=[], log_dir=tmp_path).generate_report().urls == []


@pytest.mark.asyncio
async def test_run_continuous_with_iterations(tmp_path):
    monitor = _monitor(tmp_path, {"https://up.org": 200})
    await monitor.run_continuous(interval_minutes=0, iterations=3)
    assert len(monitor.load_history()) == 3


@pytest.mark.asyncio
async def test_corrupt_history_is_replaced(tmp_path):
    (tmp_path / "status.json").write_text("{not json", encoding="utf-8")
    monitor = _monitor(tmp_path, {"https://up.org": 200})
    assert monitor.load_history() == []
    assert monitor.generate_report().urls == []

    await monitor.run_continuous(interval_minutes=0, iterations=1)
    history = monitor.load_history()
    assert len(history) == 1
    assert history[0].up_count == 1
    assert not (tmp_path / "status.json.tmp").exists()


def test_history_of_wrong_shape_is_ignored(tmp_path):
    (tmp_path / "status.json").write_text('{"timestamp": "2025-01-01"}', encoding="utf-8")
    assert UptimeMonitor(urls=[], log_dir=tmp_path).load_history() == []
