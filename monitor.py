"""
Uptime monitor.

    python monitor.py check              one round of checks, appended to logs/status.json
    python monitor.py report             uptime percentage and response time per URL
    python monitor.py monitor [MINUTES]  check forever, every MINUTES (default 5)

Log lines also go to logs/uptime.log.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from core.config import get_settings
from core.logging_config import JsonFormatter, RequestIdFilter, configure_logging
from services.uptime_monitor import UptimeMonitor

logger = logging.getLogger("monitor")


def _add_file_handler(log_dir: Path) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / "uptime.log", encoding="utf-8")
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())
    logging.getLogger().addHandler(handler)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Monitor availability of the deployed portal")
    parser.add_argument("command", nargs="?", default="check", choices=("check", "report", "monitor"))
    parser.add_argument("interval", nargs="?", type=float, default=5, help="Minutes between checks (monitor only)")
    parser.add_argument("--url", action="append", dest="urls", help="URL to check (repeatable, defaults to MONITOR_URLS)")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    _add_file_handler(Path(settings.monitor_log_dir))
    monitor = UptimeMonitor(urls=args.urls)

    if args.command == "report":
        report = monitor.generate_report()
        if report.last_check is not None:
            logger.info(f"last check {report.last_check.isoformat()}: {report.last_up_count}/{report.last_total} services up")
        return 0
    if args.command == "monitor":
        try:
            asyncio.run(monitor.run_continuous(args.interval))
        except KeyboardInterrupt:
            logger.info("monitoring stopped")
        return 0

    summary = asyncio.run(monitor.check_all())
    return 0 if summary.down_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
