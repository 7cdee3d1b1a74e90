"""
Content quality report.

Runs editorial heuristics over courses and resources (placeholder text, short
or repetitive descriptions, missing objectives, implausible years) and lists
tags that look like duplicates of each other.

Exit status is 1 only when a file could not be read or parsed.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from core.config import get_settings
from core.logging_config import configure_logging
from services.content_quality import ContentQualityChecker

logger = logging.getLogger("check_quality")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check editorial quality of portal content")
    parser.add_argument("--content-dir", help="Content directory (defaults to CONTENT_DIR)")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    report = ContentQualityChecker(args.content_dir).run()

    logger.info(
        f"{report.tag_count} unique tags, {report.instructor_count} instructors, years {report.years}",
        extra={"suggestions": len(report.suggestions)},
    )
    if not report.ok:
        logger.error("content quality check failed", extra={"errors": len(report.errors)})
        return 1
    if report.warnings:
        logger.warning("content quality check passed with warnings", extra={"warnings": len(report.warnings)})
    else:
        logger.info("content quality check passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
