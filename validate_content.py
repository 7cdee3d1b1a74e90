"""
Content validation script.

Checks every YAML file under the content directory against its schema, verifies
that learning paths and featured courses only reference existing ids and,
unless --skip-links is given, probes every external URL once.

Exit status: 0 when there are no errors (warnings allowed), 1 otherwise.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from core.config import get_settings
from core.logging_config import configure_logging
from services.content_validator import ContentValidator, ValidationReport

logger = logging.getLogger("validate_content")


async def run(content_dir: Optional[str] = None, check_links: bool = True) -> ValidationReport:
    validator = ContentValidator(content_dir, check_links=check_links)
    return await validator.run()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate portal content files")
    parser.add_argument("--content-dir", help="Content directory (defaults to CONTENT_DIR)")
    parser.add_argument("--skip-links", action="store_true", help="Do not check external links")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    report = asyncio.run(run(args.content_dir, check_links=not args.skip_links))

    if not report.ok:
        logger.error("content validation failed", extra={"errors": len(report.errors), "warnings": len(report.warnings)})
        return 1
    if report.warnings:
        logger.warning("content validation passed with warnings", extra={"warnings": len(report.warnings)})
    else:
        logger.info("content validation passed", extra={"count": report.files_checked})
    return 0


if __name__ == "__main__":
    sys.exit(main())
