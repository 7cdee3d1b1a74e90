"""
Static export script.

Loads the content directory, fails on the first schema or YAML error, and
writes the JSON views, sitemap.xml and robots.txt to the output directory.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from core.config import get_settings
from core.errors import ContentError, ContentValidationError
from core.logging_config import configure_logging
from services.content_store import ContentStore
from services.static_export import export_site

logger = logging.getLogger("build_site")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Export portal content as static JSON and XML files")
    parser.add_argument("--content-dir", help="Content directory (defaults to CONTENT_DIR)")
    parser.add_argument("--output-dir", help="Output directory (defaults to OUTPUT_DIR)")
    parser.add_argument("--site-url", help="Public site URL used in the sitemap (defaults to SITE_URL)")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    try:
        report = export_site(ContentStore(args.content_dir), args.output_dir, site_url=args.site_url)
    except ContentValidationError as e:
        logger.error(e.format())
        return 1
    except ContentError as e:
        logger.error(str(e))
        return 1

    logger.info("build finished", extra={"path": str(report.output_dir), "count": report.file_count})
    return 0


if __name__ == "__main__":
    sys.exit(main())
