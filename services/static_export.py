"""
Static export of the portal content.

Writes one JSON document per page-level view plus sitemap.xml and robots.txt
into the output directory. Any ContentError raised while loading propagates
and nothing further is written.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import BaseModel

from core.config import get_settings
from services.content_store import ContentSnapshot, ContentStore
from services.filters import available_filters
from services.learning_path_sequencer import sequence_all
from services.portal_service import course_detail, domain_detail, domain_summaries
from services.relationship_finder import find_cross_domain_relationships
from services.search_index import SearchIndex
from services.seo import (
    SeoConfig,
    breadcrumb_structured_data,
    build_robots,
    build_sitemap,
    generate_metadata,
    learning_path_metadata,
    organization_structured_data,
    render_robots_txt,
    render_sitemap_xml,
    resource_metadata,
    website_structured_data,
)

logger = logging.getLogger("static_export")


@dataclass
class ExportReport:
    output_dir: Path
    files: List[Path] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    return value


def _site_description(snapshot: ContentSnapshot) -> str:
    if snapshot.site_config is not None:
        return snapshot.site_config.site_info.description
    return "Agent-Based Modeling 中文学习社区的课程与资源门户"


class _Writer:
    def __init__(self, root: Path) -> None:
        self.report = ExportReport(output_dir=root)
        self.root = root

    def text(self, relative: str, content: str) -> None:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        self.report.files.append(path)

    def json(self, relative: str, value: Any) -> None:
        self.text(relative, json.dumps(_to_jsonable(value), ensure_ascii=False, indent=2) + "\n")


def export_site(
    source: Union[ContentStore, ContentSnapshot, None] = None,
    output_dir: Union[str, Path, None] = None,
    site_url: Optional[str] = None,
    today: Optional[date] = None,
) -> ExportReport:
    settings = get_settings()
    if isinstance(source, ContentSnapshot):
        snapshot = source
    else:
        snapshot = (source or ContentStore()).snapshot()
    root = Path(output_dir or settings.output_dir)
    base = (site_url or settings.site_url).rstrip("/")
    out = _Writer(root)

    out.json("courses.json", snapshot.courses)
    for course in snapshot.courses:
        out.json(f"courses/{course.id}.json", course_detail(snapshot, course.id, base))

    out.json("resources.json", [
        {"resource": r, "seo": resource_metadata(r, base)} for r in snapshot.resources
    ])

    sequenced = sequence_all(snapshot.learning_paths, snapshot.courses, snapshot.resources)
    out.json("learning-paths.json", sequenced)
    for path, view in zip(snapshot.learning_paths, sequenced):
        out.json(f"learning-paths/{path.id}.json", {
            "path": view,
            "seo": learning_path_metadata(path, base),
            "breadcrumbs": breadcrumb_structured_data([
                {"name": "首页", "url": base},
                {"name": "学习路径", "url": f"{base}/learning-paths"},
                {"name": path.title, "url": f"{base}/learning-paths/{path.id}"},
            ]),
        })
    out.json(
        "relationships.json",
        find_cross_domain_relationships(snapshot.courses, limit=settings.related_courses_limit),
    )

    out.json("domains.json", domain_summaries(snapshot))
    for summary in domain_summaries(snapshot):
        out.json(f"domains/{summary.domain.id}.json", domain_detail(snapshot, summary.domain.id, base))

    index = SearchIndex(snapshot.courses, snapshot.resources, snapshot.learning_paths)
    out.json("search-index.json", index.export_documents())
    out.json("filters.json", available_filters(snapshot.courses, snapshot.resources))
    out.json("site.json", {
        "metadata": generate_metadata(SeoConfig(title=settings.site_name, description=_site_description(snapshot)), base),
        "structured_data": [organization_structured_data(base), website_structured_data(base)],
        "config": snapshot.site_config,
    })

    out.text("sitemap.xml", render_sitemap_xml(build_sitemap(snapshot.courses, base, today)))
    out.text("robots.txt", render_robots_txt(build_robots(base)))

    logger.info("static export written", extra={"path": str(root), "count": out.report.file_count})
    return out.report
