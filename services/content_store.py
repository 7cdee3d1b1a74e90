"""
File-based content store.

Responsibilities:
- Load courses, resources, learning paths and the site configuration from the YAML content directory.
- Enforce collection invariants (one record per id) on top of per-file schema validation.
- Cache parsed files keyed by modification time so repeated loads are cheap and edits are picked up in development.

Layout:
    <content_dir>/courses/*.yaml        one course per file
    <content_dir>/resources/*.yaml      one resource or a list of resources per file
    <content_dir>/resources.yaml        optional list of resources
    <content_dir>/learning_paths.yaml   optional list of learning paths
    <content_dir>/site_config.yaml      optional site configuration
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from core.config import get_settings
from core.errors import ContentError, ContentValidationError
from schemas.course import Course
from schemas.learning_path import LearningPath
from schemas.resource import Resource
from schemas.site_config import SiteConfig
from services import yaml_parser

logger = logging.getLogger("content_store")

YAML_SUFFIXES = (".yaml", ".yml")


@dataclass(frozen=True)
class ContentSnapshot:
    """Everything loaded from the content directory at one point in time."""

    courses: List[Course] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)
    learning_paths: List[LearningPath] = field(default_factory=list)
    site_config: Optional[SiteConfig] = None

    def course_map(self) -> Dict[str, Course]:
        return {c.id: c for c in self.courses}

    def resource_map(self) -> Dict[str, Resource]:
        return {r.id: r for r in self.resources}


def ensure_unique_ids(items: Iterable[Any], kind: str, source: Optional[str] = None) -> None:
    counts = Counter(item.id for item in items)
    duplicates = sorted(item_id for item_id, n in counts.items() if n > 1)
    if duplicates:
        raise ContentValidationError(
            f"Duplicate {kind} ids: {', '.join(duplicates)}",
            issues=[f"{kind} id '{d}' is defined {counts[d]} times" for d in duplicates],
            source=source,
        )


def yaml_files(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix in YAML_SUFFIXES)


class ContentStore:
    def __init__(self, content_dir: Union[str, Path, None] = None) -> None:
        self.content_dir = Path(content_dir or get_settings().content_dir)
        # path -> ((mtime_ns, size), parsed value)
        self._file_cache: Dict[Path, Tuple[Tuple[int, int], Any]] = {}

    @property
    def courses_dir(self) -> Path:
        return self.content_dir / "courses"

    @property
    def resources_dir(self) -> Path:
        return self.content_dir / "resources"

    @property
    def resources_file(self) -> Path:
        return self.content_dir / "resources.yaml"

    @property
    def learning_paths_file(self) -> Path:
        return self.content_dir / "learning_paths.yaml"

    @property
    def site_config_file(self) -> Path:
        return self.content_dir / "site_config.yaml"

    def _check_root(self) -> None:
        if not self.content_dir.is_dir():
            raise ContentError(f"Content directory not found: {self.content_dir}")

    def _load_cached(self, path: Path, parse: Callable[[str, str], Any]) -> Any:
        stat = path.stat()
        # size catches same-tick edits on filesystems with coarse timestamps
        key = (stat.st_mtime_ns, stat.st_size)
        cached = self._file_cache.get(path)
        if cached is not None and cached[0] == key:
            return cached[1]

        value = parse(yaml_parser.read_content_file(path), str(path))
        self._file_cache[path] = (key, value)
        logger.debug("parsed content file", extra={"path": str(path)})
        return value

    def load_courses(self) -> List[Course]:
        """All courses, most recent year first (ties broken by id)."""
        self._check_root()
        courses = [self._load_cached(p, yaml_parser.parse_course) for p in yaml_files(self.courses_dir)]
        ensure_unique_ids(courses, "course", source=str(self.courses_dir))
        courses.sort(key=lambda c: (-c.year, c.id))
        logger.info("loaded courses", extra={"count": len(courses), "path": str(self.courses_dir)})
        return courses

    def load_resources(self) -> List[Resource]:
        self._check_root()
        resources: List[Resource] = []
        for path in yaml_files(self.resources_dir):
            resources.extend(self._load_cached(path, yaml_parser.parse_resources))
        if self.resources_file.is_file():
            resources.extend(self._load_cached(self.resources_file, yaml_parser.parse_resources))
        ensure_unique_ids(resources, "resource", source=str(self.content_dir))
        logger.info("loaded resources", extra={"count": len(resources)})
        return resources

    def load_learning_paths(self) -> List[LearningPath]:
        self._check_root()
        if not self.learning_paths_file.is_file():
            return []
        paths = list(self._load_cached(self.learning_paths_file, yaml_parser.parse_learning_paths))
        ensure_unique_ids(paths, "learning path", source=str(self.learning_paths_file))
        logger.info("loaded learning paths", extra={"count": len(paths)})
        return paths

    def load_site_config(self) -> Optional[SiteConfig]:
        self._check_root()
        if not self.site_config_file.is_file():
            return None
        return self._load_cached(self.site_config_file, yaml_parser.parse_site_config)

    def snapshot(self) -> ContentSnapshot:
        return ContentSnapshot(
            courses=self.load_courses(),
            resources=self.load_resources(),
            learning_paths=self.load_learning_paths(),
            site_config=self.load_site_config(),
        )

    def get_course(self, course_id: str) -> Optional[Course]:
        return next((c for c in self.load_courses() if c.id == course_id), None)

    def get_resource(self, resource_id: str) -> Optional[Resource]:
        return next((r for r in self.load_resources() if r.id == resource_id), None)

    def get_learning_path(self, path_id: str) -> Optional[LearningPath]:
        return next((p for p in self.load_learning_paths() if p.id == path_id), None)

    def all_course_ids(self) -> List[str]:
        return [c.id for c in self.load_courses()]

    def clear_cache(self) -> None:
        self._file_cache.clear()


_store_instance: Optional[ContentStore] = None


def get_content_store() -> ContentStore:
    global _store_instance
    if _store_instance is None:
        _store_instance = ContentStore()
    return _store_instance
