"""
Content validation run over the whole content directory.

Unlike ContentStore, which stops at the first invalid file, the validator
checks every file and collects the problems:
- schema violations, malformed YAML and duplicate ids are errors
- learning-path steps or featured courses pointing at unknown ids are warnings
- external links that cannot be reached are warnings
The run fails only when there is at least one error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, Union

from core.errors import ContentError, ContentValidationError
from services import yaml_parser
from services.content_store import ContentStore, ensure_unique_ids, yaml_files
from services.link_checker import LinkChecker, extract_urls

logger = logging.getLogger("content_validator")


@dataclass
class ValidationReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    files_checked: int = 0
    links_checked: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors


class ContentValidator:
    def __init__(
        self,
        content_dir: Union[str, Path, None] = None,
        check_links: bool = True,
        link_checker: Optional[LinkChecker] = None,
    ) -> None:
        # only used for its path layout; nothing is cached here
        self.store = ContentStore(content_dir)
        self.check_links = check_links
        self.link_checker = link_checker or LinkChecker()
        self.report = ValidationReport()
        self._raw_documents: Dict[Path, Any] = {}

    def _error(self, message: str) -> None:
        self.report.errors.append(message)
        logger.error(message)

    def _warning(self, message: str) -> None:
        self.report.warnings.append(message)
        logger.warning(message)

    def _validate_file(self, path: Path, parse: Callable[[str, str], Any]) -> Any:
        self.report.files_checked += 1
        try:
            content = yaml_parser.read_content_file(path)
            value = parse(content, str(path))
        except ContentValidationError as e:
            self._error(e.format())
            return None
        except ContentError as e:
            self._error(str(e))
            return None
        except OSError as e:
            self._error(f"{path}: cannot read file: {e}")
            return None

        # parsing succeeded, so this cannot raise
        self._raw_documents[path] = yaml_parser.parse_yaml(content, str(path))
        logger.debug("file passed schema validation", extra={"path": str(path)})
        return value

    def _check_unique(self, items: List[Any], kind: str, source: Path) -> None:
        try:
            ensure_unique_ids(items, kind, source=str(source))
        except ContentValidationError as e:
            self._error(e.format())

    def validate_schemas(self) -> Dict[str, Any]:
        store = self.store
        parsed = (self._validate_file(p, yaml_parser.parse_course) for p in yaml_files(store.courses_dir))
        courses = [c for c in parsed if c is not None]
        self._check_unique(courses, "course", store.courses_dir)

        resources = []
        resource_files = yaml_files(store.resources_dir)
        if store.resources_file.is_file():
            resource_files.append(store.resources_file)
        for path in resource_files:
            resources.extend(self._validate_file(path, yaml_parser.parse_resources) or [])
        self._check_unique(resources, "resource", store.content_dir)

        paths = []
        if store.learning_paths_file.is_file():
            paths = self._validate_file(store.learning_paths_file, yaml_parser.parse_learning_paths) or []
            self._check_unique(paths, "learning path", store.learning_paths_file)

        site_config = None
        if store.site_config_file.is_file():
            site_config = self._validate_file(store.site_config_file, yaml_parser.parse_site_config)

        return {"courses": courses, "resources": resources, "learning_paths": paths, "site_config": site_config}

    def validate_references(self, content: Dict[str, Any]) -> None:
        course_ids: Set[str] = {c.id for c in content["courses"]}
        resource_ids: Set[str] = {r.id for r in content["resources"]}
        for path in content["learning_paths"]:
            for step in path.steps:
                if step.course_id and step.course_id not in course_ids:
                    self._warning(f"Learning path '{path.id}' step {step.order} references unknown course '{step.course_id}'")
                if step.resource_id and step.resource_id not in resource_ids:
                    self._warning(
                        f"Learning path '{path.id}' step {step.order} references unknown resource '{step.resource_id}'"
                    )
        site_config = content["site_config"]
        if site_config is not None:
            for course_id in site_config.featured_courses:
                if course_id not in course_ids:
                    self._warning(f"Featured course '{course_id}' does not exist")

    async def validate_links(self) -> None:
        for path, document in self._raw_documents.items():
            urls = sorted(extract_urls(document))
            if not urls:
                continue
            results = await self.link_checker.check_many(urls)
            self.report.links_checked += len(results)
            broken = [r for r in results.values() if r.is_broken]
            if broken:
                details = "\n".join(f"  - {r.url} ({r.error})" for r in broken)
                self._warning(f"Broken links found in {path}:\n{details}")
            else:
                logger.info("all links accessible", extra={"path": str(path), "count": len(urls)})

    async def run(self) -> ValidationReport:
        if not self.store.content_dir.is_dir():
            self._error(f"Data directory not found: {self.store.content_dir}")
            return self.report

        content = self.validate_schemas()
        self.validate_references(content)
        if self.check_links:
            await self.validate_links()

        logger.info(
            "content validation finished",
            extra={"errors": len(self.report.errors), "warnings": len(self.report.warnings), "count": self.report.files_checked},
        )
        return self.report
