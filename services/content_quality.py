"""
Editorial quality heuristics for course and resource content.

These checks run on the raw YAML documents rather than the validated models so
that incomplete drafts still get feedback. Nothing here fails a build except
an unreadable file; quality issues are warnings and tag consolidation hints are
suggestions.
"""
from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from itertools import combinations
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from core.errors import ContentError
from schemas.common import DIFFICULTIES
from services import yaml_parser
from services.content_store import ContentStore, yaml_files

logger = logging.getLogger("content_quality")

PLACEHOLDERS = ("lorem ipsum", "placeholder", "todo", "tbd", "coming soon")
SENTENCE_ENDINGS = (".", "!", "?", "。", "！", "？")
RESOURCE_TYPES = ("docs", "tutorial", "paper", "book", "dataset", "tool")
MIN_TEXT_LENGTH = 10
MIN_SUMMARY_LENGTH = 50
MAX_WORD_REPEATS = 3
EARLIEST_COURSE_YEAR = 2020

COURSE_REQUIRED = ("title", "type", "year", "difficulty", "summary")
RESOURCE_REQUIRED = ("title", "type", "url", "description")


@dataclass
class QualityReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    tag_count: int = 0
    instructor_count: int = 0
    years: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def check_text_quality(text: str, context: str, require_sentence: bool = True) -> List[str]:
    """Length, placeholder, sentence ending and word repetition checks.

    ``require_sentence`` is off for titles and objectives, which are phrases.
    """
    issues = []
    stripped = text.strip()
    if len(stripped) < MIN_TEXT_LENGTH:
        issues.append(f"{context}: Text too short ({len(stripped)} chars)")

    lowered = stripped.lower()
    for placeholder in PLACEHOLDERS:
        if re.search(rf"\b{re.escape(placeholder)}\b", lowered):
            issues.append(f'{context}: Contains placeholder text "{placeholder}"')

    if require_sentence and stripped and not stripped.endswith(SENTENCE_ENDINGS):
        issues.append(f"{context}: Missing proper sentence ending")

    counts = Counter(word for word in re.findall(r"\w+", lowered) if len(word) > 3)
    repeated = sorted(word for word, n in counts.items() if n > MAX_WORD_REPEATS)
    if repeated:
        issues.append(f"{context}: Excessive word repetition: {', '.join(repeated)}")
    return issues


def check_course_quality(course: Dict[str, Any], today: Optional[date] = None) -> List[str]:
    issues = [f"Missing required field: {name}" for name in COURSE_REQUIRED if not course.get(name)]

    title = course.get("title")
    if isinstance(title, str) and title:
        issues.extend(check_text_quality(title, "Title", require_sentence=False))

    summary = course.get("summary")
    if isinstance(summary, str) and summary:
        issues.extend(check_text_quality(summary, "Summary"))
        if len(summary.strip()) < MIN_SUMMARY_LENGTH:
            issues.append(f"Summary should be more descriptive (at least {MIN_SUMMARY_LENGTH} characters)")

    sessions = course.get("sessions")
    if isinstance(sessions, list) and sessions:
        for i, session in enumerate(sessions, start=1):
            session = session if isinstance(session, dict) else {}
            if not session.get("title"):
                issues.append(f"Session {i}: Missing title")
            objectives = session.get("objectives") or []
            if not objectives:
                issues.append(f"Session {i}: Missing learning objectives")
            for j, objective in enumerate(objectives, start=1):
                if isinstance(objective, str):
                    issues.extend(check_text_quality(objective, f"Session {i}, Objective {j}", require_sentence=False))
    else:
        issues.append("Course should have sessions defined")

    if not course.get("tags"):
        issues.append("Course should have tags for better discoverability")
    if not course.get("instructors"):
        issues.append("Course should have instructors listed")

    year = course.get("year")
    if isinstance(year, int):
        latest = (today or date.today()).year + 1
        if year < EARLIEST_COURSE_YEAR or year > latest:
            issues.append(f"Year {year} seems invalid (should be between {EARLIEST_COURSE_YEAR} and {latest})")

    difficulty = course.get("difficulty")
    if difficulty and difficulty not in DIFFICULTIES:
        issues.append(f"Invalid difficulty level: {difficulty}. Should be one of: {', '.join(DIFFICULTIES)}")
    return issues


def check_resource_quality(resource: Dict[str, Any]) -> List[str]:
    issues = [f"Missing required field: {name}" for name in RESOURCE_REQUIRED if not resource.get(name)]

    title = resource.get("title")
    if isinstance(title, str) and title:
        issues.extend(check_text_quality(title, "Title", require_sentence=False))
    description = resource.get("description")
    if isinstance(description, str) and description:
        issues.extend(check_text_quality(description, "Description"))

    url = resource.get("url")
    if url and not re.match(r"^https?://", str(url)):
        issues.append("URL should start with http:// or https://")

    rtype = resource.get("type")
    if rtype and rtype not in RESOURCE_TYPES:
        issues.append(f"Invalid resource type: {rtype}. Should be one of: {', '.join(RESOURCE_TYPES)}")
    return issues


def _normalize_tag(tag: str) -> str:
    return re.sub(r"[\s_\-]+", "", tag.lower())


def find_similar_tags(tags: Sequence[str]) -> List[Tuple[str, str]]:
    """Pairs of distinct tags where one contains the other after normalisation."""
    pairs = []
    for a, b in combinations(sorted(set(tags)), 2):
        na, nb = _normalize_tag(a), _normalize_tag(b)
        if na and nb and (na in nb or nb in na):
            pairs.append((a, b))
    return pairs


class ContentQualityChecker:
    def __init__(self, content_dir: Union[str, Path, None] = None, today: Optional[date] = None) -> None:
        self.store = ContentStore(content_dir)
        self.today = today
        self.report = QualityReport()
        self._courses: List[Dict[str, Any]] = []

    def _load(self, path: Path) -> Any:
        try:
            return yaml_parser.load_yaml_file(path)
        except ContentError as e:
            self._error(f"Error checking {path.name}: {e.message}")
        except OSError as e:
            self._error(f"Error checking {path.name}: {e}")
        return None

    def _error(self, message: str) -> None:
        self.report.errors.append(message)
        logger.error(message)

    def _warning(self, message: str) -> None:
        self.report.warnings.append(message)
        logger.warning(message)

    def _suggest(self, message: str) -> None:
        self.report.suggestions.append(message)
        logger.info(message)

    def check_courses(self) -> None:
        files = yaml_files(self.store.courses_dir)
        logger.info("checking course quality", extra={"count": len(files)})
        for path in files:
            course = self._load(path)
            if course is None:
                continue
            if not isinstance(course, dict):
                self._error(f"Error checking {path.name}: expected a mapping")
                continue
            self._courses.append(course)
            issues = check_course_quality(course, self.today)
            for issue in issues:
                self._warning(f"{path.name}: {issue}")

    def check_resources(self) -> None:
        files = yaml_files(self.store.resources_dir)
        if self.store.resources_file.is_file():
            files.append(self.store.resources_file)
        for path in files:
            data = self._load(path)
            if data is None:
                continue
            entries = [data] if isinstance(data, dict) else data
            if not isinstance(entries, list):
                self._error(f"Error checking {path.name}: expected a list of resources")
                continue
            for i, resource in enumerate(entries, start=1):
                if not isinstance(resource, dict):
                    continue
                label = resource.get("id") or f"resource {i}"
                for issue in check_resource_quality(resource):
                    self._warning(f"{path.name} [{label}]: {issue}")

    def check_consistency(self) -> None:
        tags, instructors, years = set(), set(), set()
        for course in self._courses:
            tags.update(t for t in course.get("tags") or [] if isinstance(t, str))
            instructors.update(i for i in course.get("instructors") or [] if isinstance(i, str))
            if isinstance(course.get("year"), int):
                years.add(course["year"])
        self.report.tag_count = len(tags)
        self.report.instructor_count = len(instructors)
        self.report.years = sorted(years)

        for a, b in find_similar_tags(list(tags)):
            self._suggest(f'Potentially similar tags "{a}" and "{b}" (consider consolidating)')

    def run(self) -> QualityReport:
        if not self.store.content_dir.is_dir():
            self._error(f"Error checking content: data directory not found: {self.store.content_dir}")
            return self.report
        self.check_courses()
        self.check_resources()
        self.check_consistency()
        logger.info(
            "content quality check finished",
            extra={
                "errors": len(self.report.errors),
                "warnings": len(self.report.warnings),
                "suggestions": len(self.report.suggestions),
            },
        )
        return self.report
