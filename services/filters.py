"""
Faceted filtering of courses, resources and learning paths.

Within one facet any selected value may match; across facets every non-empty
facet must match. Facet state round-trips through comma-separated query
parameters so filtered views can be linked.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from schemas.course import Course
from schemas.learning_path import LearningPath
from schemas.resource import Resource
from services.domain_classifier import classify_course, classify_resource

FACETS = ("difficulty", "tags", "year", "type", "language", "domains")


class FilterOptions(BaseModel):
    difficulty: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    year: List[str] = Field(default_factory=list)
    type: List[str] = Field(default_factory=list)
    language: List[str] = Field(default_factory=list)
    domains: List[str] = Field(default_factory=list)


def _tags_match(wanted: Sequence[str], tags: Sequence[str]) -> bool:
    lowered = [t.lower() for t in tags]
    return any(w.lower() in t for w in wanted for t in lowered)


def filter_courses(courses: Sequence[Course], filters: FilterOptions) -> List[Course]:
    out = []
    for course in courses:
        if filters.difficulty and course.difficulty not in filters.difficulty:
            continue
        if filters.tags and not _tags_match(filters.tags, course.tags):
            continue
        if filters.year and str(course.year) not in filters.year:
            continue
        if filters.type and course.type not in filters.type:
            continue
        if filters.language and course.language not in filters.language:
            continue
        if filters.domains and not set(filters.domains).intersection(classify_course(course)):
            continue
        out.append(course)
    return out


def filter_resources(resources: Sequence[Resource], filters: FilterOptions) -> List[Resource]:
    out = []
    for resource in resources:
        # resources without a difficulty are not excluded by the difficulty facet
        if filters.difficulty and resource.difficulty and resource.difficulty not in filters.difficulty:
            continue
        if filters.tags and not _tags_match(filters.tags, resource.tags):
            continue
        if filters.type and resource.type not in filters.type:
            continue
        if filters.language and resource.language not in filters.language:
            continue
        if filters.domains and not set(filters.domains).intersection(classify_resource(resource)):
            continue
        out.append(resource)
    return out


def filter_learning_paths(paths: Sequence[LearningPath], filters: FilterOptions) -> List[LearningPath]:
    if not filters.tags:
        return list(paths)
    out = []
    for path in paths:
        text = f"{path.title} {path.description} {path.recommended_audience}".lower()
        if any(tag.lower() in text for tag in filters.tags):
            out.append(path)
    return out


def available_filters(courses: Sequence[Course], resources: Sequence[Resource]) -> FilterOptions:
    difficulties, tags, years, types, languages, domains = set(), set(), set(), set(), set(), set()
    for course in courses:
        difficulties.add(course.difficulty)
        tags.update(course.tags)
        years.add(str(course.year))
        types.add(course.type)
        languages.add(course.language)
        domains.update(classify_course(course))
    for resource in resources:
        if resource.difficulty:
            difficulties.add(resource.difficulty)
        tags.update(resource.tags)
        types.add(resource.type)
        languages.add(resource.language)
        domains.update(classify_resource(resource))
    return FilterOptions(
        difficulty=sorted(difficulties),
        tags=sorted(tags),
        year=sorted(years, key=int, reverse=True),
        type=sorted(types),
        language=sorted(languages),
        domains=sorted(domains),
    )


def has_active_filters(filters: FilterOptions) -> bool:
    return any(getattr(filters, facet) for facet in FACETS)


def active_filter_count(filters: FilterOptions) -> int:
    return sum(len(getattr(filters, facet)) for facet in FACETS)


def filters_from_query_params(params: Mapping[str, Optional[str]]) -> FilterOptions:
    values: Dict[str, List[str]] = {}
    for facet in FACETS:
        raw = params.get(facet) or ""
        values[facet] = [v for v in raw.split(",") if v]
    return FilterOptions(**values)


def filters_to_query_params(filters: FilterOptions) -> Dict[str, str]:
    return {facet: ",".join(getattr(filters, facet)) for facet in FACETS if getattr(filters, facet)}
