"""
Read-side views assembled from a content snapshot.

The JSON API and the static export both render these views, so a course page
looks the same whether it is served live or written to disk.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from core.config import get_settings
from schemas.api import CourseDetail, DomainDetail, DomainSummary
from services.content_store import ContentSnapshot
from services.domain_classifier import (
    classify_course,
    domain_statistics,
    filter_by_domains,
    get_domain,
    list_domains,
)
from services.relationship_finder import related_courses_for, related_domains
from services.seo import course_metadata, course_structured_data, domain_metadata

logger = logging.getLogger("portal_service")


def course_detail(snapshot: ContentSnapshot, course_id: str, site_url: Optional[str] = None) -> Optional[CourseDetail]:
    course = snapshot.course_map().get(course_id)
    if course is None:
        return None
    limit = get_settings().related_courses_limit
    return CourseDetail(
        course=course,
        domains=classify_course(course),
        related_courses=related_courses_for(course.id, snapshot.courses, limit=limit),
        seo=course_metadata(course, site_url),
        structured_data=course_structured_data(course, site_url),
    )


def domain_summaries(snapshot: ContentSnapshot) -> List[DomainSummary]:
    stats = domain_statistics(snapshot.courses, snapshot.resources)
    return [DomainSummary(domain=info, stats=stats[info.id]) for info in list_domains()]


def domain_detail(snapshot: ContentSnapshot, domain_id: str, site_url: Optional[str] = None) -> Optional[DomainDetail]:
    info = get_domain(domain_id)
    if info is None:
        return None
    stats = domain_statistics(snapshot.courses, snapshot.resources)
    return DomainDetail(
        domain=info,
        stats=stats[info.id],
        courses=filter_by_domains(snapshot.courses, [info.id]),
        resources=filter_by_domains(snapshot.resources, [info.id]),
        related_domains=related_domains(info.id, snapshot.courses),
        seo=domain_metadata(info, site_url),
    )
