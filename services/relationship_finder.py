"""
Cross-domain relationships between courses.

Two courses are related when their classified domain sets intersect. Related
courses are ordered by number of shared domains (descending), then by course
id (ascending).
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from schemas.api import CourseRelationship, RelatedCourse, RelationshipPair
from schemas.course import Course
from services.domain_classifier import DOMAIN_IDS, classify_course

logger = logging.getLogger(__name__)


def _domain_map(courses: Sequence[Course]) -> Dict[str, List[str]]:
    return {course.id: classify_course(course) for course in courses}


def _shared(a: List[str], b: List[str]) -> List[str]:
    other = set(b)
    return [d for d in a if d in other]


def _rank_key(related: RelatedCourse):
    return (-len(related.shared_domains), related.course_id)


def find_cross_domain_relationships(courses: Sequence[Course], limit: Optional[int] = None) -> List[CourseRelationship]:
    """One entry per course that has at least one domain, ordered by course id.

    ``limit`` caps the number of related courses kept per entry after ranking.
    """
    domains = _domain_map(courses)
    relationships: List[CourseRelationship] = []

    for course in sorted(courses, key=lambda c: c.id):
        own = domains[course.id]
        if not own:
            continue
        related = []
        for other in courses:
            if other.id == course.id:
                continue
            shared = _shared(own, domains[other.id])
            if shared:
                related.append(RelatedCourse(course_id=other.id, title=other.title, shared_domains=shared))
        related.sort(key=_rank_key)
        if limit is not None:
            related = related[:limit]
        relationships.append(CourseRelationship(course_id=course.id, domains=own, related_courses=related))

    logger.debug("computed relationships", extra={"count": len(relationships)})
    return relationships


def related_courses_for(course_id: str, courses: Sequence[Course], limit: Optional[int] = None) -> List[RelatedCourse]:
    course = next((c for c in courses if c.id == course_id), None)
    if course is None:
        return []
    own = classify_course(course)
    if not own:
        return []
    related = []
    for other in courses:
        if other.id == course_id:
            continue
        shared = _shared(own, classify_course(other))
        if shared:
            related.append(RelatedCourse(course_id=other.id, title=other.title, shared_domains=shared))
    related.sort(key=_rank_key)
    return related[:limit] if limit is not None else related


def relationship_pairs(courses: Sequence[Course]) -> List[RelationshipPair]:
    """Unordered pairs (a < b) sharing at least one domain."""
    domains = _domain_map(courses)
    ids = sorted(domains)
    pairs = []
    for i, a in enumerate(ids):
        for b in ids[i + 1:]:
            shared = _shared(domains[a], domains[b])
            if shared:
                pairs.append(RelationshipPair(course_a=a, course_b=b, shared_domains=shared))
    pairs.sort(key=lambda p: (-len(p.shared_domains), p.course_a, p.course_b))
    return pairs


def related_domains(domain_id: str, courses: Sequence[Course]) -> List[str]:
    """Domains that co-occur with ``domain_id`` on at least one course, most frequent first."""
    counts: Dict[str, int] = {}
    for own in _domain_map(courses).values():
        if domain_id not in own:
            continue
        for other in own:
            if other != domain_id:
                counts[other] = counts.get(other, 0) + 1
    order = {d: i for i, d in enumerate(DOMAIN_IDS)}
    return sorted(counts, key=lambda d: (-counts[d], order.get(d, len(order))))
