"""
Learning-path sequencing.

sequence_learning_path() sorts the steps of a path by ``order`` and attaches the
referenced course or resource. A reference to an id that is not loaded never
raises: the step is kept, marked unresolved and rendered without a link.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from schemas.api import LearningPhase, SequencedLearningPath, SequencedStep
from schemas.course import Course
from schemas.learning_path import LearningPath, LearningStep
from schemas.resource import Resource
from services.domain_classifier import classify_course

logger = logging.getLogger(__name__)


def course_link(course: Course) -> str:
    return f"/courses/{course.id}"


def _sequence_step(
    step: LearningStep,
    path_id: str,
    courses: Dict[str, Course],
    resources: Dict[str, Resource],
) -> SequencedStep:
    data = dict(
        order=step.order,
        type=step.type,
        note=step.note,
        optional=step.optional,
        course_id=step.course_id,
        resource_id=step.resource_id,
    )
    if step.course_id:
        course = courses.get(step.course_id)
        if course is None:
            logger.warning(
                "learning path step references unknown course",
                extra={"path": path_id, "step": step.order, "course_id": step.course_id},
            )
            return SequencedStep(resolved=False, **data)
        return SequencedStep(resolved=True, title=course.title, url=course_link(course), course=course, **data)

    if step.resource_id:
        resource = resources.get(step.resource_id)
        if resource is None:
            logger.warning(
                "learning path step references unknown resource",
                extra={"path": path_id, "step": step.order, "resource_id": step.resource_id},
            )
            return SequencedStep(resolved=False, **data)
        return SequencedStep(resolved=True, title=resource.title, url=resource.url, resource=resource, **data)

    # practice step: nothing to resolve
    return SequencedStep(resolved=True, **data)


def sequence_learning_path(
    path: LearningPath,
    courses: Iterable[Course],
    resources: Iterable[Resource],
) -> SequencedLearningPath:
    course_map = {c.id: c for c in courses}
    resource_map = {r.id: r for r in resources}
    steps = [
        _sequence_step(step, path.id, course_map, resource_map)
        for step in sorted(path.steps, key=lambda s: s.order)
    ]
    return SequencedLearningPath(
        id=path.id,
        title=path.title,
        description=path.description,
        recommended_audience=path.recommended_audience,
        estimated_duration=path.estimated_duration,
        steps=steps,
        unresolved_count=sum(1 for s in steps if not s.resolved),
    )


def sequence_all(
    paths: Iterable[LearningPath],
    courses: Sequence[Course],
    resources: Sequence[Resource],
) -> List[SequencedLearningPath]:
    return [sequence_learning_path(p, courses, resources) for p in paths]


def recommend_domain_sequence(target_domains: Sequence[str], courses: Sequence[Course]) -> List[LearningPhase]:
    """Foundation -> specialisation -> advanced curriculum across domains.

    Phases without courses are left out.
    """
    targets = set(target_domains)
    domains = {c.id: classify_course(c) for c in courses}
    phases: List[LearningPhase] = []

    foundation = [
        c for c in courses
        if c.difficulty == "beginner" and ("computational" in domains[c.id] or not domains[c.id])
    ]
    if foundation:
        phases.append(LearningPhase(
            phase="基础阶段",
            description="ABM基础概念和编程技能",
            courses=foundation,
            domains=["computational"],
        ))

    intermediate = [
        c for c in courses
        if c.difficulty == "intermediate" and targets.intersection(domains[c.id])
    ]
    if intermediate:
        phases.append(LearningPhase(
            phase="专业阶段",
            description="特定领域的ABM应用",
            courses=intermediate,
            domains=list(target_domains),
        ))

    advanced = [
        c for c in courses
        if c.difficulty == "advanced" and (targets.intersection(domains[c.id]) or len(domains[c.id]) > 1)
    ]
    if advanced:
        phases.append(LearningPhase(
            phase="高级阶段",
            description="高级技术和跨领域应用",
            courses=advanced,
            domains=list(target_domains),
        ))

    return phases
