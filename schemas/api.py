"""
Result and API contract schemas.

Notes:
- ApiResponse is a generic wrapper model so different endpoints can return consistent envelopes while varying `data` types.
- Service results (relationships, sequenced paths, search hits) are pydantic models so they serialise the same way
  in the JSON API and in the static export.
"""
from __future__ import annotations

from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field

from .course import Course
from .domain import DomainCount, DomainInfo, DomainToolkit
from .learning_path import LearningPath
from .resource import Resource

EntityKind = Literal["course", "resource", "learning_path"]


class RelatedCourse(BaseModel):
    course_id: str
    title: str
    shared_domains: List[str] = Field(default_factory=list)


class CourseRelationship(BaseModel):
    course_id: str
    domains: List[str]
    related_courses: List[RelatedCourse] = Field(default_factory=list)


class RelationshipPair(BaseModel):
    course_a: str
    course_b: str
    shared_domains: List[str]


class RelationshipsView(BaseModel):
    relationships: List[CourseRelationship]
    pairs: List[RelationshipPair]


class SequencedStep(BaseModel):
    order: int
    type: Literal["course", "resource", "practice"]
    note: str
    optional: bool = False
    course_id: Optional[str] = None
    resource_id: Optional[str] = None
    resolved: bool = Field(description="False when the referenced course/resource is not in the loaded content")
    title: Optional[str] = None
    url: Optional[str] = Field(default=None, description="Link to render for the step; None when unresolved")
    course: Optional[Course] = None
    resource: Optional[Resource] = None


class SequencedLearningPath(BaseModel):
    id: str
    title: str
    description: str
    recommended_audience: str
    estimated_duration: str
    steps: List[SequencedStep]
    unresolved_count: int = 0


class LearningPhase(BaseModel):
    phase: str
    description: str
    courses: List[Course]
    domains: List[str]


class SearchHit(BaseModel):
    kind: EntityKind
    id: str
    title: str
    tier: int = Field(description="0 exact title, 1 tag, 2 text substring")
    match: Literal["title", "tag", "text"]
    score: float = 0.0
    item: Union[Course, Resource, LearningPath]


class SearchResults(BaseModel):
    query: str
    hits: List[SearchHit] = Field(default_factory=list)
    courses: List[SearchHit] = Field(default_factory=list)
    resources: List[SearchHit] = Field(default_factory=list)
    learning_paths: List[SearchHit] = Field(default_factory=list)
    total_count: int = 0


class CourseDetail(BaseModel):
    course: Course
    domains: List[str]
    related_courses: List[RelatedCourse]
    seo: Dict[str, Any]
    structured_data: Dict[str, Any]


class DomainSummary(BaseModel):
    domain: DomainInfo
    stats: DomainCount


class CurriculumView(BaseModel):
    domains: List[str]
    phases: List[LearningPhase]
    toolkit: DomainToolkit


class DomainDetail(BaseModel):
    domain: DomainInfo
    stats: DomainCount
    courses: List[Course]
    resources: List[Resource]
    related_domains: List[str] = Field(default_factory=list)
    seo: Dict[str, Any] = Field(default_factory=dict)


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Generic response wrapper to stabilize external API while allowing inner schema evolution.

    Always return this envelope so clients can rely on `request_id` and `status`, irrespective of changes in `data`.
    """
    request_id: str
    status: str
    data: T
