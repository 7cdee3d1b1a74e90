"""
Versioned API v1 routes.

Design choices:
- The router does not hardcode a version prefix; main.py mounts it using settings.api_v1_prefix. This allows changing the prefix centrally.
- Responses are wrapped in the generic ApiResponse to keep a stable envelope while inner data evolves.
- Content is read through the ContentStore dependency; files are re-parsed only when they change on disk.
"""
from __future__ import annotations

import logging
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from core.config import get_settings
from core.errors import ContentError
from core.logging_config import set_request_id
from schemas.api import (
    ApiResponse,
    CourseDetail,
    CurriculumView,
    DomainDetail,
    DomainSummary,
    RelationshipsView,
    SearchResults,
    SequencedLearningPath,
)
from schemas.course import Course
from schemas.resource import Resource
from services.content_store import ContentSnapshot, ContentStore, get_content_store
from services.filters import (
    FilterOptions,
    available_filters,
    filter_courses,
    filter_learning_paths,
    filter_resources,
    filters_from_query_params,
)
from services.domain_classifier import DOMAIN_IDS, domain_specific_info
from services.learning_path_sequencer import recommend_domain_sequence, sequence_all, sequence_learning_path
from services.portal_service import course_detail, domain_detail, domain_summaries
from services.relationship_finder import find_cross_domain_relationships, relationship_pairs
from services.search_index import SearchIndex

router = APIRouter(tags=["portal"])  # mounted under /api/v1 by main.py
logger = logging.getLogger("api")


def _start_request() -> str:
    req_id = str(uuid4())
    set_request_id(req_id)
    return req_id


def _snapshot(store: ContentStore) -> ContentSnapshot:
    try:
        return store.snapshot()
    except ContentError as e:
        logger.error("content_load_failed", extra={"path": e.source})
        raise HTTPException(status_code=500, detail=f"Content could not be loaded: {e}") from e


@router.get("/courses", response_model=ApiResponse[List[Course]])
async def list_courses(request: Request, store: ContentStore = Depends(get_content_store)) -> ApiResponse[List[Course]]:
    """Courses, most recent first. Facets are comma-separated query parameters (?difficulty=beginner,advanced)."""
    req_id = _start_request()
    snapshot = _snapshot(store)
    filters = filters_from_query_params(request.query_params)
    courses = filter_courses(snapshot.courses, filters)
    logger.info("list_courses", extra={"count": len(courses)})
    return ApiResponse[List[Course]](request_id=req_id, status="ok", data=courses)


@router.get("/courses/{course_id}", response_model=ApiResponse[CourseDetail])
async def get_course(course_id: str, store: ContentStore = Depends(get_content_store)) -> ApiResponse[CourseDetail]:
    req_id = _start_request()
    detail = course_detail(_snapshot(store), course_id)
    if detail is None:
        logger.info("course_not_found", extra={"course_id": course_id})
        raise HTTPException(status_code=404, detail="Course not found")
    return ApiResponse[CourseDetail](request_id=req_id, status="ok", data=detail)


@router.get("/resources", response_model=ApiResponse[List[Resource]])
async def list_resources(request: Request, store: ContentStore = Depends(get_content_store)) -> ApiResponse[List[Resource]]:
    req_id = _start_request()
    snapshot = _snapshot(store)
    resources = filter_resources(snapshot.resources, filters_from_query_params(request.query_params))
    return ApiResponse[List[Resource]](request_id=req_id, status="ok", data=resources)


@router.get("/learning-paths", response_model=ApiResponse[List[SequencedLearningPath]])
async def list_learning_paths(
    request: Request, store: ContentStore = Depends(get_content_store)
) -> ApiResponse[List[SequencedLearningPath]]:
    req_id = _start_request()
    snapshot = _snapshot(store)
    paths = filter_learning_paths(snapshot.learning_paths, filters_from_query_params(request.query_params))
    data = sequence_all(paths, snapshot.courses, snapshot.resources)
    return ApiResponse[List[SequencedLearningPath]](request_id=req_id, status="ok", data=data)


@router.get("/learning-paths/{path_id}", response_model=ApiResponse[SequencedLearningPath])
async def get_learning_path(path_id: str, store: ContentStore = Depends(get_content_store)) -> ApiResponse[SequencedLearningPath]:
    req_id = _start_request()
    snapshot = _snapshot(store)
    path = next((p for p in snapshot.learning_paths if p.id == path_id), None)
    if path is None:
        raise HTTPException(status_code=404, detail="Learning path not found")
    data = sequence_learning_path(path, snapshot.courses, snapshot.resources)
    return ApiResponse[SequencedLearningPath](request_id=req_id, status="ok", data=data)


@router.get("/domains", response_model=ApiResponse[List[DomainSummary]])
async def list_domains(store: ContentStore = Depends(get_content_store)) -> ApiResponse[List[DomainSummary]]:
    req_id = _start_request()
    data = domain_summaries(_snapshot(store))
    return ApiResponse[List[DomainSummary]](request_id=req_id, status="ok", data=data)


@router.get("/domains/{domain_id}", response_model=ApiResponse[DomainDetail])
async def get_domain(domain_id: str, store: ContentStore = Depends(get_content_store)) -> ApiResponse[DomainDetail]:
    req_id = _start_request()
    detail = domain_detail(_snapshot(store), domain_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Domain not found")
    return ApiResponse[DomainDetail](request_id=req_id, status="ok", data=detail)


@router.get("/relationships", response_model=ApiResponse[RelationshipsView])
async def get_relationships(store: ContentStore = Depends(get_content_store)) -> ApiResponse[RelationshipsView]:
    req_id = _start_request()
    snapshot = _snapshot(store)
    data = RelationshipsView(
        relationships=find_cross_domain_relationships(snapshot.courses, limit=get_settings().related_courses_limit),
        pairs=relationship_pairs(snapshot.courses),
    )
    return ApiResponse[RelationshipsView](request_id=req_id, status="ok", data=data)


@router.get("/search", response_model=ApiResponse[SearchResults])
async def search(
    q: Optional[str] = Query("", description="Search text matched against titles, tags and descriptions"),
    store: ContentStore = Depends(get_content_store),
) -> ApiResponse[SearchResults]:
    req_id = _start_request()
    snapshot = _snapshot(store)
    index = SearchIndex(snapshot.courses, snapshot.resources, snapshot.learning_paths)
    results = index.search(q or "")
    return ApiResponse[SearchResults](request_id=req_id, status="ok", data=results)


@router.get("/filters", response_model=ApiResponse[FilterOptions])
async def get_filters(store: ContentStore = Depends(get_content_store)) -> ApiResponse[FilterOptions]:
    req_id = _start_request()
    snapshot = _snapshot(store)
    return ApiResponse[FilterOptions](
        request_id=req_id,
        status="ok",
        data=available_filters(snapshot.courses, snapshot.resources),
    )


@router.get("/curriculum", response_model=ApiResponse[CurriculumView])
async def get_curriculum(
    domains: str = Query(..., description="Comma-separated target domain ids, e.g. urban,transportation"),
    store: ContentStore = Depends(get_content_store),
) -> ApiResponse[CurriculumView]:
    """Foundation / specialisation / advanced course phases for the target domains, plus their toolkit."""
    req_id = _start_request()
    targets = [d for d in domains.split(",") if d]
    unknown = [d for d in targets if d not in DOMAIN_IDS]
    if unknown or not targets:
        raise HTTPException(status_code=404, detail=f"Unknown domain: {', '.join(unknown) or domains}")
    snapshot = _snapshot(store)
    data = CurriculumView(
        domains=targets,
        phases=recommend_domain_sequence(targets, snapshot.courses),
        toolkit=domain_specific_info(targets),
    )
    return ApiResponse[CurriculumView](request_id=req_id, status="ok", data=data)
