from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import yaml

from schemas.course import Course
from schemas.learning_path import LearningPath
from schemas.resource import Resource


def course_data(**overrides: Any) -> Dict[str, Any]:
    data = {
        "id": "abm-intro",
        "title": "Agent-Based Modeling Basics",
        "type": "course",
        "year": 2024,
        "difficulty": "beginner",
        "tags": ["ABM", "Mesa"],
        "instructors": ["Zhang Ming"],
        "language": "en",
        "summary": "An introduction to agent-based modeling with Python and Mesa.",
        "sessions": [{"id": "s1", "title": "Getting started", "objectives": ["Build a first model"]}],
        "last_updated": "2024-09-01",
    }
    data.update(overrides)
    return data


def resource_data(**overrides: Any) -> Dict[str, Any]:
    data = {
        "id": "mesa-docs",
        "title": "Mesa Documentation",
        "type": "docs",
        "url": "https://mesa.readthedocs.io/",
        "tags": ["Mesa", "Python"],
        "description": "Official documentation of the Mesa framework.",
        "language": "en",
    }
    data.update(overrides)
    return data


def path_data(**overrides: Any) -> Dict[str, Any]:
    data = {
        "id": "starter",
        "title": "Starter path",
        "description": "From zero to a first simulation model.",
        "recommended_audience": "Beginners",
        "estimated_duration": "4 weeks",
        "steps": [
            {"order": 1, "type": "course", "course_id": "abm-intro", "note": "Learn the basics"},
            {"order": 2, "type": "practice", "note": "Build a model"},
        ],
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_course():
    def _make(**overrides: Any) -> Course:
        return Course.model_validate(course_data(**overrides))
    return _make


@pytest.fixture
def make_resource():
    def _make(**overrides: Any) -> Resource:
        return Resource.model_validate(resource_data(**overrides))
    return _make


@pytest.fixture
def make_path():
    def _make(**overrides: Any) -> LearningPath:
        return LearningPath.model_validate(path_data(**overrides))
    return _make


def write_yaml(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, allow_unicode=True, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path: Path):
    """Factory building a content directory under tmp_path."""

    def _build(
        courses: Optional[List[Dict[str, Any]]] = None,
        resources: Optional[List[Dict[str, Any]]] = None,
        learning_paths: Optional[List[Dict[str, Any]]] = None,
        site_config: Optional[Dict[str, Any]] = None,
    ) -> Path:
        root = tmp_path / "data"
        (root / "courses").mkdir(parents=True, exist_ok=True)
        for course in courses if courses is not None else [course_data()]:
            write_yaml(root / "courses" / f"{course['id']}.yaml", course)
        if resources is not None:
            write_yaml(root / "resources.yaml", resources)
        if learning_paths is not None:
            write_yaml(root / "learning_paths.yaml", learning_paths)
        if site_config is not None:
            write_yaml(root / "site_config.yaml", site_config)
        return root

    return _build
