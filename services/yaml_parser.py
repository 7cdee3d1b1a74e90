"""
YAML parsing and schema validation for content files.

Every loader goes through parse_yaml() -> validate_data() so malformed YAML and
schema violations surface as the two error types of core.errors, with one
"path: message" line per pydantic issue.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, TypeAdapter, ValidationError

from core.errors import ContentValidationError, YAMLParseError
from schemas.course import Course
from schemas.learning_path import LearningPath
from schemas.resource import Resource
from schemas.site_config import SiteConfig

M = TypeVar("M", bound=BaseModel)


def parse_yaml(content: str, source: Optional[str] = None) -> Any:
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise YAMLParseError(f"Failed to parse YAML: {e}", source=source) from e


def read_content_file(path: Union[str, Path]) -> str:
    """Read a content file as UTF-8; undecodable bytes are a YAMLParseError for that file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise YAMLParseError(f"File is not valid UTF-8: {e}", source=str(path)) from e


def load_yaml_file(path: Union[str, Path]) -> Any:
    path = Path(path)
    return parse_yaml(read_content_file(path), source=str(path))


def format_issues(error: ValidationError, prefix: str = "") -> List[str]:
    issues = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        if prefix:
            loc = f"{prefix}.{loc}" if loc else prefix
        issues.append(f"{loc or 'root'}: {err.get('msg')}")
    return issues


def validate_data(data: Any, model: Type[M], source: Optional[str] = None) -> M:
    if data is None:
        raise ContentValidationError("Empty or invalid YAML document", source=source)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        issues = format_issues(e)
        raise ContentValidationError(f"Validation failed: {', '.join(issues)}", issues=issues, source=source) from e


def validate_collection(data: Any, model: Type[M], source: Optional[str] = None) -> List[M]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ContentValidationError("Expected a list of entries", source=source)
    try:
        return TypeAdapter(List[model]).validate_python(data)  # type: ignore[valid-type]
    except ValidationError as e:
        issues = format_issues(e)
        raise ContentValidationError(f"Validation failed: {', '.join(issues)}", issues=issues, source=source) from e


def parse_course(content: str, source: Optional[str] = None) -> Course:
    return validate_data(parse_yaml(content, source), Course, source)


def parse_courses(content: str, source: Optional[str] = None) -> List[Course]:
    return validate_collection(parse_yaml(content, source), Course, source)


def parse_resource(content: str, source: Optional[str] = None) -> Resource:
    return validate_data(parse_yaml(content, source), Resource, source)


def parse_resources(content: str, source: Optional[str] = None) -> List[Resource]:
    data = parse_yaml(content, source)
    # resource files hold either one mapping or a list of them
    if isinstance(data, dict):
        return [validate_data(data, Resource, source)]
    return validate_collection(data, Resource, source)


def parse_learning_path(content: str, source: Optional[str] = None) -> LearningPath:
    return validate_data(parse_yaml(content, source), LearningPath, source)


def parse_learning_paths(content: str, source: Optional[str] = None) -> List[LearningPath]:
    return validate_collection(parse_yaml(content, source), LearningPath, source)


def parse_site_config(content: str, source: Optional[str] = None) -> SiteConfig:
    return validate_data(parse_yaml(content, source), SiteConfig, source)


def safe_parse(content: str, model: Type[M], source: Optional[str] = None) -> Dict[str, Any]:
    """Parse and validate without raising: {"success": bool, "data" | "error": ...}."""
    try:
        return {"success": True, "data": validate_data(parse_yaml(content, source), model, source)}
    except ContentValidationError as e:
        return {"success": False, "error": e.format()}
    except YAMLParseError as e:
        return {"success": False, "error": str(e)}


def is_valid_yaml(content: str) -> bool:
    try:
        parse_yaml(content)
        return True
    except YAMLParseError:
        return False
