import pytest
import yaml

from conftest import course_data, resource_data
from core.errors import ContentValidationError, YAMLParseError
from schemas.course import Course
from services import yaml_parser


def test_parse_course_from_yaml_text():
    course = yaml_parser.parse_course(yaml.safe_dump(course_data()), source="courses/abm-intro.yaml")
    assert course.id == "abm-intro"
    assert course.last_updated == "2024-09-01"


def test_malformed_yaml_raises_parse_error():
    with pytest.raises(YAMLParseError) as exc:
        yaml_parser.parse_course("id: [unclosed", source="broken.yaml")
    assert "broken.yaml" in str(exc.value)


def test_schema_violation_lists_every_issue_path():
    data = course_data(summary="short", difficulty="expert")
    with pytest.raises(ContentValidationError) as exc:
        yaml_parser.parse_course(yaml.safe_dump(data), source="c.yaml")
    issues = exc.value.issues
    assert any(issue.startswith("summary:") for issue in issues)
    assert any(issue.startswith("difficulty:") for issue in issues)
    assert "c.yaml" in exc.value.format()


def test_empty_document_is_a_validation_error():
    with pytest.raises(ContentValidationError, match="Empty or invalid"):
        yaml_parser.parse_course("", source="empty.yaml")


def test_parse_resources_accepts_mapping_or_list():
    single = yaml_parser.parse_resources(yaml.safe_dump(resource_data()))
    many = yaml_parser.parse_resources(yaml.safe_dump([resource_data(), resource_data(id="other")]))
    assert [r.id for r in single] == ["mesa-docs"]
    assert [r.id for r in many] == ["mesa-docs", "other"]


def test_learning_paths_must_be_a_list():
    with pytest.raises(ContentValidationError, match="list"):
        yaml_parser.parse_learning_paths("id: not-a-list")


def test_safe_parse_reports_instead_of_raising():
    ok = yaml_parser.safe_parse(yaml.safe_dump(course_data()), Course)
    bad = yaml_parser.safe_parse("title: only", Course)
    assert ok["success"] is True and ok["data"].id == "abm-intro"
    assert bad["success"] is False and "Validation failed" in bad["error"]


def test_is_valid_yaml():
    assert yaml_parser.is_valid_yaml("a: 1")
    assert not yaml_parser.is_valid_yaml("a: [1")
