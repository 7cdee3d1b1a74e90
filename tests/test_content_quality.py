from datetime import date

from conftest import course_data, resource_data
from services.content_quality import (
    ContentQualityChecker,
    check_course_quality,
    check_resource_quality,
    check_text_quality,
    find_similar_tags,
)

TODAY = date(2025, 6, 1)


def test_text_quality_flags():
    issues = check_text_quality("TBD", "Summary")
    assert "Summary: Text too short (3 chars)" in issues
    assert 'Summary: Contains placeholder text "tbd"' in issues
    assert "Summary: Missing proper sentence ending" in issues


def test_chinese_sentence_ending_accepted():
    assert check_text_quality("这是一门关于城市建模的课程。", "Summary") == []


def test_placeholder_needs_word_boundary():
    assert check_text_quality("A guide to mastodon federation models.", "Summary") == []


def test_word_repetition():
    issues = check_text_quality("model model model model everywhere.", "Summary")
    assert any("repetition: model" in i for i in issues)


def test_course_quality_on_good_course():
    data = course_data(summary="A thorough introduction to agent-based modeling with Python and the Mesa library.")
    data["sessions"][0]["objectives"] = ["Build a first simulation model"]
    assert check_course_quality(data, TODAY) == []


def test_course_quality_problems():
    data = course_data(
        year=2015, difficulty="expert", summary="Too short summary.", sessions=[{"title": "", "objectives": []}], tags=[]
    )
    issues = check_course_quality(data, TODAY)
    assert "Year 2015 seems invalid (should be between 2020 and 2026)" in issues
    assert any(i.startswith("Invalid difficulty level: expert") for i in issues)
    assert "Session 1: Missing title" in issues
    assert "Session 1: Missing learning objectives" in issues
    assert "Course should have tags for better discoverability" in issues
    assert any("more descriptive" in i for i in issues)


def test_resource_quality():
    issues = check_resource_quality(resource_data(url="www.example.org", type="video", description=""))
    assert "Missing required field: description" in issues
    assert "URL should start with http:// or https://" in issues
    assert any(i.startswith("Invalid resource type: video") for i in issues)


def test_find_similar_tags():
    pairs = find_similar_tags(["ABM", "abm-modeling", "Mesa", "urban planning", "Urban_Planning"])
    assert ("ABM", "abm-modeling") in pairs
    assert ("Urban_Planning", "urban planning") in pairs
    assert all("Mesa" not in p for p in pairs)


def test_checker_run(content_dir):
    root = content_dir(
        courses=[course_data(id="a", tags=["GIS", "gis-data"]), course_data(id="b", summary="Coming soon.")],
        resources=[resource_data()],
    )
    (root / "courses" / "broken.yaml").write_text("id: [oops", encoding="utf-8")
    report = ContentQualityChecker(root, today=TODAY).run()
    assert len(report.errors) == 1
    assert any("b.yaml" in w and "coming soon" in w for w in report.warnings)
    assert any('"GIS" and "gis-data"' in s for s in report.suggestions)
    assert report.years == [2024]
    assert not report.ok
