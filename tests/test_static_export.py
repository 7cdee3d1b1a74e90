import json
from datetime import date

import pytest

from conftest import course_data, path_data, resource_data
from core.errors import ContentValidationError
from services.content_store import ContentStore
from services.static_export import export_site


def test_export_writes_every_view(content_dir, tmp_path):
    root = content_dir(
        courses=[course_data(id="urban-1", tags=["urban"]), course_data(id="urban-2", tags=["gis"])],
        resources=[resource_data()],
        learning_paths=[path_data(steps=[{"order": 1, "type": "course", "course_id": "ghost", "note": "Missing"}])],
    )
    out = tmp_path / "out"
    report = export_site(ContentStore(root), out, site_url="https://example.org", today=date(2025, 1, 1))

    for name in ("courses.json", "resources.json", "learning-paths.json", "domains.json",
                 "search-index.json", "filters.json", "sitemap.xml", "robots.txt", "courses/urban-1.json",
                 "domains/urban.json"):
        assert (out / name).is_file(), name
    assert out / "courses.json" in report.files

    detail = json.loads((out / "courses" / "urban-1.json").read_text(encoding="utf-8"))
    assert detail["domains"] == ["urban"]
    assert [r["course_id"] for r in detail["related_courses"]] == ["urban-2"]
    assert detail["seo"]["alternates"]["canonical"] == "https://example.org/courses/urban-1"

    paths = json.loads((out / "learning-paths.json").read_text(encoding="utf-8"))
    assert paths[0]["steps"][0]["resolved"] is False
    assert paths[0]["steps"][0]["url"] is None

    domains = {d["domain"]["id"]: d for d in json.loads((out / "domains.json").read_text(encoding="utf-8"))}
    assert domains["urban"]["stats"]["courses"] == 2

    assert "https://example.org/courses/urban-2" in (out / "sitemap.xml").read_text(encoding="utf-8")


def test_export_fails_on_invalid_content(content_dir, tmp_path):
    root = content_dir(courses=[course_data(summary="short")])
    with pytest.raises(ContentValidationError):
        export_site(ContentStore(root), tmp_path / "out")
    assert not (tmp_path / "out" / "courses.json").exists()


def test_export_accepts_snapshot(content_dir, tmp_path):
    snapshot = ContentStore(content_dir()).snapshot()
    report = export_site(snapshot, tmp_path / "out", site_url="https://example.org")
    assert report.file_count > 0


def test_export_rejects_ids_that_leave_output_dir(content_dir, tmp_path):
    root = content_dir(courses=[course_data(id="../../escaped")])
    out = tmp_path / "site" / "out"
    with pytest.raises(ContentValidationError):
        export_site(ContentStore(root), out)
    assert not (tmp_path / "site" / "escaped.json").exists()
    assert not out.exists()
