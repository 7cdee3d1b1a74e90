import pytest

from conftest import course_data, path_data, resource_data, write_yaml
from services.content_validator import ContentValidator
from services.link_checker import LinkChecker


class FakeFetcher:
    def __init__(self, broken=()):
        self.broken = set(broken)
        self.calls = []

    async def __call__(self, url):
        self.calls.append(url)
        return 404 if url in self.broken else 200


def _site_config(featured):
    return {
        "site_info": {"title": "Portal", "description": "A portal for courses.", "url": "https://abmind.org"},
        "navigation": [{"label": "Courses", "href": "/courses"}],
        "featured_courses": featured,
    }


@pytest.mark.asyncio
async def test_valid_content_passes(content_dir):
    root = content_dir(resources=[resource_data()], learning_paths=[path_data()], site_config=_site_config(["abm-intro"]))
    fetch = FakeFetcher()
    report = await ContentValidator(root, link_checker=LinkChecker(fetch=fetch)).run()
    assert report.ok
    assert report.warnings == []
    assert report.files_checked == 4
    assert "https://mesa.readthedocs.io/" in fetch.calls


@pytest.mark.asyncio
async def test_collects_errors_from_every_file(content_dir):
    root = content_dir(courses=[course_data(id="good"), course_data(id="bad", summary="short")])
    (root / "courses" / "broken.yaml").write_text("id: [oops", encoding="utf-8")
    report = await ContentValidator(root, check_links=False).run()
    assert not report.ok
    assert len(report.errors) == 2
    assert any("summary" in e for e in report.errors)
    assert any("broken.yaml" in e for e in report.errors)


@pytest.mark.asyncio
async def test_duplicate_ids_are_errors(content_dir):
    root = content_dir(courses=[course_data(id="dup")])
    write_yaml(root / "courses" / "other.yaml", course_data(id="dup"))
    report = await ContentValidator(root, check_links=False).run()
    assert any("Duplicate course ids: dup" in e for e in report.errors)


@pytest.mark.asyncio
async def test_unknown_references_are_warnings(content_dir):
    steps = [
        {"order": 1, "type": "course", "course_id": "ghost", "note": "Missing"},
        {"order": 2, "type": "resource", "resource_id": "nowhere", "note": "Missing"},
    ]
    root = content_dir(learning_paths=[path_data(steps=steps)], site_config=_site_config(["ghost"]))
    report = await ContentValidator(root, check_links=False).run()
    assert report.ok
    assert len(report.warnings) == 3


@pytest.mark.asyncio
async def test_broken_links_are_warnings(content_dir):
    root = content_dir(resources=[resource_data(url="https://dead.example.org/")])
    fetch = FakeFetcher(broken={"https://dead.example.org/"})
    report = await ContentValidator(root, link_checker=LinkChecker(fetch=fetch)).run()
    assert report.ok
    assert any("https://dead.example.org/" in w for w in report.warnings)
    assert report.links_checked == 1


@pytest.mark.asyncio
async def test_missing_directory(tmp_path):
    report = await ContentValidator(tmp_path / "missing", check_links=False).run()
    assert not report.ok


@pytest.mark.asyncio
async def test_undecodable_file_is_reported(content_dir):
    root = content_dir(courses=[course_data(id="good")])
    (root / "courses" / "latin1.yaml").write_bytes(b"id: caf\xe9\n")
    report = await ContentValidator(root, check_links=False).run()
    assert report.files_checked == 2
    assert len(report.errors) == 1
    assert "latin1.yaml" in report.errors[0]
    assert "UTF-8" in report.errors[0]
