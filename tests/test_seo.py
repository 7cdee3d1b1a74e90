from datetime import date
from xml.etree import ElementTree as ET

from services.domain_classifier import DOMAIN_IDS, get_domain
from services.seo import (
    SITEMAP_NS,
    SeoConfig,
    breadcrumb_structured_data,
    build_robots,
    build_sitemap,
    course_metadata,
    course_structured_data,
    domain_metadata,
    generate_metadata,
    render_robots_txt,
    render_sitemap_xml,
    website_structured_data,
)

SITE = "https://example.org"


def test_generate_metadata_title_suffix_and_keywords():
    meta = generate_metadata(SeoConfig(title="Courses", description="All courses", keywords=["ABM", "extra"]), SITE)
    assert meta["title"].startswith("Courses - ")
    assert meta["keywords"].count("ABM") == 1
    assert "extra" in meta["keywords"]
    assert meta["alternates"]["canonical"] == SITE
    assert meta["open_graph"]["type"] == "website"


def test_title_already_branded_is_not_suffixed():
    meta = generate_metadata(SeoConfig(title="ABMind Home", description="Home"), SITE)
    assert meta["title"] == "ABMind Home"


def test_course_metadata_is_an_article(make_course):
    meta = course_metadata(make_course(), SITE)
    assert meta["open_graph"]["type"] == "article"
    assert meta["open_graph"]["authors"] == ["Zhang Ming"]
    assert meta["alternates"]["canonical"] == f"{SITE}/courses/abm-intro"


def test_domain_metadata_url():
    meta = domain_metadata(get_domain("urban"), SITE)
    assert meta["alternates"]["canonical"] == f"{SITE}/domains/urban"


def test_structured_data(make_course):
    data = course_structured_data(make_course(), SITE)
    assert data["@type"] == "Course"
    assert data["inLanguage"] == "en-US"
    assert data["instructor"][0]["name"] == "Zhang Ming"
    assert "{search_term_string}" in website_structured_data(SITE)["potentialAction"]["target"]["urlTemplate"]
    crumbs = breadcrumb_structured_data([{"name": "Home", "url": SITE}, {"name": "Courses", "url": f"{SITE}/courses"}])
    assert [i["position"] for i in crumbs["itemListElement"]] == [1, 2]


def test_sitemap_entries(make_course):
    entries = build_sitemap([make_course()], SITE + "/", today=date(2025, 1, 2))
    urls = [e.url for e in entries]
    assert urls[0] == SITE
    assert f"{SITE}/courses/abm-intro" in urls
    assert all(f"{SITE}/domains/{d}" in urls for d in DOMAIN_IDS)
    course_entry = next(e for e in entries if e.url.endswith("/courses/abm-intro"))
    assert course_entry.lastmod == "2024-09-01"
    assert course_entry.priority == 0.8


def test_sitemap_xml_is_well_formed(make_course):
    xml = render_sitemap_xml(build_sitemap([make_course()], SITE, today=date(2025, 1, 2)))
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    root = ET.fromstring(xml.split("\n", 1)[1])
    locs = [node.text for node in root.iter(f"{{{SITEMAP_NS}}}loc")]
    assert f"{SITE}/courses/abm-intro" in locs


def test_robots():
    text = render_robots_txt(build_robots(SITE))
    assert "User-Agent: *\nAllow: /\nDisallow: /api/" in text
    assert "User-Agent: GPTBot\nDisallow: /" in text
    assert text.strip().endswith(f"Sitemap: {SITE}/sitemap.xml")
