"""
SEO metadata, schema.org structured data, sitemap and robots generation.

Metadata is returned as plain dictionaries so it can be embedded in the JSON
API responses and the static export without a rendering layer.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence
from xml.etree import ElementTree as ET

from pydantic import BaseModel, Field

from core.config import get_settings
from schemas.course import Course
from schemas.domain import DomainInfo
from schemas.learning_path import LearningPath
from schemas.resource import Resource
from services.domain_classifier import DOMAIN_IDS
from services.text_utils import extract_chinese_keywords, optimize_text_for_display

DEFAULT_KEYWORDS = (
    "Agent-Based Modeling",
    "ABM",
    "Mesa",
    "Python",
    "多智能体建模",
    "复杂系统",
    "仿真建模",
    "城市建模",
    "环境建模",
    "交通建模",
    "中文社区",
)
DEFAULT_IMAGE = "/og-image.png"
TWITTER_HANDLE = "@ABMindCommunity"
ORGANIZATION_NAME = "ABMind Community"

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

# path, change frequency, priority
STATIC_PAGES = (
    ("", "weekly", 1.0),
    ("/courses", "weekly", 0.9),
    ("/learning-paths", "monthly", 0.8),
    ("/resources", "weekly", 0.8),
    ("/domains", "monthly", 0.7),
    ("/about", "monthly", 0.6),
    ("/search", "weekly", 0.5),
)

BLOCKED_CRAWLERS = ("GPTBot", "ChatGPT-User", "CCBot", "anthropic-ai", "Claude-Web")


class SeoConfig(BaseModel):
    title: str
    description: str
    keywords: List[str] = Field(default_factory=list)
    image: Optional[str] = None
    url: Optional[str] = None
    type: Literal["website", "article", "course"] = "website"
    published_time: Optional[str] = None
    modified_time: Optional[str] = None
    author: Optional[str] = None
    section: Optional[str] = None


class SitemapEntry(BaseModel):
    url: str
    lastmod: str
    changefreq: str
    priority: float


def _site_url(site_url: Optional[str]) -> str:
    return (site_url or get_settings().site_url).rstrip("/")


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = []
    for item in items:
        if item and item not in seen:
            seen.append(item)
    return seen


def generate_metadata(config: SeoConfig, site_url: Optional[str] = None) -> Dict[str, Any]:
    settings = get_settings()
    base = _site_url(site_url)
    site_name = settings.site_name
    full_title = config.title if "ABMind" in config.title else f"{config.title} - {site_name}"
    url = config.url or base
    image = config.image or DEFAULT_IMAGE
    is_article = config.type == "article"

    open_graph: Dict[str, Any] = {
        "title": full_title,
        "description": config.description,
        "url": url,
        "site_name": site_name,
        "images": [{"url": image, "width": 1200, "height": 630, "alt": config.title}],
        "locale": "zh_CN",
        "type": "article" if is_article else "website",
    }
    if config.published_time:
        open_graph["published_time"] = config.published_time
    if config.modified_time:
        open_graph["modified_time"] = config.modified_time
    if is_article and config.author:
        open_graph["authors"] = [config.author]
    if is_article and config.section:
        open_graph["section"] = config.section

    return {
        "title": full_title,
        "description": config.description,
        "keywords": ", ".join(_dedupe([*DEFAULT_KEYWORDS, *config.keywords])),
        "open_graph": open_graph,
        "twitter": {
            "card": "summary_large_image",
            "title": full_title,
            "description": config.description,
            "images": [image],
            "creator": TWITTER_HANDLE,
            "site": TWITTER_HANDLE,
        },
        "robots": {"index": True, "follow": True},
        "alternates": {
            "canonical": url,
            "languages": {"zh-CN": url},
        },
    }


def course_metadata(course: Course, site_url: Optional[str] = None) -> Dict[str, Any]:
    base = _site_url(site_url)
    keywords = [
        *course.tags,
        course.difficulty,
        course.type,
        f"{course.year}年",
        *course.instructors,
        *extract_chinese_keywords(f"{course.title} {course.summary}", 5),
    ]
    return generate_metadata(
        SeoConfig(
            title=course.title,
            description=optimize_text_for_display(course.summary),
            keywords=keywords,
            type="article",
            published_time=course.last_updated,
            modified_time=course.last_updated,
            author=", ".join(course.instructors),
            section="courses",
            url=f"{base}/courses/{course.id}",
        ),
        site_url=base,
    )


def learning_path_metadata(path: LearningPath, site_url: Optional[str] = None) -> Dict[str, Any]:
    base = _site_url(site_url)
    keywords = [
        "learning path",
        "学习路径",
        path.recommended_audience,
        *(step.type for step in path.steps),
        *extract_chinese_keywords(f"{path.title} {path.description}", 3),
    ]
    return generate_metadata(
        SeoConfig(
            title=path.title,
            description=optimize_text_for_display(path.description),
            keywords=keywords,
            type="article",
            section="learning-paths",
            url=f"{base}/learning-paths",
        ),
        site_url=base,
    )


def resource_metadata(resource: Resource, site_url: Optional[str] = None) -> Dict[str, Any]:
    base = _site_url(site_url)
    keywords = [*resource.tags, resource.type, resource.language]
    if resource.difficulty:
        keywords.append(resource.difficulty)
    return generate_metadata(
        SeoConfig(
            title=resource.title,
            description=resource.description,
            keywords=keywords,
            type="article",
            section="resources",
            url=f"{base}/resources",
        ),
        site_url=base,
    )


def domain_metadata(domain: DomainInfo, site_url: Optional[str] = None) -> Dict[str, Any]:
    base = _site_url(site_url)
    return generate_metadata(
        SeoConfig(
            title=f"{domain.label} - 领域专题",
            description=domain.description,
            keywords=list(domain.keywords),
            section="domains",
            url=f"{base}/domains/{domain.id}",
        ),
        site_url=base,
    )


def course_structured_data(course: Course, site_url: Optional[str] = None) -> Dict[str, Any]:
    base = _site_url(site_url)
    return {
        "@context": "https://schema.org",
        "@type": "Course",
        "name": course.title,
        "description": course.summary,
        "provider": {"@type": "Organization", "name": ORGANIZATION_NAME, "url": base},
        "instructor": [{"@type": "Person", "name": name} for name in course.instructors],
        "courseCode": course.id,
        "educationalLevel": course.difficulty,
        "inLanguage": "zh-CN" if course.language == "zh" else "en-US",
        "dateCreated": course.last_updated,
        "dateModified": course.last_updated,
        "keywords": ", ".join(course.tags),
        "hasCourseInstance": {
            "@type": "CourseInstance",
            "courseMode": "online",
            "courseWorkload": f"{len(course.sessions)} sessions",
        },
    }


def organization_structured_data(site_url: Optional[str] = None) -> Dict[str, Any]:
    base = _site_url(site_url)
    return {
        "@context": "https://schema.org",
        "@type": "Organization",
        "name": ORGANIZATION_NAME,
        "alternateName": "ABMind 中文社区",
        "url": base,
        "logo": f"{base}/logo.png",
        "description": "Agent-Based Modeling 中文学习社区",
    }


def website_structured_data(site_url: Optional[str] = None) -> Dict[str, Any]:
    base = _site_url(site_url)
    return {
        "@context": "https://schema.org",
        "@type": "WebSite",
        "name": get_settings().site_name,
        "url": base,
        "inLanguage": "zh-CN",
        "potentialAction": {
            "@type": "SearchAction",
            "target": {"@type": "EntryPoint", "urlTemplate": f"{base}/search?q={{search_term_string}}"},
            "query-input": "required name=search_term_string",
        },
    }


def breadcrumb_structured_data(items: Sequence[Dict[str, str]]) -> Dict[str, Any]:
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": i, "name": item["name"], "item": item["url"]}
            for i, item in enumerate(items, start=1)
        ],
    }


def build_sitemap(
    courses: Sequence[Course],
    site_url: Optional[str] = None,
    today: Optional[date] = None,
    domains: Sequence[str] = DOMAIN_IDS,
) -> List[SitemapEntry]:
    """Static pages, then one entry per course, then one per domain."""
    base = _site_url(site_url)
    stamp = (today or date.today()).isoformat()
    entries = [
        SitemapEntry(url=f"{base}{path}", lastmod=stamp, changefreq=freq, priority=priority)
        for path, freq, priority in STATIC_PAGES
    ]
    entries.extend(
        SitemapEntry(url=f"{base}/courses/{c.id}", lastmod=c.last_updated, changefreq="monthly", priority=0.8)
        for c in courses
    )
    entries.extend(
        SitemapEntry(url=f"{base}/domains/{d}", lastmod=stamp, changefreq="monthly", priority=0.7)
        for d in domains
    )
    return entries


def render_sitemap_xml(entries: Sequence[SitemapEntry]) -> str:
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)
    for entry in entries:
        node = ET.SubElement(urlset, "url")
        ET.SubElement(node, "loc").text = entry.url
        ET.SubElement(node, "lastmod").text = entry.lastmod
        ET.SubElement(node, "changefreq").text = entry.changefreq
        ET.SubElement(node, "priority").text = f"{entry.priority:.1f}"
    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def build_robots(site_url: Optional[str] = None) -> Dict[str, Any]:
    base = _site_url(site_url)
    rules = [{"user_agent": "*", "allow": ["/"], "disallow": ["/api/", "/admin/", "*.json"]}]
    rules.extend({"user_agent": bot, "allow": [], "disallow": ["/"]} for bot in BLOCKED_CRAWLERS)
    return {"rules": rules, "sitemap": f"{base}/sitemap.xml", "host": base}


def render_robots_txt(robots: Dict[str, Any]) -> str:
    lines: List[str] = []
    for rule in robots["rules"]:
        lines.append(f"User-Agent: {rule['user_agent']}")
        lines.extend(f"Allow: {path}" for path in rule["allow"])
        lines.extend(f"Disallow: {path}" for path in rule["disallow"])
        lines.append("")
    lines.append(f"Host: {robots['host']}")
    lines.append(f"Sitemap: {robots['sitemap']}")
    return "\n".join(lines) + "\n"
