"""
Domain taxonomy and keyword-based domain classification.

A course or resource belongs to every domain whose keyword list matches it:
either a keyword equals one of its tags, or a keyword occurs as a substring of
its title, summary/description and tags. Matching is case-insensitive and the
result always follows the DOMAIN_CONFIG order, so classification is
deterministic.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar, Union

from schemas.course import Course
from schemas.domain import DomainCount, DomainInfo, DomainToolkit
from schemas.resource import Resource

logger = logging.getLogger(__name__)

DOMAIN_CONFIG: Dict[str, DomainInfo] = {
    "urban": DomainInfo(
        id="urban",
        label="城市建模",
        description="城市规划、交通流、人口动态等城市系统建模",
        tools=("SUMO", "GTFS", "OpenStreetMap", "PostGIS", "QGIS"),
        methodologies=("空间分析", "网络分析", "人口流动建模", "土地利用建模"),
        keywords=("urban", "city", "planning", "transportation", "spatial", "gis", "城市", "规划", "交通", "空间"),
    ),
    "environmental": DomainInfo(
        id="environmental",
        label="环境建模",
        description="生态系统、气候变化、环境保护等环境科学建模",
        tools=("NetLogo", "R", "GDAL", "Climate Data", "Satellite Imagery"),
        methodologies=("生态系统建模", "气候模拟", "环境影响评估", "生物多样性分析"),
        keywords=("environment", "ecology", "climate", "ecosystem", "biodiversity", "环境", "生态", "气候", "生物"),
    ),
    "transportation": DomainInfo(
        id="transportation",
        label="交通建模",
        description="交通流量、物流网络、出行行为等交通系统建模",
        tools=("SUMO", "GTFS", "OpenStreetMap", "Traffic Simulators", "GPS Data"),
        methodologies=("交通流建模", "路径规划", "出行需求分析", "物流优化"),
        keywords=("transport", "traffic", "mobility", "logistics", "routing", "交通", "出行", "物流", "路径"),
    ),
    "social": DomainInfo(
        id="social",
        label="社会建模",
        description="社会网络、群体行为、文化传播等社会科学建模",
        tools=("NetworkX", "Gephi", "Social Media APIs", "Survey Data", "Census Data"),
        methodologies=("社会网络分析", "群体动力学", "信息传播", "行为建模"),
        keywords=("social", "network", "behavior", "culture", "community", "社会", "网络", "行为", "文化", "群体"),
    ),
    "economics": DomainInfo(
        id="economics",
        label="经济建模",
        description="市场动态、经济政策、金融系统等经济学建模",
        tools=("Financial APIs", "Economic Databases", "Statistical Software", "Market Data"),
        methodologies=("市场建模", "政策分析", "金融风险评估", "经济预测"),
        keywords=("economics", "market", "finance", "policy", "trade", "经济", "市场", "金融", "政策", "贸易"),
    ),
    "computational": DomainInfo(
        id="computational",
        label="计算建模",
        description="算法优化、并行计算、模型验证等计算科学方法",
        tools=("HPC Clusters", "GPU Computing", "Profiling Tools", "Version Control"),
        methodologies=("并行计算", "算法优化", "模型验证", "性能分析"),
        keywords=(
            "computation", "algorithm", "optimization", "parallel", "performance",
            "计算", "算法", "优化", "并行", "性能",
        ),
    ),
}

DOMAIN_IDS: tuple = tuple(DOMAIN_CONFIG.keys())

Entity = Union[Course, Resource]
E = TypeVar("E", Course, Resource)


def list_domains() -> List[DomainInfo]:
    return list(DOMAIN_CONFIG.values())


def get_domain(domain_id: str) -> Optional[DomainInfo]:
    return DOMAIN_CONFIG.get(domain_id)


def _match_text(title: str, body: str, tags: Sequence[str]) -> str:
    return f"{title} {body} {' '.join(tags)}".lower()


def _classify_text(text: str, tags: Sequence[str]) -> List[str]:
    tag_set = {t.lower() for t in tags}
    matched = []
    for domain_id, info in DOMAIN_CONFIG.items():
        for keyword in info.keywords:
            kw = keyword.lower()
            if kw in tag_set or kw in text:
                matched.append(domain_id)
                break
    return matched


def classify_course(course: Course) -> List[str]:
    return _classify_text(_match_text(course.title, course.summary, course.tags), course.tags)


def classify_resource(resource: Resource) -> List[str]:
    return _classify_text(_match_text(resource.title, resource.description, resource.tags), resource.tags)


def classify(entity: Entity) -> List[str]:
    if isinstance(entity, Course):
        return classify_course(entity)
    return classify_resource(entity)


def domain_statistics(courses: Iterable[Course], resources: Iterable[Resource]) -> Dict[str, DomainCount]:
    """Courses, resources and total per domain. Every configured domain is present."""
    stats = {domain_id: DomainCount() for domain_id in DOMAIN_IDS}
    for course in courses:
        for domain_id in classify_course(course):
            stats[domain_id].courses += 1
            stats[domain_id].total += 1
    for resource in resources:
        for domain_id in classify_resource(resource):
            stats[domain_id].resources += 1
            stats[domain_id].total += 1
    return stats


def filter_by_domains(items: Sequence[E], selected: Sequence[str]) -> List[E]:
    if not selected:
        return list(items)
    wanted = set(selected)
    return [item for item in items if wanted.intersection(classify(item))]


def domain_specific_info(domains: Iterable[str]) -> DomainToolkit:
    """Union of tools and methodologies of the given domains, first-seen order."""
    tools: List[str] = []
    methodologies: List[str] = []
    for domain_id in domains:
        info = DOMAIN_CONFIG.get(domain_id)
        if info is None:
            logger.debug("unknown domain skipped", extra={"query": domain_id})
            continue
        tools.extend(t for t in info.tools if t not in tools)
        methodologies.extend(m for m in info.methodologies if m not in methodologies)
    return DomainToolkit(tools=tools, methodologies=methodologies)
