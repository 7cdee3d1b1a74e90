from services.relationship_finder import (
    find_cross_domain_relationships,
    related_courses_for,
    related_domains,
    relationship_pairs,
)


def _courses(make_course):
    return [
        make_course(id="traffic", title="城市交通", tags=["urban"]),          # urban, transportation
        make_course(id="city", tags=["urban"]),                             # urban
        make_course(id="mobility", tags=["mobility", "gis"]),               # urban, transportation
        make_course(id="market", tags=["market"]),                          # economics
        make_course(id="plain", tags=["misc"]),                             # no domain
    ]


def test_related_ordered_by_shared_count_then_id(make_course):
    rels = {r.course_id: r for r in find_cross_domain_relationships(_courses(make_course))}
    traffic = rels["traffic"]
    assert traffic.domains == ["urban", "transportation"]
    assert [r.course_id for r in traffic.related_courses] == ["mobility", "city"]
    assert traffic.related_courses[0].shared_domains == ["urban", "transportation"]


def test_courses_without_domain_are_skipped(make_course):
    rels = find_cross_domain_relationships(_courses(make_course))
    ids = [r.course_id for r in rels]
    assert "plain" not in ids
    assert ids == sorted(ids)
    market = next(r for r in rels if r.course_id == "market")
    assert market.related_courses == []


def test_limit_truncates_related(make_course):
    rels = find_cross_domain_relationships(_courses(make_course), limit=1)
    assert all(len(r.related_courses) <= 1 for r in rels)


def test_related_courses_for_unknown_id(make_course):
    assert related_courses_for("missing", _courses(make_course)) == []
    assert [r.course_id for r in related_courses_for("city", _courses(make_course))] == ["mobility", "traffic"]


def test_relationship_pairs(make_course):
    pairs = relationship_pairs(_courses(make_course))
    assert (pairs[0].course_a, pairs[0].course_b) == ("mobility", "traffic")
    assert all(p.course_a < p.course_b for p in pairs)
    assert len(pairs) == 3


def test_related_domains(make_course):
    assert related_domains("urban", _courses(make_course)) == ["transportation"]
    assert related_domains("economics", _courses(make_course)) == []
