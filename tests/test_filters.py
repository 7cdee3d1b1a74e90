from services.filters import (
    FilterOptions,
    active_filter_count,
    available_filters,
    filter_courses,
    filter_learning_paths,
    filter_resources,
    filters_from_query_params,
    filters_to_query_params,
    has_active_filters,
)


def test_conjunction_across_facets_disjunction_within(make_course):
    a = make_course(id="a", difficulty="beginner", year=2024)
    b = make_course(id="b", difficulty="advanced", year=2024)
    c = make_course(id="c", difficulty="advanced", year=2023)
    filters = FilterOptions(difficulty=["beginner", "advanced"], year=["2024"])
    assert [x.id for x in filter_courses([a, b, c], filters)] == ["a", "b"]


def test_tag_filter_is_case_insensitive_substring(make_course):
    course = make_course(tags=["Agent-Based Modeling"])
    assert filter_courses([course], FilterOptions(tags=["modeling"])) == [course]
    assert filter_courses([course], FilterOptions(tags=["gis"])) == []


def test_domain_filter(make_course):
    urban = make_course(id="u", tags=["urban"])
    other = make_course(id="o", tags=["misc"])
    assert filter_courses([urban, other], FilterOptions(domains=["urban"])) == [urban]


def test_resource_without_difficulty_passes_difficulty_facet(make_resource):
    plain = make_resource(id="plain")
    hard = make_resource(id="hard", difficulty="advanced")
    assert filter_resources([plain, hard], FilterOptions(difficulty=["beginner"])) == [plain]


def test_learning_paths_filtered_by_text(make_path):
    path = make_path()
    assert filter_learning_paths([path], FilterOptions()) == [path]
    assert filter_learning_paths([path], FilterOptions(tags=["beginners"])) == [path]
    assert filter_learning_paths([path], FilterOptions(tags=["expert"])) == []


def test_available_filters(make_course, make_resource):
    options = available_filters(
        [make_course(id="a", year=2022), make_course(id="b", year=2024, tags=["urban"])],
        [make_resource(difficulty="intermediate")],
    )
    assert options.year == ["2024", "2022"]
    assert options.difficulty == ["beginner", "intermediate"]
    assert "urban" in options.domains
    assert options.type == ["course", "docs"]


def test_query_param_round_trip():
    filters = filters_from_query_params({"difficulty": "beginner,advanced", "tags": "", "year": None})
    assert filters.difficulty == ["beginner", "advanced"]
    assert filters.tags == []
    assert has_active_filters(filters)
    assert active_filter_count(filters) == 2
    assert filters_to_query_params(filters) == {"difficulty": "beginner,advanced"}
    assert not has_active_filters(FilterOptions())
