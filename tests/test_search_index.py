import asyncio

import pytest

from services.search_index import SearchDebouncer, SearchIndex, highlight_matches, tokenize


def test_exact_title_ranks_above_description_match(make_course, make_resource):
    course = make_course(id="netlogo", title="NetLogo Basics", tags=["ABM"])
    resource = make_resource(
        id="guide",
        title="Modeling guide",
        description="A collection of notes that mentions NetLogo Basics in passing.",
        tags=["guide"],
    )
    results = SearchIndex([course], [resource]).search("netlogo basics")
    assert [h.id for h in results.hits] == ["netlogo", "guide"]
    assert results.hits[0].match == "title"
    assert results.hits[1].match == "text"


def test_tag_tier_between_title_and_text(make_course, make_resource):
    by_tag = make_course(id="by-tag", title="Something else", tags=["mesa"])
    by_text = make_resource(id="by-text", title="Other", description="Covers mesa internals in depth.", tags=["x"])
    by_title = make_resource(id="by-title", title="Mesa", tags=["y"])
    hits = SearchIndex([by_tag], [by_text, by_title]).search("Mesa").hits
    assert [(h.id, h.tier) for h in hits] == [("by-title", 0), ("by-tag", 1), ("by-text", 2)]


def test_empty_query_returns_nothing(make_course):
    index = SearchIndex([make_course()])
    assert index.search("   ").total_count == 0
    assert index.search("").hits == []


def test_no_match_is_excluded(make_course):
    assert SearchIndex([make_course()]).search("quantum").total_count == 0


def test_results_grouped_by_collection(make_course, make_resource, make_path):
    results = SearchIndex([make_course()], [make_resource()], [make_path()]).search("mesa")
    assert results.total_count == len(results.courses) + len(results.resources) + len(results.learning_paths)
    assert results.courses and results.resources


def test_duplicate_entities_collapse(make_course):
    course = make_course()
    assert SearchIndex([course, course]).search("mesa").total_count == 1


def test_search_is_idempotent(make_course, make_resource):
    index = SearchIndex([make_course(), make_course(id="two", tags=["Mesa", "GIS"])], [make_resource()])
    first = index.search("mesa")
    assert index.search("mesa") == first


def test_tokenize_splits_cjk_characters():
    assert tokenize("Mesa 城市") == ["mesa", "城", "市"]


def test_highlight_matches_escapes_html():
    assert highlight_matches("<b>Mesa</b> and mesa", "mesa") == "&lt;b&gt;<mark>Mesa</mark>&lt;/b&gt; and <mark>mesa</mark>"
    assert highlight_matches("plain", "") == "plain"


@pytest.mark.asyncio
async def test_debouncer_delivers_only_latest_query(make_course):
    debouncer = SearchDebouncer(SearchIndex([make_course()]), delay_ms=50)
    first = asyncio.ensure_future(debouncer.submit("zzz"))
    await asyncio.sleep(0)
    second = await debouncer.submit("mesa")
    assert await first is None
    assert second.query == "mesa" and second.total_count == 1
    assert debouncer.latest is second


@pytest.mark.asyncio
async def test_debouncer_single_query(make_course):
    debouncer = SearchDebouncer(SearchIndex([make_course()]), delay_ms=1)
    result = await debouncer.submit("mesa")
    assert result.total_count == 1
