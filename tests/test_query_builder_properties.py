"""
Property-based tests for the posts query builder and pagination.
"""

from datetime import date

import pytest
from hypothesis import given, settings, strategies as st

from bridgeyou.models import EffectiveFilters, PostCategory, PostType, SortMode
from bridgeyou.services.search.query_builder import PostQueryBuilder, escape_like, next_page
from bridgeyou.services.search.vocabulary import GENERIC_FILLER_TERMS, city_slug


page_sizes = st.integers(min_value=1, max_value=50)
pages = st.integers(min_value=0, max_value=20)
counts = st.integers(min_value=0, max_value=1000)
filler_lists = st.lists(st.sampled_from(sorted(GENERIC_FILLER_TERMS)), min_size=1, max_size=4)
keyword_lists = st.lists(
    st.text(alphabet="abcdefghijklmnop", min_size=3, max_size=10),
    min_size=1,
    max_size=4
)


@given(page=pages, count=counts, page_size=page_sizes)
@settings(max_examples=200)
def test_next_page_only_when_rows_remain(page, count, page_size):
    """
    Property: nextPage is page + 1 exactly when rows exist past this page.
    """
    result = next_page(page, count, page_size)

    if (page + 1) * page_size < count:
        assert result == page + 1
    else:
        assert result is None


def test_pagination_25_rows_page_size_10():
    assert next_page(0, 25, 10) == 1
    assert next_page(1, 25, 10) == 2
    assert next_page(2, 25, 10) is None


def test_exact_page_boundary_has_no_next_page():
    assert next_page(1, 20, 10) is None


@given(page=pages, page_size=page_sizes)
@settings(max_examples=100)
def test_limit_and_offset_params(page, page_size):
    """
    Property: the page query ends with LIMIT page_size OFFSET page * page_size.
    """
    query = PostQueryBuilder(page_size=page_size).build(EffectiveFilters(), page=page)

    assert query.params[-2:] == [page_size, page * page_size]
    assert query.count_params == query.params[:-2]
    assert "LIMIT" not in query.count_sql


@given(terms=filler_lists)
@settings(max_examples=100)
def test_filler_terms_with_bank_skip_keyword_filter(terms):
    """
    Property: with a bank filter, filler-only terms add no keyword condition.
    """
    filters = EffectiveFilters(banks=["gs-id"])

    query = PostQueryBuilder().build(filters, search_terms=terms)

    assert query.keyword_filter_applied is False
    assert "ILIKE" not in query.sql


@given(terms=filler_lists)
@settings(max_examples=50)
def test_filler_terms_without_bank_still_filter(terms):
    query = PostQueryBuilder().build(EffectiveFilters(), search_terms=terms)

    assert query.keyword_filter_applied is True
    assert "ILIKE" in query.sql


@given(terms=keyword_lists)
@settings(max_examples=100)
def test_keywords_are_or_matched_on_title_and_content(terms):
    """
    Property: each keyword gets one parameter used for title and content.
    """
    query = PostQueryBuilder().build(EffectiveFilters(), search_terms=terms)

    keyword_condition = next(c for c in query.conditions if "ILIKE" in c)
    assert keyword_condition.count("p.title ILIKE") == len(terms)
    assert keyword_condition.count("p.content ILIKE") == len(terms)
    assert " OR " in keyword_condition or len(terms) == 1
    for term in terms:
        assert f"%{term}%" in query.params


def test_approved_only_and_public_for_anonymous():
    query = PostQueryBuilder().build(EffectiveFilters(), is_authenticated=False)

    assert query.params[0] == "approved"
    assert "p.status = $1" in query.conditions
    assert "p.is_public = TRUE" in query.conditions


def test_authenticated_callers_see_private_posts():
    query = PostQueryBuilder().build(EffectiveFilters(), is_authenticated=True)

    assert "p.is_public = TRUE" not in query.conditions
    assert "p.status = $1" in query.conditions


def test_all_filters_are_conjunctive():
    filters = EffectiveFilters(
        category=PostCategory.ENTRETIEN_SALES_TRADING,
        type=PostType.TRANSCRIPT_ENTRETIEN,
        banks=["gs-id", "ms-id"],
        tags=["technique"],
        cities=[" Paris ", "Londres"],
        date_from="2024-01-01",
        date_to="2024-06-30",
    )

    query = PostQueryBuilder().build(filters, is_authenticated=True)

    assert "entretien_sales_trading" in query.params
    assert "transcript_entretien" in query.params
    assert ["gs-id", "ms-id"] in query.params
    assert ["technique"] in query.params
    assert ["paris", "london"] in query.params
    assert date(2024, 1, 1) in query.params
    # date_to covers the whole day
    assert date(2024, 7, 1) in query.params
    assert len(query.conditions) == 8
    assert " AND " in query.sql


@pytest.mark.parametrize("sort_by, expected", [
    (SortMode.RECENT, "ORDER BY p.created_at DESC"),
    (SortMode.POPULAR, "ORDER BY p.upvotes DESC"),
    (SortMode.COMMENTS, "ORDER BY p.comments_count DESC"),
])
def test_sort_modes(sort_by, expected):
    query = PostQueryBuilder().build(EffectiveFilters(sort_by=sort_by))
    assert expected in query.sql


def test_blank_terms_are_ignored():
    query = PostQueryBuilder().build(EffectiveFilters(), search_terms=["", "   "])
    assert query.keyword_filter_applied is False


def test_like_wildcards_are_escaped():
    assert escape_like("100%_sure\\") == "100\\%\\_sure\\\\"
    query = PostQueryBuilder().build(EffectiveFilters(), search_terms=["50%"])
    assert "%50\\%%" in query.params


def test_build_single_post():
    query = PostQueryBuilder().build_single("post-1", is_authenticated=False)

    assert query.params == ["approved", "post-1"]
    assert "p.is_public = TRUE" in query.conditions
    assert "LIMIT" not in query.sql


@pytest.mark.parametrize("name, slug", [
    ("Paris", "paris"),
    ("Londres", "london"),
    ("London", "london"),
    ("New York", "new_york"),
    ("Genève", "geneva"),
    ("Dubaï", "dubai"),
])
def test_city_names_map_to_stored_slugs(name, slug):
    assert city_slug(name) == slug
