"""Tests for the catalog query engine: filters, ordering, and pagination."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from promptmarket.schemas import PromptFilters, PromptRecord
from promptmarket.services.catalog_query import (
    matches_search,
    newest_first,
    paginate,
    query_prompts,
    select_prompts,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _prompt(prompt_id: int, created_at: datetime, **overrides) -> PromptRecord:
    fields = {
        "id": prompt_id,
        "title": f"Prompt {prompt_id}",
        "description": "A prompt",
        "content": "Do the thing",
        "price": Decimal("9.99"),
        "category_id": 1,
        "author_id": 1,
        "created_at": created_at,
    }
    fields.update(overrides)
    return PromptRecord(**fields)


def _ids(prompts) -> list[int]:
    return [p.id for p in prompts]


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


class TestMatchesSearch:
    def test_title_is_case_insensitive(self):
        prompt = _prompt(1, datetime(2024, 1, 1), title="Full-Stack Developer Assistant")
        assert matches_search(prompt, "stack")
        assert matches_search(prompt, "FULL-STACK")

    def test_matches_description(self):
        prompt = _prompt(1, datetime(2024, 1, 1), description="Viral social media content")
        assert matches_search(prompt, "viral")

    def test_matches_tag_element(self):
        prompt = _prompt(1, datetime(2024, 1, 1), tags=["Midjourney", "Portraits"])
        assert matches_search(prompt, "portrait")

    def test_no_match(self):
        prompt = _prompt(1, datetime(2024, 1, 1), tags=["SEO"])
        assert not matches_search(prompt, "xyz123")


class TestOrdering:
    def test_newest_first(self):
        prompts = [
            _prompt(1, datetime(2024, 1, 1, tzinfo=timezone.utc)),
            _prompt(2, datetime(2024, 1, 3, tzinfo=timezone.utc)),
            _prompt(3, datetime(2024, 1, 2, tzinfo=timezone.utc)),
        ]
        assert _ids(newest_first(prompts)) == [2, 3, 1]

    def test_ties_broken_by_id_descending(self):
        same = datetime(2024, 1, 1, tzinfo=timezone.utc)
        prompts = [_prompt(1, same), _prompt(3, same), _prompt(2, same)]
        assert _ids(newest_first(prompts)) == [3, 2, 1]


class TestPaginate:
    def test_offset_then_limit(self):
        assert paginate(list(range(10)), offset=2, limit=3) == [2, 3, 4]

    def test_no_limit_returns_remainder(self):
        assert paginate([1, 2, 3], offset=1, limit=None) == [2, 3]

    def test_limit_zero_is_empty(self):
        assert paginate([1, 2, 3], offset=None, limit=0) == []

    def test_offset_past_end(self):
        assert paginate([1, 2, 3], offset=10, limit=5) == []


def test_select_prompts_composes_filters_with_and():
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    prompts = [
        _prompt(1, base, featured=True, category_id=1),
        _prompt(2, base, featured=True, category_id=2),
        _prompt(3, base, featured=False, category_id=1),
    ]
    result = select_prompts(prompts, PromptFilters(featured=True, category_id=1))
    assert _ids(result) == [1]


# ---------------------------------------------------------------------------
# query_prompts against the seeded store
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_query_all_newest_first(seeded_store):
    result = await query_prompts(seeded_store)
    assert _ids(result) == [6, 5, 4, 3, 2, 1]


@pytest.mark.asyncio
async def test_query_without_filters_object(seeded_store):
    result = await query_prompts(seeded_store, None)
    assert len(result) == 6


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "filters,expected",
    [
        (PromptFilters(featured=True), [3, 2, 1]),
        (PromptFilters(trending=True), [6, 4, 2]),
        (PromptFilters(is_new=True), [6, 5, 3]),
        (PromptFilters(featured=True, is_new=True), [3]),
        (PromptFilters(category_id=3), [3]),
        (PromptFilters(author_id=1), [4, 1]),
        (PromptFilters(search="stack"), [3]),
        (PromptFilters(search="Full-Stack"), [3]),
        (PromptFilters(search="xyz123"), []),
        (PromptFilters(offset=2, limit=3), [4, 3, 2]),
        (PromptFilters(limit=0), []),
    ],
)
async def test_query_filters(seeded_store, filters, expected):
    result = await query_prompts(seeded_store, filters)
    assert _ids(result) == expected


@pytest.mark.asyncio
async def test_query_results_are_enriched(seeded_store):
    [prompt] = await query_prompts(seeded_store, PromptFilters(category_id=3))
    assert prompt.category.slug == "coding"
    assert prompt.author.username == "mike_johnson"
    assert prompt.review_count == 0
