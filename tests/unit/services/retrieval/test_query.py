"""
Tests for question rewriting, keyword expansion and the combined search query.
"""

import asyncio

import pytest

from src.services.errors import PipelineError
from src.services.retrieval.query import QueryExpander, QueryRewriter, combine_search_query
from tests.helpers import FakeGenerator


def test_rewrite_without_history_skips_llm():
    gen = FakeGenerator()
    result = asyncio.run(QueryRewriter(gen).rewrite("Can my employer fire me?", []))
    assert result == "Can my employer fire me?"
    assert gen.calls == []


def test_rewrite_resolves_against_history():
    gen = FakeGenerator(texts={"rewrite": "  Can Acme dismiss me without a hearing?\n"})
    history = [
        {"role": "user", "content": "I work at Acme."},
        {"role": "assistant", "content": "Thanks. What happened?"},
    ]
    result = asyncio.run(QueryRewriter(gen).rewrite("Can they fire me without a hearing?", history))

    assert result == "Can Acme dismiss me without a hearing?"
    prompt = gen.prompt_for("rewrite")
    assert "User: I work at Acme." in prompt
    assert "Can they fire me without a hearing?" in prompt


def test_expand_returns_stripped_keywords():
    gen = FakeGenerator(texts={"expand": " Labour Relations Act section 188, procedural fairness \n"})
    keywords = asyncio.run(QueryExpander(gen).expand("Can Acme dismiss me?"))
    assert keywords == "Labour Relations Act section 188, procedural fairness"
    assert gen.stages_called() == ["expand"]


def test_expand_failure_is_tagged():
    gen = FakeGenerator(texts={"expand": RuntimeError("rate limited")})
    with pytest.raises(PipelineError) as exc_info:
        asyncio.run(QueryExpander(gen).expand("q"))
    assert exc_info.value.stage == "expand"


def test_combined_query_is_question_space_keywords():
    assert combine_search_query("Can Acme dismiss me?", "LRA s188") == "Can Acme dismiss me? LRA s188"


def test_blank_rewrite_keeps_original_question():
    gen = FakeGenerator(texts={"rewrite": "   \n"})
    history = [{"role": "user", "content": "I work at Acme."}]
    result = asyncio.run(QueryRewriter(gen).rewrite("Can they fire me?", history))
    assert result == "Can they fire me?"


def test_blank_expansion_fails_the_stage():
    gen = FakeGenerator(texts={"expand": "  "})
    with pytest.raises(PipelineError) as exc_info:
        asyncio.run(QueryExpander(gen).expand("Can Acme dismiss me?"))
    assert exc_info.value.stage == "expand"
