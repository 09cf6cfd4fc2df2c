"""Unit tests for SimpleRetriever (llm_tools/rag/retriever.py)."""

import pytest

from llm_tools.errors import InvalidArgumentError, NotFoundError
from llm_tools.rag import Document, SimpleRetriever
from llm_tools.rag.retriever import score_content, tokenize


class TestTokenize:
    def test_lowercases_and_deduplicates(self):
        assert tokenize("Go go GO concurrency") == ["go", "concurrency"]

    def test_blank_query(self):
        assert tokenize("   \t\n") == []

    def test_score_counts_substring_hits(self):
        assert score_content(["go", "chan"], "Goroutines and channels") == 2.0
        assert score_content(["rust"], "Goroutines and channels") == 0.0


class TestAddAndRemove:
    @pytest.mark.asyncio
    async def test_last_write_wins(self, retriever):
        await retriever.add_document(Document(id="a", content="first"))
        await retriever.add_document(Document(id="a", content="second"))

        assert len(retriever) == 1
        assert retriever.get_document("a").content == "second"

    @pytest.mark.asyncio
    async def test_none_document_rejected(self, retriever):
        with pytest.raises(InvalidArgumentError):
            await retriever.add_document(None)

    @pytest.mark.asyncio
    async def test_empty_id_rejected(self, retriever):
        with pytest.raises(InvalidArgumentError):
            await retriever.add_document(Document(id="", content="x"))

        assert len(retriever) == 0

    @pytest.mark.asyncio
    async def test_remove_then_gone(self, retriever):
        await retriever.add_document(Document(id="a", content="alpha beta"))
        await retriever.remove_document("a")

        assert await retriever.retrieve("alpha") == []
        with pytest.raises(NotFoundError):
            retriever.get_document("a")

    @pytest.mark.asyncio
    async def test_remove_unknown_does_not_mutate(self, retriever):
        await retriever.add_document(Document(id="a", content="alpha"))

        with pytest.raises(NotFoundError):
            await retriever.remove_document("missing")

        assert [doc.id for doc in retriever.list_documents()] == ["a"]

    @pytest.mark.asyncio
    async def test_stored_score_reset(self, retriever):
        await retriever.add_document(Document(id="a", content="alpha", score=9.0))

        assert retriever.get_document("a").score == 0.0


class TestRetrieve:
    @pytest.mark.asyncio
    async def test_matches_only_overlapping_documents(self, retriever):
        await retriever.add_document(
            Document(id="go2", content="Goroutines give Go cheap concurrency.")
        )
        await retriever.add_document(Document(id="py1", content="Python reads like prose."))

        results = await retriever.retrieve("go concurrency")

        assert [doc.id for doc in results] == ["go2"]
        assert results[0].score >= 1

    @pytest.mark.asyncio
    async def test_no_overlap_returns_empty_list(self, retriever):
        await retriever.add_document(Document(id="a", content="alpha"))

        assert await retriever.retrieve("zzz") == []

    @pytest.mark.asyncio
    async def test_empty_store(self, retriever):
        assert await retriever.retrieve("anything") == []

    @pytest.mark.asyncio
    async def test_blank_query_matches_nothing(self, retriever):
        await retriever.add_document(Document(id="a", content="alpha"))

        assert await retriever.retrieve("   ") == []

    @pytest.mark.asyncio
    async def test_case_insensitive(self, retriever):
        await retriever.add_document(Document(id="a", content="LangChain Framework"))

        results = await retriever.retrieve("langchain")

        assert len(results) == 1
        assert results[0].score == 1.0

    @pytest.mark.asyncio
    async def test_repeated_tokens_count_once(self, retriever):
        await retriever.add_document(Document(id="a", content="go"))

        results = await retriever.retrieve("go go go")

        assert results[0].score == 1.0

    @pytest.mark.asyncio
    async def test_substring_match(self, retriever):
        await retriever.add_document(Document(id="a", content="category"))

        results = await retriever.retrieve("go")

        assert [doc.id for doc in results] == ["a"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -3])
    async def test_non_positive_limit_means_five(self, retriever, limit):
        for i in range(8):
            await retriever.add_document(Document(id=f"d{i}", content="shared token"))

        results = await retriever.retrieve("shared", limit)

        assert len(results) == 5

    @pytest.mark.asyncio
    async def test_limit_caps_results(self, retriever):
        for i in range(4):
            await retriever.add_document(Document(id=f"d{i}", content="shared token"))

        assert len(await retriever.retrieve("shared", 2)) == 2

    @pytest.mark.asyncio
    async def test_result_does_not_alter_stored_document(self, retriever):
        await retriever.add_document(Document(id="a", content="alpha beta"))

        results = await retriever.retrieve("alpha beta")

        assert results[0].score == 2.0
        assert retriever.get_document("a").score == 0.0

    @pytest.mark.asyncio
    async def test_default_order_is_store_order(self, retriever):
        await retriever.add_document(Document(id="low", content="alpha"))
        await retriever.add_document(Document(id="high", content="alpha beta gamma"))

        results = await retriever.retrieve("alpha beta gamma")

        assert [doc.id for doc in results] == ["low", "high"]


class TestRankedRetrieve:
    @pytest.mark.asyncio
    async def test_sorted_by_score_then_id(self):
        retriever = SimpleRetriever(rank_by_score=True)
        await retriever.add_document(Document(id="b", content="alpha"))
        await retriever.add_document(Document(id="c", content="alpha beta gamma"))
        await retriever.add_document(Document(id="a", content="alpha"))

        results = await retriever.retrieve("alpha beta gamma")

        assert [doc.id for doc in results] == ["c", "a", "b"]
        assert [doc.score for doc in results] == [3.0, 1.0, 1.0]

    @pytest.mark.asyncio
    async def test_cap_applies_after_sorting(self):
        retriever = SimpleRetriever(rank_by_score=True)
        await retriever.add_document(Document(id="low", content="alpha"))
        await retriever.add_document(Document(id="high", content="alpha beta"))

        results = await retriever.retrieve("alpha beta", 1)

        assert [doc.id for doc in results] == ["high"]
