"""Unit tests for RAGEngine (llm_tools/rag/engine.py)."""

from unittest.mock import AsyncMock

import pytest

from llm_tools.errors import RetrievalError
from llm_tools.rag import NO_DOCUMENTS_MESSAGE, Document, RAGEngine, SimpleRetriever
from llm_tools.rag.engine import build_context
from llm_tools.rag.samples import SAMPLE_DOCUMENTS, seed_sample_documents


class TestBuildContext:
    def test_numbered_blocks_with_two_decimal_scores(self):
        documents = [
            Document(id="a", content="alpha", score=2.0),
            Document(id="b", content="beta", score=1.0),
        ]

        assert build_context(documents) == (
            "文档 1 (相关度: 2.00):\nalpha\n\n"
            "文档 2 (相关度: 1.00):\nbeta\n\n"
        )


class TestQuery:
    @pytest.mark.asyncio
    async def test_empty_store_returns_fixed_message(self, rag_engine):
        assert await rag_engine.query("anything") == NO_DOCUMENTS_MESSAGE

    @pytest.mark.asyncio
    async def test_miss_returns_fixed_message(self, rag_engine, retriever):
        await retriever.add_document(Document(id="a", content="alpha"))

        assert await rag_engine.query("zzz") == NO_DOCUMENTS_MESSAGE

    @pytest.mark.asyncio
    async def test_augmented_query_layout(self, rag_engine, retriever):
        await retriever.add_document(Document(id="a", content="Go has goroutines"))

        result = await rag_engine.query("goroutines")

        assert result == (
            "基于以下上下文信息回答问题：\n\n上下文：\n"
            "文档 1 (相关度: 1.00):\nGo has goroutines\n\n"
            "\n\n问题：goroutines"
        )

    @pytest.mark.asyncio
    async def test_contains_content_and_query(self, rag_engine, retriever):
        for document in SAMPLE_DOCUMENTS:
            await retriever.add_document(document)

        result = await rag_engine.query("RAG 技术")

        assert SAMPLE_DOCUMENTS[1].content in result
        assert result.endswith("问题：RAG 技术")

    @pytest.mark.asyncio
    async def test_limit_respected(self, rag_engine, retriever):
        for i in range(3):
            await retriever.add_document(Document(id=f"d{i}", content="shared"))

        result = await rag_engine.query("shared", 2)

        assert "文档 2 " in result
        assert "文档 3 " not in result

    @pytest.mark.asyncio
    async def test_retriever_failure_is_wrapped(self):
        retriever = SimpleRetriever()
        retriever.retrieve = AsyncMock(side_effect=RuntimeError("index offline"))
        engine = RAGEngine(retriever)

        with pytest.raises(RetrievalError, match="index offline") as exc_info:
            await engine.query("anything")

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_engines_share_a_retriever(self, retriever):
        first = RAGEngine(retriever)
        second = RAGEngine(retriever)

        await retriever.add_document(Document(id="a", content="shared knowledge"))

        assert "shared knowledge" in await first.query("knowledge")
        assert "shared knowledge" in await second.query("knowledge")


class TestAugment:
    @pytest.mark.asyncio
    async def test_miss_returns_none(self, rag_engine):
        assert await rag_engine.augment("anything") is None

    @pytest.mark.asyncio
    async def test_hit_matches_query(self, rag_engine, retriever):
        await retriever.add_document(Document(id="a", content="alpha"))

        assert await rag_engine.augment("alpha") == await rag_engine.query("alpha")


class TestSampleDocuments:
    @pytest.mark.asyncio
    async def test_seed(self, retriever):
        stored = await seed_sample_documents(retriever)

        assert stored == 3
        assert [doc.id for doc in retriever.list_documents()] == ["doc1", "doc2", "doc3"]

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, retriever):
        await seed_sample_documents(retriever)
        await seed_sample_documents(retriever)

        assert len(retriever) == 3
