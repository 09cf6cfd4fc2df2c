"""Sample knowledge-base documents seeded at start-up."""

import logging
from typing import List

from .retriever import Document, Retriever

logger = logging.getLogger(__name__)

SAMPLE_DOCUMENTS: List[Document] = [
    Document(
        id="doc1",
        content="LangChain 是一个用于开发由语言模型驱动的应用程序的框架。它提供了模块化的组件和预构建的链，使开发人员能够快速构建复杂的应用程序。",
        metadata={"source": "langchain_docs", "type": "framework"},
    ),
    Document(
        id="doc2",
        content="RAG (Retrieval-Augmented Generation) 是一种结合了信息检索和文本生成的技术。它首先从知识库中检索相关信息，然后使用这些信息来生成更准确、更相关的回答。",
        metadata={"source": "rag_paper", "type": "technique"},
    ),
    Document(
        id="doc3",
        content="Prompt Engineering 是设计和优化提示词的艺术和科学，目的是从语言模型中获得更好的输出。它包括理解模型的局限性、设计有效的提示词模板等。",
        metadata={"source": "prompt_engineering_guide", "type": "technique"},
    ),
]


async def seed_sample_documents(retriever: Retriever) -> int:
    """Add SAMPLE_DOCUMENTS to retriever. Returns how many were stored."""
    stored = 0
    for document in SAMPLE_DOCUMENTS:
        try:
            await retriever.add_document(document)
            stored += 1
        except Exception as e:
            logger.warning(f"Failed to add document {document.id}: {e}")
    return stored
