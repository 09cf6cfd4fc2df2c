"""RAG engine: folds retrieved documents into an augmented query string."""

import logging
from typing import List, Optional

from ..errors import RetrievalError
from .retriever import DEFAULT_LIMIT, Document, Retriever

logger = logging.getLogger(__name__)

NO_DOCUMENTS_MESSAGE = "抱歉，没有找到相关的文档信息。"

AUGMENTED_QUERY_FORMAT = "基于以下上下文信息回答问题：\n\n上下文：\n{context}\n\n问题：{query}"
DOCUMENT_HEADER_FORMAT = "文档 {index} (相关度: {score:.2f}):\n"


def build_context(documents: List[Document]) -> str:
    """Numbered context block: header line, content, blank line per document."""
    parts = []
    for index, document in enumerate(documents, start=1):
        parts.append(DOCUMENT_HEADER_FORMAT.format(index=index, score=document.score))
        parts.append(document.content)
        parts.append("\n\n")
    return "".join(parts)


class RAGEngine:
    """Wraps a retriever it does not own; several engines may share one retriever."""

    def __init__(self, retriever: Retriever):
        self.retriever = retriever

    async def augment(self, query: str, limit: int = DEFAULT_LIMIT) -> Optional[str]:
        """
        Build the augmented query, or return None when no document matched.

        Raises:
            RetrievalError: If the retriever fails
        """
        try:
            documents = await self.retriever.retrieve(query, limit)
        except Exception as e:
            logger.warning(f"Retrieval failed for query {query!r}: {e}")
            raise RetrievalError(f"retrieval failed: {e}") from e

        if not documents:
            return None

        logger.debug(f"Augmenting query with {len(documents)} document(s)")
        return AUGMENTED_QUERY_FORMAT.format(context=build_context(documents), query=query)

    async def query(self, query: str, limit: int = DEFAULT_LIMIT) -> str:
        """
        Build an augmented query from the documents matching query.

        A retrieval miss is not an error: the fixed NO_DOCUMENTS_MESSAGE is
        returned instead.

        Args:
            query: User query
            limit: Maximum documents to include

        Returns:
            Prompt-ready string

        Raises:
            RetrievalError: If the retriever fails
        """
        augmented = await self.augment(query, limit)
        if augmented is None:
            return NO_DOCUMENTS_MESSAGE
        return augmented
