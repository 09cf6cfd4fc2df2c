"""Document store and keyword-overlap retriever."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from ..errors import InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5


@dataclass(frozen=True)
class Document:
    """A retrievable document. ``score`` is only set on retrieval results."""

    id: str
    content: str
    metadata: Dict[str, str] = field(default_factory=dict)
    score: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "content": self.content,
            "metadata": dict(self.metadata),
            "score": self.score,
        }


class Retriever(ABC):
    """Abstract base class for document retrievers."""

    @abstractmethod
    async def retrieve(self, query: str, limit: int = DEFAULT_LIMIT) -> List[Document]:
        """
        Return documents relevant to query.

        Args:
            query: Free-text query
            limit: Maximum number of results (<= 0 means the default of 5)

        Returns:
            Matching documents tagged with their score; empty when nothing matches
        """
        pass

    @abstractmethod
    async def add_document(self, document: Optional[Document]) -> None:
        """Insert or replace a document by id."""
        pass

    @abstractmethod
    async def remove_document(self, document_id: str) -> None:
        """Delete a document by id."""
        pass


def tokenize(text: str) -> List[str]:
    """Lower-cased whitespace tokens, de-duplicated in order of appearance."""
    return list(dict.fromkeys(text.lower().split()))


def score_content(tokens: List[str], content: str) -> float:
    """Number of tokens occurring anywhere in content (case-insensitive)."""
    lowered = content.lower()
    return float(sum(1 for token in tokens if token in lowered))


class SimpleRetriever(Retriever):
    """
    In-memory retriever scored by keyword overlap.

    Each distinct query token that appears as a substring of a document adds one
    point. Documents scoring zero are dropped. By default results come back in
    store order, capped at ``limit``, without sorting by score. Pass
    ``rank_by_score=True`` to sort by score (highest first, ties by id) before
    the cap is applied.

    Not internally synchronized.
    """

    def __init__(self, rank_by_score: bool = False):
        self._documents: Dict[str, Document] = {}
        self.rank_by_score = rank_by_score

    async def retrieve(self, query: str, limit: int = DEFAULT_LIMIT) -> List[Document]:
        if limit <= 0:
            limit = DEFAULT_LIMIT

        tokens = tokenize(query)
        if not tokens:
            return []

        scored = []
        for document in self._documents.values():
            score = score_content(tokens, document.content)
            if score > 0:
                scored.append(replace(document, score=score))

        if self.rank_by_score:
            scored.sort(key=lambda doc: (-doc.score, doc.id))

        return scored[:limit]

    async def add_document(self, document: Optional[Document]) -> None:
        """
        Insert or replace a document (last write wins).

        Raises:
            InvalidArgumentError: If document is None or its id is empty
        """
        if document is None:
            raise InvalidArgumentError("document cannot be None")
        if not document.id:
            raise InvalidArgumentError("document ID cannot be empty")

        self._documents[document.id] = replace(
            document, metadata=dict(document.metadata or {}), score=0.0
        )
        logger.debug(f"Stored document {document.id!r} ({len(document.content)} chars)")

    async def remove_document(self, document_id: str) -> None:
        """
        Delete a document.

        Raises:
            NotFoundError: If no document has that id
        """
        if document_id not in self._documents:
            raise NotFoundError("document", document_id)
        del self._documents[document_id]
        logger.debug(f"Removed document {document_id!r}")

    def get_document(self, document_id: str) -> Document:
        document = self._documents.get(document_id)
        if document is None:
            raise NotFoundError("document", document_id)
        return document

    def list_documents(self) -> List[Document]:
        return list(self._documents.values())

    def __len__(self) -> int:
        return len(self._documents)
