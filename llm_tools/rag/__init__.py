"""Lexical retrieval and retrieval-augmented query composition."""

from .retriever import DEFAULT_LIMIT, Document, Retriever, SimpleRetriever
from .engine import NO_DOCUMENTS_MESSAGE, RAGEngine

__all__ = [
    "DEFAULT_LIMIT",
    "Document",
    "Retriever",
    "SimpleRetriever",
    "NO_DOCUMENTS_MESSAGE",
    "RAGEngine",
]
