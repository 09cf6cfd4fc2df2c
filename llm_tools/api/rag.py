"""Retrieval endpoints."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..dependencies import AppState, get_app_state
from ..rag import DEFAULT_LIMIT, Document
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/rag", tags=["rag"])


class RAGQueryBody(BaseModel):
    query: str = Field(..., min_length=1)
    limit: int = Field(default=DEFAULT_LIMIT, description="Maximum documents (<= 0 means default)")


class DocumentBody(BaseModel):
    id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    metadata: Dict[str, str] = Field(default_factory=dict)


@router.post("/query")
async def rag_query(body: RAGQueryBody, state: AppState = Depends(get_app_state)) -> Dict[str, Any]:
    """Return the augmented query string for body.query."""
    limit = body.limit if body.limit > 0 else DEFAULT_LIMIT
    try:
        result = await state.rag_engine.query(body.query, limit)
    except Exception as e:
        raise to_http_exception(e)

    return {"query": body.query, "result": result, "limit": limit}


@router.post("/documents")
async def add_document(body: DocumentBody, state: AppState = Depends(get_app_state)) -> Dict[str, Any]:
    try:
        await state.retriever.add_document(
            Document(id=body.id, content=body.content, metadata=body.metadata)
        )
    except Exception as e:
        raise to_http_exception(e)

    logger.info(f"Document {body.id!r} added")
    return {"message": "Document added successfully", "id": body.id}


@router.delete("/documents/{document_id}")
async def delete_document(
    document_id: str, state: AppState = Depends(get_app_state)
) -> Dict[str, Any]:
    try:
        await state.retriever.remove_document(document_id)
    except Exception as e:
        raise to_http_exception(e)

    return {"message": "Document deleted successfully"}
