"""Chat endpoint."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..dependencies import AppState, get_app_state
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["chat"])


class ChatRequestBody(BaseModel):
    """Request model for a chat call."""

    query: str = Field(..., min_length=1, description="User query")
    template: str = Field(default="qa", description="Prompt template (simple mode)")
    model: Optional[str] = Field(default=None, description="Model id, optionally provider-prefixed")
    variables: Dict[str, Any] = Field(default_factory=dict, description="Extra template bindings")
    chain_mode: bool = Field(default=False, description="Use retrieve -> prompt -> chat chain")


@router.post("/chat")
async def chat(body: ChatRequestBody, state: AppState = Depends(get_app_state)) -> Dict[str, Any]:
    """
    Answer a query in simple (template) or chain (retrieval) mode.

    Returns:
        Dict with query, answer, template, model and token_usage
        (token_usage is 0 in chain mode)
    """
    service = state.chat_service
    try:
        if body.chain_mode:
            result = await service.run_chain(
                body.query, model=body.model, template=body.template or "qa"
            )
        else:
            result = await service.run_simple(
                body.query,
                template=body.template or "qa",
                model=body.model,
                variables=body.variables,
            )
    except Exception as e:
        logger.warning(f"Chat request failed: {e}")
        raise to_http_exception(e)

    return result.to_dict()
