"""Template management endpoints."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..dependencies import AppState, get_app_state
from ..prompt import Template
from .errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/templates", tags=["templates"])


class TemplateRequestBody(BaseModel):
    name: str = Field(..., description="Unique template name")
    content: str = Field(..., description="Template text with {{.variable}} placeholders")
    version: str = Field(default="")
    metadata: Dict[str, str] = Field(default_factory=dict)


@router.get("")
async def list_templates(state: AppState = Depends(get_app_state)) -> Dict[str, Any]:
    return {"templates": state.prompt_engine.list_templates()}


@router.post("")
async def add_template(
    body: TemplateRequestBody, state: AppState = Depends(get_app_state)
) -> Dict[str, Any]:
    """Register or replace a template; the response echoes the extracted variables."""
    try:
        stored = state.prompt_engine.add_template(
            Template(
                name=body.name,
                content=body.content,
                version=body.version,
                metadata=body.metadata,
            )
        )
    except Exception as e:
        raise to_http_exception(e)

    logger.info(f"Template {stored.name!r} added")
    return {"message": "Template added successfully", "template": stored.to_dict()}


@router.get("/{name}")
async def get_template(name: str, state: AppState = Depends(get_app_state)) -> Dict[str, Any]:
    try:
        return state.prompt_engine.get_template(name).to_dict()
    except Exception as e:
        raise to_http_exception(e)


@router.delete("/{name}")
async def delete_template(name: str, state: AppState = Depends(get_app_state)) -> Dict[str, Any]:
    try:
        state.prompt_engine.remove_template(name)
    except Exception as e:
        raise to_http_exception(e)

    logger.info(f"Template {name!r} deleted")
    return {"message": "Template deleted successfully"}
