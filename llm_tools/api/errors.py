"""Mapping from llm_tools errors to HTTP responses."""

import logging

from fastapi import HTTPException, status

from ..errors import (
    InvalidArgumentError,
    NotFoundError,
    RunCancelledError,
    StepExecutionError,
    TemplateRenderError,
)

logger = logging.getLogger(__name__)


def to_http_exception(error: Exception) -> HTTPException:
    """Translate an exception raised by the engines into an HTTPException."""
    if isinstance(error, StepExecutionError) and isinstance(error.cause, RunCancelledError):
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(error))
    if isinstance(error, InvalidArgumentError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, TemplateRenderError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, RunCancelledError):
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(error))

    logger.error(f"Unhandled error: {error}", exc_info=error)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
