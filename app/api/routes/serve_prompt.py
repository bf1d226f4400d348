"""Serve-prompt routes: resolve a stored prompt into its final text."""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_prompt_service
from app.api.schemas.serve_prompt import (
    ResolutionMetadataResponse,
    ServePromptRequest,
    ServePromptResponse,
)
from app.core.request_context import set_project_context
from app.domain.prompts.errors import (
    CircularReferenceError,
    MaxDepthExceededError,
    NotFoundError,
)
from app.domain.services.prompt_service import PromptService
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


async def _execute(
    service: PromptService,
    project_id: str,
    prompt_key: str,
    version_tag: str,
    language_code: str | None,
    body: ServePromptRequest | None,
    raw: bool,
) -> ServePromptResponse:
    set_project_context(project_id)
    variables = body.variables if body is not None else {}

    try:
        result = await asyncio.wait_for(
            service.execute_prompt(
                project_id,
                prompt_key,
                version_tag=version_tag,
                language_code=language_code,
                variables=variables,
                raw_only=raw,
            ),
            timeout=settings.prompt_resolution_timeout_seconds,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (CircularReferenceError, MaxDepthExceededError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except asyncio.TimeoutError:
        logger.error(
            "Prompt resolution timed out",
            extra={
                "prompt_key": prompt_key,
                "timeout_seconds": settings.prompt_resolution_timeout_seconds,
            },
        )
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Prompt resolution timed out",
        )

    return ServePromptResponse(
        processed_prompt=result.text,
        metadata=ResolutionMetadataResponse.model_validate(result.metadata, from_attributes=True),
    )


@router.post(
    "/execute/{project_id}/{prompt_key}/{version_tag}/base",
    response_model=ServePromptResponse,
)
async def execute_prompt_base(
    project_id: str,
    prompt_key: str,
    version_tag: str,
    service: Annotated[PromptService, Depends(get_prompt_service)],
    body: ServePromptRequest | None = None,
    raw: Annotated[bool, Query(description="Return the stored text without rendering")] = False,
) -> ServePromptResponse:
    """Resolve a prompt in its base language."""
    return await _execute(service, project_id, prompt_key, version_tag, None, body, raw)


@router.post(
    "/execute/{project_id}/{prompt_key}/{version_tag}/lang/{language_code}",
    response_model=ServePromptResponse,
)
async def execute_prompt_language(
    project_id: str,
    prompt_key: str,
    version_tag: str,
    language_code: str,
    service: Annotated[PromptService, Depends(get_prompt_service)],
    body: ServePromptRequest | None = None,
    raw: Annotated[bool, Query(description="Return the stored text without rendering")] = False,
) -> ServePromptResponse:
    """Resolve a prompt in a language, falling back to the base text."""
    return await _execute(service, project_id, prompt_key, version_tag, language_code, body, raw)
