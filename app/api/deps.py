"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.services.prompt_service import PromptService
from app.persistence.database import get_db


async def get_prompt_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PromptService:
    """Get a prompt service bound to the request's database session."""
    return PromptService(db)
