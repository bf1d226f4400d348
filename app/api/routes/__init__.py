"""API routes."""

from fastapi import APIRouter

from app.api.routes import serve_prompt

api_router = APIRouter()

api_router.include_router(serve_prompt.router, prefix="/serve-prompt", tags=["serve-prompt"])
