"""Request-scoped context for log correlation."""

from contextvars import ContextVar
from typing import Optional

# Context variables for the current request and project
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
project_id_var: ContextVar[Optional[str]] = ContextVar("project_id", default=None)


def set_request_id(request_id: str | None) -> None:
    """Set the current request id."""
    request_id_var.set(request_id)


def get_request_id() -> str | None:
    """Get the current request id."""
    return request_id_var.get()


def set_project_context(project_id: str | None) -> None:
    """Set the current project context.

    Args:
        project_id: Project ID to set in context
    """
    project_id_var.set(project_id)


def get_project_context() -> str | None:
    """Get the current project context.

    Returns:
        Current project ID or None
    """
    return project_id_var.get()


def clear_request_context() -> None:
    """Clear request and project context."""
    request_id_var.set(None)
    project_id_var.set(None)
