"""Errors raised while resolving prompts.

Only structural breakage is an error. Missing assets, translations and
variables are reported in the resolution metadata instead.
"""


class PromptResolutionError(Exception):
    """Base class for fatal resolution errors."""
    pass


class NotFoundError(PromptResolutionError):
    """A prompt, version or explicitly tagged asset version does not exist."""
    pass


class PromptNotFoundError(NotFoundError):
    """Raised when no prompt exists for a key in a project."""

    def __init__(self, project_id: str, prompt_key: str) -> None:
        self.project_id = project_id
        self.prompt_key = prompt_key
        super().__init__(
            f'Prompt "{prompt_key}" not found in project "{project_id}".'
        )


class VersionNotFoundError(NotFoundError):
    """Raised when no version matches the requested tag."""

    def __init__(self, subject: str, version_tag: str | None) -> None:
        self.subject = subject
        self.version_tag = version_tag
        super().__init__(
            f'No suitable version found for {subject} (tag searched: {version_tag or "latest"}).'
        )


class AssetVersionNotFoundError(VersionNotFoundError):
    """Raised when an explicitly tagged asset version does not exist."""
    pass


class CircularReferenceError(PromptResolutionError):
    """Raised when a prompt reference chain revisits one of its ancestors."""

    def __init__(self, chain: tuple[str, ...]) -> None:
        self.chain = chain
        super().__init__(f"Circular prompt reference detected: {' -> '.join(chain)}")


class MaxDepthExceededError(PromptResolutionError):
    """Raised when nested prompt references go deeper than allowed."""

    def __init__(self, max_depth: int, prompt_key: str) -> None:
        self.max_depth = max_depth
        self.prompt_key = prompt_key
        super().__init__(
            f'Maximum prompt reference depth ({max_depth}) reached while resolving "{prompt_key}".'
        )
