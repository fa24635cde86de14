from __future__ import annotations

from typing import Optional


class PipelineError(RuntimeError):
    pass


class ValidationError(PipelineError):
    pass


class AuthenticationError(PipelineError):
    pass


class ConfigurationError(PipelineError):
    pass


class UpstreamServiceError(PipelineError):
    def __init__(self, service: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{service} error: {message}")
        self.service = service
        self.status_code = status_code


class StorageError(PipelineError):
    """A write to the store failed; earlier steps may already be persisted."""

    def __init__(self, step: str, message: str) -> None:
        super().__init__(
            f"Database error while saving {step}: {message} (meeting may be partially created)"
        )
        self.step = step


class UnknownError(PipelineError):
    pass
