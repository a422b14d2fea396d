from __future__ import annotations

class ServiceError(RuntimeError):
    """Base class for service-layer errors."""

class LLMError(ServiceError):
    """Errors from the LLM providers."""

class RepoError(ServiceError):
    """Errors from repositories (I/O, parse, remote storage)."""

class AuthError(ServiceError):
    """Rejected credentials or a missing admin login setup."""

    def __init__(self, message: str, configured: bool = True):
        super().__init__(message)
        self.configured = configured
