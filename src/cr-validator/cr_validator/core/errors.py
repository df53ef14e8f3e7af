"""Base exception classes for all cr-validator-specific errors.

The categories below mirror how the orchestrator treats a failure:

- InputError: the caller's request is malformed. Never retried.
- UpstreamError: an external service failed. Retried when ``retriable``.
- ConfigurationError: programming or configuration mistake. Never retried.
- PersistenceError: storage failed after a result was computed. Reported,
  does not invalidate the result.
"""


class ValidatorError(Exception):
    """Base class for all cr-validator errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable


class InputError(ValidatorError):
    """Malformed story or CR selection supplied by the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retriable=False)


class UpstreamError(ValidatorError):
    """An external collaborator (story source, vector store, LLM) failed."""


class ConfigurationError(ValidatorError):
    """A programming or configuration error. Fatal for the run."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retriable=False)


class PersistenceError(ValidatorError):
    """The result store or report sink failed to record a computed result."""
