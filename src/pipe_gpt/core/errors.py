"""Exception hierarchy for pipe-gpt."""

from __future__ import annotations


class PipeGPTError(Exception):
    """Base error for pipe-gpt."""


class ConfigurationError(PipeGPTError):
    """Settings or environment are unusable."""


class MissingCredentialError(ConfigurationError):
    """No API key found in the environment."""


class BudgetExceededError(PipeGPTError):
    """Estimated prompt tokens exceed the configured maximum."""

    def __init__(self, estimated: int, limit: int) -> None:
        self.estimated = estimated
        self.limit = limit
        super().__init__(
            f"Estimated tokens in request ({estimated}) exceed maximum ({limit})"
        )


class TransportError(PipeGPTError):
    """The chat-completion exchange failed."""


class EmptyResponseError(TransportError):
    """The API answered without any candidate."""


class MalformedResponseError(TransportError):
    """The API answered with a body we cannot read."""
