"""Token budget check applied before any request is sent."""

from __future__ import annotations

from dataclasses import dataclass

from pipe_gpt.core.models import AssistantPurpose
from pipe_gpt.core.tokens import estimate_tokens


@dataclass(frozen=True)
class BudgetCheck:
    """Outcome of comparing the estimated prompt size with the limit."""

    estimated: int
    limit: int

    @property
    def exceeded(self) -> bool:
        return self.estimated > self.limit

    @property
    def proceed(self) -> bool:
        return not self.exceeded


def prompt_text(prepend: str, piped_input: str | None, purpose: AssistantPurpose) -> str:
    """Concatenate prepend, piped input and system prompt, in that order."""
    return f"{prepend}{piped_input or ''}{purpose.system_prompt}"


def check_budget(text: str, max_tokens: int) -> BudgetCheck:
    """Estimate text and compare it with max_tokens. Equal to the limit proceeds."""
    return BudgetCheck(estimated=estimate_tokens(text), limit=max_tokens)
