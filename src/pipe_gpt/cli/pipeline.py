"""Budget, dispatch and render one request."""

from __future__ import annotations

import logging

from pipe_gpt.cli.output import render_outcome
from pipe_gpt.core.budget import check_budget, prompt_text
from pipe_gpt.core.conversation import build_conversation
from pipe_gpt.core.errors import BudgetExceededError
from pipe_gpt.core.models import AssistantPurpose, RequestSettings
from pipe_gpt.llm.chat_client import ChatClient

log = logging.getLogger(__name__)


def run_pipeline(
    prepend: str,
    piped_input: str | None,
    purpose: AssistantPurpose,
    settings: RequestSettings,
    client: ChatClient,
) -> int:
    """Send the conversation if it fits the budget and print the reply.

    The budget check always completes before the client is touched.

    Returns:
        Process exit code: 0 on a reply, 1 on a transport error.

    Raises:
        BudgetExceededError: The estimate is above settings.max_tokens.
    """
    conversation = build_conversation(prepend, piped_input, purpose)

    check = check_budget(prompt_text(prepend, piped_input, purpose), settings.max_tokens)
    log.info("Estimated %d tokens (limit %d)", check.estimated, check.limit)
    if check.exceeded:
        raise BudgetExceededError(check.estimated, check.limit)

    log.info("Sending %d messages to %s", len(conversation), settings.model)
    outcome = client.send(conversation, settings)
    render_outcome(outcome, settings.render_markdown)

    return 0 if outcome.ok else 1
