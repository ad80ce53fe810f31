"""Assemble the ordered message list sent to the model."""

from __future__ import annotations

from pipe_gpt.core.models import AssistantPurpose, Conversation, Message, Role


def build_conversation(
    prepend: str,
    piped_input: str | None,
    purpose: AssistantPurpose,
) -> Conversation:
    """Build the conversation for one request.

    Args:
        prepend: Text sent as its own user message ahead of the piped content.
            Skipped when empty.
        piped_input: Content read from stdin, or None when stdin is a terminal.
            An empty string still produces a message, so the model can tell
            the user that nothing arrived.
        purpose: Selects the system prompt.

    Returns:
        Tuple of messages, system prompt first.
    """
    messages = [Message(role=Role.SYSTEM, content=purpose.system_prompt)]

    if prepend:
        messages.append(Message(role=Role.USER, content=prepend))

    if piped_input is not None:
        messages.append(Message(role=Role.USER, content=piped_input))

    return tuple(messages)
