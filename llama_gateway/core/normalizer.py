"""Role normalization for incoming chat messages."""

from typing import Dict, List, Sequence

from ..models.requests import Message

# Provider-specific spellings mapped onto the canonical roles
ROLE_ALIASES: Dict[str, str] = {
    "system": "system",
    "user": "user",
    "human": "user",
    "assistant": "assistant",
    "bot": "assistant",
}


def normalize_role(role: str) -> str:
    """Map a role onto its canonical spelling, keeping unknown roles verbatim."""
    return ROLE_ALIASES.get(role.lower(), role)


def normalize(messages: Sequence[Message]) -> List[Message]:
    """
    Rewrite message roles onto the canonical system/user/assistant set.

    Matching is case-insensitive. Roles outside the known vocabulary pass
    through unchanged so newer client roles never cause a rejection.

    Args:
        messages: Messages as sent by the client

    Returns:
        New list of messages, same length and order as the input
    """
    return [
        Message(role=normalize_role(message.role), content=message.content)
        for message in messages
    ]
