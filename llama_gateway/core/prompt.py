"""Llama-2 chat prompt template."""

from typing import Sequence

from ..models.requests import Message

BOS = "<s>"
EOS = "</s>"
INST_OPEN = "[INST]"
INST_CLOSE = "[/INST]"
SYS_OPEN = "<<SYS>>"
SYS_CLOSE = "<</SYS>>"


def render_prompt(messages: Sequence[Message]) -> str:
    """
    Render canonical messages into a single Llama-2 chat prompt.

    The layout follows the model's fine-tuning format:

        <s>[INST] <<SYS>>\\n{system}\\n<</SYS>>\\n\\n
        <s>[INST] {user} [/INST]      (first turn)
        [INST] {user} [/INST]         (later turns)
         {assistant} </s>

    A system block leaves its instruction open. Roles other than system,
    user and assistant contribute nothing. An empty sequence renders an
    empty prompt.

    Args:
        messages: Messages with canonical roles, in conversation order

    Returns:
        Prompt string ready for the model
    """
    prompt = ""

    for message in messages:
        if message.role == "system":
            prompt += f"{BOS}{INST_OPEN} {SYS_OPEN}\n{message.content}\n{SYS_CLOSE}\n\n"
        elif message.role == "user":
            if prompt == "":
                prompt += f"{BOS}{INST_OPEN} {message.content} {INST_CLOSE}"
            else:
                prompt += f"{INST_OPEN} {message.content} {INST_CLOSE}"
        elif message.role == "assistant":
            prompt += f" {message.content} {EOS}"

    return prompt
