"""Tests for the Llama-2 prompt template."""

from llama_gateway.core.prompt import render_prompt
from llama_gateway.models.requests import Message


def _messages(*pairs):
    return [Message(role=role, content=content) for role, content in pairs]


def test_single_user_turn_opens_with_start_token():
    assert render_prompt(_messages(("user", "hi"))) == "<s>[INST] hi [/INST]"


def test_system_then_user():
    prompt = render_prompt(_messages(("system", "Be brief."), ("user", "Hello")))
    assert prompt == "<s>[INST] <<SYS>>\nBe brief.\n<</SYS>>\n\n[INST] Hello [/INST]"
    assert prompt.endswith("[/INST]")
    assert not prompt.endswith("</s>")


def test_multi_turn_conversation():
    prompt = render_prompt(
        _messages(
            ("user", "Hi"),
            ("assistant", "Hello!"),
            ("user", "How are you?"),
        )
    )
    assert prompt == "<s>[INST] Hi [/INST] Hello! </s>[INST] How are you? [/INST]"


def test_unknown_role_contributes_nothing():
    with_narrator = render_prompt(_messages(("narrator", "Meanwhile..."), ("user", "hi")))
    assert with_narrator == "<s>[INST] hi [/INST]"
    assert "Meanwhile" not in with_narrator


def test_empty_sequence_renders_empty_prompt():
    assert render_prompt([]) == ""


def test_rendering_is_deterministic():
    messages = _messages(("system", "s"), ("user", "u"), ("assistant", "a"), ("user", "u2"))
    assert render_prompt(messages) == render_prompt(list(messages))
