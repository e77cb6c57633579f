"""Tests for role normalization."""

from llama_gateway.core.normalizer import normalize, normalize_role
from llama_gateway.models.requests import Message


def test_aliases_map_to_canonical_roles():
    messages = [
        Message(role="human", content="a"),
        Message(role="bot", content="b"),
        Message(role="system", content="c"),
        Message(role="user", content="d"),
        Message(role="assistant", content="e"),
    ]
    result = normalize(messages)
    assert [m.role for m in result] == ["user", "assistant", "system", "user", "assistant"]
    assert [m.content for m in result] == ["a", "b", "c", "d", "e"]


def test_matching_is_case_insensitive():
    assert normalize_role("Human") == "user"
    assert normalize_role("BOT") == "assistant"
    assert normalize_role("System") == "system"


def test_unknown_roles_are_preserved_verbatim():
    result = normalize([Message(role="Narrator", content="once upon a time")])
    assert result[0].role == "Narrator"
    assert result[0].content == "once upon a time"


def test_empty_content_passes_through():
    result = normalize([Message(role="user", content="")])
    assert result[0].content == ""


def test_output_length_matches_input_and_input_is_untouched():
    messages = [Message(role="human", content=str(i)) for i in range(5)]
    result = normalize(messages)
    assert len(result) == len(messages)
    assert all(m.role == "human" for m in messages)


def test_empty_sequence():
    assert normalize([]) == []
