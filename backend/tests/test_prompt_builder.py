"""
Tests for prompt construction
"""
import pytest

from appgen.services.prompt_builder import (
    APP_TYPE_BLOCKS,
    BASE_INSTRUCTION,
    STYLE_BLOCKS,
    AppType,
    PromptPair,
    StyleId,
    build_prompt,
    build_system_instruction,
    build_user_instruction,
)


def test_every_type_and_style_has_a_block():
    assert set(APP_TYPE_BLOCKS) == set(AppType)
    assert set(STYLE_BLOCKS) == set(StyleId)


@pytest.mark.parametrize("app_type", [t.value for t in AppType])
@pytest.mark.parametrize("style", [s.value for s in StyleId])
def test_system_instruction_is_deterministic(app_type, style):
    first = build_system_instruction(app_type, style)
    assert first == build_system_instruction(app_type, style)
    assert first.startswith(BASE_INSTRUCTION)
    assert APP_TYPE_BLOCKS[AppType(app_type)] in first
    assert STYLE_BLOCKS[StyleId(style)] in first


@pytest.mark.parametrize("app_type", ["spreadsheet", "", None, "__class__"])
def test_unknown_type_falls_back_to_tool(app_type):
    assert build_system_instruction(app_type, "neon") == build_system_instruction("tool", "neon")


@pytest.mark.parametrize("style", ["vaporwave", "", None, "__dict__"])
def test_unknown_style_falls_back_to_modern(style):
    assert build_system_instruction("game", style) == build_system_instruction("game", "modern")


def test_selectors_are_case_and_space_insensitive():
    assert build_system_instruction(" Game ", "NEON") == build_system_instruction("game", "neon")


def test_user_instruction_embeds_idea_verbatim():
    idea = "A pomodoro timer with {braces} and <tags>"
    user = build_user_instruction(idea)
    assert idea in user
    assert "ONLY the raw HTML" in user
    assert "markdown code fences" in user


def test_build_prompt_messages_are_ordered():
    prompt = build_prompt("a snake game", "game", "retro")
    assert isinstance(prompt, PromptPair)
    messages = prompt.messages()
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[0]["content"] == build_system_instruction("game", "retro")
    assert "a snake game" in messages[1]["content"]


def test_prompt_pair_is_immutable():
    prompt = build_prompt("idea")
    with pytest.raises(AttributeError):
        prompt.system = "changed"
