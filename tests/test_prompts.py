import pytest

from ai_code.prompts import CODE_SYSTEM, DEFAULT_MODE, SYSTEM_PROMPTS, Mode, system_prompt_for


def test_every_mode_has_a_distinct_prompt():
    prompts = [system_prompt_for(mode.value) for mode in Mode]

    assert all(prompt.strip() for prompt in prompts)
    assert len(set(prompts)) == len(Mode)


def test_known_modes_parse_exactly():
    assert Mode.parse("debug") is Mode.DEBUG
    assert Mode.parse("generate") is Mode.GENERATE


@pytest.mark.parametrize("raw", [None, "", "poetry", "CODE", " review", 5, ["debug"], {"mode": "debug"}])
def test_unknown_modes_fall_back_to_code(raw):
    assert Mode.parse(raw) is DEFAULT_MODE
    assert system_prompt_for(raw) == CODE_SYSTEM


def test_prompt_table_is_read_only():
    with pytest.raises(TypeError):
        SYSTEM_PROMPTS[Mode.CODE] = "something else"  # type: ignore[index]
