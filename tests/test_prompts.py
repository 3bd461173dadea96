from content.prompts import (
    IMAGE_STYLE_PREFIX,
    build_image_prompt,
    build_json_repair_prompt,
    build_narration_prompt,
    build_opening_prompt,
    build_turn_prompt,
    describe_state,
)
from core.state import Choice, GameState


def test_state_snapshot_lists_everything(farmer_state: GameState) -> None:
    text = describe_state(farmer_state)
    assert "Jean/Marie Dubois" in text
    assert "França" in text
    assert "50 dinheiros" in text
    assert "Roupas simples" in text
    assert "Sorte Atual: 50/100" in text
    assert "[id=sophie]" in text


def test_turn_prompt_includes_choice_and_story(farmer_state: GameState) -> None:
    prompt = build_turn_prompt(state=farmer_state, choice=Choice("Plantar trigo"))
    assert '"Plantar trigo"' in prompt
    assert "Hora de plantar." in prompt
    assert "JSON" in prompt


def test_opening_prompt() -> None:
    prompt = build_opening_prompt(lineage_name="Fergus", challenge="Decifre o pergaminho", age=8)
    assert "Fergus" in prompt
    assert "Decifre o pergaminho" in prompt
    assert "8 anos" in prompt


def test_media_prefixes() -> None:
    assert build_image_prompt("  a mill ") == IMAGE_STYLE_PREFIX + "a mill"
    assert build_narration_prompt(None).endswith(": ")


def test_repair_prompt_carries_broken_text() -> None:
    assert "{oops" in build_json_repair_prompt("{oops")
