from typing import Any, Dict

import pytest

from content.schemas import TurnOutcome
from core.effects import new_game_state
from core.lineages import get_lineage
from core.state import Choice, GameState


@pytest.fixture
def royal_state() -> GameState:
    """Lineage 1: health 80, wealth 200 (seeded above cap), 200 libras, henrique at 80."""
    return new_game_state(get_lineage(1), story="O rei chama.")


@pytest.fixture
def farmer_state() -> GameState:
    return new_game_state(get_lineage(2), story="Hora de plantar.")


def make_outcome(**overrides: Any) -> TurnOutcome:
    fields: Dict[str, Any] = {
        "story": "Algo acontece.",
        "new_choices": (Choice("Seguir", "?"),),
        "image_prompt": "a castle",
        "time_passed_days": 0,
    }
    fields.update(overrides)
    return TurnOutcome(**fields)


def raw_outcome(**overrides: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "story": "A chuva cai sobre a vila.",
        "attributeChanges": {},
        "npcChanges": [],
        "timePassedDays": 1,
        "newChoices": [{"text": "Abrigar-se", "consequenceHint": "Fica seco"}],
        "isGameOver": False,
        "imagePrompt": "rain over a medieval village",
    }
    data.update(overrides)
    return data
