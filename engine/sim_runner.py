"""engine.sim_runner

Headless runner for quick sanity checks.

This keeps tests deterministic and CI-friendly by avoiding network calls.
It uses a tiny built-in fake oracle whose replies go through the same
validating decode as Gemini's.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from content.providers.base import ProviderStatus
from content.schemas import OpeningScene, TurnOutcome, opening_from_llm, outcome_from_llm
from core.lineages import get_lineage
from core.rng import rng_from
from core.state import ATTRIBUTE_KEYS, Choice, GameState

from .config import SessionConfig
from .pipeline import play_turn, start_game

_WEATHERS = ["Ensolarado", "Chuva fina", "Tempestade", "Vento frio", "Nublado"]
_ITEMS = ["Pão duro", "Faca velha", "Moeda de cobre", "Erva medicinal", "Corda"]


@dataclass
class FakeOracle:
    """Deterministic oracle for tests (no LLM)."""

    base_seed: int = 123

    def status(self) -> ProviderStatus:
        return ProviderStatus(True, "fake", "fake-oracle")

    def generate_opening(self, *, lineage_name: str, challenge: str, age: int) -> OpeningScene:
        return opening_from_llm({
            "story": f"{lineage_name}, com {age} anos, encara o primeiro dia. {challenge}",
            "imagePrompt": f"A child of {age} at dawn, medieval village",
        })

    def draft(self, state: GameState, choice: Choice) -> Dict[str, Any]:
        """Raw oracle-shaped reply for this (state, choice)."""
        rng = rng_from("outcome", state.day, choice.text, base_seed=self.base_seed)
        npc_changes = []
        if state.npcs:
            npc = state.npcs[rng.randrange(len(state.npcs))]
            npc_changes.append({"id": npc.id, "affinityChange": rng.randint(-15, 15)})
        inventory: Dict[str, List[str]] = {"add": [], "remove": []}
        if rng.random() < 0.4:
            inventory["add"].append(rng.choice(_ITEMS))
        if state.player.inventory and rng.random() < 0.2:
            inventory["remove"].append(rng.choice(list(state.player.inventory)))
        return {
            "story": f"Dia {state.day}: você decide '{choice.text}'. O destino responde.",
            "attributeChanges": {k: rng.randint(-12, 8) for k in ATTRIBUTE_KEYS},
            "npcChanges": npc_changes,
            "currencyChanges": {"dinheiros": rng.randint(-20, 20), "sous": rng.randint(-5, 5)},
            "inventoryChanges": inventory,
            "luckChange": rng.randint(-10, 10),
            "weather": rng.choice(_WEATHERS),
            "timePassedDays": rng.randint(1, 30),
            "newChoices": [
                {"text": "Seguir pela estrada", "consequenceHint": "Pode encontrar viajantes"},
                {"text": "Voltar para casa", "consequenceHint": "Segurança, mas pouco ganho"},
            ],
            "isGameOver": False,
            "imagePrompt": f"Medieval scene on day {state.day}",
        }

    def generate_outcome(self, *, state: GameState, choice: Choice) -> TurnOutcome:
        return outcome_from_llm(self.draft(state, choice))

    def generate_image(self, prompt: str) -> Optional[str]:
        return None

    def synthesize_speech(self, text: str) -> Optional[bytes]:
        return None


def run_headless_sim(turns: int = 12, *, lineage_id: int = 2, base_seed: int = 123) -> Dict[str, Any]:
    """Run a deterministic game and return summary."""
    config = SessionConfig(muted=True, show_images=False, parallel_media=False)
    oracle = FakeOracle(base_seed=base_seed)

    started = start_game(lineage=get_lineage(lineage_id), oracle=oracle, config=config)
    state = started.state
    logs: List[Dict[str, Any]] = [started.log]

    played = 0
    while played < turns and not state.is_game_over:
        # always take the first offered choice
        result = play_turn(state=state, choice=state.choices[0], oracle=oracle, config=config)
        state = result.state
        logs.append(result.log)
        played += 1

    return {
        "turns": played,
        "initial": started.state,
        "final": state,
        "logs": logs,
    }
