"""
core.state
Core domain data models (UI/LLM independent).

Everything here is a frozen dataclass: a turn never edits a GameState,
it builds the next one (see core.effects.resolve_turn).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

ATTRIBUTE_MIN = 0
ATTRIBUTE_MAX = 100

ATTRIBUTE_KEYS = ("health", "strength", "intelligence", "wealth", "honor")
CURRENCY_KEYS = ("dinheiros", "sous", "libras")

# UI labels (pt-BR)
ATTRIBUTE_LABELS: Dict[str, str] = {
    "health": "Saúde",
    "strength": "Força",
    "intelligence": "Inteligência",
    "wealth": "Riqueza",
    "honor": "Honra",
}

DEFAULT_EPITAPH = "A morte chegou silenciosa e implacável, como faz com todos os homens."


def clamp(x: int, lo: int = ATTRIBUTE_MIN, hi: int = ATTRIBUTE_MAX) -> int:
    return max(lo, min(hi, x))


class NpcStatus(str, Enum):
    ALIVE = "Vivo"
    DEAD = "Morto"
    SICK = "Doente"
    MISSING = "Desaparecido"


@dataclass(frozen=True)
class PlayerAttributes:
    """Five bounded stats, 0..100 after any update."""

    health: int
    strength: int
    intelligence: int
    wealth: int
    honor: int


@dataclass(frozen=True)
class Currency:
    """Three denominations, no exchange rate between them."""

    dinheiros: int = 0
    sous: int = 0
    libras: int = 0


@dataclass(frozen=True)
class NPC:
    id: str
    name: str
    role: str
    status: NpcStatus
    relationship: str
    affinity: int  # 0..100


@dataclass(frozen=True)
class Choice:
    text: str
    consequence_hint: str = ""


@dataclass(frozen=True)
class Player:
    name: str
    age: int
    attributes: PlayerAttributes
    lineage_id: int
    kingdom: str
    inventory: Tuple[str, ...] = ()
    luck: int = 50
    currency: Currency = field(default_factory=Currency)


@dataclass(frozen=True)
class GameState:
    """Aggregate state for one game.

    Created once at lineage selection, replaced wholesale each turn,
    discarded on restart.
    """

    player: Player
    npcs: Tuple[NPC, ...]
    day: int
    season: str
    weather: str
    current_story: str
    choices: Tuple[Choice, ...]
    current_image_url: Optional[str] = None
    is_game_over: bool = False
    death_reason: Optional[str] = None
    critical_warning: Optional[str] = None

    def npc(self, npc_id: str) -> Optional[NPC]:
        return next((n for n in self.npcs if n.id == npc_id), None)

    def epitaph(self) -> str:
        """Death screen text: the oracle's reason, else the default epitaph."""
        return self.death_reason or DEFAULT_EPITAPH


def attributes_to_dict(a: PlayerAttributes) -> Dict[str, int]:
    return {k: int(getattr(a, k)) for k in ATTRIBUTE_KEYS}


def currency_to_dict(c: Currency) -> Dict[str, int]:
    return {k: int(getattr(c, k)) for k in CURRENCY_KEYS}


def state_to_dict(state: GameState, *, include_media: bool = True) -> Dict[str, Any]:
    """JSON-friendly snapshot (NpcStatus serializes as its pt-BR label)."""
    p = state.player
    return {
        "player": {
            "name": p.name,
            "age": int(p.age),
            "attributes": attributes_to_dict(p.attributes),
            "lineage_id": int(p.lineage_id),
            "kingdom": p.kingdom,
            "inventory": list(p.inventory),
            "luck": int(p.luck),
            "currency": currency_to_dict(p.currency),
        },
        "npcs": [
            {
                "id": n.id,
                "name": n.name,
                "role": n.role,
                "status": n.status.value,
                "relationship": n.relationship,
                "affinity": int(n.affinity),
            }
            for n in state.npcs
        ],
        "day": int(state.day),
        "season": state.season,
        "weather": state.weather,
        "current_story": state.current_story,
        "current_image_url": state.current_image_url if include_media else None,
        "choices": [{"text": c.text, "consequence_hint": c.consequence_hint} for c in state.choices],
        "is_game_over": bool(state.is_game_over),
        "death_reason": state.death_reason,
        "critical_warning": state.critical_warning,
    }
