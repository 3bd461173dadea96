"""content.schemas

Contracts for what the narrative oracle returns:
- OpeningScene: first-day story + image prompt.
- TurnOutcome: one resolved turn (story, deltas, next choices, death flag).

Decode strategy:
Model JSON is loosely typed. outcome_from_llm() is the single gate between
that JSON and core.effects.resolve_turn():
- required fields missing or malformed -> OutcomeContractError
- optional deltas missing / garbage -> None or empty (no change)
- numbers are coerced and rounded to int
- NPC status accepts pt-BR and English spellings
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.state import ATTRIBUTE_KEYS, CURRENCY_KEYS, Choice, NpcStatus

DEFAULT_OPENING_STORY = "A sua jornada começa..."
DEFAULT_OPENING_IMAGE_PROMPT = "Medieval village scene, realistic art style"

REQUIRED_OUTCOME_FIELDS = (
    "story",
    "attributeChanges",
    "npcChanges",
    "timePassedDays",
    "newChoices",
    "isGameOver",
    "imagePrompt",
)

# Bound for oracle deltas; the resolver clamps from here.
DELTA_LIMIT = 1_000_000_000


class OutcomeContractError(ValueError):
    """The oracle broke the outcome contract (required field missing/malformed)."""


def _as_int(x: Any) -> Optional[int]:
    """Coerce to a rounded int; +/-inf and huge values saturate at DELTA_LIMIT."""
    if x is None or isinstance(x, bool):
        return None
    try:
        f = float(x)
    except (TypeError, ValueError):
        return None
    if math.isnan(f):
        return None
    if abs(f) > DELTA_LIMIT:
        return DELTA_LIMIT if f > 0 else -DELTA_LIMIT
    return int(round(f))


def _as_text(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def _as_bool(x: Any) -> bool:
    if isinstance(x, str):
        return x.strip().lower() in {"true", "1", "yes", "sim", "verdadeiro"}
    return bool(x)


def _as_str_list(x: Any) -> Tuple[str, ...]:
    if x is None:
        return ()
    if isinstance(x, str):
        x = [x]
    if not isinstance(x, list):
        return ()
    out: List[str] = []
    for item in x:
        s = str(item or "").strip()
        if s:
            out.append(s)
    return tuple(out)


_STATUS_ALIASES: Dict[str, NpcStatus] = {
    "vivo": NpcStatus.ALIVE,
    "viva": NpcStatus.ALIVE,
    "alive": NpcStatus.ALIVE,
    "morto": NpcStatus.DEAD,
    "morta": NpcStatus.DEAD,
    "dead": NpcStatus.DEAD,
    "doente": NpcStatus.SICK,
    "sick": NpcStatus.SICK,
    "desaparecido": NpcStatus.MISSING,
    "desaparecida": NpcStatus.MISSING,
    "missing": NpcStatus.MISSING,
}


def normalize_status(status: Any) -> Optional[NpcStatus]:
    s = str(status or "").strip().lower()
    return _STATUS_ALIASES.get(s)


# =========================
# Opening
# =========================


@dataclass(frozen=True)
class OpeningScene:
    story: str
    image_prompt: str


def opening_from_llm(data: Mapping[str, Any]) -> OpeningScene:
    return OpeningScene(
        story=_as_text(data.get("story")) or DEFAULT_OPENING_STORY,
        image_prompt=_as_text(data.get("imagePrompt")) or DEFAULT_OPENING_IMAGE_PROMPT,
    )


# =========================
# Turn outcome
# =========================


@dataclass(frozen=True)
class NpcChange:
    id: str
    status: Optional[NpcStatus] = None
    relationship: Optional[str] = None
    affinity_change: Optional[int] = None


@dataclass(frozen=True)
class CurrencyChanges:
    dinheiros: Optional[int] = None
    sous: Optional[int] = None
    libras: Optional[int] = None


@dataclass(frozen=True)
class InventoryChanges:
    add: Tuple[str, ...] = ()
    remove: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TurnOutcome:
    story: str
    new_choices: Tuple[Choice, ...]
    image_prompt: str
    time_passed_days: int = 0
    is_game_over: bool = False
    attribute_changes: Dict[str, int] = field(default_factory=dict)
    npc_changes: Tuple[NpcChange, ...] = ()
    currency_changes: Optional[CurrencyChanges] = None
    inventory_changes: Optional[InventoryChanges] = None
    luck_change: Optional[int] = None
    weather: Optional[str] = None
    death_reason: Optional[str] = None
    critical_warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Oracle-shaped (camelCase) dict, used for run logs."""
        out: Dict[str, Any] = {
            "story": self.story,
            "attributeChanges": dict(self.attribute_changes),
            "npcChanges": [
                {
                    "id": c.id,
                    "status": c.status.value if c.status else None,
                    "relationship": c.relationship,
                    "affinityChange": c.affinity_change,
                }
                for c in self.npc_changes
            ],
            "timePassedDays": int(self.time_passed_days),
            "newChoices": [{"text": c.text, "consequenceHint": c.consequence_hint} for c in self.new_choices],
            "isGameOver": bool(self.is_game_over),
            "imagePrompt": self.image_prompt,
        }
        if self.currency_changes is not None:
            out["currencyChanges"] = {k: getattr(self.currency_changes, k) for k in CURRENCY_KEYS}
        if self.inventory_changes is not None:
            out["inventoryChanges"] = {
                "add": list(self.inventory_changes.add),
                "remove": list(self.inventory_changes.remove),
            }
        for key, val in (
            ("luckChange", self.luck_change),
            ("weather", self.weather),
            ("deathReason", self.death_reason),
            ("criticalWarning", self.critical_warning),
        ):
            if val is not None:
                out[key] = val
        return out


def _parse_choices(raw: Any) -> Tuple[Choice, ...]:
    if not isinstance(raw, list):
        raise OutcomeContractError("newChoices must be a list")
    out: List[Choice] = []
    for obj in raw:
        if isinstance(obj, str):
            obj = {"text": obj}
        if not isinstance(obj, dict):
            continue
        text = _as_text(obj.get("text"))
        if not text:
            continue
        out.append(Choice(text=text, consequence_hint=_as_text(obj.get("consequenceHint")) or ""))
    if not out:
        raise OutcomeContractError("newChoices has no usable choice")
    return tuple(out)


def _parse_attribute_changes(raw: Any) -> Dict[str, int]:
    if not isinstance(raw, dict):
        raise OutcomeContractError("attributeChanges must be an object")
    out: Dict[str, int] = {}
    for k in ATTRIBUTE_KEYS:
        v = _as_int(raw.get(k))
        if v is not None:
            out[k] = v
    return out


def _parse_npc_changes(raw: Any) -> Tuple[NpcChange, ...]:
    if not isinstance(raw, list):
        raise OutcomeContractError("npcChanges must be a list")
    out: List[NpcChange] = []
    for obj in raw:
        if not isinstance(obj, dict):
            continue
        npc_id = _as_text(obj.get("id"))
        if not npc_id:
            continue
        out.append(
            NpcChange(
                id=npc_id,
                status=normalize_status(obj.get("status")),
                relationship=_as_text(obj.get("relationship")),
                affinity_change=_as_int(obj.get("affinityChange")),
            )
        )
    return tuple(out)


def _parse_currency_changes(raw: Any) -> Optional[CurrencyChanges]:
    if not isinstance(raw, dict):
        return None
    return CurrencyChanges(**{k: _as_int(raw.get(k)) for k in CURRENCY_KEYS})


def _parse_inventory_changes(raw: Any) -> Optional[InventoryChanges]:
    if not isinstance(raw, dict):
        return None
    return InventoryChanges(add=_as_str_list(raw.get("add")), remove=_as_str_list(raw.get("remove")))


def outcome_from_llm(data: Mapping[str, Any]) -> TurnOutcome:
    """Validate and normalize a raw oracle outcome."""
    missing = [k for k in REQUIRED_OUTCOME_FIELDS if k not in data or data.get(k) is None]
    if missing:
        raise OutcomeContractError(f"outcome missing required fields: {', '.join(missing)}")

    story = _as_text(data.get("story"))
    if not story:
        raise OutcomeContractError("outcome.story is empty")

    days = _as_int(data.get("timePassedDays"))
    if days is None:
        raise OutcomeContractError("outcome.timePassedDays must be a number")

    return TurnOutcome(
        story=story,
        new_choices=_parse_choices(data.get("newChoices")),
        image_prompt=_as_text(data.get("imagePrompt")) or "",
        time_passed_days=max(0, days),
        is_game_over=_as_bool(data.get("isGameOver")),
        attribute_changes=_parse_attribute_changes(data.get("attributeChanges")),
        npc_changes=_parse_npc_changes(data.get("npcChanges")),
        currency_changes=_parse_currency_changes(data.get("currencyChanges")),
        inventory_changes=_parse_inventory_changes(data.get("inventoryChanges")),
        luck_change=_as_int(data.get("luckChange")),
        weather=_as_text(data.get("weather")),
        death_reason=_as_text(data.get("deathReason")),
        critical_warning=_as_text(data.get("criticalWarning")),
    )


# JSON schema handed to Gemini as response_schema (mirrors REQUIRED_OUTCOME_FIELDS).
OUTCOME_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "story": {"type": "STRING"},
        "attributeChanges": {
            "type": "OBJECT",
            "properties": {k: {"type": "NUMBER"} for k in ATTRIBUTE_KEYS},
        },
        "npcChanges": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING"},
                    "status": {"type": "STRING", "enum": [s.value for s in NpcStatus]},
                    "relationship": {"type": "STRING"},
                    "affinityChange": {"type": "NUMBER"},
                },
            },
        },
        "currencyChanges": {
            "type": "OBJECT",
            "properties": {k: {"type": "NUMBER"} for k in CURRENCY_KEYS},
        },
        "inventoryChanges": {
            "type": "OBJECT",
            "properties": {
                "add": {"type": "ARRAY", "items": {"type": "STRING"}},
                "remove": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
        },
        "luckChange": {"type": "NUMBER"},
        "weather": {"type": "STRING"},
        "timePassedDays": {"type": "NUMBER"},
        "newChoices": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "text": {"type": "STRING"},
                    "consequenceHint": {"type": "STRING"},
                },
            },
        },
        "isGameOver": {"type": "BOOLEAN"},
        "deathReason": {"type": "STRING"},
        "criticalWarning": {"type": "STRING"},
        "imagePrompt": {"type": "STRING"},
    },
    "required": list(REQUIRED_OUTCOME_FIELDS),
}

OPENING_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "story": {"type": "STRING"},
        "imagePrompt": {"type": "STRING"},
    },
    "required": ["story", "imagePrompt"],
}
