"""
core.effects
Turn resolution rules:
- attribute / luck / affinity clamp (0..100)
- currency floor at zero, no exchange between denominations
- inventory append-then-remove
- NPC roster merge (fixed identity set)
- time / age advance and the death check

Everything is pure. The outcome object comes from content.schemas and is
already normalized: optional deltas are None or empty, never malformed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from .lineages import START_AGE, START_CHOICES, START_INVENTORY, START_LUCK, START_SEASON, START_WEATHER, Lineage
from .state import (
    ATTRIBUTE_KEYS,
    CURRENCY_KEYS,
    NPC,
    Currency,
    GameState,
    Player,
    PlayerAttributes,
    clamp,
)

if TYPE_CHECKING:
    from content.schemas import CurrencyChanges, InventoryChanges, NpcChange, TurnOutcome

DAYS_PER_YEAR = 365


def apply_attribute_changes(attrs: PlayerAttributes, changes: Mapping[str, int]) -> PlayerAttributes:
    values: Dict[str, int] = {}
    for k in ATTRIBUTE_KEYS:
        values[k] = clamp(int(getattr(attrs, k)) + int(changes.get(k) or 0))
    return PlayerAttributes(**values)


def apply_currency_changes(currency: Currency, changes: Optional["CurrencyChanges"]) -> Currency:
    """Floor each denomination at zero; overspending is absorbed."""
    values: Dict[str, int] = {}
    for k in CURRENCY_KEYS:
        delta = getattr(changes, k, None) if changes is not None else None
        values[k] = max(0, int(getattr(currency, k)) + int(delta or 0))
    return Currency(**values)


def apply_inventory_changes(inventory: Sequence[str], changes: Optional["InventoryChanges"]) -> Tuple[str, ...]:
    items = list(inventory)
    if changes is None:
        return tuple(items)
    items.extend(changes.add)
    removed = set(changes.remove)
    if removed:
        items = [x for x in items if x not in removed]
    return tuple(items)


def apply_npc_changes(npcs: Iterable[NPC], changes: Iterable["NpcChange"]) -> Tuple[NPC, ...]:
    """Merge changes into the roster by id.

    Last change per id wins. Ids not in the roster are dropped: the roster
    never grows or shrinks during a game.
    """
    by_id: Dict[str, "NpcChange"] = {}
    for ch in changes:
        by_id[ch.id] = ch

    out = []
    for npc in npcs:
        ch = by_id.get(npc.id)
        if ch is None:
            out.append(npc)
            continue
        out.append(
            NPC(
                id=npc.id,
                name=npc.name,
                role=npc.role,
                status=ch.status or npc.status,
                relationship=ch.relationship or npc.relationship,
                affinity=clamp(int(npc.affinity) + int(ch.affinity_change or 0)),
            )
        )
    return tuple(out)


def advance_time(day: int, age: int, days_passed: int) -> Tuple[int, int]:
    """Return (day, age) after `days_passed`.

    Age grows by floor((day + days_passed) / 365) using the day *before*
    the turn. Kept as-is for parity with the original game (see DESIGN.md).
    """
    days = max(0, int(days_passed))
    return int(day) + days, int(age) + (int(day) + days) // DAYS_PER_YEAR


def resolve_turn(state: GameState, outcome: "TurnOutcome", *, image_url: Optional[str] = None) -> GameState:
    """Merge one turn outcome into state (pure function, never raises on optional fields).

    `image_url` is the rendered illustration for this turn; None clears it.
    """
    p = state.player

    attributes = apply_attribute_changes(p.attributes, outcome.attribute_changes)
    currency = apply_currency_changes(p.currency, outcome.currency_changes)
    inventory = apply_inventory_changes(p.inventory, outcome.inventory_changes)
    npcs = apply_npc_changes(state.npcs, outcome.npc_changes)
    luck = clamp(int(p.luck) + int(outcome.luck_change or 0))
    day, age = advance_time(state.day, p.age, outcome.time_passed_days)
    weather = outcome.weather or state.weather

    is_dead = attributes.health <= 0 or bool(outcome.is_game_over)

    player = Player(
        name=p.name,
        age=age,
        attributes=attributes,
        lineage_id=p.lineage_id,
        kingdom=p.kingdom,
        inventory=inventory,
        luck=luck,
        currency=currency,
    )
    return GameState(
        player=player,
        npcs=npcs,
        day=day,
        season=state.season,
        weather=weather,
        current_story=outcome.story,
        choices=tuple(outcome.new_choices),
        current_image_url=image_url,
        is_game_over=is_dead,
        death_reason=outcome.death_reason,
        critical_warning=outcome.critical_warning,
    )


def new_game_state(lineage: Lineage, *, story: str, image_url: Optional[str] = None) -> GameState:
    """Project lineage seed data into a fresh state (no clamping, no merge)."""
    player = Player(
        name=lineage.player_name,
        age=START_AGE,
        attributes=lineage.initial_attributes,
        lineage_id=lineage.id,
        kingdom=lineage.kingdom,
        inventory=START_INVENTORY,
        luck=START_LUCK,
        currency=lineage.initial_currency,
    )
    return GameState(
        player=player,
        npcs=tuple(lineage.linked_npcs),
        day=1,
        season=START_SEASON,
        weather=START_WEATHER,
        current_story=story,
        choices=START_CHOICES,
        current_image_url=image_url,
    )
