"""
engine.selfcheck
Minimal "it runs" proof for the turn resolver.

Throws random, oversized deltas at resolve_turn for every lineage and
asserts the state invariants after each turn.

Run:
  python -m engine.selfcheck
"""

from __future__ import annotations

from content.schemas import CurrencyChanges, InventoryChanges, NpcChange, TurnOutcome
from core.effects import new_game_state, resolve_turn
from core.lineages import LINEAGES
from core.rng import rng_from
from core.state import ATTRIBUTE_KEYS, CURRENCY_KEYS, Choice, GameState


def check_invariants(before: GameState, after: GameState) -> None:
    for k in ATTRIBUTE_KEYS:
        assert 0 <= getattr(after.player.attributes, k) <= 100, k
    for k in CURRENCY_KEYS:
        assert getattr(after.player.currency, k) >= 0, k
    assert 0 <= after.player.luck <= 100
    assert after.day >= before.day
    assert after.player.age >= before.player.age
    assert [n.id for n in after.npcs] == [n.id for n in before.npcs]
    for n in after.npcs:
        assert 0 <= n.affinity <= 100, n.id
    if after.player.attributes.health <= 0:
        assert after.is_game_over


def random_outcome(state: GameState, base_seed: int, turn: int) -> TurnOutcome:
    rng = rng_from("selfcheck", state.player.lineage_id, turn, base_seed=base_seed)
    ids = [n.id for n in state.npcs] + ["desconhecido"]
    return TurnOutcome(
        story=f"Turno {turn}",
        new_choices=(Choice("Continuar"),),
        image_prompt="",
        time_passed_days=rng.randint(0, 400),
        attribute_changes={k: rng.randint(-150, 150) for k in ATTRIBUTE_KEYS},
        npc_changes=tuple(NpcChange(id=rng.choice(ids), affinity_change=rng.randint(-150, 150)) for _ in range(3)),
        currency_changes=CurrencyChanges(**{k: rng.randint(-500, 500) for k in CURRENCY_KEYS}),
        inventory_changes=InventoryChanges(add=("Pão",), remove=("Roupas simples",)),
        luck_change=rng.randint(-150, 150),
    )


def run_smoke(turns: int = 20, base_seed: int = 42) -> int:
    """Return the number of turns checked."""
    checked = 0
    for lineage in LINEAGES.values():
        state = new_game_state(lineage, story="início")
        for t in range(turns):
            if state.is_game_over:
                break
            nxt = resolve_turn(state, random_outcome(state, base_seed, t))
            check_invariants(state, nxt)
            state = nxt
            checked += 1
    return checked


if __name__ == "__main__":
    n = run_smoke()
    print(f"OK: {n} resolved turns kept every invariant.")
