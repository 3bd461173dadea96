"""engine.pipeline

Core turn flow (headless).

Responsibilities:
- Ask the oracle for the opening scene / a turn outcome
- Render illustration + narration (independent of each other)
- Merge the outcome via core.effects.resolve_turn
- Keep the commit atomic: any text-oracle failure raises TurnAborted and
  the caller keeps its previous GameState untouched

This layer is UI-agnostic.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from core.effects import new_game_state, resolve_turn
from core.lineages import START_AGE, Lineage
from core.state import Choice, GameState, state_to_dict

from content.providers.base import NarrativeOracle

from .config import SessionConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TurnAborted(RuntimeError):
    """The oracle failed; no state change was applied."""


class GameOverError(RuntimeError):
    """A choice was submitted on a terminal state."""


@dataclass(frozen=True)
class TurnResult:
    state: GameState
    audio: Optional[bytes] = None
    log: Dict[str, Any] = field(default_factory=dict)


def _quiet(label: str, fn: Callable[[], Optional[T]]) -> Optional[T]:
    """Run a media call; any failure means 'no media'."""
    try:
        return fn()
    except Exception as e:
        logger.warning("%s failed: %s", label, e)
        return None


def render_media(
    oracle: NarrativeOracle,
    *,
    image_prompt: str,
    narration: str,
    config: SessionConfig,
) -> Tuple[Optional[str], Optional[bytes]]:
    """Return (image_url, audio). Both depend on the text only, not on each other."""

    def image() -> Optional[str]:
        if not config.show_images:
            return None
        return _quiet("image", lambda: oracle.generate_image(image_prompt))

    def audio() -> Optional[bytes]:
        if config.muted:
            return None
        return _quiet("speech", lambda: oracle.synthesize_speech(narration))

    if config.parallel_media and config.show_images and not config.muted:
        with ThreadPoolExecutor(max_workers=2) as pool:
            f_img = pool.submit(image)
            f_audio = pool.submit(audio)
            return f_img.result(), f_audio.result()
    return image(), audio()


def start_game(*, lineage: Lineage, oracle: NarrativeOracle, config: SessionConfig) -> TurnResult:
    """Create the initial state for `lineage` (one opening oracle call)."""
    try:
        opening = oracle.generate_opening(
            lineage_name=lineage.name,
            challenge=lineage.initial_challenge,
            age=START_AGE,
        )
    except Exception as e:
        logger.error("opening scene failed for lineage=%s: %s", lineage.id, e)
        raise TurnAborted(f"Não foi possível iniciar o jogo: {e}") from e

    image_url, audio = render_media(oracle, image_prompt=opening.image_prompt, narration=opening.story, config=config)
    state = new_game_state(lineage, story=opening.story, image_url=image_url)
    logger.info("game started lineage=%s image=%s audio=%s", lineage.id, image_url is not None, audio is not None)

    log: Dict[str, Any] = {
        "day": int(state.day),
        "event": "start",
        "lineage_id": int(lineage.id),
        "after": state_to_dict(state, include_media=False),
    }
    return TurnResult(state=state, audio=audio, log=log)


def play_turn(*, state: GameState, choice: Choice, oracle: NarrativeOracle, config: SessionConfig) -> TurnResult:
    """Resolve one player choice into the next state.

    Raises GameOverError on a terminal state and TurnAborted when the oracle
    fails or breaks the outcome contract. In both cases `state` is the
    caller's current state, unchanged.
    """
    if state.is_game_over:
        raise GameOverError("O jogo terminou; nenhuma escolha é aceita.")

    try:
        outcome = oracle.generate_outcome(state=state, choice=choice)
    except Exception as e:
        logger.warning("turn aborted day=%s choice=%r: %s", state.day, choice.text, e)
        raise TurnAborted(f"O oráculo falhou: {e}") from e

    image_url, audio = render_media(oracle, image_prompt=outcome.image_prompt, narration=outcome.story, config=config)
    new_state = resolve_turn(state, outcome, image_url=image_url)

    if new_state.is_game_over:
        logger.info("game over day=%s reason=%s", new_state.day, new_state.death_reason or "-")

    log: Dict[str, Any] = {
        "day": int(state.day),
        "event": "turn",
        "choice": {"text": choice.text, "consequence_hint": choice.consequence_hint},
        "outcome": outcome.to_dict(),
        "before": state_to_dict(state, include_media=False),
        "after": state_to_dict(new_state, include_media=False),
    }
    return TurnResult(state=new_state, audio=audio, log=log)
