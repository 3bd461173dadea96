"""content.providers.base

Provider interfaces.

A provider is the narrative oracle: it writes the opening scene, resolves a
chosen action into a TurnOutcome, and renders images / narration.
Text calls raise on failure; media calls return None instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from core.state import Choice, GameState

from ..schemas import OpeningScene, TurnOutcome


class OracleError(RuntimeError):
    """The oracle is unavailable or returned nothing usable."""


@dataclass(frozen=True)
class ProviderStatus:
    ok: bool
    backend: str
    model: str
    note: str = ""
    error: str = ""


class NarrativeOracle(Protocol):
    def status(self) -> ProviderStatus: ...

    def generate_opening(self, *, lineage_name: str, challenge: str, age: int) -> OpeningScene: ...

    def generate_outcome(self, *, state: GameState, choice: Choice) -> TurnOutcome:
        """Return a validated outcome or raise (OracleError / OutcomeContractError)."""
        ...

    def generate_image(self, prompt: str) -> Optional[str]:
        """Return a data URL, or None on failure."""
        ...

    def synthesize_speech(self, text: str) -> Optional[bytes]:
        """Return WAV bytes, or None on failure."""
        ...
