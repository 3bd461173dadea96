"""engine.logging

Small helpers for storing run logs.

A run log is JSON-serializable so it can be downloaded from the UI.
It is a record of what happened, not a save file: nothing reads it back.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, List

from core.state import GameState, state_to_dict

from .config import SessionConfig

RUN_EXPORT_VERSION = 1


def make_run_export(
    *,
    lineage_id: int,
    config: SessionConfig,
    initial_state: GameState,
    turn_logs: List[Dict[str, Any]],
    final_state: GameState,
) -> Dict[str, Any]:
    return {
        "version": RUN_EXPORT_VERSION,
        "lineage_id": int(lineage_id),
        "config": asdict(config),
        "initial_state": state_to_dict(initial_state, include_media=False),
        "turns": list(turn_logs),
        "final_state": state_to_dict(final_state, include_media=False),
    }


def dumps_run_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)
