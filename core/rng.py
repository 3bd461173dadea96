"""
core.rng
Deterministic RNG helpers that do NOT rely on Python's built-in hash().

Used by the headless fake oracle so simulated games replay identically.
"""

from __future__ import annotations

import hashlib
import json
import random
from typing import Any


def stable_int_seed(*parts: Any, salt: str = "vida-medieval") -> int:
    """Return a stable 32-bit seed derived from arbitrary inputs.

    SHA-256 over canonical JSON of `parts`; str() for anything JSON can't encode.
    """
    payload = json.dumps(parts, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    h = hashlib.sha256((salt + "|" + payload).encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big", signed=False)


def rng_from(*parts: Any, base_seed: int) -> random.Random:
    return random.Random(stable_int_seed(base_seed, *parts))
