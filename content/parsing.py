"""content.parsing

Tolerant JSON parsing for oracle replies.

Gemini is asked for application/json with a response schema, but replies
still arrive wrapped in fences, with smart quotes or a stray trailing comma.
Clean-up steps, in order:
- strip ``` fences
- cut to the outermost {...} block
- straighten smart quotes / nbsp
- escape raw newlines inside string literals
- drop trailing commas
A strict json.loads is tried first; the clean-up only runs when it fails.
Nothing here evaluates code.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

_QUOTE_MAP = str.maketrans({
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
    " ": " ",
})


@dataclass(frozen=True)
class ParsedReply:
    data: Optional[Dict[str, Any]]
    raw: str
    cleaned: str
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.data is not None


def unfence(text: str) -> str:
    text = (text or "").strip()
    m = _FENCE_RE.search(text)
    return (m.group(1) or "").strip() if m else text


def outer_object(text: str) -> str:
    start = text.find("{")
    if start < 0:
        return text
    end = text.rfind("}")
    return text[start:] if end <= start else text[start : end + 1]


def escape_string_newlines(text: str) -> str:
    """Replace bare CR/LF inside double-quoted strings with escapes."""
    out: List[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string and escaped:
            escaped = False
        elif in_string and ch == "\\":
            escaped = True
        elif ch == '"':
            in_string = not in_string
        elif in_string and ch == "\n":
            ch = "\\n"
        elif in_string and ch == "\r":
            ch = "\\r"
        out.append(ch)
    return "".join(out)


def clean_reply(raw: str) -> str:
    s = outer_object(unfence(raw))
    s = s.translate(_QUOTE_MAP)
    s = escape_string_newlines(s)
    return _TRAILING_COMMA_RE.sub(r"\1", s)


def _loads_object(text: str) -> Tuple[Optional[Dict[str, Any]], str]:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        return None, f"json: {e}"
    if not isinstance(obj, dict):
        return None, f"root is {type(obj).__name__}, not object"
    return obj, ""


def parse_reply(raw: str) -> ParsedReply:
    """Best effort; never raises. Check `.ok` / `.error`.

    Well-formed JSON is taken as is, so typographic quotes inside string
    values survive. The clean-up only runs when the strict pass fails.
    """
    raw = (raw or "").strip()
    candidate = outer_object(unfence(raw))
    obj, _ = _loads_object(candidate)
    if obj is not None:
        return ParsedReply(data=obj, raw=raw, cleaned=candidate)
    cleaned = clean_reply(raw)
    obj, error = _loads_object(cleaned)
    return ParsedReply(data=obj, raw=raw, cleaned=cleaned, error=error)


def must_parse_reply(raw: str) -> Dict[str, Any]:
    res = parse_reply(raw)
    if res.data is None:
        raise ValueError(res.error or "JSON parse failed")
    return res.data
