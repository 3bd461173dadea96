"""content.media

Small helpers for the image/audio handles the oracle returns.

Images travel as data URLs inside GameState (plain str, JSON friendly).
Gemini TTS returns raw 16-bit mono PCM; browsers need a container, so it
is wrapped as WAV before playback.
"""

from __future__ import annotations

import base64
import io
import wave
from typing import Tuple

PCM_SAMPLE_RATE = 24_000
PCM_SAMPLE_WIDTH = 2
PCM_CHANNELS = 1


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def from_data_url(url: str) -> Tuple[bytes, str]:
    """Inverse of to_data_url. Raises ValueError on anything else."""
    if not url or not url.startswith("data:") or ";base64," not in url:
        raise ValueError("not a base64 data URL")
    header, payload = url[5:].split(";base64,", 1)
    return base64.b64decode(payload), header or "application/octet-stream"


def pcm_to_wav(pcm: bytes, *, rate: int = PCM_SAMPLE_RATE) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(PCM_CHANNELS)
        wf.setsampwidth(PCM_SAMPLE_WIDTH)
        wf.setframerate(int(rate))
        wf.writeframes(pcm)
    return buf.getvalue()


def sample_rate_from_mime(mime_type: str, default: int = PCM_SAMPLE_RATE) -> int:
    """Read `rate=` from e.g. 'audio/L16;codec=pcm;rate=24000'."""
    for part in (mime_type or "").split(";"):
        k, _, v = part.strip().partition("=")
        if k == "rate":
            try:
                return int(v)
            except ValueError:
                return default
    return default
