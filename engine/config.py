"""engine.config

Session configuration passed from the UI, and oracle settings read from
secrets / environment.

The UI keeps one SessionConfig in its session and hands it to the
pipeline explicitly; nothing here is a module-level toggle.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Tuple

from content.providers.gemini import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_TEXT_MODEL,
    DEFAULT_TTS_MODEL,
    DEFAULT_VOICE,
    GeminiProvider,
)

THEMES: Tuple[str, ...] = ("parchment", "wood", "light", "castelo", "verdejo", "floresta")
DEFAULT_FONT_SIZE = 18
MAX_FONT_SIZE = 24
FONT_STEP = 2


@dataclass(frozen=True)
class SessionConfig:
    theme: str = "parchment"
    font_size: int = DEFAULT_FONT_SIZE
    muted: bool = False
    parallel_media: bool = True
    show_images: bool = True


def next_theme(cfg: SessionConfig) -> SessionConfig:
    ix = THEMES.index(cfg.theme) if cfg.theme in THEMES else -1
    return replace(cfg, theme=THEMES[(ix + 1) % len(THEMES)])


def bigger_font(cfg: SessionConfig) -> SessionConfig:
    return replace(cfg, font_size=min(int(cfg.font_size) + FONT_STEP, MAX_FONT_SIZE))


def reset_font(cfg: SessionConfig) -> SessionConfig:
    return replace(cfg, font_size=DEFAULT_FONT_SIZE)


def toggle_mute(cfg: SessionConfig) -> SessionConfig:
    return replace(cfg, muted=not cfg.muted)


@dataclass(frozen=True)
class OracleSettings:
    api_key: str
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    tts_model: str = DEFAULT_TTS_MODEL
    voice: str = DEFAULT_VOICE
    temperature: float = 0.9
    repair_on_fail: bool = False

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None, secrets: Optional[Mapping[str, Any]] = None) -> "OracleSettings":
        """Secrets (Streamlit Cloud) win over env for the key; models come from env."""
        env = os.environ if environ is None else environ
        key = ""
        if secrets is not None and "GEMINI_API_KEY" in secrets:
            key = str(secrets["GEMINI_API_KEY"])
        if not key:
            key = env.get("GEMINI_API_KEY") or env.get("GOOGLE_API_KEY") or ""

        try:
            temperature = float(env.get("VIDA_TEMPERATURE", "0.9"))
        except ValueError:
            temperature = 0.9

        return OracleSettings(
            api_key=key,
            text_model=env.get("VIDA_TEXT_MODEL") or DEFAULT_TEXT_MODEL,
            image_model=env.get("VIDA_IMAGE_MODEL") or DEFAULT_IMAGE_MODEL,
            tts_model=env.get("VIDA_TTS_MODEL") or DEFAULT_TTS_MODEL,
            voice=env.get("VIDA_TTS_VOICE") or DEFAULT_VOICE,
            temperature=temperature,
            repair_on_fail=str(env.get("VIDA_REPAIR_JSON", "")).strip().lower() in {"1", "true", "yes"},
        )

    def build_provider(self) -> GeminiProvider:
        return GeminiProvider.from_api_key_string(
            self.api_key,
            text_model=self.text_model,
            image_model=self.image_model,
            tts_model=self.tts_model,
            voice=self.voice,
            temperature=self.temperature,
            repair_on_fail=self.repair_on_fail,
        )
