"""content.providers.gemini

Gemini provider (google-genai).

- Text: opening scene + turn outcome, requested as JSON with a response schema.
- Image: one illustration per turn, returned as a data URL.
- Speech: narration via the TTS model, returned as WAV bytes.

Text failures raise (the caller aborts the turn). Media failures are
logged and come back as None.

Important: This provider is UI-agnostic (no Streamlit dependency).
Secrets/env loading lives in engine.config.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from core.state import Choice, GameState

from ..media import pcm_to_wav, sample_rate_from_mime, to_data_url
from ..parsing import must_parse_reply
from ..prompts import (
    build_image_prompt,
    build_json_repair_prompt,
    build_narration_prompt,
    build_opening_prompt,
    build_turn_prompt,
)
from ..schemas import (
    OPENING_RESPONSE_SCHEMA,
    OUTCOME_RESPONSE_SCHEMA,
    OpeningScene,
    TurnOutcome,
    opening_from_llm,
    outcome_from_llm,
)
from .base import OracleError, ProviderStatus

logger = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gemini-3-flash-preview"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_VOICE = "Charon"
IMAGE_ASPECT_RATIO = "16:9"


def _inline_parts(resp: Any) -> Iterator[Any]:
    """Yield inline_data blobs of the first candidate, if any."""
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        blob = getattr(part, "inline_data", None)
        if blob is not None and getattr(blob, "data", None):
            yield blob


@dataclass
class GeminiProvider:
    api_keys: List[str]
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    tts_model: str = DEFAULT_TTS_MODEL
    voice: str = DEFAULT_VOICE
    temperature: float = 0.9
    repair_on_fail: bool = False

    # runtime
    backend: str = "none"  # genai | none
    last_error: str = ""

    _client: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.api_keys = [k.strip() for k in (self.api_keys or []) if str(k).strip()]
        if self._client is not None:
            self.backend = "genai"
            return
        self._init_backend()

    @staticmethod
    def from_api_key_string(raw: str, **kwargs: Any) -> "GeminiProvider":
        """Accept one key or a comma-separated list (first key is used)."""
        keys = [x.strip() for x in str(raw or "").split(",") if x.strip()]
        return GeminiProvider(keys, **kwargs)

    def _init_backend(self) -> None:
        self._client = None
        self.backend = "none"

        if not self.api_keys:
            self.last_error = "Nenhuma chave de API configurada."
            return

        try:
            from google import genai

            self._client = genai.Client(api_key=self.api_keys[0])
            self.backend = "genai"
            self.last_error = ""
        except Exception as e:
            self.last_error = f"google-genai indisponível: {e}"
            logger.error("gemini init failed: %s", e)

    def status(self) -> ProviderStatus:
        if self.backend == "none":
            return ProviderStatus(False, "none", "", error=str(self.last_error or ""))
        return ProviderStatus(True, self.backend, self.text_model, note=f"img={self.image_model} tts={self.tts_model}")

    def _require_client(self) -> Any:
        if self._client is None:
            raise OracleError(self.last_error or "Gemini não está pronto.")
        return self._client

    def _generate_json(self, prompt: str, schema: Optional[Dict[str, Any]], temperature: float) -> str:
        client = self._require_client()
        cfg: Dict[str, Any] = {
            "temperature": float(temperature),
            "response_mime_type": "application/json",
        }
        if schema is not None:
            cfg["response_schema"] = schema
        logger.debug("gemini text call model=%s prompt_len=%d", self.text_model, len(prompt))
        try:
            resp = client.models.generate_content(model=self.text_model, contents=prompt, config=cfg)
        except Exception as e:
            self.last_error = f"{type(e).__name__}: {e}"
            raise OracleError(f"Erro do Gemini: {e}") from e

        txt = (getattr(resp, "text", "") or "").strip()
        if not txt:
            self.last_error = "resposta vazia"
            raise OracleError("Gemini não respondeu.")
        logger.debug("gemini text reply len=%d", len(txt))
        return txt

    def generate_opening(self, *, lineage_name: str, challenge: str, age: int) -> OpeningScene:
        prompt = build_opening_prompt(lineage_name=lineage_name, challenge=challenge, age=age)
        raw = self._generate_json(prompt, OPENING_RESPONSE_SCHEMA, self.temperature)
        return opening_from_llm(must_parse_reply(raw))

    def generate_outcome(self, *, state: GameState, choice: Choice) -> TurnOutcome:
        """Generate and validate a TurnOutcome.

        Strategy:
        1) Main prompt.
        2) If parse/validation fails and repair_on_fail is set, one repair
           pass on the broken text. Off by default: a failed turn is
           surfaced to the player, who re-submits.
        """
        raw = self._generate_json(build_turn_prompt(state=state, choice=choice), OUTCOME_RESPONSE_SCHEMA, self.temperature)
        try:
            return outcome_from_llm(must_parse_reply(raw))
        except ValueError as e:
            self.last_error = f"{type(e).__name__}: {e}"
            if not self.repair_on_fail:
                raise
            logger.warning("outcome rejected (%s); running repair pass", e)

        raw2 = self._generate_json(build_json_repair_prompt(raw), None, 0.1)
        return outcome_from_llm(must_parse_reply(raw2))

    def generate_image(self, prompt: str) -> Optional[str]:
        if self._client is None or not str(prompt or "").strip():
            return None
        try:
            resp = self._client.models.generate_content(
                model=self.image_model,
                contents=build_image_prompt(prompt),
                config={"image_config": {"aspect_ratio": IMAGE_ASPECT_RATIO}},
            )
            for blob in _inline_parts(resp):
                return to_data_url(blob.data, getattr(blob, "mime_type", None) or "image/png")
        except Exception as e:
            logger.warning("image generation failed: %s", e)
            return None
        logger.warning("image generation returned no inline image")
        return None

    def synthesize_speech(self, text: str) -> Optional[bytes]:
        if self._client is None or not str(text or "").strip():
            return None
        try:
            resp = self._client.models.generate_content(
                model=self.tts_model,
                contents=build_narration_prompt(text),
                config={
                    "response_modalities": ["AUDIO"],
                    "speech_config": {
                        "voice_config": {"prebuilt_voice_config": {"voice_name": self.voice}},
                    },
                },
            )
            for blob in _inline_parts(resp):
                rate = sample_rate_from_mime(getattr(blob, "mime_type", "") or "")
                return pcm_to_wav(blob.data, rate=rate)
        except Exception as e:
            logger.warning("speech synthesis failed: %s", e)
            return None
        return None
