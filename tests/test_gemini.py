"""Tests for content.providers.gemini: GeminiProvider with a mocked genai client."""

import io
import json
import wave
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from conftest import raw_outcome
from content.media import from_data_url
from content.providers.base import OracleError
from content.providers.gemini import DEFAULT_TEXT_MODEL, GeminiProvider
from content.schemas import OutcomeContractError
from core.state import Choice, GameState


def _text_response(text: str) -> SimpleNamespace:
    return SimpleNamespace(text=text)


def _inline_response(data: bytes, mime_type: str) -> SimpleNamespace:
    blob = SimpleNamespace(data=data, mime_type=mime_type)
    part = SimpleNamespace(inline_data=blob)
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(inline_data=None), part]))])


def _provider(client: MagicMock, **kwargs) -> GeminiProvider:
    return GeminiProvider(["key"], _client=client, **kwargs)


# ---------------------------------------------------------------------------
# Construction / status
# ---------------------------------------------------------------------------

class TestStatus:
    def test_no_key_is_not_ready(self) -> None:
        p = GeminiProvider([])
        st = p.status()
        assert st.ok is False
        assert st.error

    def test_injected_client_is_ready(self) -> None:
        st = _provider(MagicMock()).status()
        assert st.ok is True
        assert st.backend == "genai"
        assert st.model == DEFAULT_TEXT_MODEL

    def test_key_string_splits_commas(self) -> None:
        p = GeminiProvider.from_api_key_string(" a , b ,", _client=MagicMock())
        assert p.api_keys == ["a", "b"]

    def test_text_call_without_client_raises(self, royal_state: GameState) -> None:
        with pytest.raises(OracleError):
            GeminiProvider([]).generate_outcome(state=royal_state, choice=Choice("x"))


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

class TestOutcome:
    def test_happy_path(self, royal_state: GameState) -> None:
        client = MagicMock()
        client.models.generate_content.return_value = _text_response(json.dumps(raw_outcome(luckChange=4)))
        out = _provider(client).generate_outcome(state=royal_state, choice=Choice("Ir ao trono"))
        assert out.luck_change == 4
        assert out.story == "A chuva cai sobre a vila."

    def test_requests_json_with_schema(self, royal_state: GameState) -> None:
        client = MagicMock()
        client.models.generate_content.return_value = _text_response(json.dumps(raw_outcome()))
        _provider(client, text_model="m-text").generate_outcome(state=royal_state, choice=Choice("Ir ao trono"))
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "m-text"
        assert kwargs["config"]["response_mime_type"] == "application/json"
        assert "story" in kwargs["config"]["response_schema"]["required"]
        assert "Ir ao trono" in kwargs["contents"]
        assert "henrique" in kwargs["contents"]

    def test_sdk_error_becomes_oracle_error(self, royal_state: GameState) -> None:
        client = MagicMock()
        client.models.generate_content.side_effect = RuntimeError("quota")
        p = _provider(client)
        with pytest.raises(OracleError, match="quota"):
            p.generate_outcome(state=royal_state, choice=Choice("x"))
        assert "quota" in p.last_error

    def test_empty_reply_raises(self, royal_state: GameState) -> None:
        client = MagicMock()
        client.models.generate_content.return_value = _text_response("")
        with pytest.raises(OracleError):
            _provider(client).generate_outcome(state=royal_state, choice=Choice("x"))

    def test_contract_violation_raises_without_retry(self, royal_state: GameState) -> None:
        client = MagicMock()
        client.models.generate_content.return_value = _text_response('{"story": "só isso"}')
        with pytest.raises(OutcomeContractError):
            _provider(client).generate_outcome(state=royal_state, choice=Choice("x"))
        assert client.models.generate_content.call_count == 1

    def test_repair_pass_when_enabled(self, royal_state: GameState) -> None:
        client = MagicMock()
        client.models.generate_content.side_effect = [
            _text_response("isto não é json"),
            _text_response(json.dumps(raw_outcome())),
        ]
        out = _provider(client, repair_on_fail=True).generate_outcome(state=royal_state, choice=Choice("x"))
        assert out.time_passed_days == 1
        assert client.models.generate_content.call_count == 2
        assert "isto não é json" in client.models.generate_content.call_args.kwargs["contents"]


class TestOpening:
    def test_opening(self) -> None:
        client = MagicMock()
        client.models.generate_content.return_value = _text_response('{"story": "Início", "imagePrompt": "dawn"}')
        scene = _provider(client).generate_opening(lineage_name="Klaus", challenge="Fuja", age=8)
        assert scene.story == "Início"
        assert scene.image_prompt == "dawn"
        prompt = client.models.generate_content.call_args.kwargs["contents"]
        assert "Klaus" in prompt and "Fuja" in prompt and "8 anos" in prompt


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------

class TestImage:
    def test_returns_data_url(self) -> None:
        client = MagicMock()
        client.models.generate_content.return_value = _inline_response(b"PNGDATA", "image/png")
        url = _provider(client, image_model="m-img").generate_image("a castle")
        assert from_data_url(url) == (b"PNGDATA", "image/png")
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "m-img"
        assert kwargs["contents"].endswith("a castle")
        assert kwargs["config"]["image_config"]["aspect_ratio"] == "16:9"

    def test_failure_returns_none(self) -> None:
        client = MagicMock()
        client.models.generate_content.side_effect = RuntimeError("boom")
        assert _provider(client).generate_image("a castle") is None

    def test_no_inline_part_returns_none(self) -> None:
        client = MagicMock()
        client.models.generate_content.return_value = SimpleNamespace(candidates=[])
        assert _provider(client).generate_image("a castle") is None

    def test_blank_prompt_skips_call(self) -> None:
        client = MagicMock()
        assert _provider(client).generate_image("  ") is None
        client.models.generate_content.assert_not_called()


class TestSpeech:
    def test_pcm_wrapped_as_wav(self) -> None:
        client = MagicMock()
        pcm = b"\x00\x01" * 100
        client.models.generate_content.return_value = _inline_response(pcm, "audio/L16;codec=pcm;rate=16000")
        wav = _provider(client, voice="Kore").synthesize_speech("Era uma vez")
        with wave.open(io.BytesIO(wav), "rb") as wf:
            assert wf.getframerate() == 16000
            assert wf.readframes(wf.getnframes()) == pcm
        cfg = client.models.generate_content.call_args.kwargs["config"]
        assert cfg["response_modalities"] == ["AUDIO"]
        assert cfg["speech_config"]["voice_config"]["prebuilt_voice_config"]["voice_name"] == "Kore"

    def test_failure_swallowed(self) -> None:
        client = MagicMock()
        client.models.generate_content.side_effect = RuntimeError("tts down")
        assert _provider(client).synthesize_speech("Era uma vez") is None
