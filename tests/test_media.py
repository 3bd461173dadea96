"""Tests for content.media: data URLs and PCM→WAV."""

import io
import wave

import pytest

from content.media import PCM_SAMPLE_RATE, from_data_url, pcm_to_wav, sample_rate_from_mime, to_data_url


class TestDataUrl:
    def test_round_trip(self) -> None:
        url = to_data_url(b"\x89PNG", "image/png")
        assert url.startswith("data:image/png;base64,")
        assert from_data_url(url) == (b"\x89PNG", "image/png")

    @pytest.mark.parametrize("url", ["", "http://x/y.png", "data:image/png,raw"])
    def test_rejects_non_base64_urls(self, url: str) -> None:
        with pytest.raises(ValueError):
            from_data_url(url)


class TestWav:
    def test_header_and_frames(self) -> None:
        pcm = b"\x10\x00" * 480
        with wave.open(io.BytesIO(pcm_to_wav(pcm)), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == PCM_SAMPLE_RATE
            assert wf.getnframes() == 480

    def test_custom_rate(self) -> None:
        with wave.open(io.BytesIO(pcm_to_wav(b"\x00\x00", rate=8000)), "rb") as wf:
            assert wf.getframerate() == 8000


class TestSampleRate:
    def test_reads_rate(self) -> None:
        assert sample_rate_from_mime("audio/L16;codec=pcm;rate=16000") == 16000

    @pytest.mark.parametrize("mime", ["", "audio/L16", "audio/L16;rate=fast"])
    def test_defaults(self, mime: str) -> None:
        assert sample_rate_from_mime(mime) == PCM_SAMPLE_RATE
