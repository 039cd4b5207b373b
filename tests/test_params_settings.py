import importlib

import pytest
from pydantic import ValidationError

import whisperstream
from whisperstream import settings as settings_mod
from whisperstream.engine.params import PARAMS_VERSION, SamplingStrategy, default_params
from whisperstream.errors import MalformedAudio
from whisperstream.metrics import render_latest
from whisperstream.settings import StreamSettings


def test_default_params_are_pure_and_versioned():
    first = default_params()
    second = default_params()
    assert first == second
    assert first.version == PARAMS_VERSION
    assert first.strategy is SamplingStrategy.GREEDY
    assert 1 <= first.n_threads <= 4


def test_params_are_frozen():
    params = default_params()
    with pytest.raises(ValidationError):
        params.language = "de"


def test_decode_options_for_beam_search_and_translation():
    params = default_params(SamplingStrategy.BEAM_SEARCH).model_copy(
        update={"translate": True, "language": "auto", "no_context": False}
    )
    options = params.decode_options()
    assert options["beam_size"] == 5
    assert options["task"] == "translate"
    assert options["language"] is None
    assert options["condition_on_previous_text"] is True
    assert options["temperature"] == (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)


def test_temperature_without_fallback():
    params = default_params().model_copy(update={"temperature_inc": 0.0})
    assert params.temperatures() == (0.0,)


def test_flag_parsing(monkeypatch):
    monkeypatch.setenv("VAD_VERBOSE", "yes")
    monkeypatch.setenv("WHISPER_TRANSLATE", "0")
    assert settings_mod._flag("VAD_VERBOSE") is True
    assert settings_mod._flag("WHISPER_TRANSLATE") is False
    monkeypatch.setenv("ENGINE_CALL_TIMEOUT_S", "2.5")
    assert settings_mod._optional_float("ENGINE_CALL_TIMEOUT_S") == 2.5
    monkeypatch.setenv("ENGINE_CALL_TIMEOUT_S", " ")
    assert settings_mod._optional_float("ENGINE_CALL_TIMEOUT_S") is None


def test_settings_derive_vad_and_engine_config():
    settings = StreamSettings(
        vad_trailing_ms=750,
        vad_threshold=0.4,
        vad_high_pass_hz=0,
        whisper_threads=3,
        whisper_language="de",
        whisper_keep_context=True,
    )
    vad = settings.vad_config()
    assert vad.trailing_window_ms == 750
    assert vad.energy_ratio_threshold == pytest.approx(0.4)
    assert vad.high_pass_cutoff_hz == 0

    params = settings.engine_params()
    assert params.n_threads == 3
    assert params.language == "de"
    assert params.no_context is False


def test_build_session_in_mock_mode(pcm):
    settings = StreamSettings(whisper_mock_transcriber=True, vad_high_pass_hz=0, transcript_mode="segments")
    engine, controller = whisperstream.build_session(settings)
    try:
        result = controller.process_chunk(pcm(0.5, 32000))
        assert result.text == "[mock transcript 32000 samples]"
        assert controller.render(result)[0]["end_ms"] == 2000
    finally:
        engine.close()


def test_build_session_rejects_unsupported_rate():
    with pytest.raises(MalformedAudio):
        whisperstream.build_session(StreamSettings(whisper_mock_transcriber=True, sample_rate=8000))


def test_metrics_exposed(fake_engine, pcm):
    from whisperstream.session import SegmentationController

    SegmentationController(fake_engine).process_chunk(pcm(0.5, 100))
    body, content_type = render_latest()
    assert b"stream_chunks_total" in body
    assert b"stream_results_total" in body
    assert content_type.startswith("text/plain")


def test_settings_validate_strategy_and_transcript_mode():
    assert StreamSettings(whisper_strategy="beam_search").whisper_strategy is SamplingStrategy.BEAM_SEARCH
    with pytest.raises(ValidationError):
        StreamSettings(whisper_strategy="nucleus")
    with pytest.raises(ValidationError):
        StreamSettings(transcript_mode="xml")


def test_bad_env_strategy_fails_at_construction_not_import(monkeypatch):
    monkeypatch.setenv("WHISPER_STRATEGY", "nucleus")
    try:
        reloaded = importlib.reload(settings_mod)
        with pytest.raises(ValidationError):
            reloaded.StreamSettings()
    finally:
        monkeypatch.delenv("WHISPER_STRATEGY")
        importlib.reload(settings_mod)
