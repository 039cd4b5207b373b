import numpy as np
import pytest

from whisperstream.audio.converter import ensure_supported_format, pcm16_to_float32
from whisperstream.errors import MalformedAudio


def test_converter_scales_int16_to_unit_range():
    pcm = np.array([0, 1, -1, 16384, -16384, 32767, -32768], dtype="<i2")
    result = pcm16_to_float32(pcm.tobytes())

    assert result.dtype == np.float32
    assert len(result) == len(pcm)
    np.testing.assert_allclose(result, pcm.astype(np.float64) / 32768.0, rtol=0, atol=1e-7)
    assert result.min() >= -1.0
    assert result.max() <= 1.0


def test_converter_reads_little_endian():
    # 0x0100 little endian is 1, big endian would be 256.
    result = pcm16_to_float32(b"\x01\x00\x00\x01")
    assert result[0] == pytest.approx(1 / 32768.0)
    assert result[1] == pytest.approx(256 / 32768.0)


def test_converter_leaves_input_untouched():
    raw = bytearray(np.arange(-50, 50, dtype="<i2").tobytes())
    snapshot = bytes(raw)
    pcm16_to_float32(bytes(raw))
    assert bytes(raw) == snapshot


def test_converter_handles_empty_chunk():
    assert pcm16_to_float32(b"").size == 0


@pytest.mark.parametrize("length", [1, 3, 4001])
def test_converter_rejects_odd_length(length):
    with pytest.raises(MalformedAudio):
        pcm16_to_float32(b"\x00" * length)


def test_format_check_accepts_mono_16k():
    ensure_supported_format(16000, 1)


def test_format_check_rejects_stereo_and_other_rates():
    with pytest.raises(MalformedAudio):
        ensure_supported_format(16000, 2)
    with pytest.raises(MalformedAudio, match="resample"):
        ensure_supported_format(44100, 1)
