from unittest.mock import MagicMock, patch

import numpy as np

from supervad.audio import AudioManager


class TestAudioManager:
    def test_chunk_size_config(self):
        with patch("supervad.audio.pyaudio.PyAudio"):
            mgr = AudioManager(device_index=11, chunk_size=1024)
            assert mgr.chunk_size == 1024

    def test_defaults(self):
        with patch("supervad.audio.pyaudio.PyAudio"):
            mgr = AudioManager()
            assert mgr._sample_rate == 16000
            assert mgr.chunk_size == 2048
            assert mgr._device_index is None

    def test_device_without_input_falls_back(self):
        with patch("supervad.audio.pyaudio.PyAudio") as pa_cls:
            pa_cls.return_value.get_device_info_by_index.return_value = {"maxInputChannels": 0}
            mgr = AudioManager(device_index=3)
            assert mgr._device_index is None

    def test_invalid_device_falls_back(self):
        with patch("supervad.audio.pyaudio.PyAudio") as pa_cls:
            pa_cls.return_value.get_device_info_by_index.side_effect = OSError("no device")
            mgr = AudioManager(device_index=99)
            assert mgr._device_index is None

    def test_callback_converts_to_float32(self):
        received = []
        with patch("supervad.audio.pyaudio.PyAudio"):
            mgr = AudioManager(on_audio=received.append)
            pcm = np.array([0, 16384, -32768], dtype="<i2").tobytes()
            mgr._audio_callback(pcm, 3, {}, 0)
        assert len(received) == 1
        assert received[0].dtype == np.float32
        np.testing.assert_allclose(received[0], [0.0, 0.5, -1.0])

    def test_callback_ignores_none_data(self):
        received = []
        with patch("supervad.audio.pyaudio.PyAudio"):
            mgr = AudioManager(on_audio=received.append)
            result = mgr._audio_callback(None, 512, {}, 0)
        assert received == []
        assert result == (None, 0)  # pyaudio.paContinue == 0

    def test_start_opens_mono_int16_stream(self):
        with patch("supervad.audio.pyaudio.PyAudio") as pa_cls:
            mgr = AudioManager(sample_rate=16000, chunk_size=2048)
            mgr.start()
            kwargs = pa_cls.return_value.open.call_args.kwargs
            assert kwargs["channels"] == 1
            assert kwargs["rate"] == 16000
            assert kwargs["frames_per_buffer"] == 2048
            assert kwargs["stream_callback"] == mgr._audio_callback
            assert mgr.is_running

    def test_stop_closes_stream_and_terminates(self):
        with patch("supervad.audio.pyaudio.PyAudio") as pa_cls:
            mgr = AudioManager()
            mgr.start()
            stream = pa_cls.return_value.open.return_value
            mgr.stop()
            stream.stop_stream.assert_called_once()
            stream.close.assert_called_once()
            pa_cls.return_value.terminate.assert_called_once()
            assert not mgr.is_running
