import numpy as np
import pytest

from supervad.errors import InvalidTokenLength
from supervad.framer import Framer

from conftest import tok


class TestFramer:
    def test_initial_window_is_silent(self):
        framer = Framer(token_size=4, window_tokens=3)
        window = framer.submit(tok(1))
        np.testing.assert_array_equal(window[:8], np.zeros(8))

    def test_window_length_is_constant(self):
        framer = Framer(token_size=4, window_tokens=3)
        for i in range(10):
            window = framer.submit(tok(i))
            assert window.shape == (12,)
            np.testing.assert_array_equal(window[-4:], tok(i))

    def test_shift_is_fifo(self):
        framer = Framer(token_size=4, window_tokens=3)
        for i in range(1, 5):
            window = framer.submit(tok(i))
        np.testing.assert_array_equal(window, np.concatenate([tok(2), tok(3), tok(4)]))

    def test_single_token_window(self):
        framer = Framer(token_size=4, window_tokens=1)
        framer.submit(tok(1))
        np.testing.assert_array_equal(framer.submit(tok(2)), tok(2))

    def test_returned_window_is_a_copy(self):
        framer = Framer(token_size=4, window_tokens=2)
        window = framer.submit(tok(1))
        window[:] = 99
        np.testing.assert_array_equal(framer.submit(tok(2)), np.concatenate([tok(1), tok(2)]))

    @pytest.mark.parametrize("size", [0, 3, 5, 320])
    def test_wrong_length_rejected(self, size):
        framer = Framer(token_size=4, window_tokens=2)
        with pytest.raises(InvalidTokenLength) as exc:
            framer.submit(np.ones(size, dtype=np.float32))
        assert exc.value.expected == 4
        assert exc.value.actual == size

    def test_rejected_token_leaves_window_untouched(self):
        framer = Framer(token_size=4, window_tokens=2)
        framer.submit(tok(1))
        with pytest.raises(InvalidTokenLength):
            framer.submit(np.ones(7))
        np.testing.assert_array_equal(framer.submit(tok(2)), np.concatenate([tok(1), tok(2)]))

    def test_two_dimensional_token_rejected(self):
        framer = Framer(token_size=4, window_tokens=2)
        with pytest.raises(InvalidTokenLength, match=r"shape, expected \(4,\), got \(1, 4\)") as exc:
            framer.submit(np.ones((1, 4)))
        assert exc.value.shape == (1, 4)

    def test_wrong_length_message_reports_samples(self):
        framer = Framer(token_size=4, window_tokens=2)
        with pytest.raises(InvalidTokenLength, match="expected 4 samples, got 3"):
            framer.submit(np.ones(3))

    def test_sizes(self):
        framer = Framer(token_size=320, window_tokens=10)
        assert framer.token_size == 320
        assert framer.window_size == 3200
