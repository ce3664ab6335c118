"""Tests for ifmeter.stop: the three stop conditions and their selection."""

import io
import os
import sys

import pytest

from ifmeter.stop import DeadlineStop, KeypressStop, ManualStop, choose_stop


class FakeTty(io.StringIO):
    def isatty(self):
        return True


class TestDeadlineStop:
    """Elapsed-time bound driven by an injected clock."""

    def test_stops_once_duration_elapsed(self, fake_clock):
        with DeadlineStop(1.0, clock=fake_clock) as stop:
            assert not stop.should_stop()
            fake_clock.sleep(0.5)
            assert not stop.should_stop()
            fake_clock.sleep(0.5)
            assert stop.should_stop()

    def test_deadline_counts_from_enter(self, fake_clock):
        """Time spent before the measurement starts does not count."""
        stop = DeadlineStop(2.0, clock=fake_clock)
        fake_clock.sleep(10.0)

        with stop:
            assert not stop.should_stop()

    def test_non_positive_duration_rejected(self):
        with pytest.raises(ValueError):
            DeadlineStop(0)

    def test_is_polled(self, fake_clock):
        stop = DeadlineStop(1.0, clock=fake_clock)

        assert stop.blocking is False
        with pytest.raises(NotImplementedError):
            stop.wait()


class TestManualStop:
    """Degraded blocking mode."""

    def test_wait_returns_after_a_line(self):
        stream = io.StringIO("\n")
        stop = ManualStop(stream)

        assert stop.blocking is True
        with stop:
            stop.wait()
        assert stream.read() == ""

    def test_wait_on_closed_input_raises_eof(self):
        with pytest.raises(EOFError):
            ManualStop(io.StringIO("")).wait()


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX select on a pipe")
class TestKeypressStop:
    """Non-blocking key check against a pipe standing in for the terminal."""

    def test_detects_pending_input_and_drains_it(self):
        read_fd, write_fd = os.pipe()
        stream = os.fdopen(read_fd)
        try:
            with KeypressStop(stream) as stop:
                assert not stop.should_stop()
                os.write(write_fd, b"q")
                assert stop.should_stop()
                assert not stop.should_stop()
        finally:
            stream.close()
            os.close(write_fd)

    def test_pipe_is_not_supported_as_terminal(self):
        read_fd, write_fd = os.pipe()
        stream = os.fdopen(read_fd)
        try:
            assert not KeypressStop.supported(stream)
        finally:
            stream.close()
            os.close(write_fd)


class TestChooseStop:
    """Selection order: duration, then keypress, then manual."""

    def test_duration_wins(self):
        assert isinstance(choose_stop(5.0, FakeTty()), DeadlineStop)

    def test_terminal_gets_keypress(self):
        assert isinstance(choose_stop(None, FakeTty()), KeypressStop)

    def test_non_terminal_degrades_to_manual(self):
        assert isinstance(choose_stop(None, io.StringIO()), ManualStop)

    def test_keypress_can_be_disabled(self):
        assert isinstance(choose_stop(None, FakeTty(), allow_keypress=False), ManualStop)
