"""Stop conditions: how a measurement's wait ends.

Three flavours, chosen once per measurement by choose_stop():

    DeadlineStop   elapsed-time bound, polled
    KeypressStop   any key on the terminal, polled without blocking
    ManualStop     blocking line read; used when neither of the above is
                   possible. No polling happens, so no peaks are tracked.

Polled conditions are checked once per tick by the session; ManualStop is
a separate code path (blocking=True, call wait()).
"""

from __future__ import annotations

import os
import sys
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TextIO

if sys.platform == "win32":
    import msvcrt
else:
    import select
    import termios
    import tty


class StopCondition(ABC):
    """Cancellation token for one measurement. Use as a context manager."""

    blocking: bool = False
    hint: str = ""

    def __enter__(self) -> StopCondition:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release terminal state. Safe to call more than once."""

    @abstractmethod
    def should_stop(self) -> bool:
        """Non-blocking check, called once per polling tick."""

    def wait(self) -> None:
        """Block until the stop signal arrives (blocking conditions only)."""
        raise NotImplementedError(f"{type(self).__name__} is polled, not waited on")


class DeadlineStop(StopCondition):
    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        if seconds <= 0:
            raise ValueError("seconds must be positive")
        self.seconds = seconds
        self._clock = clock
        self._deadline: float | None = None
        self.hint = f"measuring for {seconds:g}s"

    def __enter__(self) -> DeadlineStop:
        self._deadline = self._clock() + self.seconds
        return self

    def should_stop(self) -> bool:
        if self._deadline is None:
            self._deadline = self._clock() + self.seconds
        return self._clock() >= self._deadline


class KeypressStop(StopCondition):
    """Stops on any key. Puts a POSIX terminal into cbreak mode while active."""

    hint = "press any key to stop"

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream if stream is not None else sys.stdin
        self._saved_attrs = None

    @staticmethod
    def supported(stream: TextIO) -> bool:
        try:
            return stream.isatty()
        except (AttributeError, ValueError):
            return False

    def __enter__(self) -> KeypressStop:
        if sys.platform != "win32" and self._stream.isatty():
            fd = self._stream.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def close(self) -> None:
        if self._saved_attrs is not None:
            termios.tcsetattr(self._stream.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    def should_stop(self) -> bool:
        if sys.platform == "win32":
            if not msvcrt.kbhit():
                return False
            while msvcrt.kbhit():
                msvcrt.getwch()
            return True

        fd = self._stream.fileno()
        ready, _, _ = select.select([fd], [], [], 0)
        if not ready:
            return False
        os.read(fd, 1024)  # drain whatever was typed
        return True


class ManualStop(StopCondition):
    """Degraded mode: one blocking read of a line, no polling at all."""

    blocking = True
    hint = "press Enter to stop"

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream if stream is not None else sys.stdin

    def should_stop(self) -> bool:
        return True

    def wait(self) -> None:
        if not self._stream.readline():
            raise EOFError("input closed while waiting for stop")


def choose_stop(
    duration: float | None,
    stream: TextIO | None = None,
    *,
    allow_keypress: bool = True,
    clock: Callable[[], float] = time.monotonic,
) -> StopCondition:
    """Pick the stop condition for one measurement.

    A configured duration wins; otherwise a keypress if the input is an
    interactive terminal; otherwise a blocking line read.
    """
    stream = stream if stream is not None else sys.stdin
    if duration:
        return DeadlineStop(duration, clock=clock)
    if allow_keypress and KeypressStop.supported(stream):
        return KeypressStop(stream)
    return ManualStop(stream)
