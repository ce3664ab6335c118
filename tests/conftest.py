"""Shared fixtures: scripted snapshots, samplers and clocks."""

import pytest

from ifmeter.base import BaseSampler
from ifmeter.models import AdapterSample


def make_snapshot(t: float, **counters: tuple[int, int]):
    """make_snapshot(1.0, eth0=(rx, tx)) → {"eth0": AdapterSample(...)}"""
    return {
        name: AdapterSample(name, rx, tx, t) for name, (rx, tx) in counters.items()
    }


class FakeClock:
    """Monotonic clock that only moves when sleep() is called."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


class ScriptedSampler(BaseSampler):
    """Returns scripted counter readings in order, repeating the last one."""

    name = "scripted"
    default_title = "Scripted counters"

    def __init__(self, readings, descriptions=None, args=None, clock=None):
        self._readings = list(readings)
        self._descriptions = descriptions or {}
        self.reads = 0
        if clock is None:
            super().__init__(args)
        else:
            super().__init__(args, clock=clock)

    def read_counters(self):
        index = min(self.reads, len(self._readings) - 1)
        self.reads += 1
        return dict(self._readings[index])

    def read_descriptions(self):
        return dict(self._descriptions)


@pytest.fixture
def snapshot():
    return make_snapshot


@pytest.fixture
def fake_clock():
    return FakeClock()
