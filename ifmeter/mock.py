"""Simulated adapters with random traffic (no real network needed)."""

from __future__ import annotations

import random
from argparse import ArgumentParser, Namespace

from ifmeter import register
from ifmeter.base import BaseSampler


@register
class MockSampler(BaseSampler):
    name = "mock"
    default_title = "Simulated adapters"

    # adapter → (description, mean rx bytes per read, mean tx bytes per read)
    ADAPTERS = {
        "eth0": ("mock wired, up", 120_000, 20_000),
        "wlan0": ("mock wireless, up", 40_000, 8_000),
        "docker0": ("virtual, up", 2_000, 2_000),
        "lo": ("loopback", 500, 500),
    }

    @classmethod
    def add_args(cls, parser: ArgumentParser) -> None:
        parser.add_argument("--seed", type=int, default=None,
                            help="Random seed for the mock sampler (default: random)")
        parser.add_argument("--reset-probability", type=float, default=0.0,
                            help="Chance per read that a mock counter restarts from zero (default: 0)")

    def setup(self, args: Namespace) -> None:
        # Isolated random instance for deterministic runs
        self._random = random.Random(getattr(args, "seed", None))

        # Simulation parameters
        self.variance = 0.25            # relative spread around the mean
        self.spike_probability = 0.05   # chance of a burst on any read
        self.spike_multiplier = 8.0
        self.reset_probability = getattr(args, "reset_probability", 0.0)

        self._counters = {
            name: [self._random.randrange(10**9), self._random.randrange(10**8)]
            for name in self.ADAPTERS
        }

    def read_counters(self) -> dict[str, tuple[int, int]]:
        for name, (_, rx_mean, tx_mean) in self.ADAPTERS.items():
            counters = self._counters[name]
            if self._random.random() < self.reset_probability:
                counters[0] = counters[1] = 0
                continue
            factor = self.spike_multiplier if self._random.random() < self.spike_probability else 1.0
            counters[0] += self._traffic(rx_mean * factor)
            counters[1] += self._traffic(tx_mean * factor)
        return {name: (rx, tx) for name, (rx, tx) in self._counters.items()}

    def read_descriptions(self) -> dict[str, str]:
        return {name: desc for name, (desc, _, _) in self.ADAPTERS.items()}

    def _traffic(self, mean: float) -> int:
        return max(0, int(self._random.gauss(mean, mean * self.variance)))
