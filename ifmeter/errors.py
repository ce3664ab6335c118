"""Exceptions raised by the measurement engine and samplers."""

from __future__ import annotations


class IfmeterError(Exception):
    """Base error for ifmeter."""


class SamplerError(IfmeterError):
    pass


class CounterRollover(IfmeterError):
    """A cumulative counter went backwards between two ordered samples.

    Carries enough context to tell the operator which adapter reset and
    by how much. A rollover invalidates the whole measurement in progress.
    """

    def __init__(self, adapter_id: str, direction: str, previous: int, current: int) -> None:
        self.adapter_id = adapter_id
        self.direction = direction
        self.previous = previous
        self.current = current
        self.delta = current - previous
        super().__init__(
            f"{direction} counter rollover on adapter {adapter_id!r}: "
            f"{previous} -> {current} (delta {self.delta})"
        )
