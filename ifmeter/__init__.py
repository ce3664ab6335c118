"""ifmeter: per-adapter network transfer meter.

Counter sources register here by name; the command line picks one with
--sampler.
"""

from ifmeter.base import BaseSampler

SAMPLERS: dict[str, type[BaseSampler]] = {}

ALIASES: dict[str, str] = {
    "procfs": "proc",
    "linux": "proc",
    "fake": "mock",
}


def register(cls: type[BaseSampler]) -> type[BaseSampler]:
    """Class decorator: make a sampler selectable by its ``name``."""
    SAMPLERS[cls.name] = cls
    return cls


def resolve(name: str) -> str:
    """Map an alias such as "fake" to its sampler name; others pass through."""
    return ALIASES.get(name, name)
