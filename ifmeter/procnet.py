"""Per-adapter byte counters: reads /proc/net/dev, names from sysfs."""

from __future__ import annotations

import logging
import os
from argparse import ArgumentParser, Namespace
from pathlib import Path

from ifmeter import register
from ifmeter.base import BaseSampler
from ifmeter.errors import SamplerError

logger = logging.getLogger(__name__)

PROC_NET_DEV = "/proc/net/dev"
SYSFS_NET = "/sys/class/net"


def parse_net_dev(text: str) -> dict[str, tuple[int, int]]:
    """Parse /proc/net/dev contents → {iface: (rx_bytes, tx_bytes)}.

    The two header lines have no colon and are skipped.
    """
    result = {}
    for line in text.splitlines():
        if ":" not in line:
            continue
        iface, data = line.split(":", 1)
        iface = iface.strip()
        parts = data.split()
        try:
            result[iface] = (int(parts[0]), int(parts[8]))   # receive bytes, transmit bytes
        except (IndexError, ValueError) as exc:
            raise SamplerError(f"Malformed {PROC_NET_DEV} line for {iface!r}: {line.strip()!r}") from exc
    return result


def describe_interface(iface: str, sysfs_root: str = SYSFS_NET) -> str:
    """Build a short description like "e1000e, up" or "virtual, down"."""
    entry = Path(sysfs_root) / iface
    parts = []

    driver = entry / "device" / "driver"
    if iface == "lo":
        parts.append("loopback")
    elif driver.exists():
        parts.append(os.path.basename(os.path.realpath(driver)))
    else:
        try:
            if "/devices/virtual/" in str(entry.resolve()):
                parts.append("virtual")
        except (OSError, ValueError):
            pass

    try:
        state = (entry / "operstate").read_text().strip()
    except OSError:
        state = ""
    if state and state != "unknown":
        parts.append(state)
    return ", ".join(parts)


@register
class ProcNetSampler(BaseSampler):
    name = "proc"
    default_title = "Linux /proc/net/dev"

    @classmethod
    def add_args(cls, parser: ArgumentParser) -> None:
        parser.add_argument("--proc-net-dev", default=PROC_NET_DEV,
                            help=f"Counter file to read (default: {PROC_NET_DEV})")

    def setup(self, args: Namespace) -> None:
        self._path = getattr(args, "proc_net_dev", PROC_NET_DEV)
        self._sysfs_root = SYSFS_NET

    def read_counters(self) -> dict[str, tuple[int, int]]:
        try:
            with open(self._path) as f:
                text = f.read()
        except OSError as exc:
            raise SamplerError(f"Cannot read {self._path}: {exc}") from exc
        return parse_net_dev(text)

    def read_descriptions(self) -> dict[str, str]:
        names = self.read_counters().keys()
        descriptions = {iface: describe_interface(iface, self._sysfs_root) for iface in names}
        logger.debug("Adapter descriptions: %s", descriptions)
        return descriptions

    @classmethod
    def is_available(cls) -> bool:
        return os.access(PROC_NET_DEV, os.R_OK)


if __name__ == "__main__":
    sampler = ProcNetSampler()
    for adapter_id, sample in sorted(sampler.take().items()):
        print(f"  {adapter_id:16s}  rx={sample.rx_bytes}  tx={sample.tx_bytes}")
